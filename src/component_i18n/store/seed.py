"""
Default localization catalog inserted into a fresh store.

Covers the keys used by the demo props of the preview and the sample
components shown in the generation prompt.
"""

from __future__ import annotations

DEFAULT_LOCALIZATIONS: dict[str, dict[str, str]] = {
    "welcome.title": {
        "en": "Welcome to our app",
        "es": "Bienvenido a nuestra aplicación",
        "fr": "Bienvenue dans notre application",
        "de": "Willkommen in unserer App",
        "ja": "私たちのアプリへようこそ",
        "zh": "欢迎使用我们的应用",
    },
    "button.submit": {
        "en": "Submit",
        "es": "Enviar",
        "fr": "Soumettre",
        "de": "Absenden",
        "ja": "送信",
        "zh": "提交",
    },
    "error.validation": {
        "en": "Please check your input",
        "es": "Por favor verifica tu entrada",
        "fr": "Veuillez vérifier votre saisie",
        "de": "Bitte überprüfen Sie Ihre Eingabe",
        "ja": "入力内容を確認してください",
        "zh": "请检查您的输入",
    },
    "navigation.home": {
        "en": "Home",
        "es": "Inicio",
        "fr": "Accueil",
        "de": "Startseite",
        "ja": "ホーム",
        "zh": "首页",
    },
    "form.email": {
        "en": "Email Address",
        "es": "Dirección de correo",
        "fr": "Adresse e-mail",
        "de": "E-Mail-Adresse",
        "ja": "メールアドレス",
        "zh": "电子邮件地址",
    },
    "click_me": {
        "en": "Click me",
        "es": "Haz clic aquí",
        "fr": "Cliquez-moi",
        "de": "Klick mich",
        "ja": "クリックしてください",
        "zh": "点击我",
    },
    "demo_title": {
        "en": "Demo Title",
        "es": "Título de demostración",
        "fr": "Titre de démo",
        "de": "Demo-Titel",
        "ja": "デモタイトル",
        "zh": "演示标题",
    },
    "demo_description": {
        "en": "This is a demo description.",
        "es": "Esta es una descripción de demostración.",
        "fr": "Ceci est une description de démo.",
        "de": "Dies ist eine Demo-Beschreibung.",
        "ja": "これはデモの説明です。",
        "zh": "这是一个演示描述。",
    },
    "enter_text_here": {
        "en": "Enter text here...",
        "es": "Ingrese texto aquí...",
        "fr": "Entrez le texte ici...",
        "de": "Text hier eingeben...",
        "ja": "ここにテキストを入力...",
        "zh": "在此输入文本...",
    },
    "demo_text": {
        "en": "Demo text",
        "es": "Texto de demostración",
        "fr": "Texte de démo",
        "de": "Demo-Text",
        "ja": "デモテキスト",
        "zh": "演示文本",
    },
    "demo_name": {
        "en": "Demo Name",
        "es": "Nombre de Demostración",
        "fr": "Nom de Démo",
        "de": "Demo-Name",
        "ja": "デモ名",
        "zh": "演示名称",
    },
    "demo_value": {
        "en": "Demo Value",
        "es": "Valor de Demostración",
        "fr": "Valeur de Démo",
        "de": "Demo-Wert",
        "ja": "デモ値",
        "zh": "演示值",
    },
    "save_document": {
        "en": "Save Document",
        "es": "Guardar Documento",
        "fr": "Enregistrer le Document",
        "de": "Dokument Speichern",
        "ja": "ドキュメントを保存",
        "zh": "保存文档",
    },
}
