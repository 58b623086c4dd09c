"""
Integration tests for the full CLI workflow
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from component_i18n import cli
from component_i18n.database import LOCALES, Database

runner = CliRunner()

BUTTON_COMPONENT = """export default function SaveButton({ t, onClick }) {
  return (
    <div>
      <h2>{t('save_title')}</h2>
      <button onClick={onClick}>{t('save_document')}</button>
      <button onClick={onClick}>{t('discard_changes')}</button>
    </div>
  );
}
"""

ASSISTANT_REPLY = f"""Here is your component:

```tsx
{BUTTON_COMPONENT.strip()}
```

It uses the t prop for every string."""


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch) -> Path:
    """Initialized project directory without an API key."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)

    result = runner.invoke(cli.app, ["init"])
    assert result.exit_code == 0, result.output
    return tmp_path


def open_db(workspace: Path) -> Database:
    return Database(workspace / "data" / "localizations.duckdb")


class TestFullWorkflow:
    """End-to-end CLI scenarios"""

    def test_init_seeds_default_catalog(self, workspace: Path):
        assert (workspace / "config.yaml").exists()

        with open_db(workspace) as db:
            record = db.get_localization("save_document")

        assert record.es == "Guardar Documento"

    def test_process_with_translation_service(self, workspace: Path, monkeypatch, make_translator):
        translator = make_translator()
        monkeypatch.setattr(cli, "get_translator", lambda settings, db: translator)
        (workspace / "reply.md").write_text(ASSISTANT_REPLY, encoding="utf-8")

        result = runner.invoke(
            cli.app, ["process", "reply.md", "--message", "--prompt", "a save button"]
        )

        assert result.exit_code == 0, result.output
        assert "Component processed" in result.output
        # save_document is already stored by init
        assert translator.calls == [["save_title", "discard_changes"]]

        with open_db(workspace) as db:
            components = db.get_all_components()
            assert len(components) == 1
            component = components[0]
            assert component.extracted_keys == ["save_title", "save_document", "discard_changes"]
            assert component.demo_props["onClick"]
            assert db.get_localization("discard_changes").ja == "ja:discard_changes"
            stages = {entry["stage"] for entry in db.get_logs(component_id=component.id)}

        assert {"extract", "translate", "persist", "component"} <= stages

    def test_process_twice_updates_component(self, workspace: Path, monkeypatch, make_translator):
        translator = make_translator()
        monkeypatch.setattr(cli, "get_translator", lambda settings, db: translator)
        (workspace / "Button.tsx").write_text(BUTTON_COMPONENT, encoding="utf-8")

        runner.invoke(cli.app, ["process", "Button.tsx", "--prompt", "a save button"])
        with open_db(workspace) as db:
            component_id = db.get_all_components()[0].id

        smaller = BUTTON_COMPONENT.replace("{t('discard_changes')}", "Discard")
        (workspace / "Button.tsx").write_text(smaller, encoding="utf-8")
        result = runner.invoke(cli.app, ["process", "Button.tsx", "--id", component_id])

        assert result.exit_code == 0, result.output
        assert "discard_changes" in result.output
        assert len(translator.calls) == 1
        with open_db(workspace) as db:
            assert len(db.get_all_components()) == 1
            component = db.get_component(component_id)
            assert component.extracted_keys == ["save_title", "save_document"]
            assert component.user_prompt == "a save button"
            # Records outlive the components that used them
            assert db.get_localization("discard_changes") is not None

    def test_process_without_api_key_falls_back(self, workspace: Path):
        (workspace / "Button.tsx").write_text(BUTTON_COMPONENT, encoding="utf-8")

        result = runner.invoke(cli.app, ["process", "Button.tsx", "--prompt", "a save button"])

        assert result.exit_code == 0, result.output
        assert "No API key" in result.output
        with open_db(workspace) as db:
            record = db.get_localization("save_title")
            assert record.translations() == {locale: "save_title" for locale in LOCALES}
            assert db.get_statistics()["fallback_keys"] == 2

    def test_manage_records(self, workspace: Path):
        with open_db(workspace) as db:
            record_id = db.get_localization("click_me").id

        result = runner.invoke(cli.app, ["edit", str(record_id), "fr", "Cliquez ici"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(cli.app, ["lookup", "fr", "click_me", "unknown_key"])
        assert result.exit_code == 0, result.output
        assert "Cliquez ici" in result.output
        assert "unknown_key" in result.output

        result = runner.invoke(cli.app, ["add", "Good morning", "--key", "greeting"])
        assert result.exit_code == 0, result.output
        assert "Translation unavailable" in result.output

        result = runner.invoke(cli.app, ["delete", str(record_id)])
        assert result.exit_code == 0, result.output

        with open_db(workspace) as db:
            assert db.get_localization("click_me") is None
            assert db.get_localization("greeting").de == "Good morning"

    def test_rename_to_existing_key_exits_with_error(self, workspace: Path):
        with open_db(workspace) as db:
            record_id = db.get_localization("click_me").id

        result = runner.invoke(cli.app, ["edit", str(record_id), "key", "save_document"])

        assert result.exit_code == 1
        assert "already exists" in result.output
        with open_db(workspace) as db:
            assert db.get_localization("click_me").id == record_id
            assert db.get_localization("save_document").es == "Guardar Documento"

    def test_invalid_input_exits_with_error(self, workspace: Path):
        assert runner.invoke(cli.app, ["lookup", "xx"]).exit_code == 1
        assert runner.invoke(cli.app, ["strings", "--locale", "xx"]).exit_code == 1
        assert runner.invoke(cli.app, ["edit", "1", "created_at", "x"]).exit_code == 1
        assert runner.invoke(cli.app, ["edit", "9999", "en", "x"]).exit_code == 1
        assert runner.invoke(cli.app, ["delete", "9999"]).exit_code == 1
        assert runner.invoke(cli.app, ["component", "comp_missing"]).exit_code == 1
        assert runner.invoke(cli.app, ["process", "missing.tsx"]).exit_code == 1

    def test_component_commands(self, workspace: Path, monkeypatch, make_translator):
        monkeypatch.setattr(cli, "get_translator", lambda settings, db: make_translator())
        (workspace / "Button.tsx").write_text(BUTTON_COMPONENT, encoding="utf-8")
        runner.invoke(cli.app, ["process", "Button.tsx", "--prompt", "a save button"])
        with open_db(workspace) as db:
            component_id = db.get_all_components()[0].id

        result = runner.invoke(cli.app, ["component", component_id, "--locale", "es"])
        assert result.exit_code == 0, result.output
        assert "Guardar Documento" in result.output

        assert runner.invoke(cli.app, ["components"]).exit_code == 0
        assert runner.invoke(cli.app, ["logs", "--component", component_id]).exit_code == 0
        assert runner.invoke(cli.app, ["stats"]).exit_code == 0

        result = runner.invoke(cli.app, ["remove-component", component_id])
        assert result.exit_code == 0, result.output
        with open_db(workspace) as db:
            assert db.get_component(component_id) is None
            assert db.get_localization("save_title") is not None
