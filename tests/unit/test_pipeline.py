"""
Unit tests for the localization pipeline
"""

import asyncio

import pytest

from component_i18n.components import ComponentType
from component_i18n.database import LOCALES
from component_i18n.errors import ExtractionError
from component_i18n.extraction import ContextLabel, KeyExtractor
from component_i18n.pipeline import LocalizationPipeline, PipelineStage
from component_i18n.store import DuckDBLocalizationStore


FORM_SOURCE = """
export default function ContactForm({ t }) {
  return (
    <div>
      <h2>{t('contact_title')}</h2>
      <input placeholder={t('enter_email')} />
      <button onClick={send}>{t('send_btn')}</button>
      <p>{t('contact_title')}</p>
    </div>
  );
}
"""

FORM_KEYS = ["contact_title", "enter_email", "send_btn"]


class BrokenExtractor(KeyExtractor):
    @property
    def name(self) -> str:
        return "broken"

    def extract(self, source):
        raise RuntimeError("parser crashed")


class TestProcess:
    """Test cases for LocalizationPipeline.process"""

    @pytest.mark.asyncio
    async def test_new_keys_are_translated_in_one_batch(
        self, store: DuckDBLocalizationStore, translator, fake_translation
    ):
        pipeline = LocalizationPipeline(store, translator)

        result = await pipeline.process(FORM_SOURCE)

        assert result.manifest == FORM_KEYS
        assert result.new_keys == FORM_KEYS
        assert result.existing_keys == []
        assert result.translation_unavailable is False
        assert translator.calls == [FORM_KEYS]
        assert store.get("send_btn").translations() == fake_translation("send_btn").as_dict()

    @pytest.mark.asyncio
    async def test_references_carry_translations_and_context(
        self, store: DuckDBLocalizationStore, translator
    ):
        result = await LocalizationPipeline(store, translator).process(FORM_SOURCE)

        by_key = {ref.key: ref for ref in result.references}
        assert by_key["send_btn"].context.value == "button"
        assert by_key["send_btn"].translations["de"] == "de:send_btn"
        assert by_key["contact_title"].translations["en"] == "en:contact_title"

    @pytest.mark.asyncio
    async def test_second_run_is_a_no_op(self, store: DuckDBLocalizationStore, translator):
        pipeline = LocalizationPipeline(store, translator)

        first = await pipeline.process(FORM_SOURCE)
        before = {record.key: record.translations() for record in store.lookup_all()}
        second = await pipeline.process(FORM_SOURCE)

        assert second.manifest == first.manifest
        assert second.existing_keys == FORM_KEYS
        assert second.new_keys == []
        assert len(translator.calls) == 1
        assert {record.key: record.translations() for record in store.lookup_all()} == before

    @pytest.mark.asyncio
    async def test_source_without_calls(self, store: DuckDBLocalizationStore, translator):
        result = await LocalizationPipeline(store, translator).process("<div>static</div>")

        assert result.is_empty
        assert result.manifest == []
        assert translator.calls == []
        assert store.lookup_all() == []

    @pytest.mark.asyncio
    async def test_stored_key_is_not_translated_again(
        self, seeded_store: DuckDBLocalizationStore, translator
    ):
        """A key from the default catalog resolves without a translation call"""
        source = "<button onClick={save}>{t('save_document')}</button>"

        result = await LocalizationPipeline(seeded_store, translator).process(source)

        assert result.manifest == ["save_document"]
        assert result.existing_keys == ["save_document"]
        assert translator.calls == []
        assert seeded_store.lookup("es")("save_document") == "Guardar Documento"

    @pytest.mark.asyncio
    async def test_only_missing_keys_are_sent(
        self, seeded_store: DuckDBLocalizationStore, translator
    ):
        source = "{t('click_me')} {t('brand_new')}"

        result = await LocalizationPipeline(seeded_store, translator).process(source)

        assert translator.calls == [["brand_new"]]
        assert result.manifest == ["click_me", "brand_new"]
        assert result.new_keys == ["brand_new"]

    @pytest.mark.asyncio
    async def test_ensure_keys(self, seeded_store: DuckDBLocalizationStore, translator):
        pipeline = LocalizationPipeline(seeded_store, translator)

        result = await pipeline.ensure_keys(
            [("click_me", ContextLabel.BUTTON), ("footer_note", ContextLabel.CONTENT)]
        )

        assert result.manifest == ["click_me", "footer_note"]
        assert result.existing_keys == ["click_me"]
        assert result.new_keys == ["footer_note"]
        assert result.references[1].context == ContextLabel.CONTENT
        assert seeded_store.get("footer_note").fr == "fr:footer_note"


class TestTranslationFailures:
    """Test cases for degraded translation"""

    @pytest.mark.asyncio
    async def test_service_failure_stores_key_text(
        self, store: DuckDBLocalizationStore, make_translator, log_callback, log_records
    ):
        translator = make_translator(fail=True)
        pipeline = LocalizationPipeline(store, translator, log_callback=log_callback)

        result = await pipeline.process(FORM_SOURCE)

        assert result.translation_unavailable is True
        assert "service down" in result.translation_error
        assert result.fallback_keys == FORM_KEYS
        assert result.manifest == FORM_KEYS
        for key in FORM_KEYS:
            assert store.get(key).translations() == {locale: key for locale in LOCALES}
        assert any(level == "WARNING" and ctx["stage"] == "translate" for level, _, ctx in log_records)

    @pytest.mark.asyncio
    async def test_fallback_records_are_not_retranslated(
        self, store: DuckDBLocalizationStore, make_translator
    ):
        await LocalizationPipeline(store, make_translator(fail=True)).process(FORM_SOURCE)
        working = make_translator()

        result = await LocalizationPipeline(store, working).process(FORM_SOURCE)

        assert working.calls == []
        assert result.existing_keys == FORM_KEYS
        assert store.get("send_btn").en == "send_btn"

    @pytest.mark.asyncio
    async def test_partial_response(self, store: DuckDBLocalizationStore, make_translator):
        translator = make_translator(omit=["enter_email"])

        result = await LocalizationPipeline(store, translator).process(FORM_SOURCE)

        assert result.translation_unavailable is True
        assert result.translation_error == "1 of 3 keys missing from translation response"
        assert result.fallback_keys == ["enter_email"]
        assert result.new_keys == FORM_KEYS
        assert store.get("enter_email").fr == "enter_email"
        assert store.get("send_btn").fr == "fr:send_btn"

    @pytest.mark.asyncio
    async def test_no_translator(self, store: DuckDBLocalizationStore):
        result = await LocalizationPipeline(store, None).process("{t('hello')}")

        assert result.translation_unavailable is True
        assert result.translation_error == "No translation service configured"
        assert store.get("hello").ja == "hello"

    @pytest.mark.asyncio
    async def test_translation_timeout(self, store: DuckDBLocalizationStore, make_translator):
        translator = make_translator(delay=1.0)
        pipeline = LocalizationPipeline(store, translator, translation_timeout=0.01)

        result = await pipeline.process("{t('slow_key')}")

        assert result.translation_unavailable is True
        assert "timed out" in result.translation_error
        assert store.get("slow_key").zh == "slow_key"

    @pytest.mark.asyncio
    async def test_extraction_failure(
        self, store: DuckDBLocalizationStore, translator, log_callback, log_records
    ):
        pipeline = LocalizationPipeline(
            store, translator, extractor=BrokenExtractor(), log_callback=log_callback
        )

        with pytest.raises(ExtractionError, match="parser crashed"):
            await pipeline.process("{t('x')}")

        level, _, context = log_records[-1]
        assert level == "ERROR"
        assert context["stage"] == "extract"
        assert store.lookup_all() == []


class TestConcurrency:
    """Test cases for concurrent runs"""

    @pytest.mark.asyncio
    async def test_concurrent_runs_create_one_record_per_key(
        self, store: DuckDBLocalizationStore, make_translator
    ):
        translator = make_translator(delay=0.01)
        pipeline = LocalizationPipeline(store, translator)

        first, second = await asyncio.gather(
            pipeline.process(FORM_SOURCE), pipeline.process(FORM_SOURCE)
        )

        assert [record.key for record in store.lookup_all()] == sorted(FORM_KEYS)
        assert first.manifest == second.manifest == FORM_KEYS
        assert sorted(first.new_keys + second.new_keys) == sorted(FORM_KEYS)

    @pytest.mark.asyncio
    async def test_concurrent_runs_with_overlapping_keys(
        self, store: DuckDBLocalizationStore, make_translator
    ):
        translator = make_translator(delay=0.01)
        pipeline = LocalizationPipeline(store, translator)

        await asyncio.gather(
            pipeline.process("{t('save_btn')} {t('a')}"),
            pipeline.process("{t('save_btn')} {t('b')}"),
            pipeline.process("{t('save_btn')}"),
        )

        assert [record.key for record in store.lookup_all()] == ["a", "b", "save_btn"]

    @pytest.mark.asyncio
    async def test_losing_failed_run_reports_stored_record(
        self, store: DuckDBLocalizationStore, make_translator, fake_translation
    ):
        working = LocalizationPipeline(store, make_translator(delay=0.01))
        failing = LocalizationPipeline(store, make_translator(fail=True, delay=0.05))

        stored, lost = await asyncio.gather(
            working.process("{t('save_btn')}"), failing.process("{t('save_btn')}")
        )

        assert stored.new_keys == ["save_btn"]
        assert lost.new_keys == []
        assert lost.existing_keys == ["save_btn"]
        assert lost.fallback_keys == []
        assert lost.translation_unavailable is False
        assert lost.translation_error is None
        assert lost.references[0].translations == fake_translation("save_btn").as_dict()
        assert store.get("save_btn").es == "es:save_btn"


class TestCallbacks:
    """Test cases for log and progress callbacks"""

    @pytest.mark.asyncio
    async def test_progress_stages(self, store: DuckDBLocalizationStore, translator):
        stages = []
        pipeline = LocalizationPipeline(
            store, translator, progress_callback=lambda info: stages.append(info.stage)
        )

        await pipeline.process(FORM_SOURCE)

        assert stages == [
            PipelineStage.EXTRACT,
            PipelineStage.RECONCILE,
            PipelineStage.TRANSLATE,
            PipelineStage.PERSIST,
            PipelineStage.MANIFEST,
        ]

    @pytest.mark.asyncio
    async def test_log_context_carries_component_id(
        self, store: DuckDBLocalizationStore, translator, log_callback, log_records
    ):
        pipeline = LocalizationPipeline(store, translator, log_callback=log_callback)

        await pipeline.process(FORM_SOURCE, component_id="comp_1")

        assert log_records
        assert all(ctx["component_id"] == "comp_1" for _, _, ctx in log_records)
        persisted = [ctx for _, _, ctx in log_records if ctx["stage"] == "persist"]
        assert persisted[-1]["new_keys"] == FORM_KEYS


NAV_SOURCE = """export default function SiteNav({ t }) {
  return (
    <nav>
      <a href="/">{t('nav_home')}</a>
      <span>{t('brand_name')}</span>
    </nav>
  );
}"""

BUTTON_SOURCE = """export default function SaveButton({ t, onClick }) {
  return <button onClick={onClick}>{t('save_btn')}</button>;
}"""


class TestProcessComponent:
    """Test cases for LocalizationPipeline.process_component"""

    @pytest.mark.asyncio
    async def test_navigation_component_gets_nav_keys(
        self, store: DuckDBLocalizationStore, translator
    ):
        result = await LocalizationPipeline(store, translator).process_component(
            NAV_SOURCE, "site navigation bar"
        )

        assert result.component_type == ComponentType.NAVIGATION
        assert result.component.extracted_keys == ["nav_home", "brand_name"]
        assert result.navigation.existing_keys == ["nav_home"]
        assert translator.calls == [
            ["nav_home", "brand_name"],
            ["nav_about", "nav_services", "nav_contact"],
        ]
        for key in ("nav_about", "nav_services", "nav_contact"):
            assert store.get(key) is not None

    @pytest.mark.asyncio
    async def test_navigation_keys_can_be_disabled(
        self, store: DuckDBLocalizationStore, translator
    ):
        pipeline = LocalizationPipeline(store, translator, ensure_navigation_keys=False)

        result = await pipeline.process_component(NAV_SOURCE, "site navigation bar")

        assert result.navigation is None
        assert result.component.extracted_keys == ["nav_home", "brand_name"]

    @pytest.mark.asyncio
    async def test_button_component_record(self, store: DuckDBLocalizationStore, translator):
        result = await LocalizationPipeline(store, translator).process_component(
            BUTTON_SOURCE, "a save button"
        )
        component = result.component

        assert result.component_type == ComponentType.BUTTON
        assert component.id.startswith("comp_")
        assert component.name == "ASaveButtonComponent"
        assert component.description == "a save button"
        assert component.extracted_keys == ["save_btn"]
        assert component.demo_props["t"] == "t"
        assert "onClick" in component.demo_props
        assert "interface SaveButtonProps" in component.code

    @pytest.mark.asyncio
    async def test_update_reports_removed_keys(
        self, store: DuckDBLocalizationStore, translator
    ):
        result = await LocalizationPipeline(store, translator).process_component(
            BUTTON_SOURCE,
            "a save button",
            component_id="comp_existing",
            previous_keys=["old_label", "save_btn"],
        )

        assert result.component.id == "comp_existing"
        assert result.removed_keys == ["old_label"]

    @pytest.mark.asyncio
    async def test_translation_failure_is_reported(
        self, store: DuckDBLocalizationStore, make_translator
    ):
        result = await LocalizationPipeline(store, make_translator(fail=True)).process_component(
            BUTTON_SOURCE, "a save button"
        )

        assert result.translation_unavailable is True
        assert result.component.extracted_keys == ["save_btn"]
