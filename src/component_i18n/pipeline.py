"""
Localization pipeline for generated components.

Runs one component's source through the stages
extract -> reconcile -> translate missing -> persist -> manifest.

Only keys without a stored record are sent for translation, and each new
key is stored with a single conflict-ignoring insert, so running the
pipeline twice, or twice at once, never creates duplicate records.
Translation problems degrade the affected keys to their fallback text;
they never fail the run.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from component_i18n.components import (
    NAVIGATION_KEYS,
    ComponentType,
    build_demo_props,
    component_name_from_prompt,
    detect_component_type,
    ensure_translation_prop,
    has_translation_prop,
    new_component_id,
)
from component_i18n.database import ComponentManifest
from component_i18n.errors import ExtractionError
from component_i18n.extraction import ExtractedReference, KeyExtractor, RegexKeyExtractor
from component_i18n.store import LocalizationStore
from component_i18n.translation import TranslationService, TranslationSet


class PipelineStage(str, Enum):
    """Pipeline processing stages."""

    EXTRACT = "extract"
    RECONCILE = "reconcile"
    TRANSLATE = "translate"
    PERSIST = "persist"
    MANIFEST = "manifest"
    COMPONENT = "component"


@dataclass
class ProgressInfo:
    """Progress information for callbacks."""

    stage: PipelineStage
    stage_display: str
    detail: str | None = None


ProgressCallback = Callable[[ProgressInfo], None] | None
LogCallback = Callable[[str, str, dict[str, Any]], None] | None


@dataclass
class PipelineResult:
    """Outcome of localizing one piece of source."""

    references: list[ExtractedReference] = field(default_factory=list)
    # Every key the source depends on, in first-seen order
    manifest: list[str] = field(default_factory=list)
    existing_keys: list[str] = field(default_factory=list)
    new_keys: list[str] = field(default_factory=list)
    # Keys stored with fallback text because no translation was available
    fallback_keys: list[str] = field(default_factory=list)
    translation_unavailable: bool = False
    translation_error: str | None = None

    @property
    def is_empty(self) -> bool:
        """True when the source contained no translation calls."""
        return not self.references


@dataclass
class ComponentResult:
    """Outcome of processing a generated component."""

    component: ComponentManifest
    component_type: ComponentType
    localization: PipelineResult
    navigation: PipelineResult | None = None
    # Keys the previous version of the component used but this one does not
    removed_keys: list[str] = field(default_factory=list)

    @property
    def translation_unavailable(self) -> bool:
        """True if any key had to fall back to its key text."""
        if self.navigation and self.navigation.translation_unavailable:
            return True
        return self.localization.translation_unavailable


class LocalizationPipeline:
    """
    Extracts, translates and stores the localization keys of components.

    The store and translation service are injected; the pipeline owns no
    connections and holds no state between runs.
    """

    def __init__(
        self,
        store: LocalizationStore,
        translator: TranslationService | None,
        *,
        extractor: KeyExtractor | None = None,
        translation_timeout: float | None = None,
        ensure_navigation_keys: bool = True,
        log_callback: LogCallback = None,
        progress_callback: ProgressCallback = None,
    ):
        """
        Initialize the pipeline.

        Args:
            store: Localization store shared by all runs.
            translator: Translation service; None stores fallback text only.
            extractor: Key extractor. Defaults to the regex extractor.
            translation_timeout: Seconds to wait for a translation batch.
            ensure_navigation_keys: Create the nav_* keys for navigation components.
            log_callback: Optional callback accepting (level, message, context).
            progress_callback: Optional callback receiving ProgressInfo.
        """
        self.store = store
        self.translator = translator
        self.extractor = extractor or RegexKeyExtractor()
        self.translation_timeout = translation_timeout
        self.ensure_navigation_keys = ensure_navigation_keys
        self._log_callback = log_callback
        self._progress_callback = progress_callback

    def _log(
        self,
        level: str,
        stage: PipelineStage,
        message: str,
        component_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Log a message via callback if available."""
        if self._log_callback:
            payload = dict(context or {})
            payload["stage"] = stage.value
            if component_id:
                payload["component_id"] = component_id
            self._log_callback(level, message, payload)

    def _progress(self, stage: PipelineStage, display: str, detail: str | None = None) -> None:
        if self._progress_callback:
            self._progress_callback(ProgressInfo(stage=stage, stage_display=display, detail=detail))

    async def process(self, source: str, component_id: str | None = None) -> PipelineResult:
        """
        Localize every key used by a piece of component source.

        Args:
            source: Generated component source.
            component_id: Component the source belongs to, for logging.

        Returns:
            PipelineResult whose manifest lists every key the source uses.

        Raises:
            ExtractionError: If the source could not be scanned.
        """
        self._progress(PipelineStage.EXTRACT, "Extracting translation keys")
        try:
            references = self.extractor.extract(source)
        except Exception as e:
            self._log(
                "ERROR",
                PipelineStage.EXTRACT,
                f"Key extraction failed: {e}",
                component_id,
                {"extractor": self.extractor.name, "error_type": type(e).__name__},
            )
            raise ExtractionError(f"Key extraction failed: {e}") from e

        if not references:
            self._log(
                "INFO", PipelineStage.EXTRACT, "No translation keys found", component_id
            )
            return PipelineResult()

        self._log(
            "INFO",
            PipelineStage.EXTRACT,
            f"Found {len(references)} translation keys",
            component_id,
            {"keys": [ref.key for ref in references]},
        )
        return await self.localize(references, component_id)

    async def localize(
        self,
        references: Sequence[ExtractedReference],
        component_id: str | None = None,
    ) -> PipelineResult:
        """
        Reconcile, translate and persist a list of references.

        Args:
            references: Deduplicated references in manifest order.
            component_id: Component the references belong to, for logging.

        Returns:
            PipelineResult for the references.
        """
        references = list(references)
        result = PipelineResult(references=references)
        keys = [ref.key for ref in references]

        # Reconcile: only keys without a record go any further
        self._progress(PipelineStage.RECONCILE, "Checking stored translations")
        existing = self.store.existing_keys(keys)
        result.existing_keys = [key for key in keys if key in existing]
        missing = [ref for ref in references if ref.key not in existing]

        if missing:
            translations = await self._translate_missing(missing, result, component_id)
            self._persist(missing, translations, result, component_id)

        self._progress(PipelineStage.MANIFEST, "Building manifest", f"{len(keys)} keys")
        result.manifest = keys
        return result

    async def _translate_missing(
        self,
        missing: list[ExtractedReference],
        result: PipelineResult,
        component_id: str | None,
    ) -> dict[str, TranslationSet]:
        """Translate missing keys in one batch; failures leave the mapping empty."""
        self._progress(
            PipelineStage.TRANSLATE, "Translating new keys", f"{len(missing)} keys"
        )

        if self.translator is None:
            result.translation_unavailable = True
            result.translation_error = "No translation service configured"
            self._log(
                "WARNING",
                PipelineStage.TRANSLATE,
                "No translation service configured, using key text",
                component_id,
                {"keys": [ref.key for ref in missing]},
            )
            return {}

        try:
            request = self.translator.translate_keys(missing)
            if self.translation_timeout:
                translations = await asyncio.wait_for(request, timeout=self.translation_timeout)
            else:
                translations = await request
        except asyncio.TimeoutError:
            result.translation_unavailable = True
            result.translation_error = (
                f"Translation timed out after {self.translation_timeout:.0f}s"
            )
            translations = {}
        except Exception as e:
            result.translation_unavailable = True
            result.translation_error = str(e) or type(e).__name__
            translations = {}

        if result.translation_unavailable:
            self._log(
                "WARNING",
                PipelineStage.TRANSLATE,
                f"Translation unavailable, using key text: {result.translation_error}",
                component_id,
                {"service": self.translator.name, "keys": [ref.key for ref in missing]},
            )
            return {}

        absent = [ref.key for ref in missing if ref.key not in translations]
        if absent:
            result.translation_unavailable = True
            result.translation_error = (
                f"{len(absent)} of {len(missing)} keys missing from translation response"
            )
            self._log(
                "WARNING",
                PipelineStage.TRANSLATE,
                result.translation_error,
                component_id,
                {"keys": absent},
            )
        else:
            self._log(
                "INFO",
                PipelineStage.TRANSLATE,
                f"Translated {len(missing)} new keys",
                component_id,
                {"service": self.translator.name},
            )
        return translations

    def _persist(
        self,
        missing: list[ExtractedReference],
        translations: dict[str, TranslationSet],
        result: PipelineResult,
        component_id: str | None,
    ) -> None:
        """Store a record for each missing key unless one appeared meanwhile."""
        self._progress(PipelineStage.PERSIST, "Saving translations")

        for ref in missing:
            translation = translations.get(ref.key)
            is_fallback = translation is None
            if translation is None:
                translation = TranslationSet.fallback(ref.fallback_text)
            ref.translations = translation.as_dict()

            if self.store.upsert_if_absent(ref.key, ref.translations):
                result.new_keys.append(ref.key)
                if is_fallback:
                    result.fallback_keys.append(ref.key)
                continue

            # Another run stored this key between reconcile and persist
            stored = self.store.get(ref.key)
            if stored is not None:
                ref.translations = stored.translations()
            self._log(
                "DEBUG",
                PipelineStage.PERSIST,
                f"Key {ref.key!r} already stored, keeping existing record",
                component_id,
            )

        # Keys another run stored first count as existing
        created = set(result.new_keys)
        result.existing_keys = [ref.key for ref in result.references if ref.key not in created]

        # Degraded only if a fallback record this run created is in the store
        if result.translation_unavailable and not result.fallback_keys:
            result.translation_unavailable = False
            result.translation_error = None

        self._log(
            "INFO",
            PipelineStage.PERSIST,
            f"Stored {len(result.new_keys)} new keys",
            component_id,
            {
                "new_keys": result.new_keys,
                "fallback_keys": result.fallback_keys,
                "existing_keys": result.existing_keys,
            },
        )

    async def ensure_keys(
        self,
        pairs: Sequence[tuple[str, Any]],
        component_id: str | None = None,
    ) -> PipelineResult:
        """
        Make sure each (key, context) pair has a stored record.

        Keys that already exist are left untouched; the rest are translated
        and stored like extracted keys.
        """
        references = [ExtractedReference(key=key, context=context) for key, context in pairs]
        return await self.localize(references, component_id)

    async def process_component(
        self,
        code: str,
        user_prompt: str,
        component_id: str | None = None,
        previous_keys: Sequence[str] | None = None,
    ) -> ComponentResult:
        """
        Process a generated component end to end.

        Localizes its keys, makes sure it declares the `t` prop, prepares
        demo props, and returns the component record ready to be saved.
        Navigation components also get records for the shared nav_* keys,
        which are not added to the component's extracted keys.

        Args:
            code: Component source from the model.
            user_prompt: The request that produced the component.
            component_id: Existing component to update; a new ID otherwise.
            previous_keys: Keys the previous version of the component used.

        Returns:
            ComponentResult with the component record and localization results.
        """
        component_id = component_id or new_component_id()
        localization = await self.process(code, component_id)
        manifest = list(localization.manifest)

        component_type = detect_component_type(code)
        navigation: PipelineResult | None = None
        if component_type == ComponentType.NAVIGATION and self.ensure_navigation_keys:
            # Records only; the manifest keeps the keys the source uses
            navigation = await self.ensure_keys(NAVIGATION_KEYS, component_id)

        transformed = ensure_translation_prop(code)
        if not has_translation_prop(transformed):
            self._log(
                "WARNING",
                PipelineStage.COMPONENT,
                "Component does not declare the t prop",
                component_id,
            )

        removed = [key for key in previous_keys or () if key not in manifest]

        component = ComponentManifest(
            id=component_id,
            name=component_name_from_prompt(user_prompt),
            description=user_prompt,
            code=transformed,
            user_prompt=user_prompt,
            extracted_keys=manifest,
            demo_props=build_demo_props(component_type),
        )

        self._log(
            "INFO",
            PipelineStage.COMPONENT,
            f"Processed {component.name} ({component_type.value}) with {len(manifest)} keys",
            component_id,
            {"removed_keys": removed} if removed else None,
        )

        return ComponentResult(
            component=component,
            component_type=component_type,
            localization=localization,
            navigation=navigation,
            removed_keys=removed,
        )
