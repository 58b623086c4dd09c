"""
CLI for component-i18n.

Provides commands for extracting and localizing component keys, managing
localization records and components, and inspecting logs.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from component_i18n.components import extract_component_code
from component_i18n.config import Settings, create_default_config, load_config
from component_i18n.database import LOCALES, Database
from component_i18n.errors import DuplicateKeyError, InvalidFieldError, InvalidLocaleError
from component_i18n.extraction import RegexKeyExtractor
from component_i18n.pipeline import LocalizationPipeline, ProgressInfo
from component_i18n.store import DuckDBLocalizationStore, make_lookup
from component_i18n.translation import LLMKeyTranslator

app = typer.Typer(
    name="component-i18n",
    help="Extract, translate and manage localization keys of generated components.",
    add_completion=False,
)

console = Console()


def get_settings(config_path: Path | None = None) -> Settings:
    """Load settings from config file or defaults."""
    if config_path and config_path.exists():
        return load_config(config_path)
    return load_config()


def get_database(settings: Settings) -> Database:
    """Get database instance."""
    return Database(settings.paths.database_path, log_level=settings.logging.level)


def _db_log_callback(db: Database):
    """Route pipeline and translator log messages into the processing log."""

    def log(level: str, message: str, context: dict[str, Any]) -> None:
        context = dict(context)
        stage = context.pop("stage", "translate")
        component_id = context.pop("component_id", None)
        db.log(level, stage, message, component_id=component_id, context=context or None)

    return log


def get_translator(settings: Settings, db: Database) -> LLMKeyTranslator | None:
    """Create the key translator, or None when no API key is configured."""
    translation = settings.translation
    if not translation.api_key:
        console.print(
            f"[yellow]No API key for {translation.provider.value}; "
            "new keys will use their key text[/yellow]"
        )
        return None

    try:
        return LLMKeyTranslator(
            provider=translation.provider.value,
            api_key=translation.api_key,
            model=translation.model,
            base_url=translation.base_url or None,
            temperature=translation.temperature,
            max_tokens=translation.max_tokens,
            timeout=translation.timeout_seconds,
            log_callback=_db_log_callback(db),
        )
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None


def get_pipeline(settings: Settings, db: Database) -> LocalizationPipeline:
    """Wire store, translator and pipeline for one command."""

    def on_progress(info: ProgressInfo) -> None:
        detail = f" ({info.detail})" if info.detail else ""
        console.print(f"[dim]{info.stage_display}{detail}[/dim]")

    return LocalizationPipeline(
        DuckDBLocalizationStore(db),
        get_translator(settings, db),
        translation_timeout=settings.translation.timeout_seconds,
        ensure_navigation_keys=settings.pipeline.ensure_navigation_keys,
        log_callback=_db_log_callback(db),
        progress_callback=on_progress,
    )


def _read_source(path: Path, from_message: bool) -> str:
    """Read component source, optionally pulling it out of an assistant reply."""
    if not path.exists():
        console.print(f"[red]File not found: {path}[/red]")
        raise typer.Exit(1)

    text = path.read_text(encoding="utf-8")
    if not from_message:
        return text

    code = extract_component_code(text)
    if code is None:
        console.print("[red]No component code block found in message[/red]")
        raise typer.Exit(1)
    return code


@app.command()
def init(
    output_path: Path = typer.Option(
        Path("config.yaml"),
        "--output",
        "-o",
        help="Output path for config file",
    ),
    seed: bool = typer.Option(True, "--seed/--no-seed", help="Insert the default catalog"),
) -> None:
    """Generate a default configuration file and initialize the database."""
    if output_path.exists():
        overwrite = typer.confirm(f"{output_path} already exists. Overwrite?")
        if not overwrite:
            raise typer.Abort()

    create_default_config(output_path)
    console.print(f"[green]Created config file: {output_path}[/green]")

    settings = load_config(output_path)
    with get_database(settings) as db:
        store = DuckDBLocalizationStore(db)
        created = store.seed_defaults() if seed and settings.pipeline.seed_defaults else 0
        db.log("INFO", "init", f"Initialized database with {created} default keys")

    console.print(f"[green]Database ready: {settings.paths.database_path}[/green]")
    if created:
        console.print(f"Inserted {created} default localization keys")
    console.print("\nSet your API key, then run:")
    console.print("  component-i18n process ./MyComponent.tsx --prompt 'a save button'")


@app.command()
def extract(
    source_file: Path = typer.Argument(..., help="Component source or assistant reply"),
    from_message: bool = typer.Option(
        False, "--message", "-m", help="Read the last code block of an assistant reply"
    ),
) -> None:
    """List the translation keys a component uses."""
    source = _read_source(source_file, from_message)
    references = RegexKeyExtractor().extract(source)

    if not references:
        console.print("[yellow]No t() calls found[/yellow]")
        return

    table = Table(title=f"Translation Keys ({len(references)})")
    table.add_column("Key", style="cyan")
    table.add_column("Context", style="magenta")
    table.add_column("Offset", justify="right", style="dim")

    for ref in references:
        table.add_row(escape(ref.key), ref.context.value, str(ref.offset))

    console.print(table)


@app.command()
def process(
    source_file: Path = typer.Argument(..., help="Component source or assistant reply"),
    prompt: str = typer.Option("", "--prompt", "-p", help="Request that produced the component"),
    component_id: str | None = typer.Option(
        None, "--id", help="Update an existing component instead of creating one"
    ),
    from_message: bool = typer.Option(
        False, "--message", "-m", help="Read the last code block of an assistant reply"
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Localize a generated component and save it."""
    settings = get_settings(config)
    source = _read_source(source_file, from_message)

    with get_database(settings) as db:
        previous_keys: list[str] | None = None
        user_prompt = prompt
        if component_id:
            existing = db.get_component(component_id)
            if existing:
                previous_keys = existing.extracted_keys
                user_prompt = prompt or existing.user_prompt

        pipeline = get_pipeline(settings, db)
        result = asyncio.run(
            pipeline.process_component(
                source,
                user_prompt or source_file.stem,
                component_id=component_id,
                previous_keys=previous_keys,
            )
        )
        db.save_component(result.component)

        localization = result.localization
        summary = Table(show_header=False, box=None, padding=(0, 2))
        summary.add_column("Key", style="cyan")
        summary.add_column("Value", style="green")
        summary.add_row("Component", f"{result.component.name} ({result.component.id})")
        summary.add_row("Type", result.component_type.value)
        summary.add_row("Keys", str(len(result.component.extracted_keys)))
        summary.add_row("  Existing", str(len(localization.existing_keys)))
        summary.add_row("  New", str(len(localization.new_keys)))
        if result.navigation:
            summary.add_row("  Navigation", str(len(result.navigation.manifest)))
        if result.removed_keys:
            summary.add_row("  No longer used", ", ".join(result.removed_keys))
        console.print(Panel(summary, title="[bold blue]Component processed[/bold blue]"))

        if result.translation_unavailable:
            errors = [
                r.translation_error
                for r in (localization, result.navigation)
                if r and r.translation_error
            ]
            console.print(
                f"[yellow]Translations unavailable ({'; '.join(errors)}); "
                "affected keys show their key text[/yellow]"
            )


@app.command()
def strings(
    locale: str | None = typer.Option(None, "--locale", "-l", help="Show only one locale"),
    limit: int = typer.Option(100, "--limit", "-n", help="Max entries to show"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Show stored localization records."""
    settings = get_settings(config)
    if locale and locale not in LOCALES:
        console.print(f"[red]Invalid locale: {locale}. Valid options: {', '.join(LOCALES)}[/red]")
        raise typer.Exit(1)

    with get_database(settings) as db:
        records = DuckDBLocalizationStore(db).lookup_all()

    if not records:
        console.print("[yellow]No localization records[/yellow]")
        return

    locales = [locale] if locale else list(LOCALES)
    table = Table(title=f"Localizations ({len(records)})")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Key", style="cyan")
    for loc in locales:
        table.add_column(loc)

    for record in records[:limit]:
        table.add_row(
            str(record.id),
            escape(record.key),
            *(escape(record.text(loc)) for loc in locales),
        )

    if len(records) > limit:
        table.add_row("...", "...", *("..." for _ in locales))

    console.print(table)


@app.command()
def lookup(
    locale: str = typer.Argument(..., help="Locale code (en, es, fr, de, ja, zh)"),
    keys: list[str] | None = typer.Argument(None, help="Keys to resolve (default: all)"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Resolve keys for one locale the way the preview does."""
    settings = get_settings(config)

    with get_database(settings) as db:
        store = DuckDBLocalizationStore(db)
        try:
            translations = store.get_by_locale(locale)
        except InvalidLocaleError as e:
            console.print(f"[red]{e}. Valid options: {', '.join(LOCALES)}[/red]")
            raise typer.Exit(1) from None

    resolve = make_lookup(translations)
    table = Table(title=f"Locale: {locale}")
    table.add_column("Key", style="cyan")
    table.add_column("Text")

    for key in keys or sorted(translations):
        table.add_row(escape(key), escape(resolve(key)))

    console.print(table)


@app.command()
def edit(
    record_id: int = typer.Argument(..., help="Localization record ID"),
    field: str = typer.Argument(..., help="Field to edit: key or a locale code"),
    value: str = typer.Argument(..., help="New value"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Edit one field of a localization record."""
    settings = get_settings(config)

    with get_database(settings) as db:
        try:
            updated = DuckDBLocalizationStore(db).update(record_id, field, value)
        except InvalidFieldError as e:
            console.print(f"[red]{e}. Valid options: key, {', '.join(LOCALES)}[/red]")
            raise typer.Exit(1) from None
        except DuplicateKeyError as e:
            console.print(f"[red]{escape(str(e))}. Edit or delete that record first[/red]")
            raise typer.Exit(1) from None

        if not updated:
            console.print(f"[red]Localization {record_id} not found[/red]")
            raise typer.Exit(1)

        db.log("INFO", "edit", f"Updated {field} of localization {record_id}")

    console.print(f"[green]Updated {field} of localization {record_id}[/green]")


@app.command()
def add(
    text: str = typer.Argument(..., help="English UI text"),
    key: str = typer.Option(..., "--key", "-k", help="Translation key to create"),
    context: str | None = typer.Option(None, "--context", help="Usage hint, e.g. button"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Translate a piece of text and store it under a new key."""
    settings = get_settings(config)

    with get_database(settings) as db:
        store = DuckDBLocalizationStore(db)
        if store.get(key):
            console.print(f"[yellow]Key {key!r} already exists[/yellow]")
            raise typer.Exit(1)

        translator = get_translator(settings, db)
        if translator is None:
            translations = {locale: text for locale in LOCALES}
            fallback = True
        else:
            result = asyncio.run(translator.translate_text(text, context))
            translations = result.translations.as_dict()
            fallback = result.fallback

        store.upsert_if_absent(key, translations)
        db.log("INFO", "add", f"Added key {key!r}", context={"fallback": fallback})

    table = Table(title=key)
    table.add_column("Locale", style="cyan")
    table.add_column("Text")
    for locale in LOCALES:
        table.add_row(locale, escape(translations[locale]))
    console.print(table)
    if fallback:
        console.print("[yellow]Translation unavailable; stored the original text[/yellow]")


@app.command()
def delete(
    record_id: int = typer.Argument(..., help="Localization record ID"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Delete a localization record."""
    settings = get_settings(config)

    with get_database(settings) as db:
        record = db.get_localization_by_id(record_id)
        if record is None:
            console.print(f"[red]Localization {record_id} not found[/red]")
            raise typer.Exit(1)
        DuckDBLocalizationStore(db).delete(record_id)
        db.log("INFO", "delete", f"Deleted localization {record_id} ({record.key})")

    console.print(f"[green]Deleted {escape(record.key)} (ID {record_id})[/green]")


@app.command()
def components(
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """List saved components."""
    settings = get_settings(config)

    with get_database(settings) as db:
        items = db.get_all_components()

    if not items:
        console.print("[yellow]No components saved[/yellow]")
        return

    table = Table(title="Components")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Keys", justify="right")
    table.add_column("Prompt")

    for component in items[:50]:
        table.add_row(
            component.id,
            component.name,
            str(len(component.extracted_keys)),
            component.user_prompt[:50],
        )

    console.print(table)


@app.command()
def component(
    component_id: str = typer.Argument(..., help="Component ID"),
    locale: str = typer.Option("en", "--locale", "-l", help="Locale to resolve keys in"),
    show_code: bool = typer.Option(False, "--code", help="Print the component source"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Show a component and its keys resolved in one locale."""
    settings = get_settings(config)

    with get_database(settings) as db:
        item = db.get_component(component_id)
        if not item:
            console.print(f"[red]Component {component_id} not found[/red]")
            raise typer.Exit(1)
        try:
            resolve = make_lookup(DuckDBLocalizationStore(db).get_by_locale(locale))
        except InvalidLocaleError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1) from None

    table = Table(title=f"{item.name} ({locale})")
    table.add_column("Key", style="cyan")
    table.add_column("Text")
    for key in item.extracted_keys:
        table.add_row(escape(key), escape(resolve(key)))

    console.print(Panel(item.description or "-", title=item.id))
    console.print(table)
    console.print(f"[dim]Demo props: {item.demo_props}[/dim]")
    if show_code:
        console.print(item.code, markup=False, highlight=False)


@app.command("remove-component")
def remove_component(
    component_id: str = typer.Argument(..., help="Component ID"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Delete a component. Its localization records are kept."""
    settings = get_settings(config)

    with get_database(settings) as db:
        if not db.delete_component(component_id):
            console.print(f"[red]Component {component_id} not found[/red]")
            raise typer.Exit(1)
        db.log("INFO", "delete", "Deleted component", component_id=component_id)

    console.print(f"[green]Deleted component {component_id}[/green]")


@app.command()
def logs(
    component_id: str | None = typer.Option(None, "--component", help="Filter by component"),
    level: str | None = typer.Option(None, "--level", "-l", help="Filter by level"),
    limit: int = typer.Option(50, "--limit", "-n", help="Max entries to show"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """View processing logs."""
    settings = get_settings(config)

    with get_database(settings) as db:
        entries = db.get_logs(level=level, component_id=component_id, limit=limit)

    if not entries:
        console.print("[yellow]No log entries found[/yellow]")
        return

    table = Table(title="Processing Logs")
    table.add_column("Time", style="dim")
    table.add_column("Level")
    table.add_column("Stage", style="cyan")
    table.add_column("Message")
    table.add_column("Component", style="dim")

    for entry in entries:
        lvl = entry["level"]
        level_style = {
            "DEBUG": "dim",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
        }.get(lvl, "white")

        table.add_row(
            str(entry["created_at"])[:19],
            f"[{level_style}]{lvl}[/{level_style}]",
            entry["stage"] or "",
            (entry["message"] or "")[:60],
            entry["component_id"] or "",
        )

    console.print(table)


@app.command()
def stats(
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Show localization statistics."""
    settings = get_settings(config)

    with get_database(settings) as db:
        stats_data = db.get_statistics()

    console.print(
        Panel(
            f"""
Keys: {stats_data["total_keys"]}
  - Incomplete: {stats_data["incomplete_keys"]}
  - Untranslated (key text): {stats_data["fallback_keys"]}

Components: {stats_data["total_components"]}

Errors logged: {stats_data["errors"]}
        """.strip(),
            title="Localization Statistics",
        )
    )


def main() -> None:
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
