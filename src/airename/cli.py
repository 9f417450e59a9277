"""Command line interface for ai-rename."""

from __future__ import annotations

import difflib
import logging
import re
from pathlib import Path
from typing import Any

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from airename.config import TIMESTAMP_PREFIX, AIRenameConfig, ConfigError, ConfigManager
from airename.errors import AIRenameError, ValidationError
from airename.ingestion import DirectoryScanner, ParserRegistry
from airename.naming.types import CATEGORY_CHOICES, DATE_FORMATS, NAMING_CONVENTIONS, PROVIDERS
from airename.organization import FileRenamer, RenameBatch
from airename.providers import LocalProvider, create_provider

console = Console()
LOGGER = logging.getLogger(__name__)

CLOUD_PROVIDERS = ("claude", "openai")
LOCAL_PROVIDERS = ("ollama", "lmstudio")

_SECRET_LINE = re.compile(r"^(?P<lead>[ +-]?\s*api_key:\s*)(?P<value>\S.*)$")


def _configure_logging(level: str) -> None:
    """Route log records to stderr through rich at the configured level.

    Args:
        level: Logging level name such as ``INFO`` or ``WARNING``.
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logging.basicConfig(
        level=numeric,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command appropriately.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        details: Optional structured details to include in the payload.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """
    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    if isinstance(original, click.ClickException):
        raise original

    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool, summary_only: bool) -> None:
    """Conditionally print CLI output according to quiet/summary settings.

    Args:
        message: Renderable or string to emit.
        mode: Output mode identifier (`detail`, `summary`, `warning`, or `error`).
        quiet: Whether quiet mode is active.
        summary_only: Whether only summary lines should be emitted.
    """
    if quiet and mode != "error":
        return
    if summary_only and mode not in {"summary", "warning", "error"}:
        return
    console.print(message)


def _format_summary_line(command: str, root: Path | str, metrics: dict[str, Any]) -> str:
    """Return a consistent summary line for CLI commands."""
    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {root}: {parts}.[/green]"


def _mask_secret(line: str) -> str:
    """Hide the API key value in a YAML or diff line."""
    match = _SECRET_LINE.match(line)
    if match is None or match.group("value") == "null":
        return line
    return f"{match.group('lead')}********"


_OVERRIDE_KEYS = {
    "provider": "llm.provider",
    "api_key": "llm.api_key",
    "model": "llm.model",
    "base_url": "llm.base_url",
    "convention": "naming.convention",
    "category": "naming.category",
    "personal_name": "naming.personal_name",
    "date_format": "naming.date_format",
    "max_size": "processing.max_file_size_mb",
}


def _rename_overrides(*, dry_run: bool, **options: Any) -> dict[str, Any]:
    """Map rename command options onto dotted configuration keys."""
    overrides = {
        _OVERRIDE_KEYS[name]: value for name, value in options.items() if value is not None
    }
    if dry_run:
        overrides["processing.dry_run"] = True
    return overrides


def _batch_payload(directory: Path, batch: RenameBatch, config: AIRenameConfig) -> dict[str, Any]:
    return {
        "context": {
            "directory": directory.as_posix(),
            "dry_run": batch.dry_run,
            "provider": config.llm.provider,
            "convention": config.naming.convention,
            "category": config.naming.category,
        },
        "counts": batch.summary(),
        "results": [result.model_dump(mode="json") for result in batch.results],
    }


def _results_table(directory: Path, batch: RenameBatch) -> Table:
    title = (
        f"Rename preview for {directory}" if batch.dry_run else f"Rename results for {directory}"
    )
    table = Table(title=title)
    table.add_column("File", overflow="fold")
    table.add_column("New name", overflow="fold")
    table.add_column("Category")
    table.add_column("Status")
    for result in batch.results:
        if result.success:
            status = "[green]ok[/green]" if not batch.dry_run else "[cyan]preview[/cyan]"
            new_name = result.suggested_name
        else:
            status = f"[red]{result.error}[/red]"
            new_name = "-"
        table.add_row(result.original_path.name, new_name, result.category or "-", status)
    return table


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="ai-rename")
def cli() -> None:
    """ai-rename gives documents descriptive names suggested by an AI model."""


@cli.command()
@click.argument("directory", type=click.Path(file_okay=False, path_type=str))
@click.option("-p", "--provider", type=click.Choice(PROVIDERS), help="AI provider to use.")
@click.option("-k", "--api-key", type=str, help="API key for cloud providers.")
@click.option(
    "-c",
    "--case",
    "convention",
    type=click.Choice(NAMING_CONVENTIONS),
    help="Naming convention for new filenames.",
)
@click.option(
    "-t",
    "--template",
    "category",
    type=click.Choice(CATEGORY_CHOICES),
    help="Category template, or 'auto' to detect it per file.",
)
@click.option("-n", "--name", "personal_name", type=str, help="Personal name for templates.")
@click.option(
    "-d", "--date", "date_format", type=click.Choice(DATE_FORMATS), help="Date stamp format."
)
@click.option("--dry-run", is_flag=True, help="Preview renames without modifying files.")
@click.option("--max-size", type=click.IntRange(min=1), help="Maximum file size in MB.")
@click.option("--base-url", type=str, help="Base URL for local LLM servers.")
@click.option("--model", type=str, help="Model name override.")
@click.option("-y", "--yes", is_flag=True, help="Rename without asking for confirmation.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON describing the results.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def rename(
    ctx: click.Context,
    directory: str,
    provider: str | None,
    api_key: str | None,
    convention: str | None,
    category: str | None,
    personal_name: str | None,
    date_format: str | None,
    dry_run: bool,
    max_size: int | None,
    base_url: str | None,
    model: str | None,
    yes: bool,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Rename supported documents in DIRECTORY based on their content.

    Args:
        ctx: Click context used for parameter source inspection.
        directory: Directory whose files are renamed (not recursive).
        provider: AI provider override.
        api_key: API key override for cloud providers.
        convention: Naming convention override.
        category: Category template override.
        personal_name: Personal name used by document and photo templates.
        date_format: Date format override.
        dry_run: If True, compute names without renaming anything.
        max_size: Maximum file size in megabytes.
        base_url: Local LLM server URL override.
        model: Model override.
        yes: Skip the confirmation prompt.
        json_output: If True, emit a JSON payload instead of tables.
        summary_mode: When True, limit output to summary lines and warnings.
        quiet: When True, suppress non-error CLI output entirely.

    Raises:
        click.ClickException: If configuration, the directory or the provider is invalid.
    """
    try:
        manager = ConfigManager()
        manager.ensure_exists()
        config = manager.load(
            cli_overrides=_rename_overrides(
                provider=provider,
                api_key=api_key,
                model=model,
                base_url=base_url,
                convention=convention,
                category=category,
                personal_name=personal_name,
                date_format=date_format,
                max_size=max_size,
                dry_run=dry_run,
            )
        )
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
        return

    _configure_logging(config.logging.level)

    explicit_quiet = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
    explicit_summary = ctx.get_parameter_source("summary_mode") == ParameterSource.COMMANDLINE
    quiet_enabled = quiet if explicit_quiet else config.cli.quiet_default
    summary_only = summary_mode if explicit_summary else config.cli.summary_default

    if json_output:
        if explicit_quiet and quiet_enabled:
            raise click.ClickException("--json cannot be combined with --quiet.")
        if explicit_summary and summary_only:
            raise click.ClickException("--json cannot be combined with --summary.")
        if not yes and not config.processing.dry_run:
            raise click.ClickException("--json requires --yes or --dry-run.")
        quiet_enabled = False
        summary_only = False

    if quiet_enabled and summary_only:
        raise click.ClickException(
            "Quiet and summary modes cannot both be enabled. Adjust CLI defaults or flags."
        )

    dry_run_enabled = config.processing.dry_run
    root = Path(directory).expanduser()

    try:
        scanner = DirectoryScanner(extensions=config.processing.supported_extensions)
        files = list(scanner.scan(root))
    except ValidationError as exc:
        _handle_cli_error(str(exc), code="invalid_directory", json_output=json_output, original=exc)
        return

    if not files:
        if json_output:
            empty = RenameBatch(dry_run=dry_run_enabled)
            console.print_json(data=_batch_payload(root, empty, config))
        else:
            _emit_message(
                "[yellow]No supported files found in the directory.[/yellow]",
                mode="warning",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
        return

    llm = config.llm
    if llm.provider in CLOUD_PROVIDERS and not llm.api_key and not json_output:
        entered = click.prompt(f"Enter your {llm.provider} API key", hide_input=True)
        llm = llm.model_copy(update={"api_key": entered})

    try:
        provider_instance = create_provider(llm)
    except AIRenameError as exc:
        _handle_cli_error(str(exc), code="provider_error", json_output=json_output, original=exc)
        return

    if not json_output:
        _emit_message(
            f"Found {len(files)} file(s) to process:",
            mode="detail",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
        for file_info in files:
            _emit_message(
                f"  - {file_info.name}",
                mode="detail",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )

    if not dry_run_enabled and not yes:
        if not click.confirm("Do you want to proceed with renaming these files?", default=False):
            _emit_message(
                "[yellow]Operation cancelled.[/yellow]",
                mode="warning",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
            provider_instance.close()
            return

    renamer = FileRenamer(ParserRegistry(), provider_instance, config)
    try:
        batch = renamer.rename_files(files)
    finally:
        provider_instance.close()

    if json_output:
        console.print_json(data=_batch_payload(root, batch, config))
        if batch.failed:
            raise SystemExit(1)
        return

    _emit_message(
        _results_table(root, batch), mode="detail", quiet=quiet_enabled, summary_only=summary_only
    )
    for result in batch.failed:
        _emit_message(
            f"[red]{result.original_path.name}: {result.error}[/red]",
            mode="error",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
    counts = batch.summary()
    _emit_message(
        _format_summary_line(
            "Rename",
            root,
            {
                "dry_run": dry_run_enabled,
                "processed": counts["processed"],
                "successful": counts["successful"],
                "failed": counts["failed"],
                "renamed": counts["renamed"],
            },
        ),
        mode="summary",
        quiet=quiet_enabled,
        summary_only=summary_only,
    )
    if batch.failed:
        raise SystemExit(1)


@cli.command()
@click.option(
    "-p",
    "--provider",
    type=click.Choice(LOCAL_PROVIDERS),
    default="ollama",
    show_default=True,
    help="Local provider to query.",
)
@click.option("--base-url", type=str, help="Base URL of the local server.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON instead of text.")
def models(provider: str, base_url: str | None, json_output: bool) -> None:
    """List models served by a local LLM server.

    Args:
        provider: Local provider identifier.
        base_url: Server URL override.
        json_output: If True, emit a JSON payload.
    """
    try:
        overrides = {"llm.provider": provider}
        if base_url:
            overrides["llm.base_url"] = base_url
        config = ConfigManager().load(cli_overrides=overrides)
        provider_instance = create_provider(config.llm)
    except (ConfigError, AIRenameError) as exc:
        _handle_cli_error(str(exc), code="provider_error", json_output=json_output, original=exc)
        return

    if not isinstance(provider_instance, LocalProvider):
        raise click.ClickException(f"{provider} does not expose a model list.")
    with provider_instance:
        available = provider_instance.is_available()
        names = provider_instance.list_models() if available else []

    if json_output:
        console.print_json(
            data={
                "provider": provider,
                "base_url": provider_instance.base_url,
                "available": available,
                "models": names,
            }
        )
        return

    if not available:
        console.print(
            f"[red]{provider_instance.name} is not reachable at {provider_instance.base_url}.[/red]"
        )
        raise SystemExit(1)
    if not names:
        console.print(f"[yellow]{provider_instance.name} reports no models.[/yellow]")
        return
    for name in names:
        console.print(f"  - {name}")


@cli.group()
def config() -> None:
    """Manage ai-rename configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Args:
        no_env: If True, ignore environment-derived overrides.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        config = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    data = config.model_dump(mode="python")
    if data["llm"].get("api_key"):
        data["llm"]["api_key"] = "********"
    yaml_text = yaml.safe_dump(data, sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    The value is read as a YAML literal, except for free-form strings such as
    ``llm.api_key`` and ``naming.personal_name`` which are stored verbatim.
    API keys are masked in the printed diff.

    Args:
        key: Dotted path describing the configuration field to update.
        value: Value to write into the configuration file.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    manager = ConfigManager()
    manager.ensure_exists()
    before = manager.read_text().splitlines()

    try:
        changed = manager.set_value(key, value)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if not changed:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    after = manager.read_text().splitlines()
    diff = [
        _mask_secret(line)
        for line in difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
        if not line[1:].startswith(TIMESTAMP_PREFIX)
    ]
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {key.strip('. ')}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
