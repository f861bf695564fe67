"""Command line interface for medialens."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

from medialens.cli_support import (
    configure_logging,
    format_navigation,
    format_summary_line,
    navigation_payload,
    render_tree,
    scan_metrics,
    scan_payload,
)
from medialens.codec import ImageCodec
from medialens.config import ConfigError, ConfigManager, MediaLensConfig
from medialens.files import read_file_text, write_file_text
from medialens.media import (
    CodecError,
    DirectoryScanner,
    FileEntry,
    FolderGroupTracker,
    GroupPolicy,
    GroupSet,
    GroupWarning,
    MediaIOError,
    MediaKind,
    MediaLensError,
    MediaSetBuilder,
    ScanError,
    aggregate,
    classify,
    navigate,
)
from medialens.media.kinds import needs_transcoding
from medialens.session import BrowserSession, FileOpenOutcome

console = Console()

_VERBOSITY_LEVELS = {1: "INFO", 2: "DEBUG"}


@dataclass(slots=True)
class CLIState:
    """Options captured by the root command."""

    config_path: Path | None
    verbosity: int


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command.

    Raises:
        SystemExit: In JSON mode after printing the error payload.
        click.ClickException: Otherwise.
    """
    if json_output:
        console.print_json(data={"error": {"code": code, "message": message}})
        raise SystemExit(1)
    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool, summary_only: bool) -> None:
    """Print ``message`` unless quiet or summary settings suppress ``mode``."""
    if quiet and mode != "error":
        return
    if summary_only and mode not in {"summary", "warning", "error"}:
        return
    console.print(message)


def _load_config(ctx: click.Context) -> MediaLensConfig:
    """Load configuration and configure logging for the running command."""
    state: CLIState = ctx.find_root().obj or CLIState(config_path=None, verbosity=0)
    try:
        config = ConfigManager(state.config_path).load()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    level = _VERBOSITY_LEVELS.get(min(state.verbosity, 2), config.logging.level)
    configure_logging(level)
    return config


def _resolve_output_modes(
    ctx: click.Context, config: MediaLensConfig, *, quiet: bool, summary: bool, json_output: bool
) -> tuple[bool, bool]:
    explicit_quiet = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
    explicit_summary = ctx.get_parameter_source("summary_mode") == ParameterSource.COMMANDLINE
    quiet_enabled = quiet if explicit_quiet else config.cli.quiet_default
    summary_only = summary if explicit_summary else config.cli.summary_default
    if json_output:
        if explicit_quiet and quiet_enabled:
            raise click.ClickException("--json cannot be combined with --quiet.")
        if explicit_summary and summary_only:
            raise click.ClickException("--json cannot be combined with --summary.")
        return False, False
    if quiet_enabled and summary_only:
        raise click.ClickException(
            "Quiet and summary modes cannot both be enabled. Adjust CLI defaults or flags."
        )
    return quiet_enabled, summary_only


def _file_entry(path: Path) -> FileEntry:
    resolved = path.expanduser().absolute()
    return FileEntry(name=resolved.name, path=resolved, kind=classify(resolved.name))


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="medialens")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file to use instead of ~/.medialens/config.yaml.",
)
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v info, -vv debug).")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: int) -> None:
    """medialens scans a folder of media and lets you browse it by kind."""
    ctx.obj = CLIState(config_path=config_path, verbosity=verbose)


@cli.command()
@click.argument("path", type=click.Path(file_okay=False, path_type=Path))
@click.option("--json", "json_output", is_flag=True, help="Emit the tree and stats as JSON.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def scan(
    ctx: click.Context, path: Path, json_output: bool, summary_mode: bool, quiet: bool
) -> None:
    """Scan PATH and show its media tree with per-kind counts."""
    config = _load_config(ctx)
    quiet_enabled, summary_only = _resolve_output_modes(
        ctx, config, quiet=quiet, summary=summary_mode, json_output=json_output
    )
    scanner = DirectoryScanner(follow_symlinks=config.scan.follow_symlinks)
    try:
        result = scanner.scan(path)
    except ScanError as exc:
        _handle_cli_error(str(exc), code="scan_failed", json_output=json_output, original=exc)
        return

    if json_output:
        console.print_json(data=scan_payload(result))
        return

    _emit_message(
        render_tree(result.root), mode="detail", quiet=quiet_enabled, summary_only=summary_only
    )
    if result.issues:
        _emit_message(
            f"[yellow]{len(result.issues)} location(s) could not be scanned:[/yellow]",
            mode="warning",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
        for issue in result.issues:
            _emit_message(
                f"  - {escape(str(issue.path))}: {escape(issue.message)}",
                mode="warning",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
    _emit_message(
        format_summary_line("Scan", result.root.path, scan_metrics(result)),
        mode="summary",
        quiet=quiet_enabled,
        summary_only=summary_only,
    )


@cli.command()
@click.argument("path", type=click.Path(file_okay=False, path_type=Path))
@click.option("--json", "json_output", is_flag=True, help="Emit counts as JSON.")
@click.pass_context
def stats(ctx: click.Context, path: Path, json_output: bool) -> None:
    """Print video, audio and transcript counts for PATH."""
    config = _load_config(ctx)
    try:
        result = DirectoryScanner(follow_symlinks=config.scan.follow_symlinks).scan(path)
    except ScanError as exc:
        _handle_cli_error(str(exc), code="scan_failed", json_output=json_output, original=exc)
        return
    totals = aggregate(result.root)
    if json_output:
        console.print_json(data=totals.model_dump(mode="json"))
        return
    console.print(f"Videos: {totals.video}")
    console.print(f"Audio: {totals.audio}")
    console.print(f"Transcripts: {totals.transcript}")


@cli.command()
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--step",
    type=int,
    default=0,
    show_default=True,
    help="Move this many entries forward (negative for backwards), stopping at the ends.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit the sibling set as JSON.")
@click.pass_context
def siblings(ctx: click.Context, file: Path, step: int, json_output: bool) -> None:
    """List the image, video and audio files next to FILE."""
    _load_config(ctx)
    entry = _file_entry(file)
    try:
        nav_set = MediaSetBuilder().build_sibling_set(entry)
    except MediaIOError as exc:
        _handle_cli_error(str(exc), code=exc.reason, json_output=json_output, original=exc)
        return

    direction = 1 if step > 0 else -1
    for _ in range(abs(step)):
        nav_set, item = navigate(nav_set, direction)
        if item is None:
            break

    if json_output:
        console.print_json(data=navigation_payload(nav_set))
        return
    if not nav_set.entries:
        console.print(f"[yellow]{escape(entry.name)} is not navigable media.[/yellow]")
        return
    for line in format_navigation(nav_set):
        console.print(line)
    console.print(
        f"[cyan]{nav_set.current_index + 1} of {len(nav_set.entries)} in "
        f"{escape(str(nav_set.directory))}[/cyan]"
    )


@cli.command()
@click.argument("files", nargs=-1, required=True)
@click.option(
    "--policy",
    type=click.Choice([policy.value for policy in GroupPolicy]),
    help="Override the configured group extraction policy.",
)
@click.pass_context
def group(ctx: click.Context, files: tuple[str, ...], policy: str | None) -> None:
    """Replay FILES as clicks and report folder-group warnings."""
    config = _load_config(ctx)
    tracker = FolderGroupTracker(GroupPolicy(policy or config.grouping.policy))
    for name in files:
        state = tracker.observe(Path(name).name)
        if isinstance(state, GroupWarning):
            console.print(f"[yellow]{escape(name)}: {escape(state.message)}[/yellow]")
        elif isinstance(state, GroupSet):
            console.print(f"{escape(name)}: group {escape(state.group_id)}")
        else:
            console.print(f"{escape(name)}: no group")


@cli.group()
def transcript() -> None:
    """Read and write transcript files."""


@transcript.command("show")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--encoding", default="utf-8", show_default=True)
@click.pass_context
def transcript_show(ctx: click.Context, file: Path, encoding: str) -> None:
    """Print the contents of a transcript FILE."""
    _load_config(ctx)
    try:
        text = read_file_text(file, encoding=encoding)
    except MediaIOError as exc:
        raise click.ClickException(f"Error reading transcript: {exc}") from exc
    click.echo(text, nl=False)


@transcript.command("save")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--text", "content", help="New transcript text; read from stdin when omitted.")
@click.option("--encoding", default="utf-8", show_default=True)
@click.pass_context
def transcript_save(ctx: click.Context, file: Path, content: str | None, encoding: str) -> None:
    """Replace the contents of a transcript FILE."""
    _load_config(ctx)
    if classify(file.name) is not MediaKind.TRANSCRIPT:
        raise click.ClickException(f"{file.name} is not a transcript (.txt) file.")
    if content is None:
        content = click.get_text_stream("stdin").read()
    try:
        write_file_text(file, content, encoding=encoding)
    except MediaIOError as exc:
        raise click.ClickException(f"Error saving transcript: {exc}") from exc
    console.print(f"[green]Saved transcript {escape(str(file))}.[/green]")


@cli.command()
@click.argument("image", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def preview(ctx: click.Context, image: Path, output: Path) -> None:
    """Write a displayable copy of IMAGE to OUTPUT."""
    config = _load_config(ctx)
    codec = ImageCodec(quality=config.preview.jpeg_quality, background=config.preview.background)
    try:
        data, mime = codec.prepare_preview(image)
    except CodecError as exc:
        raise click.ClickException(
            f"Unable to display {image.name}: {exc}. Open it in an external viewer instead."
        ) from exc
    except MediaIOError as exc:
        raise click.ClickException(f"Error loading image: {exc}") from exc
    try:
        output.write_bytes(data)
    except OSError as exc:
        raise click.ClickException(f"Cannot write {output}: {exc}") from exc
    console.print(f"[green]Wrote {len(data)} bytes ({mime}) to {escape(str(output))}.[/green]")


_BROWSE_HELP = (
    "Commands: ls | open REL_PATH | next | prev | stats | pick [PATH] | "
    "save TEXT | help | quit\n"
    "In save TEXT, write \\n for a line break."
)


@cli.command()
@click.argument("path", type=click.Path(file_okay=False, path_type=Path), required=False)
@click.pass_context
def browse(ctx: click.Context, path: Path | None) -> None:
    """Interactively browse the media under PATH."""
    config = _load_config(ctx)
    session = BrowserSession(
        scanner=DirectoryScanner(follow_symlinks=config.scan.follow_symlinks),
        group_policy=GroupPolicy(config.grouping.policy),
    )
    codec = ImageCodec(quality=config.preview.jpeg_quality, background=config.preview.background)
    with session:
        if path is not None:
            _browse_pick(session, str(path))
        console.print(_BROWSE_HELP)
        while True:
            try:
                line = click.prompt("medialens", prompt_suffix="> ", default="", show_default=False)
            except click.Abort:
                break
            command, _, argument = line.strip().partition(" ")
            argument = argument.strip()
            if command in {"quit", "exit", "q"}:
                break
            try:
                _browse_dispatch(session, codec, command, argument)
            except MediaLensError as exc:
                console.print(f"[red]{escape(str(exc))}[/red]")


def _browse_dispatch(
    session: BrowserSession, codec: ImageCodec, command: str, argument: str
) -> None:
    if command == "":
        return
    if command == "help":
        console.print(_BROWSE_HELP)
    elif command == "pick":
        _browse_pick(session, argument or None)
    elif command == "ls":
        context = session.context
        if context is None:
            raise MediaLensError("No folder selected.")
        console.print(render_tree(context.scan.root))
    elif command == "stats":
        context = session.context
        if context is None:
            raise MediaLensError("No folder selected.")
        console.print(
            f"Videos: {context.stats.video}  Audio: {context.stats.audio}  "
            f"Transcripts: {context.stats.transcript}"
        )
    elif command == "open":
        entry = session.find_entry(argument)
        if entry is None:
            raise MediaLensError(f"{argument!r} is not in the scanned tree.")
        _browse_show(session.open_file(entry), codec)
    elif command in {"next", "prev"}:
        item = session.step(1 if command == "next" else -1)
        if item is None:
            console.print("[yellow]No more media in that direction.[/yellow]")
        else:
            console.print(f"Now showing {escape(item.path.name)} ({item.kind.value})")
            _browse_preview(item.path, item.kind, codec)
    elif command == "save":
        saved = session.save_transcript(argument.replace("\\n", "\n"))
        console.print(f"[green]Saved transcript {escape(str(saved))}.[/green]")
    else:
        console.print(f"[red]Unknown command {escape(command)!r}.[/red] {_BROWSE_HELP}")


def _browse_pick(session: BrowserSession, path: str | None) -> None:
    try:
        result = session.select_folder(path)
    except ScanError as exc:
        console.print(f"[red]Error selecting folder: {escape(str(exc))}[/red]")
        return
    if result is None:
        console.print("[yellow]No folder selected.[/yellow]")
        return
    console.print(render_tree(result.root))
    metrics = scan_metrics(result)
    console.print(format_summary_line("Scan", result.root.path, metrics))


def _browse_show(outcome: FileOpenOutcome, codec: ImageCodec) -> None:
    entry = outcome.entry
    console.print(f"[bold]{escape(entry.name)}[/bold] ({entry.kind.value})")
    if outcome.warning:
        console.print(f"[yellow]Warning: {escape(outcome.warning)}[/yellow]")
    for error in outcome.errors:
        console.print(f"[red]{escape(error)}[/red]")
    if outcome.transcript is not None:
        console.print(escape(outcome.transcript))
    if outcome.navigation is not None and outcome.navigation.entries:
        for line in format_navigation(outcome.navigation):
            console.print(line)
    _browse_preview(entry.path, entry.kind, codec)


def _browse_preview(path: Path, kind: MediaKind, codec: ImageCodec) -> None:
    if kind is MediaKind.IMAGE and needs_transcoding(path.name):
        try:
            data, _ = codec.prepare_preview(path)
        except (CodecError, MediaIOError) as exc:
            console.print(
                f"[red]Unable to display this image: {escape(str(exc))}. "
                "Open it in an external viewer instead.[/red]"
            )
        else:
            console.print(f"[cyan]Converted preview ready ({len(data)} bytes).[/cyan]")


@cli.group()
def config() -> None:
    """Inspect and modify medialens configuration."""


@config.command("view")
@click.option("--effective", is_flag=True, help="Show values after environment overrides.")
@click.pass_context
def config_view(ctx: click.Context, effective: bool) -> None:
    """Print the configuration as YAML."""
    state: CLIState = ctx.find_root().obj
    manager = ConfigManager(state.config_path)
    try:
        loaded = manager.load(include_env=effective)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    rendered = yaml.safe_dump(loaded.model_dump(mode="json"), sort_keys=False)
    console.print(Syntax(rendered, "yaml", theme="ansi_dark", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str) -> None:
    """Set KEY (dotted, e.g. grouping.policy) to VALUE in the config file."""
    state: CLIState = ctx.find_root().obj
    manager = ConfigManager(state.config_path)
    try:
        current = manager.load_file_overrides()
        parsed = yaml.safe_load(value)
        current = _merge_key(current, key.split("."), parsed)
        manager.save(current)
    except (ConfigError, yaml.YAMLError) as exc:
        raise click.ClickException(str(exc)) from exc
    console.print(f"[green]Set {escape(key)} = {escape(repr(parsed))}.[/green]")


@config.command("path")
@click.pass_context
def config_path_command(ctx: click.Context) -> None:
    """Print the configuration file location."""
    state: CLIState = ctx.find_root().obj
    click.echo(str(ConfigManager(state.config_path).config_path))


def _merge_key(target: dict[str, Any], path: list[str], value: Any) -> dict[str, Any]:
    node = target
    for segment in path[:-1]:
        existing = node.setdefault(segment, {})
        if not isinstance(existing, dict):
            raise ConfigError(
                f"Cannot assign into '{segment}' because it is not a mapping in the config file."
            )
        node = existing
    node[path[-1]] = value
    return target

