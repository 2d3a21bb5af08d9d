"""Command-line interface for signal-set files."""

import json
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from signalset import __version__
from signalset.capture.capture import CapturedResponse, ResponseReplayer, parse_hex
from signalset.capture.jsonl import JsonlWriter
from signalset.config import DecoderConfig, LoadPolicy, ValidationConfig
from signalset.decoder.decoder import DecodedResponse, ResponseDecoder
from signalset.errors import SignalSetError, SignalSetRejected
from signalset.loader.loader import SignalSetLoader
from signalset.loader.serializer import dumps
from signalset.schema.command import ServiceRequest, SignalSet
from signalset.visualization.console import ConsoleVisualizer


console = Console()
logger = logging.getLogger("signalset")


def _setup_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load(path: Path, config: Optional[ValidationConfig] = None) -> SignalSet:
    """Load a signal set, printing the report and exiting on errors."""
    try:
        result = SignalSetLoader(config).load_file(path)
    except SignalSetRejected as e:
        ConsoleVisualizer(console).print_report(e.report, title=f"{path} rejected")
        raise SystemExit(1)
    return result.signalset


def _request(cmd: str) -> str:
    try:
        return ServiceRequest.parse(cmd).wire
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--cmd")


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", count=True, help="Log more (-v info, -vv debug)")
def main(verbose: int) -> None:
    """Signal Set - validate, format and decode OBD-II signal sets."""
    _setup_logging(verbose)


@main.command()
@click.argument("signalset_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--prefix", help="Required vehicle prefix for signal ids")
@click.option("--tolerance", default=1e-6, show_default=True, help="Relative tolerance for min/max checks")
@click.option("--no-lint", is_flag=True, help="Skip advisory checks")
@click.option("--strict", is_flag=True, help="Fail on advisories as well as errors")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
def validate(
    signalset_file: Path,
    prefix: Optional[str],
    tolerance: float,
    no_lint: bool,
    strict: bool,
    as_json: bool,
) -> None:
    """Validate a signal-set file and report every problem found."""
    config = ValidationConfig(
        rel_tol=tolerance,
        vehicle_prefix=prefix,
        lint=not no_lint,
        policy=LoadPolicy.SKIP,
    )
    result = SignalSetLoader(config).load_file(signalset_file)
    report = result.report

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        visualizer = ConsoleVisualizer(console)
        if len(result.signalset):
            visualizer.print_signalset_summary(result.signalset)
        visualizer.print_report(report, title=str(signalset_file))

    if not report.ok or (strict and report.advisories):
        raise SystemExit(1)


@main.command(name="format")
@click.argument("signalset_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--check", is_flag=True, help="Exit 1 if the file is not canonically formatted")
@click.option("--in-place", "-i", is_flag=True, help="Rewrite the file")
def format_command(signalset_file: Path, check: bool, in_place: bool) -> None:
    """Write a signal-set file in canonical form."""
    signalset = _load(signalset_file, ValidationConfig(lint=False))
    text = dumps(signalset)
    current = signalset_file.read_text(encoding="utf-8")

    if check:
        if text != current:
            console.print(f"[yellow]{signalset_file} would be reformatted[/yellow]")
            raise SystemExit(1)
        console.print(f"[green]{signalset_file} is formatted[/green]")
        return

    if in_place:
        if text != current:
            signalset_file.write_text(text, encoding="utf-8")
            logger.info("Reformatted %s", signalset_file)
        return

    click.echo(text, nl=False)


@main.command()
@click.argument("signalset_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("data")
@click.option("--hdr", required=True, help="Command header, e.g. 7E0")
@click.option("--cmd", "cmd", required=True, help="Request, e.g. 221234")
@click.option("--year", type=int, help="Model year for dbgfilter matching")
@click.option("--substitute-unknown", is_flag=True, help="Show unmapped enum values as Unknown")
def decode(
    signalset_file: Path,
    data: str,
    hdr: str,
    cmd: str,
    year: Optional[int],
    substitute_unknown: bool,
) -> None:
    """Decode one response buffer given as hex (e.g. 480D)."""
    try:
        buffer = parse_hex(data)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="DATA")

    request = _request(cmd)
    signalset = _load(signalset_file)
    decoder = ResponseDecoder(signalset, DecoderConfig(substitute_unknown_enum=substitute_unknown))

    response = decoder.decode(hdr, request, buffer, model_year=year)
    if response is None:
        console.print(f"[red]No command for {hdr.upper()} {request}[/red]")
        raise SystemExit(1)

    ConsoleVisualizer(console).print_response(response)
    if not response.ok:
        raise SystemExit(2)


@main.command()
@click.argument("signalset_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("values", nargs=-1, required=True)
@click.option("--hdr", required=True, help="Command header, e.g. 7E0")
@click.option("--cmd", "cmd", required=True, help="Request, e.g. 221234")
@click.option("--year", type=int, help="Model year for dbgfilter matching")
def encode(
    signalset_file: Path,
    values: tuple[str, ...],
    hdr: str,
    cmd: str,
    year: Optional[int],
) -> None:
    """Build a response buffer from SIGNAL_ID=VALUE pairs."""
    parsed: dict[str, str] = {}
    for item in values:
        signal_id, sep, value = item.partition("=")
        if not sep or not signal_id:
            raise click.BadParameter(f"Expected SIGNAL_ID=VALUE, got {item!r}", param_hint="VALUES")
        parsed[signal_id] = value

    request = _request(cmd)
    decoder = ResponseDecoder(_load(signalset_file))

    try:
        buffer = decoder.encode(hdr, request, parsed, model_year=year)
    except SignalSetError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    click.echo(buffer.hex().upper())


@main.command()
@click.argument("signalset_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("capture_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write decoded responses as JSONL")
@click.option("--limit", "-n", type=int, help="Stop after this many responses")
@click.option("--year", type=int, help="Model year for dbgfilter matching")
@click.option("--quiet", "-q", is_flag=True, help="Only print the summary")
def replay(
    signalset_file: Path,
    capture_file: Path,
    output: Optional[Path],
    limit: Optional[int],
    year: Optional[int],
    quiet: bool,
) -> None:
    """Decode every response in a JSONL capture file."""
    decoder = ResponseDecoder(_load(signalset_file))
    visualizer = ConsoleVisualizer(console)
    writer = JsonlWriter(output) if output else None

    def on_response(captured: CapturedResponse, response: DecodedResponse) -> None:
        if writer is not None:
            writer.append_response(response, captured.timestamp_ns)
        if not quiet:
            console.print(f"[dim]{captured.timestamp_ns}[/dim] [bold]{response.header} {response.request}[/bold]")
            for decoded in response.signals.values():
                visualizer.print_signal(decoded)

    replayer = ResponseReplayer(path=capture_file, model_year=year)
    try:
        decoded, unmatched = replayer.run(decoder, on_response, limit=limit)
    except ValueError as e:
        console.print(f"[red]Malformed capture line: {e}[/red]")
        raise SystemExit(1)
    finally:
        if writer is not None:
            writer.close()

    console.print(f"\n[bold]Replay complete[/bold]: {decoded} decoded, {unmatched} unmatched")
    if writer is not None:
        console.print(f"Wrote {writer.count} record(s) to {output}")


if __name__ == "__main__":
    main()
