"""Console-based rendering using Rich."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from signalset.decoder.decoder import DecodedResponse, DecodedSignal
from signalset.schema.command import SignalSet
from signalset.validation.events import Severity, ValidationReport


_SEVERITY_COLORS = {
    Severity.INFO: "blue",
    Severity.WARNING: "yellow",
    Severity.ERROR: "red",
}

_QUALITY_COLORS = {
    "OK": "green",
    "OUT_OF_RANGE": "red",
    "UNMAPPED_ENUM": "yellow",
}


class ConsoleVisualizer:
    """Renders signal sets, validation reports and decoded responses."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def print_report(self, report: ValidationReport, title: str = "Validation Report") -> None:
        """Print every issue of a report as a table, followed by a summary."""
        if report.issues:
            table = Table(title=title)
            table.add_column("Severity")
            table.add_column("Kind", style="bold")
            table.add_column("Command", style="dim")
            table.add_column("Signal", style="cyan")
            table.add_column("Message")

            for issue in report:
                color = _SEVERITY_COLORS.get(issue.severity, "white")
                table.add_row(
                    f"[{color}]{issue.severity.value.upper()}[/{color}]",
                    issue.kind.value,
                    issue.command or "-",
                    issue.signal_id or "-",
                    issue.message,
                )
            self.console.print(table)

        summary = report.summary()
        status = "[green]OK[/green]" if report.ok else "[red]FAILED[/red]"
        self.console.print(
            Panel(
                f"Status: {status}\n"
                f"Errors: {summary['errors']}\n"
                f"Advisories: {summary['advisories']}",
                title="Summary",
            )
        )

    def print_signalset_summary(self, signalset: SignalSet) -> None:
        """Print a per-command overview of a signal set."""
        table = Table(title="Signal Set")
        table.add_column("Header", style="cyan")
        table.add_column("Request")
        table.add_column("Freq", justify="right")
        table.add_column("Years")
        table.add_column("Signals", justify="right")

        for command in signalset:
            years = command.model_year_filter
            if years is None:
                years_str = "all"
            else:
                years_str = f"{years.year_from or '…'}-{years.year_to or '…'}"
            table.add_row(
                command.header,
                command.request.wire,
                f"{command.poll_frequency:g}s",
                years_str,
                str(len(command.signals)),
            )

        self.console.print(table)

    def print_signal(self, decoded: DecodedSignal) -> None:
        """Print one decoded signal."""
        color = _QUALITY_COLORS.get(decoded.quality, "white")
        value = str(decoded.value) if decoded.value is not None else "-"
        self.console.print(
            f"[cyan]{decoded.signal_id}[/cyan] "
            f"[{color}]{value}[/{color}] "
            f"[dim]raw={decoded.raw_value}[/dim]",
            highlight=False,
        )

    def print_response(self, response: DecodedResponse) -> None:
        """Print a decoded response as a table."""
        data_str = " ".join(f"{b:02X}" for b in response.raw_data)
        table = Table(title=f"{response.header} {response.request}  [{data_str}]")
        table.add_column("Signal", style="cyan")
        table.add_column("Name")
        table.add_column("Raw", justify="right")
        table.add_column("Value", justify="right")
        table.add_column("Quality")

        for decoded in response.signals.values():
            color = _QUALITY_COLORS.get(decoded.quality, "white")
            table.add_row(
                decoded.signal_id,
                decoded.name,
                str(decoded.raw_value) if decoded.raw_value is not None else "-",
                str(decoded.value) if decoded.value is not None else "-",
                f"[{color}]{decoded.quality}[/{color}]",
            )

        self.console.print(table)
