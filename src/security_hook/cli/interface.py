from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from security_hook.core.pipeline import ScanReport


class CLInterface:
    """Rich-formatted output; the report goes to stdout, diagnostics to stderr."""

    def __init__(self, console: Console | None = None, err_console: Console | None = None):
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    def print_banner(self):
        self.console.print("[bold cyan]Scanning staged changes for security issues...[/bold cyan]")

    def print_success(self, message: str):
        self.console.print(f"[bold green]OK: {escape(message)}[/bold green]")

    def print_error(self, message: str):
        self.err_console.print(f"[bold red]ERROR: {escape(message)}[/bold red]")

    def print_warning(self, message: str):
        self.err_console.print(f"[bold yellow]WARNING: {escape(message)}[/bold yellow]")

    def print_info(self, message: str):
        self.console.print(f"[bold blue]INFO: {escape(message)}[/bold blue]")

    def show_settings(self, settings: dict, settings_file: str):
        table = Table(title="security-hook settings", box=box.ROUNDED, header_style="bold cyan")
        table.add_column("Key", style="magenta")
        table.add_column("Value", style="white")
        for section, values in settings.items():
            if not isinstance(values, dict):
                table.add_row(escape(str(section)), escape(str(values)))
                continue
            for key, value in values.items():
                if value in ("", None):
                    shown = "[dim](default)[/dim]"
                else:
                    shown = escape(str(value))
                table.add_row(f"{section}.{key}", shown)
        self.console.print(table)
        self.console.print(f"[dim]Settings file: {escape(settings_file)}[/dim]")

    def show_scan_report(self, report: ScanReport):
        if not report.scanned_files and not report.findings:
            self.print_success("No files to scan. Commit allowed.")
            return

        if not report.findings:
            self.print_success("No security issues found. Commit allowed.")
            return

        self.console.print("[bold red]Security issues found! Commit blocked.[/bold red]\n")
        self.console.print(f"[bold blue]Total issues found: {len(report.findings)}[/bold blue]")

        table = Table(box=box.ROUNDED, show_header=True, header_style="bold magenta", show_lines=True)
        table.add_column("File", style="yellow", overflow="fold")
        table.add_column("Issue", style="red")
        table.add_column("Line", style="blue", overflow="fold")
        table.add_column("Suggestion", style="green", overflow="fold")
        for finding in report.findings:
            table.add_row(
                escape(finding.file_path or "unknown file"),
                escape(finding.type),
                escape(finding.line),
                escape(finding.suggestion),
            )
        self.console.print(table)

        if report.service_available is False:
            self.console.print("[dim]Ollama was unavailable; findings come from the regex detectors only.[/dim]")
        self.console.print(
            Panel(
                "Remove the values above from the staged files, keep secrets in environment variables "
                "or a .env file listed in .gitignore, then stage the changes again.",
                title="[bold cyan]Fix[/bold cyan]",
                border_style="cyan",
            )
        )
