"""
Command-line interface for sonarrapi using Typer.

Thin commands over SonarrClient with Rich output and exit codes that reflect
the kind of failure.
"""

import asyncio
import sys
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from ..clients import sonarr as endpoints
from ..clients.sonarr import SonarrClient
from ..config import Settings, get_settings
from ..core import status as service_status
from ..core.models import ApiResult, RequestDescriptor
from ..utils.exceptions import ErrorCategory, ErrorSeverity, SonarrApiError
from ..utils.logging import generate_correlation_id, get_logger, setup_logging

app = typer.Typer(
    name="sonarrapi",
    help="[bold blue]sonarrapi[/bold blue] - query and manage a Sonarr server",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()


class ExitCodes:
    SUCCESS = 0
    GENERAL_ERROR = 1
    CONFIGURATION_ERROR = 2
    NETWORK_ERROR = 3
    API_ERROR = 4
    USER_INTERRUPTED = 130  # Standard SIGINT exit code


def get_exit_code_for_error(error: Exception) -> int:
    """Determine appropriate exit code based on error type."""
    if isinstance(error, KeyboardInterrupt):
        return ExitCodes.USER_INTERRUPTED
    if isinstance(error, SonarrApiError):
        category_to_exit_code = {
            ErrorCategory.CONFIGURATION_ERROR: ExitCodes.CONFIGURATION_ERROR,
            ErrorCategory.NETWORK_ERROR: ExitCodes.NETWORK_ERROR,
            ErrorCategory.PERFORMANCE_ERROR: ExitCodes.NETWORK_ERROR,
            ErrorCategory.API_ERROR: ExitCodes.API_ERROR,
            ErrorCategory.SECURITY_ERROR: ExitCodes.API_ERROR,
            ErrorCategory.EXTERNAL_SERVICE_ERROR: ExitCodes.API_ERROR,
            ErrorCategory.DATA_ERROR: ExitCodes.API_ERROR,
        }
        return category_to_exit_code.get(error.category, ExitCodes.GENERAL_ERROR)
    return ExitCodes.GENERAL_ERROR


def display_error(message: str, exception: Exception | None = None) -> None:
    """Display an error with troubleshooting hints when available."""
    console.print(f"[red]✗ Error:[/red] {message}")

    if isinstance(exception, SonarrApiError):
        if exception.message != message:
            console.print(f"[dim red]Details: {exception.message}[/dim red]")
        if exception.severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL):
            console.print(
                f"[dim red]Severity: {exception.severity.value.upper()}[/dim red]"
            )
        if exception.correlation_id:
            console.print(f"[dim]Correlation ID: {exception.correlation_id}[/dim]")
        if exception.troubleshooting_hints:
            console.print("\n[bold yellow]💡 Troubleshooting Tips:[/bold yellow]")
            for i, hint in enumerate(exception.troubleshooting_hints, 1):
                console.print(f"  {i}. {hint}")
    elif exception:
        console.print(f"[dim red]Details: {exception}[/dim red]")


def display_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def _settings_from(ctx: typer.Context) -> Settings:
    return ctx.obj["settings"]


def run_client_call(
    ctx: typer.Context,
    operation: str,
    descriptor: RequestDescriptor,
    trace_name: str,
) -> Any:
    """Send one request and turn a failed result into an exit code."""
    settings = _settings_from(ctx)
    trace = ctx.obj.get("trace_responses", settings.debug)

    async def runner() -> ApiResult:
        async with SonarrClient(settings, trace_responses=trace) as client:
            result = await client.request(descriptor)
            if result.ok:
                client.trace_response(trace_name, result.data)
            return result

    try:
        result = asyncio.run(runner())
    except KeyboardInterrupt:
        console.print("[yellow]⚠[/yellow] Operation cancelled by user")
        raise typer.Exit(ExitCodes.USER_INTERRUPTED)
    except SonarrApiError as e:
        display_error(f"{operation} failed", e)
        raise typer.Exit(get_exit_code_for_error(e))

    if not result.ok:
        display_error(f"{operation} failed", result.error)
        raise typer.Exit(get_exit_code_for_error(result.error))
    return result.data


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging and response tracing"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only show warnings and errors"
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a .env configuration file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON"),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Also write logs to a rotating file"
    ),
    correlation_id: str | None = typer.Option(
        None, "--correlation-id", help="Set correlation ID for request tracking"
    ),
):
    """
    [bold blue]sonarrapi[/bold blue] - a small client for the Sonarr v3 API

    Configure with SONARR_URL and SONARR_API_KEY (environment or .env file).

    [bold]Examples:[/bold]
        sonarrapi health
        sonarrapi create-tag Pilot
        sonarrapi series 133
    """
    try:
        settings = get_settings(config)
    except Exception as e:
        display_error("Failed to load configuration", e)
        raise typer.Exit(ExitCodes.CONFIGURATION_ERROR)

    setup_logging(
        verbose=verbose or settings.debug,
        quiet=quiet,
        json_logs=json_logs or settings.log_format == "json",
        level=settings.log_level,
        log_file=str(log_file) if log_file else None,
    )
    get_logger(__name__).with_correlation_id(
        correlation_id or generate_correlation_id()
    )

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["trace_responses"] = verbose or settings.debug


@app.command("health")
def health_command(ctx: typer.Context):
    """Show the health issues reported by Sonarr."""
    data = run_client_call(
        ctx, "Health check", endpoints.health_request(), "get_health"
    )
    if not data:
        display_success("Sonarr reports no health issues")
        return
    console.print_json(data=data)


@app.command("tags")
def tags_command(ctx: typer.Context):
    """List all tags."""
    data = run_client_call(ctx, "Listing tags", endpoints.tags_request(), "get_tags")
    console.print_json(data=data)


@app.command("create-tag")
def create_tag_command(
    ctx: typer.Context,
    label: str = typer.Argument(..., help="Label for the new tag"),
):
    """Create a tag and print it with its assigned ID."""
    data = run_client_call(
        ctx, "Creating tag", endpoints.create_tag_request(label), "create_tag"
    )
    console.print_json(data=data)


@app.command("series")
def series_command(
    ctx: typer.Context,
    series_id: int = typer.Argument(..., help="Sonarr series ID"),
):
    """Print the full record for one series."""
    data = run_client_call(
        ctx,
        "Fetching series",
        endpoints.series_request(series_id),
        "get_media_item",
    )
    console.print_json(data=data)


@app.command("status")
def status_command(ctx: typer.Context):
    """Check that Sonarr is configured and reachable."""
    settings = _settings_from(ctx)
    result = asyncio.run(service_status.check_service_status(settings))

    table = Table(
        title="[bold magenta]Service Status[/bold magenta]",
        show_header=True,
        border_style="blue",
    )
    table.add_column("Service", style="cyan")
    table.add_column("Configured", justify="center")
    table.add_column("Accessible", justify="center")
    table.add_column("Status")

    if not result["configured"]:
        overall = "⚙️ Not Configured"
    elif result["accessible"]:
        overall = "🟢 Ready"
    else:
        overall = f"🔴 {result['error'] or 'Unreachable'}"

    table.add_row(
        "Sonarr",
        "✅ Yes" if result["configured"] else "❌ No",
        "✅ Yes" if result["accessible"] else "❌ No",
        overall,
    )
    console.print(table)

    get_logger(__name__).audit(
        "service_status_check",
        configured=result["configured"],
        accessible=result["accessible"],
        error_category=result["error_category"],
    )

    for issue in result["health_issues"]:
        console.print(
            f"  [yellow]•[/yellow] {issue.get('type', 'notice')}: {issue.get('message', '')}"
        )

    if not result["configured"]:
        raise typer.Exit(ExitCodes.CONFIGURATION_ERROR)
    if not result["accessible"]:
        category = result["error_category"]
        raise typer.Exit(
            ExitCodes.NETWORK_ERROR
            if category
            in (ErrorCategory.NETWORK_ERROR.value, ErrorCategory.PERFORMANCE_ERROR.value)
            else ExitCodes.API_ERROR
        )


@app.command("config-validate")
def config_validate_command(ctx: typer.Context):
    """Report missing or suspicious configuration."""
    settings = _settings_from(ctx)
    missing = settings.missing_keys()

    for key in missing:
        console.print(f"[red]✗[/red] {key} is not set")

    if settings.sonarr_url and settings.sonarr_url.rstrip("/").endswith("/api/v3"):
        console.print(
            "[yellow]⚠[/yellow] SONARR_URL should not include /api/v3; it is added automatically"
        )

    if missing:
        raise typer.Exit(ExitCodes.CONFIGURATION_ERROR)

    display_success(f"Sonarr configured at {settings.sonarr_url}")
    if settings.debug:
        console.print("[blue]i[/blue] Response tracing is enabled (APP_ENV=development)")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        console.print("[yellow]⚠[/yellow] Operation cancelled by user")
        sys.exit(ExitCodes.USER_INTERRUPTED)
