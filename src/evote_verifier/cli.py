"""CLI for the e-voting evidence verifier.

Commands:
    setup   Run the setup verifications over a dataset
    tally   Run the tally verifications over a dataset
    list    List the verifications of the manifest

Exit codes:
    0  all verifications passed
    1  at least one failure (protocol violation)
    2  errors only (the run is inconclusive)
    3  fatal start-up error
"""

import json
from enum import Enum
from pathlib import Path
from typing import Optional

import structlog
import typer
from rich.console import Console
from rich.table import Table

from evote_verifier import __version__
from evote_verifier.application.services.metadata_loader import load_metadata
from evote_verifier.application.services.run_strategy import strategy_for
from evote_verifier.application.services.runner import Runner
from evote_verifier.application.verifications.context import VerificationContext
from evote_verifier.application.verifications.summary import EXIT_FATAL, RunSummary
from evote_verifier.application.verifications.suite import VerificationStatus
from evote_verifier.config.verifier_config import VerifierConfig
from evote_verifier.domain.errors import (
    KeystoreError,
    MetadataLoadError,
    RunnerConfigurationError,
    RunnerStartupError,
)
from evote_verifier.domain.models.verification_meta_data import VerificationPeriod
from evote_verifier.infrastructure.direct_trust import DirectTrustStore
from evote_verifier.infrastructure.observability import configure_structlog

logger = structlog.get_logger()


class OutputFormat(str, Enum):
    """Output format options."""

    text = "text"
    json = "json"


app = typer.Typer(
    name="evote-verify",
    help="Independent verifier for e-voting setup and tally evidence",
    add_completion=False,
)
console = Console()

_STATUS_STYLES = {
    VerificationStatus.FINISHED_SUCCESSFULLY: "green",
    VerificationStatus.FINISHED_WITH_FAILURES: "red",
    VerificationStatus.FINISHED_WITH_ERRORS: "yellow",
}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"evote-verify version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """E-voting evidence verifier.

    Checks the cryptographic evidence of an election without trusting the
    software that produced it.
    """
    pass


def _fatal(message: str) -> typer.Exit:
    console.print(f"[red]Error:[/red] {message}", style="bold")
    return typer.Exit(code=EXIT_FATAL)


def _load_trust_store(
    config: VerifierConfig, require_trust: bool
) -> tuple[Optional[DirectTrustStore], Optional[str]]:
    """Open the direct-trust keystore, or explain why it is unavailable."""
    if config.direct_trust_dir is None:
        reason = "no direct-trust directory configured"
        if require_trust:
            raise _fatal(reason)
        logger.warning("trust_store_unavailable", reason=reason)
        return None, reason
    try:
        return DirectTrustStore.open(config.direct_trust_dir), None
    except KeystoreError as exc:
        if require_trust:
            raise _fatal(str(exc))
        logger.warning("trust_store_unavailable", reason=str(exc))
        return None, str(exc)


def _run_period(
    period: VerificationPeriod,
    dataset: Path,
    exclude: list[str],
    direct_trust: Optional[Path],
    require_trust: bool,
    output_format: OutputFormat,
    parallel: Optional[int],
    timeout: Optional[float],
    environment: Optional[str],
) -> None:
    try:
        config = VerifierConfig.from_environment().with_overrides(
            direct_trust_dir=direct_trust,
            environment=environment,
            parallel_workers=parallel,
            check_timeout_seconds=timeout,
        )
    except ValueError as exc:
        raise _fatal(str(exc))
    configure_structlog(config.environment, config.log_level)

    trust_store, trust_store_error = _load_trust_store(config, require_trust)
    context = VerificationContext(
        config=config,
        trust_store=trust_store,
        trust_store_error=trust_store_error,
    )
    try:
        runner = Runner(
            dataset,
            period,
            load_metadata(),
            exclusions=exclude,
            context=context,
            strategy=strategy_for(config),
        )
        summary = runner.run_all()
    except (MetadataLoadError, RunnerConfigurationError, RunnerStartupError) as exc:
        logger.error("run_aborted", error_type=type(exc).__name__, error=str(exc))
        raise _fatal(str(exc))

    _output_summary(summary, output_format.value)
    raise typer.Exit(code=summary.exit_code)


def _output_summary(summary: RunSummary, output_format: str) -> None:
    """Output a run summary in the requested format."""
    if output_format == "json":
        console.print_json(json.dumps(summary.to_dict()))
        return

    table = Table(title=f"{summary.period.value.capitalize()} verifications")
    table.add_column("Id", style="dim")
    table.add_column("Name")
    table.add_column("Status")
    table.add_column("Errors", justify="right")
    table.add_column("Failures", justify="right")
    for outcome in summary.outcomes:
        style = _STATUS_STYLES.get(outcome.status, "")
        table.add_row(
            outcome.id,
            outcome.name,
            f"[{style}]{outcome.status.value}[/{style}]" if style else outcome.status.value,
            str(len(outcome.errors)),
            str(len(outcome.failures)),
        )
    for verification_id in summary.skipped:
        table.add_row(verification_id, "", "[dim]skipped[/dim]", "", "")
    console.print(table)

    for outcome in summary.outcomes:
        for event in outcome.errors:
            console.print(f"[yellow]ERROR[/yellow] {outcome.id}: {event}")
        for event in outcome.failures:
            console.print(f"[red]FAILURE[/red] {outcome.id}: {event}")

    if summary.is_ok():
        console.print(
            f"[green]All {len(summary.outcomes)} verifications passed[/green] "
            f"({summary.duration:.2f} s)"
        )
    else:
        console.print(
            f"[bold]{summary.failure_count} failure(s), {summary.error_count} error(s)[/bold] "
            f"({summary.duration:.2f} s)"
        )


DATASET_ARGUMENT = typer.Argument(
    ...,
    help="Dataset root directory (holding context/ and setup/ or tally/)",
)
EXCLUDE_OPTION = typer.Option(
    [],
    "--exclude",
    "-e",
    help="Verification id to exclude (repeatable), e.g. 03.09",
)
DIRECT_TRUST_OPTION = typer.Option(
    None,
    "--direct-trust",
    help="Direct-trust directory (default: VERIFIER_DIRECT_TRUST_DIR)",
)
REQUIRE_TRUST_OPTION = typer.Option(
    False,
    "--require-trust",
    help="Abort when the keystore cannot be loaded",
)
FORMAT_OPTION = typer.Option(
    OutputFormat.text,
    "--format",
    "-o",
    help="Output format: text or json",
)
PARALLEL_OPTION = typer.Option(
    None,
    "--parallel",
    "-p",
    help="Worker threads; 0 runs sequentially",
)
TIMEOUT_OPTION = typer.Option(
    None,
    "--timeout",
    help="Per-verification timeout in seconds (parallel runs)",
)
ENVIRONMENT_OPTION = typer.Option(
    None,
    "--environment",
    help="Logging environment: production (JSON) or development (console)",
)


@app.command()
def setup(
    dataset: Path = DATASET_ARGUMENT,
    exclude: list[str] = EXCLUDE_OPTION,
    direct_trust: Optional[Path] = DIRECT_TRUST_OPTION,
    require_trust: bool = REQUIRE_TRUST_OPTION,
    output_format: OutputFormat = FORMAT_OPTION,
    parallel: Optional[int] = PARALLEL_OPTION,
    timeout: Optional[float] = TIMEOUT_OPTION,
    environment: Optional[str] = ENVIRONMENT_OPTION,
) -> None:
    """Run the setup verifications.

    Example:
        evote-verify setup ./dataset --direct-trust ./direct-trust
        evote-verify setup ./dataset -e 03.09 --format json
    """
    _run_period(
        VerificationPeriod.SETUP,
        dataset,
        exclude,
        direct_trust,
        require_trust,
        output_format,
        parallel,
        timeout,
        environment,
    )


@app.command()
def tally(
    dataset: Path = DATASET_ARGUMENT,
    exclude: list[str] = EXCLUDE_OPTION,
    direct_trust: Optional[Path] = DIRECT_TRUST_OPTION,
    require_trust: bool = REQUIRE_TRUST_OPTION,
    output_format: OutputFormat = FORMAT_OPTION,
    parallel: Optional[int] = PARALLEL_OPTION,
    timeout: Optional[float] = TIMEOUT_OPTION,
    environment: Optional[str] = ENVIRONMENT_OPTION,
) -> None:
    """Run the tally verifications.

    Example:
        evote-verify tally ./dataset --direct-trust ./direct-trust
    """
    _run_period(
        VerificationPeriod.TALLY,
        dataset,
        exclude,
        direct_trust,
        require_trust,
        output_format,
        parallel,
        timeout,
        environment,
    )


@app.command("list")
def list_verifications(
    period: Optional[VerificationPeriod] = typer.Option(
        None,
        "--period",
        help="Only list verifications of this period",
    ),
    output_format: OutputFormat = FORMAT_OPTION,
) -> None:
    """List the verifications known to the verifier."""
    try:
        metadata = load_metadata()
    except MetadataLoadError as exc:
        raise _fatal(str(exc))

    records = list(metadata.for_period(period)) if period else list(metadata)
    if output_format == OutputFormat.json:
        console.print_json(
            json.dumps(
                [
                    {
                        "id": m.id,
                        "name": m.name,
                        "period": m.period.value,
                        "category": m.category.value,
                        "description": m.description,
                    }
                    for m in records
                ]
            )
        )
        return

    table = Table()
    table.add_column("Id", style="dim")
    table.add_column("Name")
    table.add_column("Period")
    table.add_column("Category")
    for m in records:
        table.add_row(m.id, m.name, m.period.value, m.category.value)
    console.print(table)


if __name__ == "__main__":
    app()
