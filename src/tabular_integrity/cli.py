# tabular_integrity/cli.py

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer

from .domain import inspect_table, optimise_expenses
from .domain.integrity import (
    DEFAULT_ANOMALY_TYPES,
    DetectionSettings,
    detect_anomalies,
    render_anomaly_report,
    save_anomaly_report,
)
from .logging_config import configure_logging
from .storage import (
    AnalysisSession,
    LoadResult,
    SessionError,
    discover_files,
    load_csv,
    load_excel,
    open_session,
)

app = typer.Typer(add_completion=False, help="Anomaly and spending reports for CSV/Excel files.")


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to TABULAR_INTEGRITY_LOG_LEVEL or WARNING)",
    ),
) -> None:
    """
    Configure package logging before any command runs.
    """
    configure_logging(log_level)


@app.command()
def detect(
    file: str = typer.Argument(..., help="CSV or .xlsx file, or a CSV glob pattern"),
    table: str = typer.Option(None, "--table", "-t", help="Table name to load into"),
    severity: str = typer.Option("medium", "--severity", "-s", help="Minimum severity"),
    focus: list[str] = typer.Option(None, "--focus", "-f", help="Column to focus on"),
    anomaly_type: list[str] = typer.Option(
        None,
        "--type",
        help="Detector toggle (statistical, duplicates, nulls, outliers,"
        " patterns, business_logic)",
    ),
    timeout: float = typer.Option(None, "--timeout", help="Per-query timeout in seconds"),
    json_out: Path = typer.Option(None, "--json", help="Also write the report as JSON"),
) -> None:
    """
    Load a file and print its anomaly detection report.
    """
    types = anomaly_type or [member.value for member in DEFAULT_ANOMALY_TYPES]
    settings = DetectionSettings(query_timeout_seconds=timeout)

    with _cli_errors(), open_session() as session:
        loaded = _load(session, file, table)
        report = detect_anomalies(
            session,
            loaded.table_name,
            severity_threshold=severity,
            focus_columns=focus or (),
            anomaly_types=types,
            settings=settings,
        )

    typer.echo(render_anomaly_report(report))
    if json_out:
        save_anomaly_report(report, json_out)
        typer.echo(f"JSON report written: {json_out}")


@app.command()
def inspect(
    file: str = typer.Argument(..., help="CSV or .xlsx file, or a CSV glob pattern"),
    table: str = typer.Option(None, "--table", "-t", help="Table name to load into"),
) -> None:
    """
    Load a file and print its schema and a sample of rows.
    """
    with _cli_errors(), open_session() as session:
        loaded = _load(session, file, table)
        typer.echo(f"Loaded {len(loaded.files)} file(s) as table \"{loaded.table_name}\"\n")
        typer.echo(inspect_table(session, loaded.table_name))


@app.command()
def expenses(
    file: str = typer.Argument(..., help="CSV or .xlsx file of card transactions"),
    table: str = typer.Option(None, "--table", "-t", help="Table name to load into"),
    amount_column: str = typer.Option("Amount", "--amount-column"),
    name_column: str = typer.Option("Name", "--name-column"),
    date_column: str = typer.Option("Date", "--date-column"),
) -> None:
    """
    Load transactions and print an expense optimisation report.
    """
    with _cli_errors(), open_session() as session:
        loaded = _load(session, file, table)
        typer.echo(
            optimise_expenses(
                session,
                loaded.table_name,
                amount_column=amount_column,
                name_column=name_column,
                date_column=date_column,
            )
        )


@app.command()
def discover(
    pattern: str = typer.Argument(..., help='Glob pattern, e.g. "data/**/*.csv"'),
) -> None:
    """
    List files matching a glob pattern.
    """
    with _cli_errors(), open_session() as session:
        found = discover_files(session, pattern)

    total_size = sum(entry.size for entry in found if entry.exists)
    typer.echo(f'Found {len(found)} files matching pattern "{pattern}"')
    typer.echo(f"Total size: {total_size / 1024 / 1024:.2f} MB\n")
    for entry in found:
        detail = (
            f"{entry.size / 1024:.1f} KB, modified: {entry.modified}"
            if entry.exists
            else "NOT FOUND"
        )
        typer.echo(f"- {entry.path} ({detail})")


def _load(session: AnalysisSession, file: str, table: str | None) -> LoadResult:
    """
    Load a file into the session, choosing the reader from its suffix.

    Returns:
        LoadResult: The loaded table.
    """
    if file.lower().endswith(".xlsx"):
        return load_excel(session, file, table)
    return load_csv(session, file, table)


@contextmanager
def _cli_errors() -> Iterator[None]:
    """
    Turn session failures into a one-line message and exit status 1.

    Yields:
        None: Control while errors are being translated.
    """
    try:
        yield
    except SessionError as error:
        typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=1) from error


def main() -> None:
    """
    Console script entry point.
    """
    app()


if __name__ == "__main__":
    main()
