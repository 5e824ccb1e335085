# storage/loaders.py

import datetime
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ._utils import (
    escape_literal,
    is_glob_pattern,
    quote_identifier,
    sanitise_table_name,
)
from .errors import DataLoadError, QueryExecutionError
from .session import AnalysisSession

logger = logging.getLogger(__name__)

_EXCEL_SUFFIX = ".xlsx"


@dataclass(frozen=True)
class LoadResult:
    """
    Outcome of loading one or more files into a table.
    """

    table_name: str
    files: tuple[str, ...]
    row_count: int


@dataclass(frozen=True)
class DiscoveredFile:
    """
    A file matched by a glob pattern, with its filesystem metadata.
    """

    path: str
    size: int
    modified: str | None
    exists: bool


def load_csv(
    session: AnalysisSession,
    file_path: str,
    table_name: str | None = None,
    delimiter: str | None = None,
    *,
    header: bool = True,
) -> LoadResult:
    """
    Load a CSV file, or every file matching a glob pattern, into a table.

    Args:
        session: Session to load into.
        file_path: Path to a CSV file or a glob pattern.
        table_name: Target table; defaults to the sanitised file stem, or
            "csv_<sanitised pattern>" for glob patterns.
        delimiter: Field delimiter; auto-detected when None.
        header: Whether the file has a header row.

    Returns:
        LoadResult: The loaded table and the files it was built from.

    Raises:
        DataLoadError: When no file matches, the file is missing or no rows load.
    """
    if is_glob_pattern(file_path):
        files = _glob_files(session, file_path)
        if not files:
            raise DataLoadError(f"No CSV files found matching pattern: {file_path}")
        target = table_name or f"csv_{sanitise_table_name(file_path)}"
    else:
        _require_existing(file_path)
        files = (file_path,)
        target = table_name or sanitise_table_name(Path(file_path).stem)

    options = [f"header={_sql_bool(header)}"]
    if delimiter:
        options.append(f"delim={escape_literal(delimiter)}")

    source = escape_literal(file_path)
    row_count = _create_table(session, target, f"read_csv({source}, {', '.join(options)})")

    session.register_table(target, file_path)
    logger.info("Loaded %d rows from %s into %s", row_count, file_path, target)
    return LoadResult(target, files, row_count)


def load_multiple_csvs(
    session: AnalysisSession,
    pattern_or_files: str | Sequence[str],
    table_name: str = "multi_csv_data",
    delimiter: str = ",",
    *,
    header: bool = True,
    union_by_name: bool = False,
    include_filename: bool = False,
) -> LoadResult:
    """
    Combine several CSV files into a single table.

    Args:
        session: Session to load into.
        pattern_or_files: Glob pattern or explicit list of file paths.
        table_name: Target table, sanitised before use.
        delimiter: Field delimiter.
        header: Whether the files have header rows.
        union_by_name: Align columns by name rather than position.
        include_filename: Add a "filename" column recording each row's source.

    Returns:
        LoadResult: The combined table and the files it was built from.
    """
    files, source = _resolve_sources(session, pattern_or_files, "CSV")
    options = [
        f"header={_sql_bool(header)}",
        f"delim={escape_literal(delimiter)}",
        f"union_by_name={_sql_bool(union_by_name)}",
        f"filename={_sql_bool(include_filename)}",
    ]

    target = sanitise_table_name(table_name)
    row_count = _create_table(session, target, f"read_csv({source}, {', '.join(options)})")

    session.register_table(target, _describe_sources(pattern_or_files))
    logger.info("Loaded %d rows from %d CSV files into %s", row_count, len(files), target)
    return LoadResult(target, files, row_count)


def load_excel(
    session: AnalysisSession,
    file_path: str,
    table_name: str | None = None,
    sheet: str | None = None,
    cell_range: str | None = None,
    *,
    header: bool = True,
    all_varchar: bool = False,
) -> LoadResult:
    """
    Load one sheet of an .xlsx workbook into a table.

    Args:
        session: Session to load into.
        file_path: Path to the workbook.
        table_name: Target table; defaults to the sanitised file stem.
        sheet: Sheet name; defaults to the first sheet.
        cell_range: Cell range such as "A1:C10"; defaults to all data.
        header: Whether the first row holds column names.
        all_varchar: Read every column as text.

    Returns:
        LoadResult: The loaded table.

    Raises:
        DataLoadError: For non-.xlsx files, missing files or empty sheets.
    """
    _require_xlsx(file_path)
    _require_existing(file_path)
    _ensure_excel_extension(session)

    target = table_name or sanitise_table_name(Path(file_path).stem)
    options = _excel_options(sheet, cell_range, header=header, all_varchar=all_varchar)

    row_count = _create_table(
        session,
        target,
        f"read_xlsx({escape_literal(file_path)}, {', '.join(options)})",
    )

    session.register_table(target, file_path)
    logger.info("Loaded %d rows from %s into %s", row_count, file_path, target)
    return LoadResult(target, (file_path,), row_count)


def load_multiple_excels(
    session: AnalysisSession,
    pattern_or_files: str | Sequence[str],
    table_name: str = "multi_excel_data",
    sheet: str | None = None,
    *,
    header: bool = True,
    all_varchar: bool = False,
) -> LoadResult:
    """
    Combine the same sheet from several .xlsx workbooks into a single table.

    Args:
        session: Session to load into.
        pattern_or_files: Glob pattern or explicit list of workbook paths.
        table_name: Target table, sanitised before use.
        sheet: Sheet name read from every workbook.
        header: Whether the first row holds column names.
        all_varchar: Read every column as text.

    Returns:
        LoadResult: The combined table and the workbooks it was built from.
    """
    files, source = _resolve_sources(session, pattern_or_files, "Excel")

    non_xlsx = [path for path in files if not path.lower().endswith(_EXCEL_SUFFIX)]
    if non_xlsx:
        raise DataLoadError(
            f"Found non-xlsx files: {', '.join(non_xlsx)}. "
            "Only .xlsx files are supported."
        )

    _ensure_excel_extension(session)

    options = _excel_options(sheet, None, header=header, all_varchar=all_varchar)

    target = sanitise_table_name(table_name)
    row_count = _create_table(session, target, f"read_xlsx({source}, {', '.join(options)})")

    session.register_table(target, _describe_sources(pattern_or_files))
    logger.info("Loaded %d rows from %d workbooks into %s", row_count, len(files), target)
    return LoadResult(target, files, row_count)


def discover_files(
    session: AnalysisSession,
    pattern: str,
) -> tuple[DiscoveredFile, ...]:
    """
    List files matching a glob pattern with their size and modification time.

    Args:
        session: Session whose engine evaluates the glob.
        pattern: Glob pattern, e.g. "data/**/*.csv".

    Returns:
        tuple[DiscoveredFile, ...]: Matches ordered by path.
    """
    return tuple(_stat_file(path) for path in sorted(_glob_files(session, pattern)))


def _create_table(session: AnalysisSession, table_name: str, reader: str) -> int:
    """
    Materialise a reader expression as a table, dropping it again when empty.

    Returns:
        int: Number of rows loaded.

    Raises:
        DataLoadError: When the engine cannot read the source or it has no rows.
    """
    quoted = quote_identifier(table_name)
    try:
        session.execute(f"CREATE OR REPLACE TABLE {quoted} AS SELECT * FROM {reader}")
    except QueryExecutionError as error:
        raise DataLoadError(f"Failed to load {table_name}: {error}") from error

    row_count = session.count_rows(table_name)
    if row_count == 0:
        session.execute(f"DROP TABLE IF EXISTS {quoted}")
        raise DataLoadError(f"No data was loaded into {table_name}")
    return row_count


def _resolve_sources(
    session: AnalysisSession,
    pattern_or_files: str | Sequence[str],
    label: str,
) -> tuple[tuple[str, ...], str]:
    """
    Resolve a pattern or file list into concrete files and a reader argument.

    Returns:
        tuple[tuple[str, ...], str]: Matched files and the SQL source expression.
    """
    if isinstance(pattern_or_files, str):
        if is_glob_pattern(pattern_or_files):
            files = _glob_files(session, pattern_or_files)
            if not files:
                raise DataLoadError(
                    f"No {label} files found matching pattern: {pattern_or_files}"
                )
        else:
            _require_existing(pattern_or_files)
            files = (pattern_or_files,)
        return files, escape_literal(pattern_or_files)

    files = tuple(pattern_or_files)
    if not files:
        raise DataLoadError(f"No {label} files given")
    for path in files:
        _require_existing(path)
    return files, "[" + ", ".join(escape_literal(path) for path in files) + "]"


def _glob_files(session: AnalysisSession, pattern: str) -> tuple[str, ...]:
    """
    Expand a glob pattern using the engine's glob table function.

    Returns:
        tuple[str, ...]: Matching file paths.
    """
    rows = session.execute(f"SELECT file FROM glob({escape_literal(pattern)})")
    return tuple(str(row["file"]) for row in rows)


def _stat_file(path: str) -> DiscoveredFile:
    """
    Collect size and modification time for a path.

    Returns:
        DiscoveredFile: Metadata, with exists=False when the file has vanished.
    """
    try:
        stats = os.stat(path)
    except OSError:
        return DiscoveredFile(path=path, size=0, modified=None, exists=False)

    modified = datetime.datetime.fromtimestamp(stats.st_mtime, datetime.UTC)
    return DiscoveredFile(
        path=path,
        size=stats.st_size,
        modified=modified.isoformat(),
        exists=True,
    )


def _ensure_excel_extension(session: AnalysisSession) -> None:
    """
    Install and load the engine's excel extension if it is not already present.
    """
    for statement in ("INSTALL excel", "LOAD excel"):
        try:
            session.execute(statement)
        except QueryExecutionError as error:
            logger.debug("%s failed: %s", statement, error)


def _excel_options(
    sheet: str | None,
    cell_range: str | None,
    *,
    header: bool,
    all_varchar: bool,
) -> list[str]:
    """
    Build the option list for read_xlsx.

    Returns:
        list[str]: Rendered "name=value" options.
    """
    options = [f"header={_sql_bool(header)}"]
    if sheet:
        options.append(f"sheet={escape_literal(sheet)}")
    if cell_range:
        options.append(f"range={escape_literal(cell_range)}")
    if all_varchar:
        options.append("all_varchar=true")
    return options


def _require_existing(path: str) -> None:
    """
    Raise DataLoadError when a path does not exist.
    """
    if not Path(path).exists():
        raise DataLoadError(f"File not found: {path}")


def _require_xlsx(path: str) -> None:
    """
    Raise DataLoadError for anything other than an .xlsx workbook.
    """
    if not path.lower().endswith(_EXCEL_SUFFIX):
        raise DataLoadError(
            "Only .xlsx files are supported. Please convert .xls files to .xlsx format."
        )


def _describe_sources(pattern_or_files: str | Sequence[str]) -> str:
    """
    Render the sources of a multi-file load for the session's table registry.

    Returns:
        str: The pattern, or the comma-separated file list.
    """
    if isinstance(pattern_or_files, str):
        return pattern_or_files
    return ", ".join(pattern_or_files)


def _sql_bool(value: bool) -> str:
    """
    Render a boolean as a SQL literal.

    Returns:
        str: "true" or "false".
    """
    return "true" if value else "false"
