"""
Map (year, file type) to standardized MEPS public use file names.

The mapping comes from the file-name lookup table AHRQ publishes
alongside the MEPS documentation: one row per data year, one column per
file type, each cell holding a name such as ``h171`` or ``h168a``.

Strategy:
1. web=True always downloads the latest table.
2. Otherwise use MEPS_FILE_NAMES_PATH when set.
3. Otherwise use the cached copy, downloading it on first use.
"""

import io
import os

import pandas as pd
import requests

from meps import config
from meps.dataset_request import FileType
from meps.errors import MEPSError, UnknownFileError
from meps.fetch import make_session
from meps.logging_config import get_logger

log = get_logger(__name__)


class FileNamesUnavailableError(MEPSError):
    """The file-name lookup table could not be obtained."""


def _download_table_text(session=None) -> str:
    session = session or make_session()
    try:
        r = session.get(config.FILE_NAMES_URL, timeout=config.HTTP_TIMEOUT_SECONDS)
        r.raise_for_status()
    except requests.RequestException as exc:
        raise FileNamesUnavailableError(
            f"Could not download file-name table from {config.FILE_NAMES_URL}: {exc}"
        ) from exc
    return r.text


def parse_file_names(source) -> pd.DataFrame:
    """Parse a lookup table into a DataFrame indexed by integer year.

    *source* is a path or a file-like object holding CSV text. Column
    names are matched to FileType values ignoring case and surrounding
    whitespace; unrelated columns are dropped.
    """
    df = pd.read_csv(source, dtype=str, keep_default_na=False)
    df.columns = [str(c).strip() for c in df.columns]

    year_col = next((c for c in df.columns if c.lower() == "year"), None)
    if year_col is None:
        raise FileNamesUnavailableError("File-name table has no Year column")

    rename_map = {}
    for col in df.columns:
        for ft in FileType:
            if col.lower() == ft.value.lower():
                rename_map[col] = ft.value
    table = df[[year_col] + list(rename_map)].rename(columns=rename_map)

    table[year_col] = pd.to_numeric(table[year_col], errors="coerce")
    table = table.dropna(subset=[year_col]).copy()
    table[year_col] = table[year_col].astype(int)
    table = table.set_index(year_col).sort_index()
    table.index.name = "Year"

    for col in table.columns:
        table[col] = table[col].str.strip().str.lower()
    return table


def load_file_names(web=False, cache_dir=None, session=None) -> pd.DataFrame:
    """Load the file-name lookup table.

    Parameters
    ----------
    web : bool
        Always download the latest table from the MEPS repository.
    cache_dir : str, optional
        Where the cached copy lives. Default: config.default_cache_dir().
    session : requests.Session, optional
        Session used for downloads.
    """
    if web:
        log.debug("Downloading file-name table from %s", config.FILE_NAMES_URL)
        return parse_file_names(io.StringIO(_download_table_text(session)))

    explicit = config.file_names_path()
    if explicit:
        return parse_file_names(explicit)

    cache_dir = cache_dir or config.default_cache_dir()
    cached = os.path.join(cache_dir, config.FILE_NAMES_CACHE_NAME)
    if not os.path.exists(cached):
        text = _download_table_text(session)
        os.makedirs(cache_dir, exist_ok=True)
        tmp_path = cached + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_path, cached)
        log.info("Cached file-name table at %s", cached)
    return parse_file_names(cached)


def _cell(table, year, file_type):
    value = table.at[year, file_type.value] if file_type.value in table.columns else ""
    if pd.isna(value) or str(value).strip().lower() in config.MISSING_FILE_MARKERS:
        raise UnknownFileError(f"No {file_type.value} file released for {year}")
    return str(value).strip().lower()


def get_puf_names(year=None, file_type=None, web=False, table=None):
    """Look up standardized public use file names.

    Parameters
    ----------
    year : int, optional
        Data year, from 1996 to the most recent release.
    file_type : FileType or str, optional
        File type, e.g. ``"FYC"``.
    web : bool
        Download the latest lookup table instead of the cached one.
    table : DataFrame, optional
        Pre-loaded table (from load_file_names or parse_file_names).

    Returns
    -------
    str
        When both year and file_type are given.
    dict
        ``{type: name}`` when only year is given, ``{year: name}`` when
        only file_type is given.
    DataFrame
        The whole table when neither is given.
    """
    if file_type is not None:
        file_type = FileType.parse(file_type)
    if year is not None:
        year = int(year)
        if year < config.FIRST_YEAR:
            raise UnknownFileError(
                f"Year {year} is before the first MEPS release ({config.FIRST_YEAR})"
            )

    if table is None:
        table = load_file_names(web=web)

    if year is not None and year not in table.index:
        latest = int(table.index.max()) if len(table.index) else None
        raise UnknownFileError(f"No MEPS files listed for {year} (latest year: {latest})")

    if year is not None and file_type is not None:
        return _cell(table, year, file_type)

    if year is not None:
        names = {}
        for ft in FileType:
            try:
                names[ft.value] = _cell(table, year, ft)
            except UnknownFileError:
                continue
        return names

    if file_type is not None:
        names = {}
        for y in table.index:
            try:
                names[int(y)] = _cell(table, y, file_type)
            except UnknownFileError:
                continue
        return names

    return table
