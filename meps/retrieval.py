"""
Read MEPS public use files into DataFrames.

read_meps() is the entry point. It resolves the request to a
standardized file name, loads the file from a local directory when it is
there, and otherwise downloads it from the MEPS website. Larger files
(e.g. full-year consolidated files) can take several seconds to load.

Usage:
    from meps.retrieval import read_meps

    # Download the 2014 full-year consolidated file
    fyc2014 = read_meps("h171", web=True)
    fyc2014 = read_meps(year=2014, file_type="FYC", web=True)

    # Load from a local directory, falling back to the website
    fyc2014 = read_meps(year=2014, file_type="FYC", directory="mydata")
"""

import os

import pandas as pd

from meps.dataset_request import make_request
from meps.decode import read_xport
from meps.errors import DecodeError, LocalReadError, RemoteFetchError
from meps.fetch import fetch_ssp
from meps.logging_config import StepTimer, get_logger, log_step_summary
from meps.notices import log_notice
from meps.puf_names import get_puf_names
from meps.resolver import resolve
from meps.selector import LocalSource, select

log = get_logger(__name__)


def read_local(source: LocalSource, decoder=read_xport) -> pd.DataFrame:
    """Decode a file the selector confirmed to exist.

    Any failure is a LocalReadError; there is no fallback to the website.
    """
    try:
        return decoder(source.path)
    except Exception as exc:
        raise LocalReadError(source.path, exc) from exc


def read_remote(identifier, fetcher=fetch_ssp, decoder=read_xport) -> pd.DataFrame:
    """Fetch *identifier* once and decode the result."""
    try:
        fetched = fetcher(identifier)
    except RemoteFetchError:
        raise
    except Exception as exc:
        raise RemoteFetchError(identifier, str(exc)) from exc

    try:
        return decoder(fetched)
    except DecodeError:
        raise
    except Exception as exc:
        raise DecodeError(f"Could not decode {identifier}: {exc}") from exc


def read_meps(
    identifier=None,
    year=None,
    file_type=None,
    directory=".",
    web=False,
    *,
    name_mapper=None,
    fetcher=None,
    decoder=None,
    notify=None,
) -> pd.DataFrame:
    """Read a MEPS public use file into a DataFrame.

    Either a standardized file name or both year and file type must be
    given.

    Parameters
    ----------
    identifier : str, optional
        Standardized file name, e.g. ``"h160g"``. Takes precedence over
        year/file_type.
    year : int, optional
        Data year, between 1996 and the most recent release.
    file_type : FileType or str, optional
        One of PIT, FYC, Conditions, Jobs, PRPL, PMED, DV, OM, IP, ER, OP,
        OB, HH, CLNK, RXLK.
    directory : str or PathLike
        Directory searched for .ssp files. Ignored when *web* is set.
    web : bool
        Download from the MEPS website without checking *directory*.
    name_mapper, fetcher, decoder : callable, optional
        Replacements for get_puf_names, fetch_ssp and read_xport. *decoder*
        must return a DataFrame.
    notify : callable, optional
        Receives Notice objects. Default: log them.

    Returns
    -------
    pandas.DataFrame

    Raises
    ------
    InvalidRequestError
        Neither a file name nor a complete year/type pair was given.
    LocalReadError
        The matching local file could not be read.
    RemoteFetchError
        The download failed.
    DecodeError
        The downloaded file is not a SAS transport file.
    """
    request = make_request(identifier, year, file_type)

    name_mapper = name_mapper or get_puf_names
    fetcher = fetcher or fetch_ssp
    decoder = decoder or read_xport
    notify = notify or log_notice

    with StepTimer() as timer:
        canonical = resolve(request, name_mapper, web)
        source = select(canonical, os.fspath(directory), web, notify)

        if isinstance(source, LocalSource):
            df = read_local(source, decoder)
            origin = "local"
        else:
            df = read_remote(source.identifier, fetcher, decoder)
            origin = "remote"

    log_step_summary(
        log, f"read_meps:{canonical}", "success",
        input_summary={"identifier": canonical, "source": origin},
        output_summary={"rows": len(df), "columns": len(getattr(df, "columns", ()))},
        timing_seconds=timer.elapsed,
    )
    return df
