"""
Read several MEPS files in one call.

Unlike read_meps(), which raises on the first failure, the batch reader
records every outcome in a RetrievalResult so one bad file does not stop
the rest. Requests that resolve to the same file name are retrieved once;
each repeat gets its own copy of the outcome and table.
"""

import os
import traceback
from dataclasses import dataclass, field, replace
from typing import Optional

import pandas as pd

from meps.dataset_request import make_request
from meps.decode import read_xport
from meps.errors import MEPSError
from meps.fetch import fetch_ssp
from meps.logging_config import StepTimer, get_logger, log_step_summary
from meps.notices import log_notice
from meps.puf_names import get_puf_names
from meps.resolver import resolve
from meps.retrieval import read_local, read_remote
from meps.selector import LocalSource, select

log = get_logger(__name__)


@dataclass
class RetrievalResult:
    """Outcome of retrieving one requested file."""

    identifier: Optional[str]
    status: str  # "success" | "error"
    source: Optional[str] = None  # "local" | "remote"
    rows: int = 0
    columns: list = field(default_factory=list)
    timing_seconds: float = 0.0
    error: Optional[str] = None
    data: Optional[pd.DataFrame] = field(default=None, repr=False)

    @property
    def ok(self):
        return self.status == "success"


def _as_request(item):
    """Accept a request object, a file name, or a mapping of read_meps kwargs."""
    if isinstance(item, str):
        return make_request(identifier=item)
    if isinstance(item, dict):
        return make_request(
            item.get("identifier"), item.get("year"), item.get("file_type")
        )
    return item


def _copy_result(result):
    """Independent copy of *result* for a repeated request."""
    data = result.data.copy() if result.data is not None else None
    return replace(result, columns=list(result.columns), data=data)


def _retrieve_one(identifier, directory, web, fetcher, decoder, notify):
    source = select(identifier, directory, web, notify)
    if isinstance(source, LocalSource):
        return "local", read_local(source, decoder)
    return "remote", read_remote(source.identifier, fetcher, decoder)


def read_meps_many(
    requests,
    directory=".",
    web=False,
    *,
    name_mapper=None,
    fetcher=None,
    decoder=None,
    notify=None,
) -> list[RetrievalResult]:
    """Retrieve each of *requests* sequentially.

    Parameters
    ----------
    requests : iterable
        File names, ``{"identifier"|"year"|"file_type": ...}`` dicts, or
        request objects from make_request().
    directory, web, name_mapper, fetcher, decoder, notify
        As for read_meps().

    Returns
    -------
    list[RetrievalResult]
        One result per request, in input order. Repeated requests get
        independent copies, so mutating one table leaves the others intact.
    """
    name_mapper = name_mapper or get_puf_names
    fetcher = fetcher or fetch_ssp
    decoder = decoder or read_xport
    notify = notify or log_notice
    directory = os.fspath(directory)

    resolved = []
    for item in requests:
        try:
            resolved.append((resolve(_as_request(item), name_mapper, web), None))
        except MEPSError as exc:
            resolved.append((None, str(exc)))
        except Exception:
            log.error("Could not resolve %r", item, exc_info=True)
            resolved.append((None, traceback.format_exc()))

    outcomes = {}
    results = []
    for identifier, resolve_error in resolved:
        if resolve_error is not None:
            results.append(RetrievalResult(
                identifier=None, status="error", error=resolve_error,
            ))
            continue

        key = identifier.strip().lower()
        if key in outcomes:
            results.append(_copy_result(outcomes[key]))
            continue
        outcomes[key] = _run_retrieval(
            identifier, directory, web, fetcher, decoder, notify
        )
        results.append(outcomes[key])

    n_ok = sum(r.ok for r in results)
    log.info("Retrieved %d/%d requested files", n_ok, len(results))
    return results


def _run_retrieval(identifier, directory, web, fetcher, decoder, notify):
    error_tb = None
    origin, df = None, None

    with StepTimer() as timer:
        try:
            origin, df = _retrieve_one(identifier, directory, web, fetcher, decoder, notify)
        except MEPSError as exc:
            error_tb = str(exc)
            log.error("%s failed: %s", identifier, exc, exc_info=True)
        except Exception:
            error_tb = traceback.format_exc()
            log.error("%s failed unexpectedly", identifier, exc_info=True)

    if error_tb:
        log_step_summary(log, f"read_meps:{identifier}", "error", timing_seconds=timer.elapsed)
        return RetrievalResult(
            identifier=identifier,
            status="error",
            error=error_tb,
            timing_seconds=timer.elapsed,
        )

    log_step_summary(
        log, f"read_meps:{identifier}", "success",
        input_summary={"identifier": identifier, "source": origin},
        output_summary={"rows": len(df), "columns": len(getattr(df, "columns", ()))},
        timing_seconds=timer.elapsed,
    )
    return RetrievalResult(
        identifier=identifier,
        status="success",
        source=origin,
        rows=len(df),
        columns=list(getattr(df, "columns", ())),
        timing_seconds=timer.elapsed,
        data=df,
    )
