"""
Dataset request types.

A request names a MEPS public use file either directly (``h171``) or by
data year and file type (2014, FYC). The two shapes are separate frozen
dataclasses; make_request() is the only supported constructor and rejects
a request that fills neither shape before any I/O happens.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from meps.errors import InvalidRequestError


class FileType(str, Enum):
    """MEPS public use file types, valued as lookup-table column names."""
    PIT = "PIT"
    FYC = "FYC"
    CONDITIONS = "Conditions"
    JOBS = "Jobs"
    PRPL = "PRPL"
    PMED = "PMED"
    DV = "DV"
    OM = "OM"
    IP = "IP"
    ER = "ER"
    OP = "OP"
    OB = "OB"
    HH = "HH"
    CLNK = "CLNK"
    RXLK = "RXLK"

    @classmethod
    def parse(cls, value):
        """Case-insensitive lookup by value (``"fyc"`` -> FYC)."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        valid = ", ".join(m.value for m in cls)
        raise InvalidRequestError(f"Unknown file type {value!r}. Options are: {valid}")


@dataclass(frozen=True)
class ByIdentifier:
    """Request for a file by its standardized name, e.g. ``h171``."""

    identifier: str


@dataclass(frozen=True)
class ByYearType:
    """Request for a file by data year and file type."""

    year: int
    file_type: FileType


DatasetRequest = Union[ByIdentifier, ByYearType]


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def make_request(identifier=None, year=None, file_type=None) -> DatasetRequest:
    """Build a validated request.

    An identifier takes precedence over year/type. Without one, both year
    and file type are required.

    Raises
    ------
    InvalidRequestError
        When neither shape is fully populated, or year/type are malformed.
    """
    if not _is_missing(identifier):
        return ByIdentifier(str(identifier))

    if _is_missing(year) or _is_missing(file_type):
        raise InvalidRequestError("Must specify either file or year and type")

    if isinstance(year, bool):
        raise InvalidRequestError(f"Year must be an integer, got {year!r}")
    try:
        year_int = int(year)
    except (TypeError, ValueError):
        raise InvalidRequestError(f"Year must be an integer, got {year!r}") from None
    if isinstance(year, float) and year != year_int:
        raise InvalidRequestError(f"Year must be an integer, got {year!r}")

    return ByYearType(year_int, FileType.parse(file_type))
