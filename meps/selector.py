"""
Local-versus-remote source selection.

Given a canonical file name, decide whether it can be loaded from a local
directory of .ssp files or must be downloaded from the MEPS website.
Matching is case-insensitive and ignores a trailing .ssp extension: both
the requested name and every directory entry go through
normalize_filename() before comparison.
"""

import os
from dataclasses import dataclass
from typing import Union

from meps import config
from meps.logging_config import get_logger
from meps.notices import Notice, NoticeKind, log_notice

log = get_logger(__name__)


@dataclass(frozen=True)
class LocalSource:
    """A file confirmed present in a local directory."""

    directory: str
    filename: str

    @property
    def path(self):
        return os.path.join(self.directory, self.filename)


@dataclass(frozen=True)
class RemoteSource:
    """A file to be fetched from the MEPS website."""

    identifier: str


SourceLocation = Union[LocalSource, RemoteSource]


def normalize_filename(name: str) -> str:
    """Normalize a file name for matching.

    Strips whitespace, lowercases, and appends the .ssp extension when it
    is not already present.
    """
    normalized = str(name).strip().lower()
    if not normalized.endswith(config.SSP_EXTENSION):
        normalized += config.SSP_EXTENSION
    return normalized


def list_local_files(directory) -> list[str]:
    """Return regular-file names in *directory*, sorted.

    A missing or unreadable directory yields an empty list.
    """
    try:
        with os.scandir(directory) as entries:
            return sorted(e.name for e in entries if e.is_file())
    except OSError as exc:
        log.debug("Cannot list %s: %s", directory, exc)
        return []


def find_local_file(identifier, directory):
    """Return the directory entry matching *identifier*, or None."""
    candidate = normalize_filename(identifier)
    for name in list_local_files(directory):
        if normalize_filename(name) == candidate:
            return name
    return None


def select(identifier, local_dir=".", prefer_remote=False, notify=log_notice) -> SourceLocation:
    """Choose where to read *identifier* from.

    With *prefer_remote* the local directory is never touched. Otherwise a
    local hit produces an INFO notice and a LocalSource; a miss produces a
    single WARNING notice and falls back to a RemoteSource.
    """
    if prefer_remote:
        return RemoteSource(identifier)

    local_dir = os.fspath(local_dir)
    match = find_local_file(identifier, local_dir)
    if match is not None:
        notify(Notice(
            NoticeKind.INFO,
            f"Loading {match} from {local_dir}",
            identifier,
        ))
        return LocalSource(local_dir, match)

    notify(Notice(
        NoticeKind.WARNING,
        f"{normalize_filename(identifier)} not found in local directory. "
        "Downloading from MEPS website instead.",
        identifier,
    ))
    return RemoteSource(identifier)
