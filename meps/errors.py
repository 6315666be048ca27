"""
Error taxonomy for MEPS retrieval.

Every fatal condition raised by the package derives from MEPSError, so
callers can catch one type. Non-fatal conditions (local cache miss, local
load notice) are reported as notices, never raised.
"""


class MEPSError(Exception):
    """Base class for all MEPS retrieval errors."""


class InvalidRequestError(MEPSError, ValueError):
    """Neither a file name nor a complete (year, type) pair was supplied."""


class UnknownFileError(MEPSError, LookupError):
    """The file-name lookup table has no file for the requested year/type."""


class LocalReadError(MEPSError):
    """A local file chosen for loading could not be read or decoded."""

    def __init__(self, path, cause=None):
        self.path = path
        self.cause = cause
        msg = f"Failed to read local file {path}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)


class RemoteFetchError(MEPSError):
    """Downloading a file from the MEPS website failed."""

    def __init__(self, identifier, message):
        self.identifier = identifier
        super().__init__(f"Could not download {identifier}: {message}")


class DecodeError(MEPSError):
    """Bytes were obtained but are not a readable SAS transport file."""
