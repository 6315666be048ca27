"""
MEPS public use file reader.

Loads MEPS .ssp files from a local directory, falling back to the MEPS
website when a file is not there. The public entry points are exposed
lazily so that importing a submodule does not pull in the whole package.
"""

__version__ = "0.1.0"

_EXPORTS = {
    "read_meps": "meps.retrieval",
    "read_meps_many": "meps.batch",
    "get_puf_names": "meps.puf_names",
    "download_ssp": "meps.fetch",
    "make_request": "meps.dataset_request",
    "FileType": "meps.dataset_request",
}


def __getattr__(name):
    if name in _EXPORTS:
        import importlib

        module = importlib.import_module(_EXPORTS[name])
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
