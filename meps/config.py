"""
Centralized configuration for the MEPS public use file reader.

All file-naming conventions, download locations, HTTP parameters and
environment overrides are defined here so every module reads them from
one place.
"""

import os

# ─── FILE NAMING ─────────────────────────────────────────────────────────
# MEPS public use files are distributed as SAS transport (XPORT) files with
# a ".ssp" extension, named by a standardized code such as "h171" (2014
# full-year consolidated) or "h168a" (2014 prescribed medicines events).
SSP_EXTENSION = ".ssp"

# Strings in MEPS transport files are single-byte; latin-1 decodes every
# byte so no row is lost to a codec error.
SSP_ENCODING = "latin-1"

# ─── TEMPORAL COVERAGE ───────────────────────────────────────────────────
# The MEPS household component starts with the 1996 panel.
FIRST_YEAR = 1996

# ─── FILE TYPES ──────────────────────────────────────────────────────────
# Column names of the published file-name lookup table, with descriptions.
FILE_TYPES = {
    "PIT": "Point-in-time file",
    "FYC": "Full-year consolidated",
    "Conditions": "Medical conditions",
    "Jobs": "Jobs file",
    "PRPL": "Person-round-plan",
    "PMED": "Prescribed medicines events",
    "DV": "Dental visits",
    "OM": "Other medical expenses",
    "IP": "Hospital inpatient stays",
    "ER": "Emergency room visits",
    "OP": "Outpatient visits",
    "OB": "Office-based medical provider visits",
    "HH": "Home health",
    "CLNK": "Conditions-event link file",
    "RXLK": "Prescribed medicines-event link file",
}

# Cell values in the lookup table that mean "no file released".
MISSING_FILE_MARKERS = ("", "-", "na", "nan")

# ─── REMOTE SOURCES ──────────────────────────────────────────────────────
MEPS_PUF_BASE_URL = "https://meps.ahrq.gov/mepsweb/data_files/pufs"

# Older releases sit directly under pufs/, newer ones in a per-file folder.
# Tried in order; the first URL that answers 200 wins.
PUF_URL_TEMPLATES = [
    "{base}/{name}ssp.zip",
    "{base}/{name}/{name}ssp.zip",
]

FILE_NAMES_URL = (
    "https://raw.githubusercontent.com/HHS-AHRQ/MEPS/master/"
    "Quick_Reference_Guides/meps_file_names.csv"
)
FILE_NAMES_CACHE_NAME = "meps_file_names.csv"

# ─── HTTP PARAMETERS ─────────────────────────────────────────────────────
HTTP_TIMEOUT_SECONDS = 120
HTTP_MAX_RETRIES = 3
HTTP_BACKOFF_FACTOR = 0.5
HTTP_RETRY_STATUSES = (429, 500, 502, 503, 504)
HTTP_CHUNK_SIZE = 1024 * 1024  # 1 MB
USER_AGENT = "meps-reader/0.1"

# ─── ENVIRONMENT OVERRIDES ───────────────────────────────────────────────


def default_data_dir():
    """Directory searched for local .ssp files when none is given."""
    return os.environ.get("MEPS_DATA_DIR", ".")


def default_cache_dir():
    """Directory holding the cached file-name lookup table."""
    return os.environ.get(
        "MEPS_CACHE_DIR",
        os.path.join(os.path.expanduser("~"), ".cache", "meps"),
    )


def file_names_path():
    """Explicit local lookup table, or None when unset."""
    return os.environ.get("MEPS_FILE_NAMES_PATH") or None
