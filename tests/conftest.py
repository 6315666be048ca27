"""
Shared fixtures for MEPS reader tests.

Network access and SAS transport decoding are replaced by small fakes:
local ".ssp" fixtures hold CSV text and the fake decoder reads them with
pandas, so each test can focus on the retrieval logic.
"""

import io
import os
import zipfile

import pandas as pd
import pytest


# ---------------------------------------------------------------------------
# Sample lookup table (subset of the published MEPS file-name table)
# ---------------------------------------------------------------------------
FILE_NAMES_CSV = """Year,PIT,FYC,Conditions,Jobs,PRPL,PMED,DV,OM,IP,ER,OP,OB,HH,CLNK,RXLK
2013,h157,h163,h162,h158,h164,h160a,h160b,h160c,h160d,h160e,h160f,h160g,h160h,h160if1,h160if2
2014,h166,h171,h170,h169,h172,h168a,h168b,h168c,h168d,h168e,h168f,h168g,h168h,h168if1,h168if2
2015,-,h181,h180,h177,h183,h178a,h178b,h178c,h178d,h178e,h178f,h178g,h178h,h178if1,h178if2
"""

LOCAL_CSV = "DUPERSID,AGE14X,TOTEXP14\n10001,34,1200.5\n10002,61,40.0\n"
REMOTE_CSV = "DUPERSID,AGE14X,TOTEXP14\n20001,12,0.0\n20002,45,310.25\n20003,70,9800.0\n"


@pytest.fixture
def file_names_table():
    from meps.puf_names import parse_file_names

    return parse_file_names(io.StringIO(FILE_NAMES_CSV))


@pytest.fixture
def data_dir(tmp_path):
    """Local directory with one file, ``h171.ssp``."""
    d = tmp_path / "mydata"
    d.mkdir()
    (d / "h171.ssp").write_text(LOCAL_CSV)
    return d


def csv_decoder(path_or_buffer):
    """Stand-in for read_xport: fixture files hold CSV text."""
    return pd.read_csv(path_or_buffer)


class FakeFetcher:
    """Records requested identifiers and serves REMOTE_CSV from disk."""

    def __init__(self, out_dir, content=REMOTE_CSV, error=None):
        self.out_dir = out_dir
        self.content = content
        self.error = error
        self.calls = []

    def __call__(self, identifier):
        self.calls.append(identifier)
        if self.error is not None:
            raise self.error
        path = os.path.join(self.out_dir, f"{identifier}.ssp")
        with open(path, "w") as f:
            f.write(self.content)
        return path


class FakeNameMapper:
    def __init__(self, table):
        self.table = table
        self.calls = []

    def __call__(self, year, file_type, remote):
        from meps.puf_names import get_puf_names

        self.calls.append((year, file_type, remote))
        return get_puf_names(year, file_type, table=self.table)


@pytest.fixture
def fetcher(tmp_path):
    d = tmp_path / "downloads"
    d.mkdir()
    return FakeFetcher(str(d))


@pytest.fixture
def name_mapper(file_names_table):
    return FakeNameMapper(file_names_table)


@pytest.fixture
def no_listing(monkeypatch):
    """Fail the test if the selector lists any directory."""
    import meps.selector as selector

    def _forbidden(directory):
        raise AssertionError(f"directory listed: {directory}")

    monkeypatch.setattr(selector, "list_local_files", _forbidden)


# ---------------------------------------------------------------------------
# HTTP fakes
# ---------------------------------------------------------------------------


def make_zip_bytes(members):
    """Build a zip archive in memory from ``{name: bytes}``."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return buf.getvalue()


class FakeResponse:
    def __init__(self, status_code=200, content=b"", text=""):
        self.status_code = status_code
        self.content = content
        self.text = text

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False

    def raise_for_status(self):
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i:i + chunk_size]


class FakeSession:
    """Serves canned responses by URL; unknown URLs answer 404."""

    def __init__(self, responses=None, error=None):
        self.responses = responses or {}
        self.error = error
        self.urls = []

    def get(self, url, **kwargs):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.responses.get(url, FakeResponse(404))


@pytest.fixture
def reset_meps_logging():
    from meps.logging_config import reset_logging, setup_logging

    reset_logging()
    yield
    reset_logging()
    setup_logging()
