"""
Tests for meps/puf_names.py.

The lookup table maps (year, file type) to standardized file names. All
tests use an in-memory table or a fake HTTP session; none reach the web.
"""

import io

import pandas as pd
import pytest

from meps import config
from meps.dataset_request import FileType
from meps.errors import InvalidRequestError, UnknownFileError
from meps.puf_names import (
    FileNamesUnavailableError,
    get_puf_names,
    load_file_names,
    parse_file_names,
)
from tests.conftest import FILE_NAMES_CSV, FakeResponse, FakeSession


class TestParseFileNames:

    def test_indexed_by_year(self, file_names_table):
        assert list(file_names_table.index) == [2013, 2014, 2015]
        assert file_names_table.index.name == "Year"

    def test_columns_are_file_types(self, file_names_table):
        assert set(file_names_table.columns) == {ft.value for ft in FileType}

    def test_column_matching_ignores_case(self):
        table = parse_file_names(io.StringIO("year, fyc ,conditions,Notes\n2014,H171,h170,x\n"))
        assert list(table.columns) == ["FYC", "Conditions"]
        assert table.at[2014, "FYC"] == "h171"

    def test_non_numeric_years_dropped(self):
        table = parse_file_names(io.StringIO("Year,FYC\n2014,h171\nTotal,\n"))
        assert list(table.index) == [2014]

    def test_missing_year_column(self):
        with pytest.raises(FileNamesUnavailableError):
            parse_file_names(io.StringIO("FYC\nh171\n"))


class TestGetPufNames:

    @pytest.mark.parametrize("year,file_type,expected", [
        (2014, "FYC", "h171"),
        (2014, FileType.FYC, "h171"),
        (2013, "OB", "h160g"),
        (2014, "conditions", "h170"),
        (2015, "CLNK", "h178if1"),
        (2014, "RXLK", "h168if2"),
    ])
    def test_single_lookup(self, file_names_table, year, file_type, expected):
        assert get_puf_names(year, file_type, table=file_names_table) == expected

    def test_year_only(self, file_names_table):
        names = get_puf_names(2014, table=file_names_table)
        assert names["FYC"] == "h171"
        assert len(names) == 15

    def test_year_only_skips_missing(self, file_names_table):
        assert "PIT" not in get_puf_names(2015, table=file_names_table)

    def test_type_only(self, file_names_table):
        assert get_puf_names(file_type="FYC", table=file_names_table) == {
            2013: "h163", 2014: "h171", 2015: "h181",
        }

    def test_neither_returns_table(self, file_names_table):
        assert get_puf_names(table=file_names_table) is file_names_table

    def test_dash_cell_is_unknown(self, file_names_table):
        with pytest.raises(UnknownFileError, match="No PIT file released for 2015"):
            get_puf_names(2015, "PIT", table=file_names_table)

    def test_year_not_listed(self, file_names_table):
        with pytest.raises(UnknownFileError, match="latest year: 2015"):
            get_puf_names(2030, "FYC", table=file_names_table)

    def test_year_before_first_release(self, file_names_table):
        with pytest.raises(UnknownFileError):
            get_puf_names(config.FIRST_YEAR - 1, "FYC", table=file_names_table)

    def test_unknown_type(self, file_names_table):
        with pytest.raises(InvalidRequestError):
            get_puf_names(2014, "XYZ", table=file_names_table)

    def test_resolver_call_signature(self, monkeypatch, file_names_table):
        """The resolver calls name_mapper(year, type, remote) positionally."""
        import meps.puf_names as puf_names

        seen = []

        def fake_load(web=False, **kwargs):
            seen.append(web)
            return file_names_table

        monkeypatch.setattr(puf_names, "load_file_names", fake_load)
        assert get_puf_names(2014, FileType.FYC, True) == "h171"
        assert seen == [True]


class TestLoadFileNames:

    def test_explicit_path(self, tmp_path, monkeypatch):
        path = tmp_path / "names.csv"
        path.write_text(FILE_NAMES_CSV)
        monkeypatch.setenv("MEPS_FILE_NAMES_PATH", str(path))
        table = load_file_names(session=FakeSession(error=AssertionError("no web")))
        assert table.at[2014, "FYC"] == "h171"

    def test_cached_copy_used(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MEPS_FILE_NAMES_PATH", raising=False)
        (tmp_path / config.FILE_NAMES_CACHE_NAME).write_text(FILE_NAMES_CSV)
        table = load_file_names(cache_dir=str(tmp_path),
                                session=FakeSession(error=AssertionError("no web")))
        assert table.at[2013, "FYC"] == "h163"

    def test_cache_populated_on_first_use(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MEPS_FILE_NAMES_PATH", raising=False)
        session = FakeSession({config.FILE_NAMES_URL: FakeResponse(text=FILE_NAMES_CSV)})
        cache_dir = tmp_path / "cache"

        load_file_names(cache_dir=str(cache_dir), session=session)
        assert (cache_dir / config.FILE_NAMES_CACHE_NAME).exists()

        load_file_names(cache_dir=str(cache_dir), session=session)
        assert session.urls == [config.FILE_NAMES_URL], "second load served from cache"

    def test_web_always_downloads(self, tmp_path, monkeypatch):
        path = tmp_path / "names.csv"
        path.write_text("Year,FYC\n2014,stale\n")
        monkeypatch.setenv("MEPS_FILE_NAMES_PATH", str(path))
        session = FakeSession({config.FILE_NAMES_URL: FakeResponse(text=FILE_NAMES_CSV)})

        table = load_file_names(web=True, session=session)
        assert table.at[2014, "FYC"] == "h171"

    def test_download_failure(self, tmp_path, monkeypatch):
        import requests

        monkeypatch.delenv("MEPS_FILE_NAMES_PATH", raising=False)
        session = FakeSession(error=requests.ConnectionError("offline"))
        with pytest.raises(FileNamesUnavailableError, match="offline"):
            load_file_names(cache_dir=str(tmp_path), session=session)

    def test_http_error(self, tmp_path):
        session = FakeSession({config.FILE_NAMES_URL: FakeResponse(status_code=500)})
        with pytest.raises(FileNamesUnavailableError):
            load_file_names(web=True, session=session)

    def test_returns_dataframe(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MEPS_FILE_NAMES_PATH", raising=False)
        (tmp_path / config.FILE_NAMES_CACHE_NAME).write_text(FILE_NAMES_CSV)
        assert isinstance(load_file_names(cache_dir=str(tmp_path)), pd.DataFrame)
