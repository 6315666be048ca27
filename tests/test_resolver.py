"""Tests for meps/resolver.py."""

import pytest

from meps.dataset_request import ByIdentifier, ByYearType, FileType, make_request
from meps.errors import InvalidRequestError
from meps.resolver import resolve


class TestResolve:

    def test_identifier_passthrough(self, name_mapper):
        assert resolve(ByIdentifier("h171"), name_mapper) == "h171"
        assert name_mapper.calls == []

    def test_identifier_not_normalized(self, name_mapper):
        """Case and extension are left for the selector."""
        assert resolve(ByIdentifier("H171.ssp"), name_mapper) == "H171.ssp"

    def test_year_type_delegates(self, name_mapper):
        result = resolve(ByYearType(2014, FileType.FYC), name_mapper, remote=True)
        assert result == "h171"
        assert name_mapper.calls == [(2014, FileType.FYC, True)]

    def test_remote_flag_forwarded(self, name_mapper):
        resolve(make_request(year=2013, file_type="OB"), name_mapper, remote=False)
        assert name_mapper.calls == [(2013, FileType.OB, False)]

    def test_mapper_result_coerced_to_str(self):
        class Code:
            def __str__(self):
                return "h163"

        assert resolve(ByYearType(2013, FileType.FYC), lambda y, t, r: Code()) == "h163"

    def test_non_request_rejected(self):
        with pytest.raises(InvalidRequestError):
            resolve(None)
