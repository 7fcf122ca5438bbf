"""Tests for dburl.result: Ok/Err envelope."""

from __future__ import annotations

import pytest

from dburl.errors import ConfigKeyError
from dburl.result import Err, Ok, from_optional


class TestOk:
    def test_inspection(self):
        ok = Ok("sqlite://")
        assert ok.is_ok()
        assert not ok.is_err()
        assert ok.unwrap() == "sqlite://"
        assert ok.unwrap_or("default") == "sqlite://"

    def test_map_and_flat_map(self):
        assert Ok("a").map(str.upper) == Ok("A")
        assert Ok("a").flat_map(lambda v: Err(ValueError(v))).is_err()

    def test_err_side_is_noop(self):
        ok = Ok(1)
        assert ok.map_err(lambda e: RuntimeError()) is ok
        assert ok.or_else(lambda e: Ok(2)) is ok
        assert ok.inspect_err(lambda e: pytest.fail("called")) is ok

    def test_pattern_matching(self):
        match Ok("url"):
            case Ok(value):
                assert value == "url"
            case _:
                pytest.fail("expected Ok")

    def test_to_dict(self):
        assert Ok("url").to_dict() == {"ok": True, "value": "url"}


class TestErr:
    def test_unwrap_raises(self):
        with pytest.raises(ValueError, match="boom"):
            Err(ValueError("boom")).unwrap()

    def test_recovery(self):
        err = Err(ValueError("boom"))
        assert err.unwrap_or("default") == "default"
        assert err.unwrap_or_else(lambda e: str(e)) == "boom"
        assert err.or_else(lambda e: Ok("fallback")) == Ok("fallback")

    def test_map_passes_error_through(self):
        error = ValueError("boom")
        assert Err(error).map(str.upper).error is error
        assert Err(error).flat_map(lambda v: Ok(v)).error is error

    def test_map_err(self):
        wrapped = Err(ValueError("raw")).map_err(lambda e: RuntimeError(f"wrapped: {e}"))
        assert str(wrapped.error) == "wrapped: raw"

    def test_inspect_err(self):
        seen: list[Exception] = []
        Err(ValueError("x")).inspect_err(seen.append)
        assert len(seen) == 1

    def test_to_dict_dburl_error(self):
        payload = Err(ConfigKeyError("database.url")).to_dict()
        assert payload["ok"] is False
        assert payload["error"]["error_type"] == "ConfigKeyError"
        assert payload["error"]["message"] == "configuration property database.url is not defined"

    def test_to_dict_plain_exception(self):
        assert Err(KeyError("k")).to_dict()["error"]["error_type"] == "KeyError"


class TestHelpers:
    def test_from_optional(self):
        error = ConfigKeyError("k")
        assert from_optional("v", error) == Ok("v")
        assert from_optional(None, error).error is error
        assert from_optional("", error) == Ok("")
