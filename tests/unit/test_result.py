"""Test the Result type and precondition helpers."""

import pytest

from kaisha.core.errors import InvalidShareCount, NoSharesIssued
from kaisha.core.result import Result, first_error, require


class TestConstruction:
    def test_ok_carries_value(self):
        r = Result.ok(42)
        assert r.is_ok()
        assert not r.is_err()
        assert r.value == 42

    def test_err_carries_error(self):
        r = Result.err("boom")
        assert r.is_err()
        assert r.error == "boom"

    def test_value_on_err_raises(self):
        with pytest.raises(ValueError):
            Result.err("boom").value

    def test_error_on_ok_raises(self):
        with pytest.raises(ValueError):
            Result.ok(1).error

    def test_repr(self):
        assert repr(Result.ok(1)) == "Ok(1)"
        assert repr(Result.err("x")) == "Err('x')"


class TestUnwrap:
    def test_unwrap_ok(self):
        assert Result.ok("v").unwrap() == "v"

    def test_unwrap_raises_carried_exception(self):
        with pytest.raises(NoSharesIssued):
            Result.err(NoSharesIssued()).unwrap()

    def test_unwrap_non_exception_raises_value_error(self):
        with pytest.raises(ValueError, match="plain message"):
            Result.err("plain message").unwrap()

    def test_unwrap_or(self):
        assert Result.ok(1).unwrap_or(0) == 1
        assert Result.err("x").unwrap_or(0) == 0


class TestCombinators:
    def test_map_transforms_ok(self):
        assert Result.ok(2).map(lambda x: x * 10).value == 20

    def test_map_skips_err(self):
        r = Result.err("e").map(lambda x: x * 10)
        assert r.error == "e"

    def test_map_err_wraps_message(self):
        r = Result.err("bad").map_err(InvalidShareCount)
        assert r.error == InvalidShareCount("bad")

    def test_map_err_skips_ok(self):
        assert Result.ok(3).map_err(InvalidShareCount).value == 3

    def test_and_then_chains(self):
        def half(x: int) -> Result:
            return Result.ok(x // 2) if x % 2 == 0 else Result.err("odd")

        assert Result.ok(8).and_then(half).and_then(half).value == 2
        assert Result.ok(6).and_then(half).and_then(half).error == "odd"


class TestRequire:
    def test_require_true(self):
        assert require(True, "never").is_ok()

    def test_require_false(self):
        assert require(False, "failed").error == "failed"

    def test_first_error_returns_first_failure(self):
        r = first_error(require(True, "a"), require(False, "b"), require(False, "c"))
        assert r.error == "b"

    def test_first_error_all_pass(self):
        assert first_error(require(True, "a"), require(True, "b")).is_ok()
