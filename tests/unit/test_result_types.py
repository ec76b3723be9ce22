"""Unit tests for Ok/Err result types."""

import pytest

from hr_analytics.core.result_types import Err, Ok


class TestOk:
    def test_accessors(self) -> None:
        result = Ok([1, 2])

        assert result.is_ok()
        assert not result.is_err()
        assert result.ok_value == [1, 2]
        assert result.err_value is None


class TestErr:
    def test_accessors(self) -> None:
        result = Err("boom")

        assert result.is_err()
        assert not result.is_ok()
        assert result.err_value == "boom"
        assert result.ok_value is None

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Err("boom").error = "other"  # type: ignore[misc]
