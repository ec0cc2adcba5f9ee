"""Tests for the EnviroGeo exception hierarchy."""

from __future__ import annotations

import pytest

from envirogeo.exceptions import (
    ConfigurationError,
    EnviroGeoError,
    InputError,
    ProviderError,
    StoreError,
)

ALL_EXCEPTION_CLASSES = [
    EnviroGeoError,
    ConfigurationError,
    InputError,
    ProviderError,
    StoreError,
]

SUBCLASS_EXCEPTION_CLASSES = [
    ConfigurationError,
    InputError,
    ProviderError,
    StoreError,
]


@pytest.mark.unit
class TestExceptionInheritance:
    """Verify the exception inheritance chain."""

    def test_base_inherits_from_exception(self) -> None:
        assert issubclass(EnviroGeoError, Exception)

    @pytest.mark.parametrize(
        "exc_cls",
        SUBCLASS_EXCEPTION_CLASSES,
        ids=lambda c: c.__name__,
    )
    def test_subclass_inherits_from_base(self, exc_cls: type[EnviroGeoError]) -> None:
        assert issubclass(exc_cls, EnviroGeoError)

    @pytest.mark.parametrize(
        "exc_cls",
        SUBCLASS_EXCEPTION_CLASSES,
        ids=lambda c: c.__name__,
    )
    def test_caught_by_base(self, exc_cls: type[EnviroGeoError]) -> None:
        with pytest.raises(EnviroGeoError):
            raise exc_cls(what="boom")


@pytest.mark.unit
class TestThreePartMessage:
    """Verify the three-part message pattern (what, cause, fix)."""

    @pytest.mark.parametrize(
        "exc_cls",
        ALL_EXCEPTION_CLASSES,
        ids=lambda c: c.__name__,
    )
    def test_full_message(self, exc_cls: type[EnviroGeoError]) -> None:
        exc = exc_cls(what="Operation failed", cause="Bad input", fix="Check your data")
        lines = str(exc).split("\n")
        assert lines == ["Operation failed", "Cause: Bad input", "Fix: Check your data"]

    def test_what_only_message(self) -> None:
        assert str(StoreError(what="Unknown action: explode")) == "Unknown action: explode"

    def test_message_omits_empty_cause(self) -> None:
        msg = str(InputError(what="No area selected", fix="Draw a shape"))
        assert "Cause:" not in msg
        assert "Fix: Draw a shape" in msg

    def test_attributes_stored(self) -> None:
        exc = ProviderError(what="W", cause="C", fix="F")
        assert (exc.what, exc.cause, exc.fix) == ("W", "C", "F")

    def test_default_cause_and_fix_are_empty(self) -> None:
        exc = EnviroGeoError(what="W")
        assert exc.cause == ""
        assert exc.fix == ""
