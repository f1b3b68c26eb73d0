"""
Tests for the subtypesurv exception hierarchy.
"""

import pytest

from subtypesurv.core.exceptions import (
    DimensionError,
    SubtypeSurvError,
    ValidationError,
)


class TestInheritance:
    """Every exception is catchable via SubtypeSurvError."""

    def test_validation_error_is_base_error(self):
        with pytest.raises(SubtypeSurvError):
            raise ValidationError("bad input")

    def test_dimension_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise DimensionError("wrong length")

    def test_base_is_exception(self):
        assert issubclass(SubtypeSurvError, Exception)


class TestAttributes:

    def test_field_default_none(self):
        err = ValidationError("bad input")
        assert err.field is None
        assert str(err) == "bad input"

    def test_field_recorded(self):
        err = DimensionError("C1.survival: too short", field="C1.survival")
        assert err.field == "C1.survival"
        assert "too short" in str(err)
