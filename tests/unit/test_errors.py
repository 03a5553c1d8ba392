from __future__ import annotations

from lib_typed_settings.domain.errors import (
    CyclicInheritanceError,
    InvalidSettingError,
    SettingsError,
    ValidationError,
)


def test_error_hierarchy() -> None:
    assert issubclass(InvalidSettingError, SettingsError)
    assert issubclass(InvalidSettingError, ValueError)
    assert issubclass(CyclicInheritanceError, InvalidSettingError)
    assert issubclass(ValidationError, SettingsError)


def test_invalid_setting_carries_context() -> None:
    error = InvalidSettingError("foo", "bar", "invalid integer value")
    assert (error.name, error.value, error.reason) == ("foo", "bar", "invalid integer value")
    assert str(error) == "Bad value 'bar' for setting 'foo': invalid integer value"
    missing = InvalidSettingError("foo", None, "mandatory setting is missing")
    assert str(missing) == "Missing value for setting 'foo': mandatory setting is missing"


def test_cycle_and_aggregate_messages() -> None:
    cycle = CyclicInheritanceError("a", ["a", "b", "a"])
    assert cycle.chain == ("a", "b", "a")
    assert "a -> b -> a" in str(cycle)

    aggregate = ValidationError([InvalidSettingError("x", "1", "too small"), cycle])
    assert len(aggregate.errors) == 2
    assert str(aggregate).startswith("2 invalid setting(s):")
    assert "Bad value '1' for setting 'x': too small" in str(aggregate)
