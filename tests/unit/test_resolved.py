from __future__ import annotations

import pytest

from lib_typed_settings import INTEGER, setting
from lib_typed_settings.domain.resolved import EMPTY_SETTINGS, ResolvedSettings, SourceInfo


def make_resolved() -> ResolvedSettings:
    values = {"dbms.port": 7474, "dbms.host": "localhost"}
    meta = {
        "dbms.port": SourceInfo(setting="dbms.port", source="default", key="dbms.port"),
        "dbms.host": SourceInfo(setting="dbms.host", source="explicit", key="dbms.host"),
    }
    return ResolvedSettings(values, meta)


def test_mapping_interface() -> None:
    resolved = make_resolved()
    assert resolved["dbms.port"] == 7474
    assert "dbms.host" in resolved
    assert len(resolved) == 2
    assert sorted(resolved) == ["dbms.host", "dbms.port"]


def test_setting_objects_are_accepted_as_keys() -> None:
    resolved = make_resolved()
    port = setting("dbms.port", INTEGER, "7474")
    assert resolved[port] == 7474
    assert port in resolved
    assert resolved.get(port) == 7474
    assert resolved.origin(port) == {"setting": "dbms.port", "source": "default", "key": "dbms.port"}


def test_values_are_read_only() -> None:
    source = {"dbms.port": 7474}
    resolved = ResolvedSettings(source, {})
    source["dbms.port"] = 1
    assert resolved["dbms.port"] == 7474
    copy = resolved.as_dict()
    copy["dbms.port"] = 2
    assert resolved["dbms.port"] == 7474
    with pytest.raises(TypeError):
        resolved._values["dbms.port"] = 3  # type: ignore[index]


def test_empty_settings() -> None:
    assert len(EMPTY_SETTINGS) == 0
    assert EMPTY_SETTINGS.origin("anything") is None
