"""Group extraction tests: discovery by pattern, numeric ordering, prefixed views."""

from __future__ import annotations

import re

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_typed_settings import (
    INTEGER,
    MANDATORY,
    STRING,
    ConfigGroup,
    InvalidSettingError,
    MappingLookup,
    PrefixedLookup,
    group,
    setting,
)

NAME = setting("name", STRING, MANDATORY)
INSTRUMENT = setting("instrument", STRING, MANDATORY)


def test_should_handle_setting_groups() -> None:
    the_group = group("dbms.mygroup")
    lookup = MappingLookup(
        {
            "dbms.mygroup.1000.name": "Bob Dylan",
            "dbms.mygroup.1000.instrument": "Harmonica",
        }
    )

    groups = the_group.resolve(lookup)

    assert len(groups) == 1
    found = groups[0]
    assert isinstance(found, ConfigGroup)
    assert found.index == 1000
    assert found.get(NAME) == "Bob Dylan"
    assert found.get(INSTRUMENT) == "Harmonica"


def test_groups_are_ordered_by_numeric_index() -> None:
    lookup = MappingLookup(
        {
            "band.10.name": "Ten",
            "band.2.name": "Two",
            "band.2.instrument": "Drums",
            "band.33.name": "Thirty-three",
        }
    )
    groups = group("band").resolve(lookup)
    assert [found.index for found in groups] == [2, 10, 33]
    assert [found.get(NAME) for found in groups] == ["Two", "Ten", "Thirty-three"]


def test_no_matches_yields_empty_list() -> None:
    lookup = MappingLookup({"band.name": "not indexed", "other.1.name": "elsewhere", "band.x.name": "nope"})
    assert group("band").resolve(lookup) == []


def test_prefix_is_matched_literally() -> None:
    lookup = MappingLookup({"dbmsXmygroup.1.name": "dot is not a wildcard"})
    assert group("dbms.mygroup").resolve(lookup) == []


def test_missing_mandatory_fails_only_on_get() -> None:
    lookup = MappingLookup({"band.1.name": "Joan Baez"})
    (found,) = group("band").resolve(lookup)
    assert found.get(NAME) == "Joan Baez"
    with pytest.raises(InvalidSettingError) as excinfo:
        found.get(INSTRUMENT)
    assert excinfo.value.name == "instrument"


def test_group_members_use_defaults_and_constraints() -> None:
    port = setting("port", INTEGER, "7474")
    lookup = MappingLookup({"server.1.port": "7687", "server.2.host": "b"})
    first, second = group("server").resolve(lookup)
    assert first.get(port) == 7687
    assert second.get(port) == 7474


def test_as_dict_exposes_group_entries() -> None:
    lookup = MappingLookup({"band.1.name": "Bob", "band.1.instrument": "Harmonica", "band.2.name": "Joan"})
    first, _ = group("band").resolve(lookup)
    assert first.as_dict() == {"name": "Bob", "instrument": "Harmonica"}
    assert first.key == "1"
    assert first.prefix == "band"


def test_nested_groups() -> None:
    lookup = MappingLookup(
        {
            "cluster.1.member.1.host": "a",
            "cluster.1.member.2.host": "b",
            "cluster.2.member.5.host": "c",
        }
    )
    host = setting("host", STRING, MANDATORY)
    clusters = group("cluster").resolve(lookup)
    members = [[m.get(host) for m in group("member").resolve(c.lookup)] for c in clusters]
    assert members == [["a", "b"], ["c"]]


def test_prefixed_lookup_delegates_without_copying() -> None:
    lookup = MappingLookup({"band.7.name": "Bob", "band.8.name": "Joan"})
    view = PrefixedLookup(lookup, "band.7.")
    assert view.get("name") == "Bob"
    assert view.get("band.8.name") is None
    assert view.find(re.compile("n.*")) == [("name", "Bob")]


def test_prefixed_lookup_find_accepts_inline_flags_and_anchors() -> None:
    lookup = MappingLookup({"band.7.name": "Bob", "band.7.instrument": "harmonica", "band.8.name": "Joan"})
    view = PrefixedLookup(lookup, "band.7.")
    assert view.find(re.compile("(?i)NAME")) == [("name", "Bob")]
    assert view.find(re.compile("^inst.*$")) == [("instrument", "harmonica")]
    assert view.find(re.compile("band.*")) == []


@given(st.sets(st.integers(min_value=0, max_value=10_000), max_size=8))
def test_every_index_is_discovered_once(indices: set[int]) -> None:
    entries = {f"grp.{index}.name": f"member-{index}" for index in indices}
    entries.update({f"grp.{index}.instrument": "kazoo" for index in indices})
    groups = group("grp").resolve(MappingLookup(entries))
    assert [found.index for found in groups] == sorted(indices)
    assert all(found.get(NAME) == f"member-{found.index}" for found in groups)
