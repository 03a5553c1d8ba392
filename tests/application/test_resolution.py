"""Resolution algorithm tests: explicit values, defaults, inheritance, mandatory values.

The scenarios follow the behaviour operators rely on when declaring schemas:
the nearest explicit value wins, defaults are validated like user input, and
mandatory settings never fall back to an ancestor's literal default.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from lib_typed_settings import (
    BYTES,
    DURATION,
    INTEGER,
    MANDATORY,
    NO_DEFAULT,
    NORMALIZED_RELATIVE_URI,
    PATH,
    STRING,
    CyclicInheritanceError,
    InvalidSettingError,
    MappingLookup,
    base_path,
    in_range,
    is_file,
    list_of,
    matches,
    maximum,
    minimum,
    setting,
)


def config(**entries: str) -> MappingLookup:
    return MappingLookup(entries)


def lookup(entries: dict[str, str]) -> MappingLookup:
    return MappingLookup(entries)


def test_integer() -> None:
    foo = setting("foo", INTEGER, "3")
    assert foo.resolve(config(foo="4")) == 4
    with pytest.raises(InvalidSettingError) as excinfo:
        foo.resolve(config(foo="bar"))
    assert excinfo.value.name == "foo"
    assert excinfo.value.value == "bar"


def test_list() -> None:
    assert setting("foo", list_of(",", INTEGER), "1,2,3,4").resolve(config()) == [1, 2, 3, 4]
    assert setting("foo", list_of(",", INTEGER), "1,2,3,4,").resolve(config()) == [1, 2, 3, 4]
    assert setting("foo", list_of(",", INTEGER), "").resolve(config()) == []


def test_min() -> None:
    foo = setting("foo", INTEGER, "3", minimum(2))
    assert foo.resolve(config(foo="4")) == 4
    with pytest.raises(InvalidSettingError, match="minimum allowed value is 2"):
        foo.resolve(config(foo="1"))


def test_max() -> None:
    foo = setting("foo", INTEGER, "3", maximum(5))
    assert foo.resolve(config(foo="4")) == 4
    with pytest.raises(InvalidSettingError):
        foo.resolve(config(foo="7"))


def test_range() -> None:
    foo = setting("foo", INTEGER, "3", in_range(2, 5))
    assert foo.resolve(config(foo="4")) == 4
    assert foo.resolve(config(foo="2")) == 2
    assert foo.resolve(config(foo="5")) == 5
    for bad in ("1", "6"):
        with pytest.raises(InvalidSettingError):
            foo.resolve(config(foo=bad))


def test_matches() -> None:
    foo = setting("foo", STRING, "abc", matches("a*b*c*"))
    assert foo.resolve(config(foo="aaabbbccc")) == "aaabbbccc"
    with pytest.raises(InvalidSettingError):
        foo.resolve(config(foo="cba"))


def test_duration_with_broken_default() -> None:
    """A default below the minimum fails even though nobody set the value."""

    foo_bar = setting("foo.bar", DURATION, "1s", minimum(DURATION("3s")))
    with pytest.raises(InvalidSettingError) as excinfo:
        foo_bar.resolve(config())
    assert excinfo.value.value == "1s"


def test_duration_with_value_not_within_constraint() -> None:
    foo_bar = setting("foo.bar", DURATION, "3s", minimum(DURATION("3s")))
    with pytest.raises(InvalidSettingError):
        foo_bar.resolve(lookup({"foo.bar": "2s"}))


def test_duration() -> None:
    foo_bar = setting("foo.bar", DURATION, "3s", minimum(DURATION("3s")))
    assert foo_bar.resolve(lookup({"foo.bar": "4s"})) == 4000
    assert foo_bar.resolve(config()) == 3000


def test_default() -> None:
    assert setting("foo", INTEGER, "3").resolve(config()) == 3


def test_mandatory() -> None:
    foo = setting("foo", INTEGER, MANDATORY)
    with pytest.raises(InvalidSettingError, match="mandatory setting is missing"):
        foo.resolve(config())
    assert foo.resolve(config(foo="9")) == 9


def test_no_default_resolves_to_none_and_skips_constraints() -> None:
    foo = setting("foo", INTEGER, NO_DEFAULT, minimum(10))
    assert foo.resolve(config()) is None
    assert foo.trace(config()).source == "unset"


def test_paths() -> None:
    home = setting("home", PATH, ".")
    conf = setting("config", PATH, "config.properties", base_path(home), is_file)
    assert conf.resolve(config()) == (Path(".") / "config.properties").absolute()


def test_paths_follow_overridden_base(tmp_path: Path) -> None:
    home = setting("home", PATH, ".")
    conf = setting("config", PATH, "config.properties", base_path(home))
    assert conf.resolve(config(home=str(tmp_path))) == tmp_path / "config.properties"


def test_inherit_one_level() -> None:
    root = setting("root", INTEGER, "4")
    foo = setting("foo", INTEGER, root)
    assert foo.resolve(config(foo="1")) == 1
    assert foo.resolve(config()) == 4
    assert foo.resolve(config(root="6")) == 6


def test_inherit_hierarchy() -> None:
    a = setting("A", STRING, "A")
    b = setting("B", STRING, "B", inherits=a)
    c = setting("C", STRING, "C", inherits=b)
    d = setting("D", STRING, b)
    e = setting("E", STRING, d)

    assert c.resolve(lookup({"C": "X"})) == "X"
    assert c.resolve(lookup({"B": "X"})) == "X"
    assert c.resolve(lookup({"A": "X"})) == "X"
    assert c.resolve(lookup({"A": "Y", "B": "X"})) == "X"
    assert c.resolve(lookup({})) == "C"

    assert d.resolve(lookup({})) == "B"
    assert e.resolve(lookup({})) == "B"
    assert e.resolve(lookup({"A": "Z"})) == "Z"
    assert e.resolve(lookup({"D": "W", "A": "Z"})) == "W"


def test_mandatory_applies_to_inherited() -> None:
    x = setting("X", STRING, NO_DEFAULT)
    y = setting("Y", STRING, MANDATORY, inherits=x)

    with pytest.raises(ValueError):
        y.resolve(lookup({}))
    assert y.resolve(lookup({"X": "from parent"})) == "from parent"


def test_mandatory_is_not_satisfied_by_ancestor_default() -> None:
    parent = setting("parent", STRING, "fallback")
    child = setting("child", STRING, MANDATORY, inherits=parent)
    with pytest.raises(InvalidSettingError, match="mandatory setting is missing"):
        child.resolve(lookup({}))


def test_mandatory_ancestor_without_value_fails_descendants() -> None:
    required = setting("required", STRING, MANDATORY)
    child = setting("child", STRING, "own default", inherits=required)
    with pytest.raises(InvalidSettingError, match="inherits from mandatory setting 'required'"):
        child.resolve(lookup({}))
    assert child.resolve(lookup({"required": "ok"})) == "ok"
    assert child.resolve(lookup({"child": "mine"})) == "mine"


def test_inherited_value_is_validated_by_child_constraints() -> None:
    parent = setting("parent", INTEGER, "100")
    child = setting("child", INTEGER, parent, maximum(10))
    with pytest.raises(InvalidSettingError) as excinfo:
        child.resolve(lookup({}))
    assert excinfo.value.name == "child"
    assert child.resolve(lookup({"parent": "5"})) == 5


def test_logical_log_rotation_threshold() -> None:
    threshold = setting("logical_log_rotation_threshold", BYTES, "25M")
    default_value = threshold.resolve(lookup({}))
    mega_value = threshold.resolve(lookup({threshold.name: "10M"}))
    giga_value = threshold.resolve(lookup({threshold.name: "10g"}))

    assert default_value > 0
    assert mega_value == 10 * 1024 * 1024
    assert giga_value == 10 * 1024 * 1024 * 1024


def test_normalized_relative_uri() -> None:
    uri = setting("mySetting", NORMALIZED_RELATIVE_URI, "http://localhost:7474///db///data///")
    assert uri.resolve(lookup({})) == "/db/data"


def test_trace_reports_provenance() -> None:
    a = setting("A", STRING, "A")
    b = setting("B", STRING, "B", inherits=a)

    explicit = b.trace(lookup({"B": "x"}))
    inherited = b.trace(lookup({"A": "y"}))
    default = b.trace(lookup({}))

    assert (explicit.raw, explicit.source, explicit.key) == ("x", "explicit", "B")
    assert (inherited.raw, inherited.source, inherited.key) == ("y", "inherited", "A")
    assert (default.raw, default.source, default.key) == ("B", "default", "B")


def test_cyclic_inheritance_fails_fast() -> None:
    a = setting("a", STRING, NO_DEFAULT)
    b = setting("b", STRING, NO_DEFAULT, inherits=a)
    object.__setattr__(a, "inherits", b)

    with pytest.raises(CyclicInheritanceError) as excinfo:
        a.resolve(lookup({}))
    assert excinfo.value.chain == ("a", "b", "a")
    assert a.resolve(lookup({"a": "found before the loop"})) == "found before the loop"


def test_settings_are_reusable_across_lookups() -> None:
    foo = setting("foo", INTEGER, "3", minimum(0))
    first = lookup({"foo": "1"})
    second = lookup({"foo": "2"})
    assert [foo.resolve(first), foo.resolve(second), foo.resolve(first)] == [1, 2, 1]


def test_no_default_child_falls_back_to_parent_default() -> None:
    a = setting("A", STRING, "A")
    z = setting("Z", STRING, NO_DEFAULT, inherits=a)
    d = setting("D", STRING, a)

    assert z.resolve(lookup({})) == d.resolve(lookup({})) == "A"
    assert z.resolve(lookup({"A": "X"})) == "X"
    assert z.resolve(lookup({"Z": "Y", "A": "X"})) == "Y"
    fallback = z.trace(lookup({}))
    assert (fallback.raw, fallback.source, fallback.key) == ("A", "default", "A")


def test_no_default_chain_without_any_default_stays_unset() -> None:
    x = setting("X", STRING, NO_DEFAULT)
    y = setting("Y", STRING, NO_DEFAULT, inherits=x)
    assert y.resolve(lookup({})) is None
    assert y.trace(lookup({})).source == "unset"


def test_resolve_traced_pairs_value_with_provenance() -> None:
    parent = setting("parent", INTEGER, "4")
    child = setting("child", INTEGER, parent, minimum(0))

    value, resolution = child.resolve_traced(lookup({"parent": "7"}))
    assert value == 7
    assert (resolution.source, resolution.key) == ("inherited", "parent")

    with pytest.raises(InvalidSettingError):
        child.resolve_traced(lookup({"child": "-1"}))
