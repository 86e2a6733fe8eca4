"""Tests for FieldPath parsing of dotted names and request parameter keys."""

import pytest

from cmscore.orm.field_path import FieldPath


def test_from_dotted() -> None:
    path = FieldPath.from_dotted("author.name")
    assert path.segments == ("author", "name")
    assert path.field == "name"
    assert path.relation == ("author",)
    assert path.is_relation
    assert path.dotted == "author.name"
    assert path.param == "author__name"
    assert str(path) == "author.name"


def test_plain_field() -> None:
    path = FieldPath.from_dotted("title")
    assert path.relation == ()
    assert not path.is_relation
    assert path.param == "title"


def test_from_param_keeps_single_underscores() -> None:
    assert FieldPath.from_param("author__first_name").segments == ("author", "first_name")
    assert FieldPath.from_param("first_name").segments == ("first_name",)


def test_from_param_multi_level() -> None:
    path = FieldPath.from_param("comments__author__name")
    assert path.relation == ("comments", "author")
    assert path.dotted == "comments.author.name"


@pytest.mark.parametrize("key", ["", "__name", "author__", "a____b", "author.name", "  "])
def test_malformed_params_rejected(key: str) -> None:
    with pytest.raises(ValueError):
        FieldPath.from_param(key)
    assert FieldPath.try_from_param(key) is None


@pytest.mark.parametrize("name", ["", "author.", ".name", "a..b"])
def test_malformed_dotted_rejected(name: str) -> None:
    with pytest.raises(ValueError):
        FieldPath.from_dotted(name)


def test_coerce_passes_through_instances() -> None:
    path = FieldPath(("title",))
    assert FieldPath.coerce(path) is path
    assert FieldPath.coerce("author.name") == FieldPath(("author", "name"))


def test_round_trip_between_forms() -> None:
    path = FieldPath.from_dotted("comments.author.name")
    assert FieldPath.from_param(path.param) == path


def test_hashable_and_frozen() -> None:
    path = FieldPath.from_dotted("title")
    assert {path: 1}[FieldPath(("title",))] == 1
    with pytest.raises(AttributeError):
        path.segments = ("other",)  # type: ignore[misc]


@pytest.mark.parametrize("key", ["author.name", "author__name"])
def test_try_from_key_accepts_both_forms(key: str) -> None:
    assert FieldPath.try_from_key(key) == FieldPath(("author", "name"))


@pytest.mark.parametrize("key", ["", "author.", "a..b", "__name", "author__"])
def test_try_from_key_rejects_malformed(key: str) -> None:
    assert FieldPath.try_from_key(key) is None
