"""Tests for domain exceptions (error_code, message, details)."""

import pytest

from cmscore.domain.exceptions import (
    CmsCoreException,
    InvalidArgumentException,
    InvalidFieldException,
    InvalidFilterException,
    InvalidRelationException,
    UnknownModelException,
    UnsupportedConnectiveException,
)


def test_base_exception_default_error_code() -> None:
    """Base CmsCoreException uses class name as error_code when not provided."""
    exc = CmsCoreException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "CmsCoreException"
    assert exc.details == {}
    assert str(exc) == "Something failed"


def test_base_exception_to_dict() -> None:
    exc = CmsCoreException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {
        "error": "CUSTOM",
        "message": "Oops",
        "details": {"key": "value"},
    }


def test_invalid_argument_with_and_without_argument() -> None:
    assert InvalidArgumentException("bad", "limit").details == {"argument": "limit"}
    assert InvalidArgumentException("bad").details == {}


@pytest.mark.parametrize(
    ("exc", "error_code", "details"),
    [
        (UnsupportedConnectiveException("OR"), "NOT_IMPLEMENTED", {"connective": "OR"}),
        (UnknownModelException("Nope"), "UNKNOWN_MODEL", {"model": "Nope"}),
        (
            InvalidRelationException("Article", "publisher"),
            "INVALID_RELATION",
            {"model": "Article", "relation": "publisher"},
        ),
        (
            InvalidFieldException("Article", "subtitle"),
            "INVALID_FIELD",
            {"model": "Article", "field": "subtitle"},
        ),
        (InvalidFilterException("bad", "title"), "INVALID_FILTER", {"filter": "title"}),
    ],
)
def test_subclass_codes_and_details(exc: CmsCoreException, error_code: str, details: dict) -> None:
    assert isinstance(exc, CmsCoreException)
    assert exc.error_code == error_code
    assert exc.details == details


def test_messages_name_the_offender() -> None:
    assert "OR" in UnsupportedConnectiveException("OR").message
    assert "publisher" in InvalidRelationException("Article", "publisher").message
