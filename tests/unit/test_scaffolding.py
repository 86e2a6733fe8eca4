"""Tests for default search filters, scaffolded fields and contexts."""

from sqlalchemy import Date, Integer, String

from cmscore.forms import CheckboxField, DateField, DropdownField, NumericField, TextField
from cmscore.orm.filters import (
    ExactMatchFilter,
    GreaterThanOrEqualFilter,
    PartialMatchFilter,
)
from cmscore.orm.search import (
    SearchContext,
    default_search_context,
    default_search_filters,
    scaffold_search_fields,
)
from cmscore.orm.search.scaffolding import default_filter_kind, form_field_for
from cmscore.orm.filters import FilterKind
from tests.models import Article, Author, Comment


def test_default_filters_follow_declarations() -> None:
    filters = {f.get_full_name(): f for f in default_search_filters(Article)}
    assert list(filters) == ["title", "status", "views", "author.name"]
    assert isinstance(filters["title"], PartialMatchFilter)
    assert isinstance(filters["status"], ExactMatchFilter)
    assert isinstance(filters["views"], GreaterThanOrEqualFilter)
    assert isinstance(filters["author.name"], PartialMatchFilter)


def test_default_filters_without_declarations_use_plain_columns() -> None:
    filters = {f.get_full_name(): f for f in default_search_filters("Author")}
    assert list(filters) == ["name", "email"]
    assert all(isinstance(f, PartialMatchFilter) for f in filters.values())
    comment_filters = [f.get_full_name() for f in default_search_filters(Comment)]
    assert comment_filters == ["body"]


def test_default_filter_kind() -> None:
    assert default_filter_kind(String(10)) is FilterKind.PARTIAL_MATCH
    assert default_filter_kind(Integer()) is FilterKind.EXACT_MATCH
    assert default_filter_kind(Date()) is FilterKind.EXACT_MATCH


def test_scaffolded_field_types_and_titles() -> None:
    fields = scaffold_search_fields(Article)
    assert fields.names() == ["title", "status", "views", "author__name"]
    title = fields.field_by_name("title")
    assert isinstance(title, TextField)
    assert title.max_length == 200
    status = fields.field_by_name("status")
    assert isinstance(status, DropdownField)
    assert status.title == "State"
    assert status.source == {"draft": "draft", "published": "published"}
    assert isinstance(fields.field_by_name("views"), NumericField)
    assert fields.field_by_name("author__name").title == "Author name"


def test_form_field_for_column_types() -> None:
    assert isinstance(form_field_for("featured", Article.featured.type), CheckboxField)
    assert isinstance(form_field_for("published_on", Article.published_on.type), DateField)
    assert isinstance(form_field_for("body", Article.body.type), TextField)
    assert form_field_for("body", Article.body.type).max_length is None


def test_default_search_context() -> None:
    context = default_search_context("Article")
    assert isinstance(context, SearchContext)
    assert context.model_class is Article
    assert set(context.get_filters()) == {"title", "status", "views", "author.name"}
    sql = context.get_results({"author__name": "ann", "views": "5"}).sql()
    assert "lower(rel_author.name) LIKE lower('%ann%')" in sql
    assert "article.views >= '5'" in sql or "article.views >= 5" in sql


def test_default_context_for_model_without_declarations() -> None:
    context = default_search_context(Author)
    assert context.get_fields().names() == ["name", "email"]
