"""Tests for ResponseRenderer, writers, directors and requirements."""

import logging

import pytest
from starlette.requests import Request

from cmscore.control.director import RequestDirector, StaticDirector
from cmscore.control.http_response import HTTPResponse
from cmscore.control.rendering import FriendlyErrorFormatter, ResponseRenderer
from cmscore.control.requirements import Requirements
from cmscore.control.writers import BufferedResponseWriter


def _renderer(environment_type: str = "dev", *, ajax: bool = False, requirements=None):
    return ResponseRenderer(
        director=StaticDirector("http://example.com/site", environment_type, ajax=ajax),
        error_formatter=FriendlyErrorFormatter("Example"),
        requirements=requirements,
    )


def _request(query_string: bytes = b"", headers: list | None = None) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "scheme": "http",
            "server": ("testserver", 80),
            "root_path": "",
            "path": "/admin/pages",
            "query_string": query_string,
            "headers": headers or [],
        }
    )


# --- Rendering ---


def test_render_sends_status_headers_and_body() -> None:
    writer = BufferedResponseWriter()
    response = HTTPResponse("<p>hi</p>", 201).add_header("X-Test", "yes")
    _renderer().render(response, writer)
    assert writer.status_line == "HTTP/1.1 201 Created"
    assert writer.get_header("content-type") == "text/html; charset=utf-8"
    assert writer.get_header("X-Test") == "yes"
    assert writer.body == "<p>hi</p>"


def test_render_quotes_etag() -> None:
    writer = BufferedResponseWriter()
    _renderer().render(HTTPResponse().add_header("ETag", "abc123"), writer)
    assert writer.get_header("ETag") == '"abc123"'


def test_render_keeps_quoted_etag() -> None:
    writer = BufferedResponseWriter()
    _renderer().render(HTTPResponse().add_header("ETag", '"abc"'), writer)
    assert writer.get_header("ETag") == '"abc"'


def test_render_status_description_is_single_line() -> None:
    writer = BufferedResponseWriter()
    response = HTTPResponse().set_status_description("OK\r\nX-Evil: 1")
    _renderer().render(response, writer)
    assert writer.status_line == "HTTP/1.1 200 OKX-Evil: 1"


def test_live_error_without_body_uses_friendly_page() -> None:
    writer = BufferedResponseWriter()
    _renderer("live").render(HTTPResponse(status_code=404), writer)
    assert writer.status_code == 404
    assert "<h1>Not Found</h1>" in writer.body
    assert "Sorry, there was a problem with handling your request." in writer.body
    assert "Example" in writer.body


def test_live_error_with_body_keeps_body() -> None:
    writer = BufferedResponseWriter()
    _renderer("live").render(HTTPResponse("custom", 500), writer)
    assert writer.body == "custom"


def test_dev_error_without_body_writes_nothing() -> None:
    writer = BufferedResponseWriter()
    _renderer("dev").render(HTTPResponse(status_code=500), writer)
    assert writer.status_code == 500
    assert writer.body == ""


def test_redirect_with_headers_unsent_sets_location() -> None:
    writer = BufferedResponseWriter()
    _renderer().render(HTTPResponse().redirect("/next", 301), writer)
    assert writer.status_line == "HTTP/1.1 301 Moved Permanently"
    assert writer.get_header("Location") == "/next"
    assert writer.body == ""


def test_redirect_after_output_writes_fallback_page() -> None:
    """A redirect after output started degrades to link, meta refresh and script."""
    writer = BufferedResponseWriter(headers_sent=True, output_started_at="views.py:12")
    _renderer("live").render(HTTPResponse().redirect("next?a=1&b=2"), writer)
    url = "http://example.com/site/next?a=1&amp;b=2"
    assert writer.status_line is None
    assert f'<a href="{url}"' in writer.body
    assert f'content="1; url={url}"' in writer.body
    assert 'window.location.href = "http://example.com/site/next?a=1&b=2";' in writer.body
    assert "output started at" not in writer.body


def test_redirect_fallback_in_dev_reports_output_location() -> None:
    writer = BufferedResponseWriter(headers_sent=True, output_started_at="views.py:12")
    _renderer("dev").render(HTTPResponse().redirect("http://other.test/x"), writer)
    assert "(output started at views.py:12)" in writer.body
    assert 'href="http://other.test/x"' in writer.body


def test_redirect_fallback_escapes_script_breakout() -> None:
    writer = BufferedResponseWriter(headers_sent=True)
    _renderer("live").render(HTTPResponse().redirect('/"</script><b>'), writer)
    assert "</script><b>" not in writer.body.replace("</script>\n", "")
    assert "<\\/script>" in writer.body
    assert "&lt;/script&gt;" in writer.body


def test_error_status_after_output_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    writer = BufferedResponseWriter(headers_sent=True, output_started_at="views.py:3")
    with caplog.at_level(logging.WARNING, logger="cmscore.control.rendering"):
        _renderer().render(HTTPResponse("late", 404), writer)
    assert "Couldn't set response type to 404" in caplog.text
    assert "views.py:3" in caplog.text
    assert writer.body == "late"


def test_ajax_response_includes_requirements() -> None:
    requirements = Requirements()
    requirements.javascript("js/a.js")
    requirements.javascript("js/b.js")
    requirements.css("css/site.css")
    writer = BufferedResponseWriter()
    response = HTTPResponse("ok")
    _renderer(ajax=True, requirements=requirements).render(response, writer)
    assert writer.get_header("X-Include-JS") == "js/a.js,js/b.js"
    assert writer.get_header("X-Include-CSS") == "css/site.css"


def test_non_ajax_response_skips_requirements() -> None:
    requirements = Requirements()
    requirements.javascript("js/a.js")
    writer = BufferedResponseWriter()
    _renderer(ajax=False, requirements=requirements).render(HTTPResponse("ok"), writer)
    assert writer.get_header("X-Include-JS") is None


def test_output_uses_renderer_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from cmscore.core.config import get_settings

    monkeypatch.setenv("ENVIRONMENT_TYPE", "live")
    get_settings.cache_clear()
    writer = BufferedResponseWriter()
    HTTPResponse(status_code=403).output(writer)
    assert writer.status_line == "HTTP/1.1 403 Forbidden"
    assert "<h1>Forbidden</h1>" in writer.body


def test_to_starlette() -> None:
    response = HTTPResponse("body", 404).add_header("X-Test", "1")
    starlette_response = _renderer().to_starlette(response)
    assert starlette_response.status_code == 404
    assert starlette_response.body == b"body"
    assert starlette_response.headers["x-test"] == "1"
    assert starlette_response.headers["content-type"] == "text/html; charset=utf-8"


# --- Writers ---


def test_writer_rejects_headers_after_output() -> None:
    writer = BufferedResponseWriter()
    writer.write("started")
    assert writer.headers_sent
    assert writer.output_started_at == "BufferedResponseWriter.write"
    with pytest.raises(RuntimeError):
        writer.send_header("X-Late", "1")
    with pytest.raises(RuntimeError):
        writer.send_status("HTTP/1.1", 200, "OK")


def test_writer_ignores_empty_writes() -> None:
    writer = BufferedResponseWriter()
    writer.write("")
    assert not writer.headers_sent


# --- Directors ---


def test_static_director_absolute_url() -> None:
    director = StaticDirector("http://example.com/site")
    assert director.absolute_url("page") == "http://example.com/site/page"
    assert director.absolute_url("/root") == "http://example.com/root"
    assert director.absolute_url("https://x.test/y") == "https://x.test/y"


def test_static_director_environment() -> None:
    assert StaticDirector("http://x/", "dev").is_dev()
    assert StaticDirector("http://x/", "live").is_live()
    assert not StaticDirector("http://x/", "test").is_dev()
    assert not StaticDirector("http://x/", "test").is_live()


def test_request_director_ajax_header() -> None:
    request = _request(headers=[(b"x-requested-with", b"XMLHttpRequest")])
    assert RequestDirector(request).is_ajax()


def test_request_director_ajax_query_param() -> None:
    assert RequestDirector(_request(query_string=b"ajax=1")).is_ajax()
    assert not RequestDirector(_request()).is_ajax()


def test_request_director_absolute_url() -> None:
    director = RequestDirector(_request(), "live")
    assert director.absolute_url("admin") == "http://testserver/admin"
    assert director.is_live()


# --- Requirements ---


def test_requirements_deduplicate_and_clear() -> None:
    requirements = Requirements()
    requirements.javascript("a.js")
    requirements.javascript("a.js")
    requirements.css("a.css")
    assert requirements.get_javascript() == ["a.js"]
    assert requirements.get_css() == ["a.css"]
    requirements.clear()
    assert requirements.get_javascript() == []
    response = HTTPResponse()
    requirements.include_in_response(response)
    assert response.get_header("X-Include-JS") is None
    assert response.get_header("X-Include-CSS") is None
