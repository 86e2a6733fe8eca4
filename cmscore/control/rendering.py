"""Render an HTTPResponse through a ResponseWriter.

All collaborators (director, error formatter, requirements) are passed in
at construction; nothing is looked up globally at render time.
"""

from __future__ import annotations

import html
import json
import logging
from typing import TYPE_CHECKING, Any, Protocol

from starlette.responses import Response

from cmscore.control.director import Director, StaticDirector
from cmscore.control.status_codes import REDIRECT_CODES, STATUS_CODES
from cmscore.control.writers import BufferedResponseWriter

if TYPE_CHECKING:
    from cmscore.control.http_response import HTTPResponse
    from cmscore.control.requirements import Requirements
    from cmscore.control.writers import ResponseWriter

logger = logging.getLogger(__name__)


class ErrorFormatter(Protocol):
    """Formats a body for error responses that have none."""

    def format(self, context: dict[str, Any]) -> str:
        """Return body text for context (at least {"code": int})."""


class FriendlyErrorFormatter:
    """Minimal HTML error page for live environments."""

    def __init__(self, site_name: str = "cmscore") -> None:
        self.site_name = site_name

    def format(self, context: dict[str, Any]) -> str:
        code = context.get("code", 500)
        title = STATUS_CODES.get(code, "Error")
        site = html.escape(self.site_name)
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{code} {html.escape(title)} - {site}</title>
</head>
<body>
    <h1>{html.escape(title)}</h1>
    <p>Sorry, there was a problem with handling your request.</p>
</body>
</html>
"""


def _quote_etag(value: str) -> str:
    """ETag values must be quoted; leave already-quoted values alone."""
    if value.startswith('"'):
        return value
    return f'"{value}"'


class ResponseRenderer:
    """Sends status line, headers and body of an HTTPResponse to a writer."""

    def __init__(
        self,
        director: Director,
        error_formatter: ErrorFormatter,
        requirements: Requirements | None = None,
        protocol: str = "HTTP/1.1",
    ) -> None:
        self.director = director
        self.error_formatter = error_formatter
        self.requirements = requirements
        self.protocol = protocol

    @classmethod
    def from_settings(cls) -> ResponseRenderer:
        """Renderer with a StaticDirector and FriendlyErrorFormatter built from settings."""
        from cmscore.core.config import get_settings

        settings = get_settings()
        return cls(
            director=StaticDirector(settings.base_url, settings.environment_type),
            error_formatter=FriendlyErrorFormatter(settings.app_name),
        )

    def render(self, response: HTTPResponse, writer: ResponseWriter) -> None:
        """Send response through writer.

        Redirects that can no longer set a Location header (output already
        started) degrade to an HTML page with meta refresh and script redirect.
        """
        if self.requirements is not None and self.director.is_ajax():
            self.requirements.include_in_response(response)

        code = response.get_status_code()
        if code in REDIRECT_CODES and writer.headers_sent:
            writer.write(self._redirect_fallback(response, writer))
            return

        if not writer.headers_sent:
            writer.send_status(self.protocol, code, response.get_status_description())
            for header, value in response.get_headers().items():
                if header.lower() == "etag":
                    value = _quote_etag(value)
                writer.send_header(header, value)
        elif code >= 300:
            # The status could not be sent; report it rather than fail silently.
            logger.warning(
                "Couldn't set response type to %s because of output started at %s",
                code,
                writer.output_started_at or "unknown location",
            )

        body = response.get_body()
        if self.director.is_live() and response.is_error() and not body:
            writer.write(self.error_formatter.format({"code": code}))
        elif body:
            writer.write(body)

    def to_starlette(self, response: HTTPResponse) -> Response:
        """Render into a fresh buffer and return the equivalent Starlette response."""
        writer = BufferedResponseWriter()
        self.render(response, writer)
        return writer.to_starlette()

    def _redirect_fallback(self, response: HTTPResponse, writer: ResponseWriter) -> str:
        url = self.director.absolute_url(response.get_header("Location") or "")
        url_att = html.escape(url, quote=True)
        url_js = json.dumps(url).replace("</", "<\\/")
        if self.director.is_dev():
            started = writer.output_started_at or "unknown location"
            title = f"{url_att}... (output started at {html.escape(started)})"
        else:
            title = f"{url_att}..."
        return (
            f'<p>Redirecting to <a href="{url_att}" title="Click this link if your '
            f'browser does not redirect you">{title}</a></p>\n'
            f'<meta http-equiv="refresh" content="1; url={url_att}" />\n'
            '<script type="application/javascript">setTimeout(function(){\n'
            f"\twindow.location.href = {url_js};\n"
            "}, 50);</script>\n"
        )
