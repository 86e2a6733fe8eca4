"""HTTP response returned by a controller.

Holds status, headers and body; rendering to a transport is delegated to
ResponseRenderer so the response itself has no global dependencies.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from cmscore.control.status_codes import (
    DEFAULT_REDIRECT_CODE,
    FINISHED_CODES,
    REDIRECT_CODES,
    STATUS_CODES,
)
from cmscore.domain.exceptions import InvalidArgumentException

if TYPE_CHECKING:
    from cmscore.control.rendering import ResponseRenderer
    from cmscore.control.writers import ResponseWriter

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "text/html; charset=utf-8"


class HTTPResponse:
    """Status code, reason phrase, ordered headers and an optional body.

    Header names are case-sensitive keys; adding a header that already
    exists replaces its value. Mutators return self so calls can be chained.
    """

    def __init__(
        self,
        body: Any = None,
        status_code: int | str | None = None,
        status_description: str | None = None,
    ) -> None:
        """Create a response.

        Args:
            body: Response body; truthy values are cast to str.
            status_code: Optional status code (200 when omitted).
            status_description: Optional reason phrase; see set_status_code().
        """
        self.status_code = 200
        self.status_description = STATUS_CODES[200]
        self.headers: dict[str, str] = {"Content-Type": DEFAULT_CONTENT_TYPE}
        self.body: str | None = None
        self.set_body(body)
        if status_code:
            self.set_status_code(status_code, status_description)

    def set_status_code(self, code: int | str, description: str | None = None) -> HTTPResponse:
        """Set the status code and reason phrase.

        Args:
            code: A code from STATUS_CODES, as an int or a string of digits
                ("404").
            description: Optional reason phrase. Defaults to the canonical
                phrase for code. Newlines are stripped on read.

        Raises:
            InvalidArgumentException: If code is not a recognised status code.
                The response is left unchanged.
        """
        if isinstance(code, str) and code.strip().isdecimal():
            code = int(code)
        if code not in STATUS_CODES:
            raise InvalidArgumentException(
                f"Unrecognised HTTP status code '{code}'", argument="code"
            )
        self.status_code = code
        self.status_description = description if description else STATUS_CODES[code]
        return self

    def set_status_description(self, description: str) -> HTTPResponse:
        """Set the reason phrase. Overwritten by the next set_status_code()."""
        self.status_description = description
        return self

    def get_status_code(self) -> int:
        return self.status_code

    def get_status_description(self) -> str:
        """Return the reason phrase as a single line."""
        return self.status_description.replace("\r", "").replace("\n", "")

    def is_error(self) -> bool:
        """True when a status code is set and falls outside 200-399."""
        return bool(self.status_code) and (
            self.status_code < 200 or self.status_code > 399
        )

    def is_finished(self) -> bool:
        """True for redirects and 401/403: callers should stop mutating the response."""
        return self.status_code in FINISHED_CODES

    def set_body(self, body: Any) -> HTTPResponse:
        # Falsy values keep their identity: None stays None, "" stays "".
        self.body = str(body) if body else body
        return self

    def get_body(self) -> str | None:
        return self.body

    def add_header(self, header: str, value: str) -> HTTPResponse:
        """Add a header, replacing any header of the same name."""
        self.headers[header] = value
        return self

    def get_header(self, header: str) -> str | None:
        return self.headers.get(header)

    def get_headers(self) -> dict[str, str]:
        return dict(self.headers)

    def remove_header(self, header: str) -> HTTPResponse:
        self.headers.pop(header, None)
        return self

    def redirect(self, dest: str, code: int = DEFAULT_REDIRECT_CODE) -> HTTPResponse:
        """Turn this response into a redirect to dest.

        An invalid redirect code is logged and replaced by 302.
        """
        if code not in REDIRECT_CODES:
            logger.warning(
                "Invalid HTTP redirect code %s; using %s", code, DEFAULT_REDIRECT_CODE
            )
            code = DEFAULT_REDIRECT_CODE
        self.set_status_code(code)
        self.headers["Location"] = dest
        return self

    def output(
        self,
        writer: ResponseWriter,
        renderer: ResponseRenderer | None = None,
    ) -> None:
        """Send this response through writer.

        Args:
            writer: Transport seam receiving status line, headers and body.
            renderer: Rendering component; built from settings when omitted.
        """
        if renderer is None:
            from cmscore.control.rendering import ResponseRenderer

            renderer = ResponseRenderer.from_settings()
        renderer.render(self, writer)

    def __repr__(self) -> str:
        return f"<HTTPResponse {self.status_code} {self.get_status_description()!r}>"
