"""Front-end requirements (JavaScript and CSS files) attached to ajax responses.

Ajax responses cannot carry <script>/<link> tags in a page head, so the
required files are announced in X-Include-JS / X-Include-CSS headers for
the client to load.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cmscore.control.http_response import HTTPResponse

INCLUDE_JS_HEADER = "X-Include-JS"
INCLUDE_CSS_HEADER = "X-Include-CSS"


class Requirements:
    """Ordered, de-duplicated sets of JavaScript and CSS file paths."""

    def __init__(self) -> None:
        self._javascript: dict[str, None] = {}
        self._css: dict[str, None] = {}

    def javascript(self, path: str) -> None:
        self._javascript[path] = None

    def css(self, path: str) -> None:
        self._css[path] = None

    def clear(self) -> None:
        self._javascript.clear()
        self._css.clear()

    def get_javascript(self) -> list[str]:
        return list(self._javascript)

    def get_css(self) -> list[str]:
        return list(self._css)

    def include_in_response(self, response: HTTPResponse) -> None:
        """Add X-Include-JS / X-Include-CSS headers listing required files.

        Headers are only added when there is something to include.
        """
        if self._javascript:
            response.add_header(INCLUDE_JS_HEADER, ",".join(self._javascript))
        if self._css:
            response.add_header(INCLUDE_CSS_HEADER, ",".join(self._css))
