"""Directors: routing collaborators consulted while rendering a response.

A director answers "is this an ajax request?", resolves absolute URLs,
and reports the environment type. Renderers receive one explicitly.
"""

from __future__ import annotations

from typing import Protocol
from urllib.parse import urljoin, urlsplit

from starlette.requests import Request

from cmscore.shared.enums import EnvironmentType

AJAX_HEADER = "X-Requested-With"
AJAX_HEADER_VALUE = "XMLHttpRequest"


class Director(Protocol):
    """Protocol for request routing context (DIP)."""

    def is_ajax(self) -> bool:
        """Return True when the current request was made via XMLHttpRequest."""

    def absolute_url(self, url: str) -> str:
        """Resolve url against the site base; absolute URLs pass through."""

    def is_dev(self) -> bool:
        """Return True in dev environments."""

    def is_live(self) -> bool:
        """Return True in live environments."""


def _is_absolute(url: str) -> bool:
    return bool(urlsplit(url).scheme)


class _EnvironmentMixin:
    """is_dev/is_live from a stored environment type."""

    environment_type: str

    def is_dev(self) -> bool:
        return self.environment_type == EnvironmentType.DEV.value

    def is_live(self) -> bool:
        return self.environment_type == EnvironmentType.LIVE.value


class StaticDirector(_EnvironmentMixin):
    """Director with a fixed base URL, for use outside a request (CLI, jobs, tests)."""

    def __init__(
        self,
        base_url: str,
        environment_type: str = EnvironmentType.DEV.value,
        *,
        ajax: bool = False,
    ) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.environment_type = environment_type
        self._ajax = ajax

    def is_ajax(self) -> bool:
        return self._ajax

    def absolute_url(self, url: str) -> str:
        if _is_absolute(url):
            return url
        return urljoin(self.base_url, url)


class RequestDirector(_EnvironmentMixin):
    """Director backed by the current Starlette request."""

    def __init__(
        self,
        request: Request,
        environment_type: str = EnvironmentType.DEV.value,
    ) -> None:
        self.request = request
        self.environment_type = environment_type

    def is_ajax(self) -> bool:
        """Ajax when X-Requested-With is XMLHttpRequest or ?ajax is present."""
        if self.request.headers.get(AJAX_HEADER) == AJAX_HEADER_VALUE:
            return True
        return "ajax" in self.request.query_params

    def absolute_url(self, url: str) -> str:
        if _is_absolute(url):
            return url
        return urljoin(str(self.request.base_url), url)
