"""Response writers: the transport seam HTTPResponse renders through.

A writer accepts one status line, then headers, then body text. Once
anything has been written the headers count as sent, mirroring how a
real connection can no longer change its status after output begins.
"""

from __future__ import annotations

from typing import Protocol

from starlette.responses import Response


class ResponseWriter(Protocol):
    """Protocol for response transports (DIP)."""

    @property
    def headers_sent(self) -> bool:
        """True once the status line or any body output has gone out."""

    @property
    def output_started_at(self) -> str | None:
        """Where output started (diagnostic; e.g. 'views.py:42'), if known."""

    def send_status(self, protocol: str, code: int, description: str) -> None:
        """Send the status line."""

    def send_header(self, name: str, value: str) -> None:
        """Send one header. Only valid before any body output."""

    def write(self, text: str) -> None:
        """Write body text."""


class BufferedResponseWriter:
    """In-memory writer capturing status, headers and body.

    Pass headers_sent=True to model a transport where output already
    started before the response was rendered.
    """

    def __init__(
        self,
        *,
        headers_sent: bool = False,
        output_started_at: str | None = None,
    ) -> None:
        self._headers_sent = headers_sent
        self._output_started_at = output_started_at
        self.status_line: str | None = None
        self.status_code: int | None = None
        self.headers: list[tuple[str, str]] = []
        self._chunks: list[str] = []

    @property
    def headers_sent(self) -> bool:
        return self._headers_sent

    @property
    def output_started_at(self) -> str | None:
        return self._output_started_at

    def send_status(self, protocol: str, code: int, description: str) -> None:
        if self._headers_sent:
            raise RuntimeError("Cannot send status line: headers already sent")
        self.status_code = code
        self.status_line = f"{protocol} {code} {description}"

    def send_header(self, name: str, value: str) -> None:
        if self._headers_sent:
            raise RuntimeError(f"Cannot send header {name!r}: headers already sent")
        self.headers.append((name, value))

    def write(self, text: str) -> None:
        if not text:
            return
        if not self._headers_sent:
            self._headers_sent = True
            self._output_started_at = self._output_started_at or "BufferedResponseWriter.write"
        self._chunks.append(text)

    @property
    def body(self) -> str:
        return "".join(self._chunks)

    def get_header(self, name: str) -> str | None:
        """Return the last value sent for name (case-insensitive), or None."""
        want = name.lower()
        for key, value in reversed(self.headers):
            if key.lower() == want:
                return value
        return None

    def to_starlette(self) -> Response:
        """Convert the captured output into a Starlette Response.

        Content-Type is passed through as a header rather than media_type so
        the charset set by the framework is preserved.
        """
        response = Response(content=self.body, status_code=self.status_code or 200)
        for name, value in self.headers:
            if name.lower() == "content-length":
                continue
            response.headers[name] = value
        return response
