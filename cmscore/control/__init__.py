"""Control layer: HTTP response object and its rendering collaborators."""

from cmscore.control.director import Director, RequestDirector, StaticDirector
from cmscore.control.http_response import HTTPResponse
from cmscore.control.rendering import (
    ErrorFormatter,
    FriendlyErrorFormatter,
    ResponseRenderer,
)
from cmscore.control.requirements import Requirements
from cmscore.control.writers import BufferedResponseWriter, ResponseWriter

__all__ = [
    "BufferedResponseWriter",
    "Director",
    "ErrorFormatter",
    "FriendlyErrorFormatter",
    "HTTPResponse",
    "RequestDirector",
    "Requirements",
    "ResponseRenderer",
    "ResponseWriter",
    "StaticDirector",
]
