"""Domain layer: errors and schemas."""

from .errors import (
    DirectiveParseError,
    ErrorCodes,
    RenderError,
    UpstreamNetworkError,
    UpstreamTimeoutError,
)
from .schemas import (
    FragmentResponse,
    FragmentResult,
    FragmentStatus,
    IncludeDirective,
    RenderedDocument,
    RenderLog,
    Template,
)

__all__ = [
    "RenderError",
    "DirectiveParseError",
    "UpstreamTimeoutError",
    "UpstreamNetworkError",
    "ErrorCodes",
    "Template",
    "IncludeDirective",
    "FragmentStatus",
    "FragmentResponse",
    "FragmentResult",
    "RenderedDocument",
    "RenderLog",
]
