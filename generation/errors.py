"""
Exception types raised by the generation pipeline.

Routers map MissingFieldError to HTTP 400 and everything else to HTTP 500.
"""


class PaperGenerationError(Exception):
    """Base class for request-level generation failures."""


class MissingFieldError(PaperGenerationError):
    """A required request field was absent or empty."""


class CompletionError(PaperGenerationError):
    """The completion provider returned a non-success response."""


class InvalidModelOutputError(PaperGenerationError):
    """The model response could not be parsed as a JSON object."""


class SectionPlanError(PaperGenerationError, ValueError):
    """A section plan cannot be scaled to the requested total."""
