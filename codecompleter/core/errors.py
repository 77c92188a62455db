"""
errors.py

Exception types raised along the completion lifecycle. Everything below a
command handler is converted into "no visible effect + a log line", so these
are mostly caught by core.CompletionSession rather than by the host.
"""


class CompleterError(Exception):
    """Base class for all codecompleter failures."""


class ConfigError(CompleterError, ValueError):
    """Malformed configuration (bad template fields, invalid numeric settings)."""


class InferenceError(CompleterError):
    """
    The model endpoint could not produce a usable answer.

    :param message:     Human readable summary.
    :param status_code: HTTP status when the server answered, else None.
    :param detail:      Underlying error text (response body, transport error...).
    """

    def __init__(self, message, status_code=None, detail=None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail

    def __str__(self):
        text = super().__str__()
        if self.status_code is not None:
            text = f"{text} (HTTP {self.status_code})"
        if self.detail:
            text = f"{text}: {self.detail}"
        return text


class EmptyResponse(InferenceError):
    """The endpoint answered, but there was nothing to show."""


class StaleAnchor(CompleterError):
    """The document changed since the preview anchor was taken."""
