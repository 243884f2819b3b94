"""Exception types raised by the LGTM image services.

Request-level failures derive from ``LgtmError`` and carry the HTTP status
the API layer should answer with.  ``FontLoadError`` deliberately does not:
a broken typeface is a deployment defect and stops the application at
start-up instead of failing individual requests.
"""


class LgtmError(Exception):
    """Base class for recoverable, per-request failures."""

    status_code: int = 500


class InvalidInputError(LgtmError):
    """The caller supplied input that cannot be interpreted (bad data URL, empty upload)."""

    status_code = 400


class ImageDecodeError(LgtmError):
    """The image bytes could not be decoded by any supported codec."""

    status_code = 422


class ImageEncodeError(LgtmError):
    """The composited image could not be encoded in the requested format."""

    status_code = 500


class ImageFetchError(LgtmError):
    """A remote image could not be downloaded."""

    status_code = 502


class OutputNotFoundError(LgtmError):
    """No image has been produced yet."""

    status_code = 404


class FontLoadError(RuntimeError):
    """The typeface could not be loaded."""
