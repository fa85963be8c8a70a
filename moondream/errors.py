# =============================================================================
# Moondream Client - Errors
# =============================================================================
# Local argument errors are raised before any network call. Transport errors
# come straight from ``requests`` and are re-exported here under a stable
# name; the client never wraps or retries them. HTTP error statuses are not
# exceptions at all: their bodies are returned like any other response.
# =============================================================================

import requests


class Error(Exception):
    """Base class for errors raised by the moondream package."""


class InvalidArgument(Error, ValueError):
    """A required argument (API key, image URL) was missing."""


TransportError = requests.exceptions.RequestException
