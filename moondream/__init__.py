# =============================================================================
# Moondream Client Package
# =============================================================================
# A minimal synchronous client for the Moondream image-understanding API:
# query, detect, point, and caption (optionally streamed). Response bodies
# are returned as raw strings and never parsed by the client.
# =============================================================================

from moondream.client import BASE_URL, Client
from moondream.errors import Error, InvalidArgument, TransportError

__version__ = "0.1.0"
__all__ = ["BASE_URL", "Client", "Error", "InvalidArgument", "TransportError"]
