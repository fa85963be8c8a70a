# =============================================================================
# Moondream Client - API Client
# =============================================================================
# Provides the Client class, which holds an API key and exposes the four
# Moondream operations (query, detect, point, caption). Each call serializes
# its request schema to JSON, attaches the bearer token, performs exactly one
# synchronous POST against the fixed base URL, and returns the raw response
# body. The caption operation can additionally stream the body to a callback
# as it arrives.
# =============================================================================

import codecs
import logging
from typing import Callable, Optional

import requests
from pydantic import BaseModel, ValidationError

from config import get_config
from moondream.errors import InvalidArgument
from moondream.schemas import CaptionRequest, DetectRequest, PointRequest, QueryRequest

logger = logging.getLogger(__name__)

BASE_URL = "https://api.moondream.ai/v1"

ChunkCallback = Callable[[str], None]


class Client:
    """
    Synchronous HTTP client for the Moondream API.

    The client holds nothing but the API key, so a single instance can be
    shared freely between callers and threads. No network activity happens
    until an operation is called.

    Response bodies are returned untouched whatever the HTTP status: a 401's
    ``{"error": "Unauthorized"}`` comes back exactly like a 200's answer.
    Transport failures raise ``requests.exceptions.RequestException``
    (re-exported as ``moondream.TransportError``) without retries.

    Args:
        api_key: Moondream API key, sent as ``Authorization: Bearer <key>``.

    Raises:
        InvalidArgument: If ``api_key`` is missing or empty. Operations raise it
            too when an argument has the wrong type (e.g. ``prompt=None``).
    """

    def __init__(self, api_key: Optional[str] = None):
        if not api_key:
            raise InvalidArgument("api_key is required")
        self._api_key = api_key

    @classmethod
    def from_config(cls, config=None) -> "Client":
        """
        Build a client from the global configuration (``MOONDREAM_API_KEY``).

        Args:
            config: Optional Config instance; defaults to ``get_config()``.

        Returns:
            Client: A client using ``config.api_key``.
        """
        if config is None:
            config = get_config()
        return cls(api_key=config.api_key)

    @property
    def api_key(self) -> str:
        return self._api_key

    def __repr__(self) -> str:
        return f"{type(self).__name__}(api_key='***')"

    # -----------------------------------------------------------------
    # Operations
    # -----------------------------------------------------------------

    def query(self, image_url: str, prompt: str) -> str:
        """
        Ask a free-text question about an image.

        Args:
            image_url: The URL of the image to query.
            prompt:    The question to ask about the image.

        Returns:
            str: The raw response body (JSON with ``request_id`` and ``answer``).
        """
        return self._post("query", _build_body(QueryRequest, image_url=image_url, prompt=prompt))

    def detect(self, image_url: str, object: str) -> str:
        """
        Detect bounding boxes of an object in an image.

        Args:
            image_url: The URL of the image to detect objects in.
            object:    The object to detect.

        Returns:
            str: The raw response body (JSON with ``request_id`` and ``objects``).
        """
        return self._post("detect", _build_body(DetectRequest, image_url=image_url, object=object))

    def point(self, image_url: str, object: str) -> str:
        """
        Locate center points of an object in an image.

        Returns:
            str: The raw response body (JSON with ``request_id`` and ``points``).
        """
        return self._post("point", _build_body(PointRequest, image_url=image_url, object=object))

    def caption(
        self,
        image_url: Optional[str] = None,
        length: str = "normal",
        stream: bool = False,
        on_chunk: Optional[ChunkCallback] = None,
    ) -> str:
        """
        Caption an image, optionally streaming the response.

        With ``stream=True`` the body is read incrementally and each decoded
        chunk is handed to ``on_chunk`` as soon as it is available. The full
        body is still assembled and returned once the response completes, so
        ``on_chunk`` is optional: without it the stream is simply buffered.
        With ``stream=False`` ``on_chunk`` is never called.

        Usage:
            client.caption("https://example.com/image.jpg", stream=True,
                           on_chunk=lambda chunk: print(chunk, end=""))

        Args:
            image_url: The URL of the image to caption.
            length:    Caption length hint, "normal" or "short".
            stream:    Whether to stream the response.
            on_chunk:  Called once per received chunk when streaming.

        Returns:
            str: The raw response body.

        Raises:
            InvalidArgument: If ``image_url`` is missing.
        """
        if image_url is None:
            raise InvalidArgument("image_url is required")

        body = _build_body(CaptionRequest, image_url=image_url, length=length, stream=stream)
        headers = {"Content-Type": "application/json"}

        if not stream:
            return self._post("caption", body, headers=headers)

        response = self._send("caption", body, headers=headers, stream=True)
        try:
            return _read_stream(response, on_chunk)
        finally:
            response.close()

    # -----------------------------------------------------------------
    # Transport
    # -----------------------------------------------------------------

    def _post(self, path: str, body: BaseModel, headers: Optional[dict] = None) -> str:
        response = self._send(path, body, headers=headers)
        return response.content.decode(_body_encoding(response), errors="replace")

    def _send(
        self,
        path: str,
        body: BaseModel,
        headers: Optional[dict] = None,
        stream: bool = False,
    ) -> requests.Response:
        """
        Issue a single POST to ``{BASE_URL}/{path}``.

        The status code is not checked; callers get the response whatever it
        is. No timeout is passed, so the call blocks until the transport
        completes or raises.
        """
        url = f"{BASE_URL}/{path}"
        request_headers = {"Authorization": f"Bearer {self._api_key}"}
        if headers:
            request_headers.update(headers)

        logger.debug("POST %s (stream=%s)", url, stream)
        response = requests.post(
            url,
            json=body.model_dump(),
            headers=request_headers,
            stream=stream,
        )
        logger.debug("POST %s -> HTTP %s", url, response.status_code)
        return response


def _build_body(model, **fields) -> BaseModel:
    """
    Build a request schema, reporting bad argument types as InvalidArgument.

    Raises:
        InvalidArgument: If a field has the wrong type (e.g. ``prompt=None``).
    """
    try:
        return model(**fields)
    except ValidationError as exc:
        raise InvalidArgument(str(exc)) from exc


def _body_encoding(response: requests.Response) -> str:
    """
    Pick the charset for decoding a response body, streamed or not.

    Only an explicit ``charset=`` in Content-Type is honoured; otherwise the
    body is treated as UTF-8 (the API's JSON and text payloads), including
    ``text/*`` bodies that requests would guess as ISO-8859-1.
    """
    content_type = response.headers.get("Content-Type", "")
    if "charset=" in content_type.lower() and response.encoding:
        return response.encoding
    return "utf-8"


def _read_stream(response: requests.Response, on_chunk: Optional[ChunkCallback]) -> str:
    """
    Drain a streamed response, forwarding each decoded chunk to ``on_chunk``.

    Bytes are decoded incrementally so a multi-byte character split across
    two network reads is emitted whole in the later chunk. Byte sequences
    that are invalid in the chosen charset are replaced with U+FFFD, so the
    returned string equals the body only when the body is valid text.

    Returns:
        str: The concatenation of every chunk delivered.
    """
    decoder = codecs.getincrementaldecoder(_body_encoding(response))(errors="replace")
    parts = []

    def _emit(text: str) -> None:
        if not text:
            return
        parts.append(text)
        if on_chunk is not None:
            on_chunk(text)

    for raw in response.iter_content(chunk_size=None):
        _emit(decoder.decode(raw))
    _emit(decoder.decode(b"", final=True))

    body = "".join(parts)
    logger.debug("Streamed %d chunks (%d chars)", len(parts), len(body))
    return body
