# =============================================================================
# Moondream Client - Request Schemas
# =============================================================================
# Pydantic models defining the request bodies the client sends to the
# Moondream API. Each model's field set is exactly the wire field set for its
# endpoint; bodies are produced with ``model_dump()``.
#
# Responses are deliberately not modelled: the client hands back the raw
# response body and leaves interpretation (answers, boxes, points, captions)
# to the caller.
# =============================================================================

from pydantic import BaseModel, Field


class QueryRequest(BaseModel):
    """
    Body for ``POST /query``: ask a free-text question about an image.

    Attributes:
        image_url: URL (or opaque reference) of the image.
        prompt:    The question to ask about the image.
    """

    image_url: str = Field(..., description="Image URL or reference")
    prompt: str = Field(..., description="Free-text question about the image")


class DetectRequest(BaseModel):
    """
    Body for ``POST /detect``: locate bounding boxes of an object.

    Attributes:
        image_url: URL (or opaque reference) of the image.
        object:    Label of the object to detect.
    """

    image_url: str = Field(..., description="Image URL or reference")
    object: str = Field(..., description="Object label to detect")


class PointRequest(BaseModel):
    """Body for ``POST /point``: locate center points of an object."""

    image_url: str = Field(..., description="Image URL or reference")
    object: str = Field(..., description="Object label to point at")


class CaptionRequest(BaseModel):
    """
    Body for ``POST /caption``, and the caption options with their defaults.

    Attributes:
        image_url: URL (or opaque reference) of the image.
        length:    Caption length hint, passed through as-is ("normal", "short").
        stream:    Ask the API to stream the caption back incrementally.
    """

    image_url: str = Field(..., description="Image URL or reference")
    length: str = Field(default="normal", description="Caption length hint")
    stream: bool = Field(default=False, description="Stream the response")
