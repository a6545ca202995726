from typing import Any

from pydantic import BaseModel


class AnswerRequest(BaseModel):
    """
    SDP answer delivered by the media server.

    Both fields are optional at the schema level so that missing values are
    reported as 400 by the endpoint instead of a 422 validation error.
    """

    clientId: str | None = None
    sdpAnswer: Any = None


class MessageResponse(BaseModel):
    message: str
