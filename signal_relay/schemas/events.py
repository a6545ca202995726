"""
Signaling channel message models.

Inbound frames are JSON objects of the form ``{"event": ..., "data": {...}}``
and are parsed through ``client_message_adapter`` into one of the
``ClientMessage`` variants. Each variant converts itself into the router
event it stands for, so the endpoint never branches on event names.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from signal_relay.constants import ServerEvent


# Router events (closed set, dispatched by SessionRouter.dispatch)


class ConnectEvent(BaseModel):
    model_config = ConfigDict(frozen=True)


class RegisterEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    client_id: str | None = None


class OfferEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    sdp: Any = None


class DisconnectEvent(BaseModel):
    model_config = ConfigDict(frozen=True)


RouterEvent = ConnectEvent | RegisterEvent | OfferEvent | DisconnectEvent


# Inbound frames


class RegisterData(BaseModel):
    clientId: str | None = None


class RegisterMessage(BaseModel):
    event: Literal["register"]
    data: RegisterData = Field(default_factory=RegisterData)

    def to_event(self) -> RegisterEvent:
        return RegisterEvent(client_id=self.data.clientId)


class OfferData(BaseModel):
    # Opaque session description, relayed as-is
    sdp: Any = None


class OfferMessage(BaseModel):
    event: Literal["sdp-offer"]
    data: OfferData = Field(default_factory=OfferData)

    def to_event(self) -> OfferEvent:
        return OfferEvent(sdp=self.data.sdp)


ClientMessage = Annotated[
    RegisterMessage | OfferMessage, Field(discriminator="event")
]

client_message_adapter: TypeAdapter[ClientMessage] = TypeAdapter(ClientMessage)


# Outbound frames


class ServerMessage(BaseModel):
    event: ServerEvent
    data: dict[str, Any]
