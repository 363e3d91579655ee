"""
Realtime broadcast hub for BorderWatch.

This module keeps the set of connected client channels and fans events out
to all of them. Delivery is best effort: nothing is queued for clients that
are not connected, and a failing channel never stops delivery to the rest.
"""

from typing import Protocol, Set

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from borderwatch.core.logging import logger
from borderwatch.schemas.events import BroadcastEvent, ConnectionEstablished


class Channel(Protocol):
    """A server-push connection to one client."""

    @property
    def is_open(self) -> bool:
        ...

    async def send_text(self, data: str) -> None:
        ...


class WebSocketChannel:
    """
    Channel backed by a Starlette WebSocket.
    """

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket

    @property
    def is_open(self) -> bool:
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    async def send_text(self, data: str) -> None:
        await self.websocket.send_text(data)

    def __repr__(self):
        client = self.websocket.client
        return f"<WebSocketChannel {client.host}:{client.port}>" if client else "<WebSocketChannel>"


class BroadcastHub:
    """
    Registry of open channels with fan-out delivery.

    Runs on a single event loop; broadcast iterates over a snapshot so
    channels may register or leave while a broadcast is in flight.
    """

    def __init__(self):
        self._channels: Set[Channel] = set()

    @property
    def connection_count(self) -> int:
        return len(self._channels)

    def register(self, channel: Channel) -> None:
        """Add a channel. Registering twice is a no-op."""
        self._channels.add(channel)

    def unregister(self, channel: Channel) -> None:
        """Remove a channel. Unknown channels are ignored."""
        self._channels.discard(channel)

    def is_registered(self, channel: Channel) -> bool:
        return channel in self._channels

    async def open(self, channel: Channel) -> None:
        """
        Complete the handshake for a newly opened channel.

        The connection_established event goes out before the channel joins
        the registry, so it always precedes broadcast traffic.

        Raises:
            Exception: Whatever the channel raised while sending the
                handshake; the channel is not registered in that case.
        """
        await channel.send_text(self.serialize(ConnectionEstablished()))
        self.register(channel)
        logger.info(f"Channel opened: {channel!r} ({self.connection_count} connected)")

    def close(self, channel: Channel) -> None:
        self.unregister(channel)
        logger.info(f"Channel closed: {channel!r} ({self.connection_count} connected)")

    @staticmethod
    def serialize(event: BroadcastEvent) -> str:
        return event.model_dump_json(by_alias=True)

    async def broadcast(self, event: BroadcastEvent) -> int:
        """
        Deliver an event to every open channel.

        Args:
            event: Event to deliver.

        Returns:
            Number of channels the event was handed to.
        """
        message = self.serialize(event)
        delivered = 0

        for channel in list(self._channels):
            if not channel.is_open:
                self.unregister(channel)
                continue
            try:
                await channel.send_text(message)
                delivered += 1
            except Exception as e:
                logger.error(f"Error broadcasting {event.type} to {channel!r}: {e}")
                self.unregister(channel)

        logger.debug(f"Broadcast {event.type} to {delivered} channels")
        return delivered
