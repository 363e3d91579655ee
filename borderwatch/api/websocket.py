"""
WebSocket API for BorderWatch.

This module provides the push channel for real-time updates. Clients only
listen; anything they send is ignored.
"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from borderwatch.core.logging import logger
from borderwatch.services.broadcast_hub import WebSocketChannel

router = APIRouter()


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for real-time updates.

    The client first receives connection_established, then every event
    broadcast while it stays connected.
    """
    hub = websocket.app.state.hub
    channel = WebSocketChannel(websocket)

    await websocket.accept()
    try:
        await hub.open(channel)

        # Keep connection alive until the client leaves
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info(f"Client {channel!r} disconnected from WebSocket")
    except Exception as e:
        logger.error(f"WebSocket error: {e}")
    finally:
        hub.close(channel)
