"""Change notifications pushed to connected clients after each mutation."""

import logging
from typing import List, Optional

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ChangeFeed:
    def __init__(self):
        self.active_connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

    async def publish(self, table: str, row_id: Optional[int], event: str = "UPDATE", **extra):
        """Send ``{"table", "id", "event", ...}`` to every subscriber."""
        message = {"table": table, "id": row_id, "event": event, **extra}
        for connection in list(self.active_connections):
            try:
                await connection.send_json(message)
            except Exception as e:
                logger.warning(f"Dropping change-feed subscriber: {e}")
                self.disconnect(connection)
