"""Change-feed router: WebSocket stream of table change notifications."""

from fastapi import APIRouter, Request, WebSocket, WebSocketDisconnect

from hacksite.services.change_feed import ChangeFeed

router = APIRouter(prefix="/changes", tags=["changes"])


def get_change_feed(request: Request) -> ChangeFeed:
    return request.app.state.change_feed


@router.websocket("/ws")
async def changes_ws(websocket: WebSocket):
    feed: ChangeFeed = websocket.app.state.change_feed
    await feed.connect(websocket)
    try:
        while True:
            # Clients only listen; incoming frames are keep-alives
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        feed.disconnect(websocket)
