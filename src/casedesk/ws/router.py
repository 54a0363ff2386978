"""WebSocket presence endpoint with JWT authentication."""

import json

import jwt
import structlog
from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from casedesk.auth.jwt import user_id_from_token
from casedesk.auth.service import get_user_by_id
from casedesk.database import get_session_factory
from casedesk.ws.presence import presence

logger = structlog.get_logger()

router = APIRouter()

AUTH_FAILED_CLOSE_CODE = 4001


async def _user_exists(user_id: int) -> bool:
    async with get_session_factory()() as db:
        return await get_user_by_id(db, user_id) is not None


@router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    token: str | None = Query(None),
) -> None:
    """Presence channel used to push reminders.

    Protocol:
        Client -> Server:
            {"action": "ping"}

        Server -> Client:
            {"type": "notification", "payload": {...}}
            {"type": "pong"}
            {"type": "error", "message": "..."}
    """
    if not token:
        await websocket.close(code=AUTH_FAILED_CLOSE_CODE, reason="Authentication failed: missing token")
        return
    try:
        user_id = user_id_from_token(token)
    except jwt.InvalidTokenError as e:
        await websocket.close(code=AUTH_FAILED_CLOSE_CODE, reason=f"Authentication failed: {e}")
        return
    if not await _user_exists(user_id):
        await websocket.close(code=AUTH_FAILED_CLOSE_CODE, reason="Authentication failed: user not found")
        return

    await websocket.accept()
    presence.register(user_id, websocket)

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                await websocket.send_json({"type": "error", "message": "Invalid JSON"})
                continue

            action = msg.get("action") if isinstance(msg, dict) else None
            if action == "ping":
                await websocket.send_json({"type": "pong"})
            else:
                await websocket.send_json({
                    "type": "error",
                    "message": f"Unknown action: {action}",
                })

    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("ws_error", user_id=user_id)
    finally:
        presence.unregister(user_id, websocket)
