import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from fastapi_users.db import SQLAlchemyUserDatabase

from canteen.auth.dependencies import user_from_token
from canteen.auth.manager import UserManager
from canteen.core.constants import STAFF_ROOM, Role
from canteen.db import async_session
from canteen.models.user import User
from canteen.realtime.hub import hub, user_room

log = logging.getLogger(__name__)

router = APIRouter()


def rooms_for_user(user: User) -> list[str]:
    rooms = [user_room(user.id)]
    if user.role in (Role.staff.value, Role.admin.value):
        rooms.append(STAFF_ROOM)
    return rooms


@router.websocket("/ws")
async def realtime_ws(websocket: WebSocket):
    """Push order/bill events for the caller's rooms. Auth via ``?token=<jwt>``."""
    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    async with async_session() as session:
        user = await user_from_token(token, UserManager(SQLAlchemyUserDatabase(session, User)))
    if not user:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    rooms = rooms_for_user(user)
    for room in rooms:
        hub.join(room, websocket)
    log.info("🔌 %s connected to rooms %s", user.id, rooms)

    try:
        while True:
            await websocket.receive_text()  # no-op, keep alive
    except WebSocketDisconnect:
        pass
    finally:
        hub.leave(websocket)
        log.info("🔌 %s disconnected", user.id)
