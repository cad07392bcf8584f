"""
Realtime fan-out

Room-addressed publish/subscribe for connected clients. Delivery is
at-most-once with no backlog: a subscriber that joins after an event never
sees it and has to refetch the list endpoints.
"""
import logging
from collections import defaultdict
from typing import Any, Protocol

from fastapi.encoders import jsonable_encoder

log = logging.getLogger(__name__)


class Subscriber(Protocol):
    async def send_json(self, data: Any) -> None: ...


def user_room(user_id) -> str:
    return str(user_id)


class RoomHub:
    # Room bookkeeping never awaits, so it is atomic on the event loop
    def __init__(self):
        self._rooms: dict[str, set[Subscriber]] = defaultdict(set)

    def rooms_for(self, subscriber: Subscriber) -> list[str]:
        return sorted(room for room, members in self._rooms.items() if subscriber in members)

    def members(self, room: str) -> int:
        return len(self._rooms.get(room, ()))

    def join(self, room: str, subscriber: Subscriber) -> None:
        self._rooms[room].add(subscriber)
        log.debug("Subscriber joined room %s", room)

    def leave(self, subscriber: Subscriber) -> None:
        """Remove a subscriber from every room it joined."""
        for room in list(self._rooms):
            self._rooms[room].discard(subscriber)
            if not self._rooms[room]:
                del self._rooms[room]

    def clear(self) -> None:
        self._rooms.clear()

    async def emit(self, room: str, event: str, payload: Any) -> int:
        """Send ``event`` to everyone currently in ``room``; returns deliveries."""
        message = {"event": event, "data": jsonable_encoder(payload)}
        targets = list(self._rooms.get(room, ()))

        delivered = 0
        for subscriber in targets:
            try:
                await subscriber.send_json(message)
                delivered += 1
            except Exception as e:
                log.warning("⚠️ Dropping subscriber in room %s: %s", room, e)
                self.leave(subscriber)
        return delivered


hub = RoomHub()
