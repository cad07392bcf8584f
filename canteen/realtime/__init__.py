from .hub import RoomHub, hub, user_room

__all__ = ["RoomHub", "hub", "user_room"]
