from canteen.core.constants import EVENT_BILL_NEW, EVENT_ORDER_NEW, EVENT_ORDER_UPDATE, STAFF_ROOM
from canteen.realtime.hub import RoomHub, hub as default_hub, user_room


async def notify_checkout(order: dict, bill: dict, hub: RoomHub = default_hub) -> None:
    await hub.emit(STAFF_ROOM, EVENT_ORDER_NEW, order)
    await hub.emit(user_room(order["userId"]), EVENT_BILL_NEW, bill)


async def notify_order_update(order: dict, hub: RoomHub = default_hub) -> None:
    await hub.emit(STAFF_ROOM, EVENT_ORDER_UPDATE, order)
    await hub.emit(user_room(order["userId"]), EVENT_ORDER_UPDATE, order)
