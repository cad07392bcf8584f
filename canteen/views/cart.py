"""
Cart store

The cart lives in the browser session only; nothing is persisted server-side
until checkout. Prices here are display snapshots; checkout reprices every
line from the live menu.
"""
from typing import Any, List, MutableMapping

from canteen.models.menu_item import MenuItem
from canteen.schemas.order import CartLine

CART_KEY = "cart"


class CartStore:
    """Cart held in a caller-owned mapping (normally ``request.session``)."""

    def __init__(self, storage: MutableMapping[str, Any], key: str = CART_KEY):
        self._storage = storage
        self._key = key

    @property
    def _entries(self) -> dict:
        return self._storage.setdefault(self._key, {})

    def _save(self, entries: dict) -> None:
        # Reassign so session backends notice nested changes
        self._storage[self._key] = entries

    @staticmethod
    def snapshot(item: MenuItem) -> dict:
        return {
            "id": item.id,
            "name": item.name,
            "category": item.category,
            "price": item.price,
        }

    def add(self, item: MenuItem, qty: int = 1) -> int:
        """Add ``qty`` of ``item``, merging with an existing line. Returns new qty."""
        if qty < 1:
            raise ValueError("qty must be at least 1")
        entries = dict(self._entries)
        entry = entries.get(item.id)
        new_qty = (entry["qty"] if entry else 0) + qty
        entries[item.id] = {"item": self.snapshot(item), "qty": new_qty}
        self._save(entries)
        return new_qty

    def update_qty(self, menu_id: str, qty: int) -> None:
        entries = dict(self._entries)
        if menu_id not in entries:
            return
        if qty <= 0:
            entries.pop(menu_id)
        else:
            entries[menu_id] = {**entries[menu_id], "qty": qty}
        self._save(entries)

    def remove(self, menu_id: str) -> None:
        entries = dict(self._entries)
        if entries.pop(menu_id, None) is not None:
            self._save(entries)

    def clear(self) -> None:
        self._save({})

    def lines(self) -> List[dict]:
        return [
            {
                "menu_id": menu_id,
                "item": entry["item"],
                "qty": entry["qty"],
                "subtotal": entry["item"]["price"] * entry["qty"],
            }
            for menu_id, entry in self._entries.items()
        ]

    @property
    def count(self) -> int:
        return sum(entry["qty"] for entry in self._entries.values())

    @property
    def total(self) -> int:
        return sum(entry["item"]["price"] * entry["qty"] for entry in self._entries.values())

    def is_empty(self) -> bool:
        return not self._entries

    def checkout_items(self) -> List[CartLine]:
        return [CartLine(menu_id=menu_id, qty=entry["qty"]) for menu_id, entry in self._entries.items()]
