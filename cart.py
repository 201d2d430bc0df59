"""
Shopping cart state.

The cart owns an ordered list of line items and keeps it persisted as JSON
text under a single key of a mutable mapping (the Flask session in the web
app, a plain dict in tests). Every mutation writes the full list back and
notifies subscribers with a CartEvent.
"""
import json
import logging
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = "azuSpiritsCart"


@dataclass
class LineItem:
    """One product in the cart."""
    id: str
    name: str
    price: Decimal
    image: str = ""
    quantity: int = 1
    price_ref: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.price, Decimal):
            self.price = Decimal(str(self.price))

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "priceId": self.price_ref,
            "name": self.name,
            "price": str(self.price),
            "image": self.image,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        quantity = int(data["quantity"])
        if quantity < 1:
            raise ValueError(f"Invalid quantity {quantity} for {data['id']}")
        price = Decimal(str(data["price"]))
        if not price.is_finite() or price < 0:
            raise ValueError(f"Invalid price {price} for {data['id']}")
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            price=price,
            image=data.get("image", ""),
            quantity=quantity,
            price_ref=data.get("priceId"),
        )


@dataclass(frozen=True)
class CartEvent:
    """Emitted after every persisted mutation."""
    action: str  # added, removed, updated, cleared
    cart: "Cart"
    item: Optional[LineItem] = None


Listener = Callable[[CartEvent], None]


class Cart:
    """
    Ordered collection of line items bound to a storage slot.

    Usage:
        cart = Cart(session)
        cart.subscribe(lambda event: print(event.action))
        cart.add(LineItem(id="a", name="A", price=Decimal("52.00")))
        cart.total()
    """

    def __init__(self, storage, key: str = CART_STORAGE_KEY):
        self.storage = storage
        self.key = key
        self._listeners: List[Listener] = []
        self._items: List[LineItem] = self.load()

    @property
    def items(self):
        return tuple(self._items)

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(self.items)

    def get(self, item_id: str) -> Optional[LineItem]:
        return next((item for item in self._items if item.id == item_id), None)

    def subscribe(self, listener: Listener):
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def load(self) -> List[LineItem]:
        """
        Read the persisted item list.

        Missing or corrupted data means there is no cart yet, so this always
        returns a list and never raises.
        """
        saved = self.storage.get(self.key)
        if not saved:
            return []

        try:
            data = json.loads(saved)
            if not isinstance(data, list):
                raise TypeError(f"expected a list, got {type(data).__name__}")
            return [LineItem.from_dict(entry) for entry in data]
        except (ValueError, KeyError, TypeError, InvalidOperation) as e:
            logger.warning("Ignoring corrupted cart data under %r: %s", self.key, e)
            return []

    def persist(self, event: CartEvent):
        """Write the full list back to storage, then notify subscribers."""
        self.storage[self.key] = json.dumps([item.to_dict() for item in self._items])
        for listener in list(self._listeners):
            listener(event)

    def add(self, item: LineItem, quantity: int = 1) -> LineItem:
        """
        Add ``quantity`` units of ``item``.

        An existing line with the same id is incremented; otherwise a copy of
        the item is appended so the caller's object is never aliased.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError("quantity must be a positive integer")

        existing = self.get(item.id)
        if existing:
            existing.quantity += quantity
            line = existing
        else:
            line = replace(item, quantity=quantity)
            self._items.append(line)

        self.persist(CartEvent("added", self, line))
        return line

    def remove(self, item_id: str):
        removed = self.get(item_id)
        self._items = [item for item in self._items if item.id != item_id]
        self.persist(CartEvent("removed", self, removed))

    def set_quantity(self, item_id: str, quantity: int):
        item = self.get(item_id)
        if item is None:
            return

        if quantity <= 0:
            self.remove(item_id)
        else:
            item.quantity = quantity
            self.persist(CartEvent("updated", self, item))

    def total(self) -> Decimal:
        return sum((item.subtotal for item in self._items), Decimal("0"))

    def count(self) -> int:
        return sum(item.quantity for item in self._items)

    def clear(self):
        self._items = []
        self.persist(CartEvent("cleared", self))

    def to_list(self) -> List[dict]:
        return [item.to_dict() for item in self._items]
