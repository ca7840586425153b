"""
Data models for the register.

Prices are integer cents everywhere. Real-number inputs (weights) are
converted with Decimal and rounded explicitly.
"""
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterator, Optional, Protocol


class SKU(Protocol):
    """Anything scannable: a name and an integer price in cents."""
    name: str

    def price(self) -> int:
        ...


@dataclass(frozen=True)
class Item:
    """A fixed-price item."""
    name: str
    price_each: int

    def __post_init__(self):
        if self.price_each < 0:
            raise ValueError(f"price_each must be non-negative, got {self.price_each}")

    def price(self) -> int:
        return self.price_each


@dataclass(frozen=True)
class WeightedItem:
    """An item priced by weight, e.g. produce at 199 cents per pound."""
    name: str
    price_per_unit: int
    weight: float

    def __post_init__(self):
        if self.price_per_unit < 0:
            raise ValueError(f"price_per_unit must be non-negative, got {self.price_per_unit}")
        if self.weight < 0:
            raise ValueError(f"weight must be non-negative, got {self.weight}")

    def price(self) -> int:
        """Rate times weight, rounded half away from zero (298.5 -> 299)."""
        amount = Decimal(self.price_per_unit) * Decimal(str(self.weight))
        return int(amount.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


class Receipt:
    """
    Ordered log of the items scanned in one transaction.

    The total is never cached: it is recomputed from the items on every call.
    """

    def __init__(self):
        self._items: list[SKU] = []

    def add(self, item: SKU):
        """Append an item to the end of the receipt."""
        self._items.append(item)

    def items(self) -> tuple[SKU, ...]:
        """Snapshot of the scanned items, in scan order."""
        return tuple(self._items)

    def total(self) -> int:
        """Undiscounted total in cents."""
        return sum(item.price() for item in self._items)

    def clear(self):
        """Remove all items to start a new transaction."""
        self._items.clear()

    def output(self) -> str:
        """Human-readable receipt text."""
        from .formatting import render_receipt
        return render_receipt(self)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[SKU]:
        return iter(self.items())

    def __repr__(self):
        return f"Receipt(items={len(self._items)}, total={self.total()})"


@dataclass
class TraceStep:
    """A single step in the subtotal evaluation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class Quote:
    """Result of evaluating a register's pricing schemes over its receipt."""
    raw_total: int
    subtotal: int
    item_count: int
    trace: list[TraceStep] = field(default_factory=list)

    @property
    def savings(self) -> int:
        return self.raw_total - self.subtotal

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the quote trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)
