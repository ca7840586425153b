"""
Pricing Schemes - pluggable total-to-total transforms over a receipt.

Every scheme receives the whole receipt and returns the payable total for
all of it, pricing the items it does not care about at face value.

Coupons and rain checks are single-use tokens: their used flag lives on the
scheme instance and survives across receipts. Registers that share an
instance share that flag.
"""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable


def _percent(value) -> Decimal:
    return Decimal(str(value))


def _require(config: dict, key: str, scheme_type: str):
    if config.get(key) is None:
        raise ValueError(f"{scheme_type} scheme requires '{key}'")
    return config[key]


class PricingScheme(ABC):
    """Base class for all pricing schemes."""

    scheme_type: str = ''

    @abstractmethod
    def apply(self, receipt) -> int:
        """Return the adjusted total in cents for the full receipt."""

    @abstractmethod
    def describe(self) -> str:
        """Short human-readable summary, e.g. for receipts and UIs."""

    @abstractmethod
    def to_config(self) -> dict:
        """Configuration that rebuilds this scheme via scheme_from_config."""

    def state(self) -> dict:
        """Mutable usage state carried by the instance."""
        return {}

    def __repr__(self):
        return f"{type(self).__name__}({self.describe()!r})"


class BunchedPricing(PricingScheme):
    """
    Buy-N-pay-for-M bundles, e.g. "buy 3 Beans, pay for 2".

    Matching items are grouped into full bundles of `buy`; each bundle costs
    `pay` units and leftovers are charged individually. The unit price is
    the price of the first matching item.
    """

    scheme_type = 'bunched'

    def __init__(self, item_name: str, buy: int, pay: int):
        if buy < 1:
            raise ValueError(f"buy must be at least 1, got {buy}")
        if pay < 0:
            raise ValueError(f"pay must be non-negative, got {pay}")
        self.item_name = item_name
        self.buy = buy
        self.pay = pay

    def apply(self, receipt) -> int:
        items = receipt.items()
        matching = [item for item in items if item.name == self.item_name]
        if not matching:
            return receipt.total()

        unit_price = matching[0].price()
        full_bundles, leftover = divmod(len(matching), self.buy)
        bundled_total = (full_bundles * self.pay + leftover) * unit_price

        other_total = sum(item.price() for item in items if item.name != self.item_name)
        return bundled_total + other_total

    def describe(self) -> str:
        return f"Buy {self.buy} {self.item_name}, pay for {self.pay}"

    def to_config(self) -> dict:
        return {'type': self.scheme_type, 'item_name': self.item_name, 'buy': self.buy, 'pay': self.pay}

    @classmethod
    def from_config(cls, config: dict) -> 'BunchedPricing':
        return cls(
            item_name=_require(config, 'item_name', cls.scheme_type),
            buy=int(_require(config, 'buy', cls.scheme_type)),
            pay=int(_require(config, 'pay', cls.scheme_type)),
        )


class GroupedDiscount(PricingScheme):
    """
    Percentage off every group member when the whole group is bought together.

    The discount applies only when the number of receipt items whose name is
    in the group equals the number of distinct group names. Buying a second
    unit of any member therefore cancels the discount.
    """

    scheme_type = 'grouped'

    def __init__(self, group_names: Iterable[str], discount_percent: float):
        self.group_names = frozenset(group_names)
        self.discount_percent = discount_percent

    def apply(self, receipt) -> int:
        total = receipt.total()
        in_group = [item for item in receipt.items() if item.name in self.group_names]

        if len(in_group) != len(self.group_names):
            return total

        percent = _percent(self.discount_percent)
        discount = sum(int(Decimal(item.price()) * percent / 100) for item in in_group)
        return total - discount

    def describe(self) -> str:
        names = " + ".join(sorted(self.group_names))
        return f"{self.discount_percent}% off {names} together"

    def to_config(self) -> dict:
        return {
            'type': self.scheme_type,
            'group_names': sorted(self.group_names),
            'discount_percent': self.discount_percent,
        }

    @classmethod
    def from_config(cls, config: dict) -> 'GroupedDiscount':
        group_names = _require(config, 'group_names', cls.scheme_type)
        if isinstance(group_names, str):
            group_names = [name for name in group_names.split('|') if name]
        if not group_names:
            raise ValueError("grouped scheme requires at least one group name")
        return cls(
            group_names=group_names,
            discount_percent=float(_require(config, 'discount_percent', cls.scheme_type)),
        )


class Coupon(PricingScheme):
    """
    One-time percentage coupon for a single item.

    Discounts the first matching item only, truncating the discounted price
    toward zero. Once it has discounted something it is spent for good; a
    receipt without a match leaves it unused.
    """

    scheme_type = 'coupon'

    def __init__(self, item_name: str, discount_percent: float = 15):
        self.item_name = item_name
        self.discount_percent = discount_percent
        self.used = False

    def apply(self, receipt) -> int:
        if self.used:
            return receipt.total()

        factor = 1 - _percent(self.discount_percent) / 100
        total = 0
        applied = False

        for item in receipt.items():
            if item.name == self.item_name and not applied:
                total += int(Decimal(item.price()) * factor)
                applied = True
            else:
                total += item.price()

        self.used = applied
        return total

    def describe(self) -> str:
        return f"{self.discount_percent}% off one {self.item_name}"

    def to_config(self) -> dict:
        return {'type': self.scheme_type, 'item_name': self.item_name, 'discount_percent': self.discount_percent}

    def state(self) -> dict:
        return {'used': self.used}

    @classmethod
    def from_config(cls, config: dict) -> 'Coupon':
        discount_percent = config.get('discount_percent')
        return cls(
            item_name=_require(config, 'item_name', cls.scheme_type),
            discount_percent=15 if discount_percent is None else float(discount_percent),
        )


class RainCheck(PricingScheme):
    """
    Single-use price lock: the first matching item is charged special_price.

    Once honoured, the rain check never applies again, even on a new receipt.
    """

    scheme_type = 'rain_check'

    def __init__(self, item_name: str, special_price: int):
        self.item_name = item_name
        self.special_price = special_price
        self.applied = False

    def apply(self, receipt) -> int:
        total = 0
        applied_now = False

        for item in receipt.items():
            if item.name == self.item_name and not self.applied and not applied_now:
                total += self.special_price
                applied_now = True
            else:
                total += item.price()

        if applied_now:
            self.applied = True
        return total

    def describe(self) -> str:
        return f"Rain check: {self.item_name} at {self.special_price}c"

    def to_config(self) -> dict:
        return {'type': self.scheme_type, 'item_name': self.item_name, 'special_price': self.special_price}

    def state(self) -> dict:
        return {'applied': self.applied}

    @classmethod
    def from_config(cls, config: dict) -> 'RainCheck':
        return cls(
            item_name=_require(config, 'item_name', cls.scheme_type),
            special_price=int(_require(config, 'special_price', cls.scheme_type)),
        )


SCHEME_TYPES = {
    scheme.scheme_type: scheme
    for scheme in (BunchedPricing, GroupedDiscount, Coupon, RainCheck)
}


def scheme_from_config(config: dict) -> PricingScheme:
    """
    Build a fresh scheme instance from a config dict.

    The dict carries a 'type' key (one of SCHEME_TYPES) plus that type's
    parameters. Raises ValueError for unknown types or missing parameters.
    """
    scheme_type = config.get('type')
    if scheme_type not in SCHEME_TYPES:
        raise ValueError(f"invalid scheme type '{scheme_type}', must be one of: {sorted(SCHEME_TYPES)}")
    return SCHEME_TYPES[scheme_type].from_config(config)
