"""Engine subpackage - items, receipts, pricing schemes and the register."""
from .models import Item, WeightedItem, Receipt, Quote
from .schemes import (
    PricingScheme,
    BunchedPricing,
    GroupedDiscount,
    Coupon,
    RainCheck,
    scheme_from_config,
)
from .register import Register

__all__ = [
    'Item', 'WeightedItem', 'Receipt', 'Quote',
    'PricingScheme', 'BunchedPricing', 'GroupedDiscount', 'Coupon', 'RainCheck',
    'scheme_from_config', 'Register',
]
