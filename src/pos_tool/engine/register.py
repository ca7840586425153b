"""
Register - scans items into the active receipt and prices it.

Subtotal policy: the register starts from the raw receipt total and then
lets each pricing scheme, in the order it was added, replace that running
total with its own result for the untouched receipt. Results are not
compounded, so the last scheme in the list decides the subtotal.
"""
from typing import Iterable, Optional

from .formatting import format_cents
from .models import Quote, Receipt, SKU
from .schemes import PricingScheme


class Register:
    """
    A single checkout lane: one active receipt and an ordered scheme list.

    Not thread-safe. Callers that share a register across threads must
    serialise scan/subtotal/total themselves, since coupon and rain check
    usage flags are mutated during subtotal().
    """

    def __init__(self, pricing_schemes: Optional[Iterable[PricingScheme]] = None):
        self._receipt = Receipt()
        self._pricing_schemes: list[PricingScheme] = list(pricing_schemes or [])

    @property
    def receipt(self) -> Receipt:
        """The active (not yet finalized) receipt."""
        return self._receipt

    @property
    def pricing_schemes(self) -> tuple[PricingScheme, ...]:
        return tuple(self._pricing_schemes)

    def scan(self, item: SKU):
        """Add an item to the active receipt."""
        self._receipt.add(item)

    def add_pricing_scheme(self, scheme: PricingScheme):
        """Append a scheme; it takes part in subsequent subtotals only."""
        self._pricing_schemes.append(scheme)

    def quote(self) -> Quote:
        """
        Evaluate the pricing schemes with a step-by-step trace.

        Each scheme is applied exactly once, so single-use schemes are
        consumed by this call.
        """
        raw_total = self._receipt.total()
        quote = Quote(raw_total=raw_total, subtotal=raw_total, item_count=len(self._receipt))
        quote.add_trace("Raw Total", f"{quote.item_count} item(s) at face value", format_cents(raw_total))

        if not self._pricing_schemes:
            quote.add_trace("Schemes", "No pricing schemes configured")

        for scheme in self._pricing_schemes:
            quote.subtotal = scheme.apply(self._receipt)
            quote.add_trace("Scheme Applied", scheme.describe(), format_cents(quote.subtotal))

        return quote

    def subtotal(self) -> int:
        """Payable amount for the active receipt, in cents."""
        return self.quote().subtotal

    def total(self) -> Receipt:
        """Finalize: detach the active receipt and start a fresh one."""
        finished = self._receipt
        self._receipt = Receipt()
        return finished
