"""
POS Tool Package

A point-of-sale register for scanning items into a receipt.
Computes the payable subtotal by running the register's pricing schemes
(bundles, grouped discounts, coupons, rain checks) over the receipt.
"""

__version__ = "0.1.0"
