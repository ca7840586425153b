"""
Receipt presentation - currency display and printed receipt text.

Conversions work on integer cents only; no float division is involved.
"""
import pandas as pd
from typing import Optional

from ..config.settings import get_settings, Settings


def format_cents(cents: int, settings: Optional[Settings] = None) -> str:
    """Format integer cents for display: 199 -> "$1.99", -50 -> "-$0.50"."""
    settings = settings or get_settings()
    sign = '-' if cents < 0 else ''
    dollars, remainder = divmod(abs(cents), 100)
    return f"{sign}{settings.currency_symbol}{dollars}.{remainder:02d}"


def render_receipt(receipt, settings: Optional[Settings] = None) -> str:
    """
    Render a receipt as printed text.

    Example:
        Receipt:
        Beans (8oz Can): $1.99
        ------------------
        TOTAL: $1.99
    """
    settings = settings or get_settings()

    lines = [settings.receipt_header]
    for item in receipt.items():
        lines.append(f"{item.name}: {format_cents(item.price(), settings)}")
    lines.append(settings.receipt_rule)
    lines.append(f"{settings.total_label}: {format_cents(receipt.total(), settings)}")
    return "\n".join(lines)


def receipt_frame(receipt, settings: Optional[Settings] = None) -> pd.DataFrame:
    """Tabular view of a receipt for display and CSV export."""
    settings = settings or get_settings()
    rows = [
        {
            'Line': line_num,
            'Name': item.name,
            'Price (cents)': item.price(),
            'Price': format_cents(item.price(), settings),
        }
        for line_num, item in enumerate(receipt.items(), start=1)
    ]
    return pd.DataFrame(rows, columns=['Line', 'Name', 'Price (cents)', 'Price'])
