import pytest
import sys
import os

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from dataclasses import FrozenInstanceError

from pos_tool.engine import Item, WeightedItem, Receipt
from pos_tool.engine.formatting import format_cents, render_receipt, receipt_frame
from pos_tool.config.settings import Settings


@pytest.mark.parametrize("price_per_unit, weight, expected", [
    (199, 1.5, 299),    # 298.5 rounds up
    (1, 2.5, 3),        # half away from zero, not to even
    (100, 0.333, 33),
    (199, 0, 0),
    (250, 2, 500),
])
def test_weighted_item_price(price_per_unit, weight, expected):
    assert WeightedItem("Apples", price_per_unit=price_per_unit, weight=weight).price() == expected


def test_items_are_immutable():
    item = Item("Beans", 199)
    with pytest.raises(FrozenInstanceError):
        item.price_each = 1


def test_negative_inputs_rejected():
    with pytest.raises(ValueError):
        Item("Beans", -1)
    with pytest.raises(ValueError):
        WeightedItem("Apples", price_per_unit=-199, weight=1.0)
    with pytest.raises(ValueError):
        WeightedItem("Apples", price_per_unit=199, weight=-0.5)


def test_empty_name_is_allowed():
    assert Item("", 10).price() == 10


def test_receipt_keeps_scan_order_and_duplicates():
    receipt = Receipt()
    receipt.add(Item("Beans", 199))
    receipt.add(Item("Pencil", 99))
    receipt.add(Item("Beans", 199))

    assert [item.name for item in receipt.items()] == ["Beans", "Pencil", "Beans"]
    assert len(receipt) == 3


def test_receipt_items_is_a_snapshot():
    receipt = Receipt()
    receipt.add(Item("Beans", 199))

    snapshot = receipt.items()
    receipt.add(Item("Pencil", 99))

    assert len(snapshot) == 1
    assert isinstance(snapshot, tuple)
    assert len(receipt.items()) == 2


def test_receipt_total_reflects_current_contents():
    receipt = Receipt()
    assert receipt.total() == 0
    receipt.add(Item("Beans", 199))
    assert receipt.total() == 199
    receipt.add(WeightedItem("Apples", price_per_unit=199, weight=1.5))
    assert receipt.total() == 498


def test_receipt_clear():
    receipt = Receipt()
    receipt.add(Item("Beans", 199))
    snapshot = receipt.items()

    receipt.clear()

    assert receipt.total() == 0
    assert receipt.items() == ()
    assert snapshot[0].name == "Beans"


@pytest.mark.parametrize("cents, expected", [
    (199, "$1.99"),
    (0, "$0.00"),
    (5, "$0.05"),
    (100000, "$1000.00"),
    (-50, "-$0.50"),
])
def test_format_cents(cents, expected):
    assert format_cents(cents) == expected


def test_render_empty_receipt():
    assert render_receipt(Receipt()) == "Receipt:\n------------------\nTOTAL: $0.00"


def test_render_weighted_line():
    receipt = Receipt()
    receipt.add(WeightedItem("Apples", price_per_unit=199, weight=1.5))
    assert "Apples: $2.99\n" in render_receipt(receipt)


def test_receipt_frame():
    receipt = Receipt()
    receipt.add(Item("Beans", 199))
    receipt.add(Item("Pencil", 99))

    df = receipt_frame(receipt)

    assert list(df.columns) == ['Line', 'Name', 'Price (cents)', 'Price']
    assert df['Name'].tolist() == ["Beans", "Pencil"]
    assert df['Price (cents)'].sum() == receipt.total()
    assert df['Price'].tolist() == ["$1.99", "$0.99"]


def test_receipt_frame_empty():
    df = receipt_frame(Receipt())
    assert df.empty
    assert 'Name' in df.columns


def test_settings_load_from_rules_dir(tmp_path):
    settings = Settings.load(tmp_path)
    assert settings.schemes_csv == tmp_path / 'schemes.csv'
    assert settings.compiled_schemes == tmp_path / 'compiled_schemes.json'
    assert Settings.load().schemes_csv.name == 'schemes.csv'
    assert Settings.load().schemes_csv.parent.name == 'rules'
