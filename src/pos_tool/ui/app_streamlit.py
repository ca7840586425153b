"""
Streamlit UI for the POS register.

Features:
- Scan fixed-price and weighted items
- Live receipt grid and subtotal with scheme trace
- Add pricing schemes on the fly
- Finalize, print and export the receipt
"""
import streamlit as st
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from pos_tool.engine import Item, WeightedItem, Register, scheme_from_config
from pos_tool.engine.formatting import format_cents, receipt_frame
from pos_tool.engine.scheme_loader import SchemeLoader
from pos_tool.config.settings import get_settings
from pos_tool.store import Store


st.set_page_config(
    page_title="POS Register",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_settings_cached():
    """Get cached settings."""
    return get_settings()


settings = get_settings_cached()

if 'register' not in st.session_state:
    loader = SchemeLoader(settings.compiled_schemes)
    st.session_state.register = Register(loader.build_schemes())
    st.session_state.loader_error = loader.error
    st.session_state.last_receipt = None

register: Register = st.session_state.register


# ============================================================================
# SIDEBAR: Pricing Schemes
# ============================================================================
with st.sidebar:
    st.header("🏷️ Pricing Schemes")

    if st.session_state.loader_error:
        st.warning(st.session_state.loader_error)

    if register.pricing_schemes:
        for position, scheme in enumerate(register.pricing_schemes, start=1):
            used = any(scheme.state().values())
            st.caption(f"**{position}.** {scheme.describe()}" + (" _(used)_" if used else ""))
        st.info("The last scheme in the list sets the subtotal.")
    else:
        st.caption("No schemes configured")

    st.divider()

    with st.form("add_scheme"):
        scheme_type = st.selectbox("Type", ["bunched", "grouped", "coupon", "rain_check"])
        item_name = st.text_input("Item name")
        group_names = st.text_input("Group names (separate with |)")
        col_a, col_b = st.columns(2)
        buy = col_a.number_input("Buy", min_value=1, value=3, step=1)
        pay = col_b.number_input("Pay", min_value=0, value=2, step=1)
        discount_percent = st.number_input("Discount %", value=15.0, step=1.0)
        special_price = st.number_input("Special price (cents)", min_value=0, value=0, step=1)

        if st.form_submit_button("Add Scheme"):
            config = {
                'type': scheme_type,
                'item_name': item_name or None,
                'group_names': group_names or None,
                'buy': int(buy),
                'pay': int(pay),
                'discount_percent': discount_percent,
                'special_price': int(special_price),
            }
            try:
                register.add_pricing_scheme(scheme_from_config(config))
                st.rerun()
            except ValueError as e:
                st.error(str(e))


# ============================================================================
# MAIN CONTENT
# ============================================================================
st.title("POS Register")
st.caption(f"Store v{Store.version} | {datetime.now().strftime('%Y-%m-%d')}")

col1, col2 = st.columns([1.2, 1.8], gap="large")

with col1:
    st.subheader("Scan")
    tab_fixed, tab_weighted = st.tabs(["Fixed price", "By weight"])

    with tab_fixed:
        with st.form("scan_fixed", clear_on_submit=True):
            name = st.text_input("Name")
            price_each = st.number_input("Price (cents)", min_value=0, value=199, step=1)
            if st.form_submit_button("Scan"):
                register.scan(Item(name=name, price_each=int(price_each)))
                st.rerun()

    with tab_weighted:
        with st.form("scan_weighted", clear_on_submit=True):
            name = st.text_input("Name")
            price_per_unit = st.number_input("Price per unit (cents)", min_value=0, value=199, step=1)
            weight = st.number_input("Weight", min_value=0.0, value=1.0, step=0.1)
            if st.form_submit_button("Scan"):
                register.scan(WeightedItem(name=name, price_per_unit=int(price_per_unit), weight=weight))
                st.rerun()

with col2:
    st.subheader("Current Receipt")
    receipt = register.receipt

    if len(receipt) == 0:
        st.caption("Nothing scanned yet")
    else:
        st.dataframe(receipt_frame(receipt, settings), hide_index=True, use_container_width=True)
        st.metric("Raw Total", format_cents(receipt.total(), settings))

        if st.button("Compute Subtotal"):
            quote = register.quote()
            st.metric("Subtotal", format_cents(quote.subtotal, settings),
                      delta=f"-{format_cents(quote.savings, settings)}" if quote.savings else None)
            with st.expander("🔍 Scheme Trace", expanded=True):
                st.text(quote.get_trace_text())

        if st.button("Finalize", type="primary"):
            st.session_state.last_receipt = register.total()
            st.rerun()

    last_receipt = st.session_state.last_receipt
    if last_receipt is not None:
        st.divider()
        st.subheader("Last Receipt")
        st.code(last_receipt.output(), language=None)
        st.download_button(
            "Export CSV",
            receipt_frame(last_receipt, settings).to_csv(index=False),
            file_name=f"receipt_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv",
            mime="text/csv",
        )
