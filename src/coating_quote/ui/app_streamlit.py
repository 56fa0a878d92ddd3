"""
Streamlit UI for the Coating Quote engine.

Features:
- Four-step quote wizard with per-step validation
- Live price preview as fields change
- Breakdown table with CSV export
- Checkout request preview
"""
import json
import uuid
from dataclasses import asdict
from datetime import datetime

import pandas as pd
import streamlit as st

from coating_quote import __version__
from coating_quote.config.settings import get_settings
from coating_quote.engine import PricingEngine
from coating_quote.engine.models import (
    Material, PrepLevel, MATERIAL_INFO, PREP_LEVEL_INFO, DEFAULT_QUOTE_VALUES,
    DIMENSION_MIN_MM, DIMENSION_MAX_MM, TURNAROUND_MIN_DAYS, TURNAROUND_MAX_DAYS,
    QUANTITY_MIN, QUANTITY_MAX,
)
from coating_quote.services.validation_service import validate
from coating_quote.services.checkout_service import build_checkout_request, CheckoutError
from coating_quote.ui.formatting import format_price
from coating_quote.ui.wizard import STEPS, step_errors, completed_steps, can_open_step


st.set_page_config(
    page_title="Powder Coating Quote",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_engine():
    """Get cached engine instance."""
    return PricingEngine()


@st.cache_resource
def get_settings_cached():
    """Get cached settings."""
    return get_settings()


try:
    engine = get_engine()
    settings = get_settings_cached()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()

currency = engine.rates.currency


# ============================================================================
# SESSION STATE
# ============================================================================
if 'quote' not in st.session_state:
    st.session_state.quote = dict(DEFAULT_QUOTE_VALUES)
if 'step' not in st.session_state:
    st.session_state.step = 1
if 'quote_id' not in st.session_state:
    st.session_state.quote_id = f"Q-{uuid.uuid4().hex[:8].upper()}"

quote = st.session_state.quote


# ============================================================================
# MAIN CONTENT
# ============================================================================
st.title("Powder Coating Quote")
st.caption(f"v{__version__} | Prices in {currency} | {datetime.now().strftime('%Y-%m-%d')}")

col1, col2 = st.columns([1.8, 1.2], gap="large")

with col1:
    current = next(s for s in STEPS if s.number == st.session_state.step)
    st.subheader(f"Step {current.number}: {current.name}")

    with st.container(border=True):
        if current.number == 1:
            c1, c2, c3 = st.columns(3)
            for column, name, label in ((c1, 'length_mm', "Length (mm)"),
                                        (c2, 'width_mm', "Width (mm)"),
                                        (c3, 'height_mm', "Height (mm)")):
                with column:
                    quote[name] = st.number_input(
                        label, value=float(quote[name]), step=10.0,
                        min_value=0.0, max_value=float(DIMENSION_MAX_MM * 2),
                        help=f"{DIMENSION_MIN_MM}-{DIMENSION_MAX_MM} mm",
                    )

        elif current.number == 2:
            options = [m.value for m in Material]
            quote['material'] = st.radio(
                "Material", options, index=options.index(quote['material']),
                format_func=lambda v: f"{MATERIAL_INFO[Material(v)]['label']} - {MATERIAL_INFO[Material(v)]['description']}",
            )

        elif current.number == 3:
            options = [p.value for p in PrepLevel]
            quote['prep_level'] = st.radio(
                "Surface Preparation", options, index=options.index(quote['prep_level']),
                format_func=lambda v: f"{PREP_LEVEL_INFO[PrepLevel(v)]['label']} - {PREP_LEVEL_INFO[PrepLevel(v)]['description']}",
            )

        else:
            quote['color'] = st.text_input("RAL Colour Code", value=quote['color'], placeholder="9005")
            c1, c2 = st.columns(2)
            with c1:
                quote['quantity'] = st.number_input(
                    "Quantity", value=int(quote['quantity']), step=1,
                    min_value=0, max_value=QUANTITY_MAX * 10,
                    help=f"{QUANTITY_MIN}-{QUANTITY_MAX} parts",
                )
            with c2:
                quote['turnaround_days'] = st.number_input(
                    "Turnaround (days)", value=int(quote['turnaround_days']), step=1,
                    min_value=0, max_value=TURNAROUND_MAX_DAYS * 2,
                    help=f"{TURNAROUND_MIN_DAYS}-{TURNAROUND_MAX_DAYS} days",
                )
            quote['is_rush'] = st.checkbox(
                "Rush order", value=quote['is_rush'],
                help=f"Surcharge applies to turnaround under {engine.rates.rush_threshold_days} days",
            )

        errors = step_errors(quote, current)
        for message in errors.values():
            st.error(message)

    nav1, nav2 = st.columns(2)
    with nav1:
        if current.number > 1 and st.button("← Back", use_container_width=True):
            st.session_state.step -= 1
            st.rerun()
    with nav2:
        if current.number < len(STEPS) and st.button(
            "Next →", type="primary", disabled=bool(errors), use_container_width=True
        ):
            st.session_state.step += 1
            st.rerun()


# ============================================================================
# LIVE PRICE PREVIEW
# ============================================================================
with col2:
    st.subheader("Quote Summary")

    with st.container(border=True):
        result = validate(quote)
        if not result.valid:
            st.info("Complete every step to see your price.")
            st.caption(f"{len(result.errors)} field(s) need attention.")
        else:
            output = engine.calculate(result.quote_input)

            st.metric("Total", format_price(output.total_price, output.currency))

            breakdown = pd.DataFrame([
                {"Item": "Base price", "Amount": output.base_price},
                {"Item": "Prep surcharge", "Amount": output.prep_surcharge},
                {"Item": "Rush surcharge", "Amount": output.rush_surcharge},
                {"Item": "Total", "Amount": output.total_price},
            ])
            display = breakdown.copy()
            display["Amount"] = display["Amount"].map(lambda a: format_price(a, output.currency))
            st.dataframe(display, use_container_width=True, hide_index=True)

            with st.expander("🔍 Price Derivation"):
                for t in output.trace:
                    if t.value:
                        st.caption(f"**{t.step}**: {t.description} = `{t.value}`")
                    else:
                        st.caption(f"**{t.step}**: {t.description}")

            export_df = pd.DataFrame([{
                **result.quote_input.to_dict(),
                **output.to_dict(),
            }])
            st.download_button(
                "📥 CSV",
                data=export_df.to_csv(index=False),
                file_name=f"quote_{st.session_state.quote_id}.csv",
                mime="text/csv",
                use_container_width=True
            )

            st.divider()
            email = st.text_input("Email (optional)", key="customer_email")
            if st.button("Prepare Checkout", type="primary", use_container_width=True):
                try:
                    checkout = build_checkout_request(
                        quote_id=st.session_state.quote_id,
                        quote_input=result.quote_input,
                        quote_output=output,
                        customer_email=email or None,
                        settings=settings,
                    )
                except CheckoutError as e:
                    st.error(str(e))
                else:
                    st.code(json.dumps(asdict(checkout), indent=2), language="json")


# ============================================================================
# SIDEBAR: Progress
# ============================================================================
# Drawn after the step widgets so progress reflects this run's edits
with st.sidebar:
    st.header("Quote Progress")
    st.caption(f"Quote ID: `{st.session_state.quote_id}`")

    done = completed_steps(quote)
    for step in STEPS:
        marker = "✅" if step.number in done else ("➡️" if step.number == st.session_state.step else "⬜")
        allowed = can_open_step(quote, step.number, st.session_state.step)
        if st.button(f"{marker} {step.number}. {step.name}", key=f"nav_{step.number}",
                     disabled=not allowed, use_container_width=True):
            st.session_state.step = step.number
            st.rerun()

    st.divider()
    if st.button("↺ Reset Quote", use_container_width=True):
        st.session_state.quote = dict(DEFAULT_QUOTE_VALUES)
        st.session_state.step = 1
        st.rerun()

