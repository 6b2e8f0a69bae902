"""
Streamlit Dashboard for Production Ledger

The screen the floor manager uses every day: log production, record
payments, see the month's balance.

DESIGN PRINCIPLES:
1. Live preview of weight and amount before saving
2. Explicit confirmation before anything is deleted or replaced
3. Clear error messages in simple language
4. Month selector drives every number on the page

All ledger logic lives in LedgerFlow. This module only renders and
collects input.
"""

import asyncio
from datetime import date

import streamlit as st

from production_ledger.config import get_settings
from production_ledger.ledger import (
    ALL_PERIODS,
    LedgerError,
    PaymentRejectedError,
    calculate_production_weight,
    calculate_total_amount,
    current_period_key,
    period_label,
)
from production_ledger.ledger.confirmation import ConfirmIntent
from production_ledger.models.ledger import EntryDraft, PaymentDraft
from production_ledger.orchestrator import LedgerFlow, create_app_components
from production_ledger.services.storage import StorageError


# Page configuration
st.set_page_config(
    page_title="Production Ledger",
    page_icon="🏭",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for the stats cards
st.markdown("""
<style>
    .stat-card {
        padding: 16px;
        border-radius: 12px;
        border: 1px solid #e2e8f0;
        background-color: #ffffff;
    }
    .stat-label {
        font-size: 0.8em;
        font-weight: 600;
        color: #64748b;
        text-transform: uppercase;
    }
    .stat-value {
        font-size: 1.6em;
        font-weight: bold;
        color: #0f172a;
    }
    .stat-value.good { color: #059669; }
    .stat-value.bad { color: #e11d48; }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_flow() -> LedgerFlow:
    """Get or create the ledger flow (cached)."""
    return create_app_components()


def format_money(value: float) -> str:
    symbol = get_settings().app.currency_symbol
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def stat_card(label: str, value: str, tone: str = "") -> None:
    st.markdown(f"""
    <div class="stat-card">
        <div class="stat-label">{label}</div>
        <div class="stat-value {tone}">{value}</div>
    </div>
    """, unsafe_allow_html=True)


def main():
    """Main application entry point."""
    flow = get_flow()

    if "pending_delete" not in st.session_state:
        st.session_state.pending_delete = None  # (intent, record_id)
    if "ai_insight" not in st.session_state:
        st.session_state.ai_insight = ""

    # Sidebar: period selection and data management
    st.sidebar.title("🏭 Production")
    view = flow.dashboard(ALL_PERIODS)
    period_options = [ALL_PERIODS] + view.available_periods
    default_period = period_options.index(current_period_key())
    period_key = st.sidebar.selectbox(
        "Period",
        options=period_options,
        index=default_period,
        format_func=period_label,
    )

    st.sidebar.markdown("---")
    render_data_management(flow)

    view = flow.dashboard(period_key)

    st.title(f"📊 {period_label(period_key)}")
    render_stats(view)
    render_insight(flow, period_key, has_entries=bool(view.entries))

    st.markdown("---")
    production_tab, payments_tab = st.tabs(["🧵 Production", "💳 Payments"])

    with production_tab:
        render_production_form(flow)
        render_production_history(flow, view)

    with payments_tab:
        render_payment_form(flow)
        render_payment_history(flow, view)


def render_stats(view) -> None:
    """Four headline numbers for the selected period."""
    stats = view.stats
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        stat_card("Net Weight", f"{stats.total_weight:,.2f} kg")
    with col2:
        stat_card("Total Value", format_money(stats.total_value))
    with col3:
        stat_card("Total Paid", format_money(stats.total_paid))
    with col4:
        stat_card(
            "Outstanding",
            format_money(stats.outstanding_balance),
            tone="good" if stats.is_overpaid else "bad",
        )


def render_insight(flow: LedgerFlow, period_key: str, has_entries: bool) -> None:
    """AI analysis of the most recent entries."""
    if st.button("✨ AI Insights", disabled=not has_entries):
        with st.spinner("Analyzing production data..."):
            st.session_state.ai_insight = run_async(flow.request_insight(period_key))

    if st.session_state.ai_insight:
        with st.expander("✨ AI Insights", expanded=True):
            st.markdown(st.session_state.ai_insight)
            if st.button("Dismiss"):
                st.session_state.ai_insight = ""
                st.rerun()


def render_production_form(flow: LedgerFlow) -> None:
    """New production entry, with a live weight/amount preview."""
    st.subheader("➕ New Production Entry")
    defaults = flow.store.form_defaults()

    col1, col2, col3 = st.columns(3)
    with col1:
        entry_date = st.date_input("Date", value=date.today(), key="entry_date")
        running_drum = st.number_input(
            "Running Drum", value=int(defaults["running_drum"]), step=1, key="running_drum",
        )
    with col2:
        open_stock = st.number_input("Open Stock (g)", value=0, step=1, key="open_stock")
        closing_stock = st.number_input("Closing Stock (g)", value=0, step=1, key="closing_stock")
    with col3:
        cones = st.number_input("Production (cones)", value=0, step=1, key="cones")
        rate = st.number_input(
            "Rate per Kg", value=float(defaults["rate_per_kg"]), step=0.5, key="rate",
        )

    weight = calculate_production_weight(running_drum, open_stock, closing_stock, cones)
    amount = calculate_total_amount(weight, rate)
    st.info(f"**Weight:** {weight:.3f} kg  |  **Amount:** {format_money(amount)}")

    if st.button("💾 Save Entry", type="primary"):
        try:
            flow.record_production(EntryDraft(
                date=entry_date,
                running_drum=running_drum,
                open_stock_grams=open_stock,
                production_cones=cones,
                closing_stock_grams=closing_stock,
                rate_per_kg=rate,
            ))
            st.success("Entry saved.")
            st.rerun()
        except StorageError as e:
            st.error(f"Could not save the entry: {e}")


def render_payment_form(flow: LedgerFlow) -> None:
    """New payment."""
    st.subheader("➕ Record Payment")
    col1, col2 = st.columns(2)
    with col1:
        payment_date = st.date_input("Date", value=date.today(), key="payment_date")
        amount = st.number_input("Amount", value=0.0, step=100.0, key="payment_amount")
    with col2:
        note = st.text_input("Note", placeholder="Cash, bank transfer...", key="payment_note")

    if st.button("💾 Save Payment", type="primary"):
        try:
            flow.record_payment(PaymentDraft(date=payment_date, amount=amount, note=note))
            st.success("Payment saved.")
            st.rerun()
        except PaymentRejectedError:
            st.error("Please enter an amount greater than zero.")
        except StorageError as e:
            st.error(f"Could not save the payment: {e}")


def render_delete_prompt(flow: LedgerFlow, record_id: str, intent: ConfirmIntent) -> None:
    """Inline "are you sure" for one record."""
    pending = st.session_state.pending_delete
    if pending != (intent, record_id):
        if st.button("🗑️", key=f"delete_{record_id}"):
            st.session_state.pending_delete = (intent, record_id)
            st.rerun()
        return

    st.warning(intent.prompt)
    yes, no = st.columns(2)
    with yes:
        if st.button("Yes", key=f"confirm_{record_id}"):
            remove = flow.remove_entry if intent == ConfirmIntent.DELETE_ENTRY else flow.remove_payment
            remove(record_id, confirm=lambda _intent: True)
            st.session_state.pending_delete = None
            st.rerun()
    with no:
        if st.button("No", key=f"cancel_{record_id}"):
            remove = flow.remove_entry if intent == ConfirmIntent.DELETE_ENTRY else flow.remove_payment
            remove(record_id, confirm=lambda _intent: False)
            st.session_state.pending_delete = None
            st.rerun()


def render_production_history(flow: LedgerFlow, view) -> None:
    st.subheader("📜 Production History")
    if not view.entries:
        st.info("No production entries for this period.")
        return

    header = st.columns([2, 1, 1, 1, 1, 1, 1, 2, 1])
    for col, title in zip(header, [
        "Date", "Drum", "Open (g)", "Cones", "Close (g)", "Rate", "Weight (kg)", "Amount", "",
    ]):
        col.markdown(f"**{title}**")

    for entry in view.entries:
        cols = st.columns([2, 1, 1, 1, 1, 1, 1, 2, 1])
        cols[0].write(entry.date)
        cols[1].write(entry.running_drum)
        cols[2].write(entry.open_stock_grams)
        cols[3].write(entry.production_cones)
        cols[4].write(entry.closing_stock_grams)
        cols[5].write(entry.rate_per_kg)
        cols[6].write(f"{entry.production_weight:.3f}")
        cols[7].write(format_money(entry.total_amount))
        with cols[8]:
            render_delete_prompt(flow, entry.id, ConfirmIntent.DELETE_ENTRY)


def render_payment_history(flow: LedgerFlow, view) -> None:
    st.subheader("📜 Payment History")
    if not view.payments:
        st.info("No payments for this period.")
        return

    for payment in view.payments:
        cols = st.columns([2, 2, 4, 1])
        cols[0].write(payment.date)
        cols[1].write(format_money(payment.amount))
        cols[2].write(payment.note or "-")
        with cols[3]:
            render_delete_prompt(flow, payment.id, ConfirmIntent.DELETE_PAYMENT)


def render_data_management(flow: LedgerFlow) -> None:
    """Exports, full backup and restore."""
    st.sidebar.markdown("### 💾 Data")

    production_csv = flow.export_production_csv()
    st.sidebar.download_button(
        "Production CSV",
        data=production_csv.content,
        file_name=production_csv.filename,
        mime=production_csv.mime_type,
    )
    payments_csv = flow.export_payments_csv()
    st.sidebar.download_button(
        "Payments CSV",
        data=payments_csv.content,
        file_name=payments_csv.filename,
        mime=payments_csv.mime_type,
    )
    backup = flow.export_backup()
    st.sidebar.download_button(
        "Full Backup (JSON)",
        data=backup.content,
        file_name=backup.filename,
        mime=backup.mime_type,
    )

    st.sidebar.markdown("### ♻️ Restore")
    uploaded = st.sidebar.file_uploader("Backup file", type=["json"])
    if uploaded is None:
        return

    st.sidebar.warning(ConfirmIntent.RESTORE_BACKUP.prompt)
    replace_ok = st.sidebar.checkbox("Yes, replace my current data")
    if st.sidebar.button("Restore"):
        try:
            result = flow.import_file(
                uploaded.name,
                uploaded.getvalue(),
                confirm=lambda _intent: replace_ok,
            )
        except LedgerError as e:
            st.sidebar.error(f"Error parsing file. {e}")
            return
        except StorageError as e:
            st.sidebar.error(f"Could not save the restored data: {e}")
            return
        if result.restored:
            st.sidebar.success(result.message)
            st.rerun()
        else:
            st.sidebar.info(result.message)


if __name__ == "__main__":
    main()
