import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio
from datetime import date

import plotly.express as px
import streamlit as st

from chestnut import config
from chestnut.currency import format_dollars
from chestnut.dates import (
    day_name,
    dates_in_week,
    format_short_date,
    format_week_range,
    is_current_or_future_week,
    shift_week,
    today_key,
    week_start_of,
)
from chestnut.functional import validate_budget, validate_purchase
from chestnut.history import spending_trend_figure, summaries_frame
from chestnut.lazy import by_date, by_name, iter_purchases, iter_week_days
from chestnut.memo import all_summaries, budget_remaining, summarize, weekly_average
from chestnut.storage import JsonFileStorage
from chestnut.store import StateStore

st.set_page_config(page_title="Chestnut", layout="centered")

config.configure_logging()


def build_store() -> StateStore:
    config.ensure_data_directories()
    store = StateStore(
        JsonFileStorage(config.STORAGE_PATH, default_budget=config.default_budget()),
        use_seed_data=config.use_seed_data(),
        budget_policy=config.budget_policy(),
        default_budget=config.default_budget(),
    )
    asyncio.run(store.load())
    return store


if "store" not in st.session_state:
    with st.spinner("Loading..."):
        st.session_state.store = build_store()

store: StateStore = st.session_state.store

if "week_key" not in st.session_state:
    st.session_state.week_key = week_start_of(date.today())

menu = st.sidebar.radio("Menu", ["🧾 Purchases", "📈 History"])
if config.use_seed_data():
    st.sidebar.caption("Seed data: changes are not saved.")

if menu == "🧾 Purchases":
    week_key = st.session_state.week_key
    store.ensure_week(week_key)
    week = store.week(week_key)
    summary = summarize(week)

    prev_col, title_col, next_col = st.columns([1, 4, 1])
    with prev_col:
        if st.button("◀", key="btn_prev_week"):
            st.session_state.week_key = shift_week(week_key, -1)
            st.rerun()
    with title_col:
        label = "This week" if week_key == week_start_of(date.today()) else format_week_range(week_key)
        st.markdown(f"### {label}")
        st.caption(format_week_range(week_key) if is_current_or_future_week(week_key) else f"{format_week_range(week_key)} · past week")
    with next_col:
        if st.button("▶", key="btn_next_week"):
            st.session_state.week_key = shift_week(week_key, 1)
            st.rerun()

    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("Spent", format_dollars(summary.total_spent))
    with k2:
        st.metric("Budget", format_dollars(summary.budget))
    with k3:
        remaining = budget_remaining(summary)
        st.metric("Left", format_dollars(max(remaining, 0)),
                  delta=None if remaining >= 0 else f"-{format_dollars(-remaining)} over")
    if week_key == week_start_of(date.today()):
        spent_today = sum(p.amount for p in iter_purchases(week.purchases, by_date(today_key())))
        st.caption(f"Today: {format_dollars(spent_today)}")

    with st.expander("✏️ Budget"):
        with st.form("budget_form"):
            budget_text = st.text_input("Weekly budget", value=str(summary.budget))
            if st.form_submit_button("Save budget"):
                result = validate_budget(budget_text)
                if result.is_right():
                    store.set_budget(week_key, result.get_or_else(summary.budget))
                    st.rerun()
                else:
                    st.warning(result.get_error()["message"])

    st.subheader("➕ Add Purchase")
    with st.form("purchase_form", clear_on_submit=True):
        c1, c2 = st.columns([3, 1])
        with c1:
            name = st.text_input("What")
        with c2:
            amount_text = st.text_input("$")
        if st.form_submit_button("Add"):
            result = validate_purchase(name, amount_text)
            if result.is_right():
                clean_name, amount = result.get_or_else(None)
                store.add_purchase(week_key, clean_name, amount)
                st.rerun()
            else:
                st.warning(result.get_error()["message"])

    week_dates = dates_in_week(week_key)
    query = st.text_input("🔎 Filter by name", key="purchase_filter")
    name_filter = by_name(query) if query.strip() else None
    for date_key, purchases in iter_week_days(week_key, week.purchases, name_filter):
        st.markdown(f"**{day_name(date_key)}** · {format_short_date(date_key)}")
        if not purchases:
            st.caption("No purchases")
            continue
        for p in purchases:
            row_name, row_amount, row_actions = st.columns([4, 2, 2])
            row_name.write(p.name)
            row_amount.write(format_dollars(p.amount))
            with row_actions.popover("⋯"):
                new_name = st.text_input("Name", value=p.name, key=f"name_{p.id}")
                new_amount = st.text_input("Amount", value=str(p.amount), key=f"amount_{p.id}")
                if st.button("Save", key=f"save_{p.id}"):
                    result = validate_purchase(new_name, new_amount)
                    if result.is_right():
                        clean_name, amount = result.get_or_else(None)
                        store.edit_purchase(week_key, p.id, name=clean_name, amount=amount)
                        st.rerun()
                    else:
                        st.warning(result.get_error()["message"])
                new_date = st.selectbox(
                    "Move to",
                    options=week_dates,
                    index=week_dates.index(p.date) if p.date in week_dates else 0,
                    format_func=lambda d: f"{day_name(d)} {format_short_date(d)}",
                    key=f"move_{p.id}",
                )
                if new_date != p.date and st.button("Move", key=f"btn_move_{p.id}"):
                    store.move_purchase(week_key, p.id, new_date)
                    st.rerun()
                if st.button("🗑 Delete", key=f"delete_{p.id}"):
                    store.delete_purchase(week_key, p.id)
                    st.rerun()

elif menu == "📈 History":
    st.title("📈 History")
    summaries = all_summaries(store.data)
    if not summaries:
        st.info("No weeks recorded yet.")
    else:
        st.metric("Weekly Average", format_dollars(weekly_average(summaries)))
        st.plotly_chart(spending_trend_figure(summaries), use_container_width=True)

        df = summaries_frame(summaries)
        over = int(df["is_over_budget"].sum())
        fig_status = px.pie(
            names=["Over budget", "Within budget"],
            values=[over, len(df) - over],
            title="Weeks over budget",
        )
        fig_status.update_layout(height=300)
        st.plotly_chart(fig_status, use_container_width=True)

        display_df = df.assign(
            week=df["start_date"].map(format_week_range),
            total_spent=df["total_spent"].map(format_dollars),
            budget=df["budget"].map(format_dollars),
        )[["week", "total_spent", "budget", "is_over_budget"]].rename(columns={
            "week": "Week",
            "total_spent": "Spent",
            "budget": "Budget",
            "is_over_budget": "Over",
        })
        st.dataframe(display_df, use_container_width=True)
        csv = df.to_csv(index=False)
        st.download_button("⬇ Download CSV", csv, file_name="weekly_history.csv")
