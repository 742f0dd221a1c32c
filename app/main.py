import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from app.config import load_config
from budgeting.domain import (
    BUDGET_CATEGORIES,
    EXTENDED_CATEGORIES,
    RECURRING_TYPES,
    SpendStatus,
    Transaction,
    TransactionType,
)
from budgeting.errors import BudgetNotFoundError, ValidationError
from budgeting.goals import contribute, goal_progress, is_goal_reached
from budgeting.repository import InMemoryRepository
from budgeting.services import BudgetService, ReportService
from budgeting.transforms import goal_from_record
from budgeting.validation import validate_goal

config = load_config()
categories = EXTENDED_CATEGORIES if config.extended_categories else BUDGET_CATEGORIES

st.set_page_config(page_title="Budget Tracker", layout="wide")

if "repo" not in st.session_state:
    st.session_state.repo = InMemoryRepository.from_seed(config.seed_path)

repo: InMemoryRepository = st.session_state.repo
budget_service = BudgetService(repo, repo, categories=categories)
report_service = ReportService(repo)
user_id = config.user_id

STATUS_BADGES = {
    SpendStatus.GOOD: "🟢 On track",
    SpendStatus.WARNING: "🟠 Close to limit",
    SpendStatus.EXCEEDED: "🔴 Over budget",
}


def money(value, currency: str = config.currency) -> str:
    return f"{Decimal(value):,.2f} {currency}"


def tx_to_df(tx_list) -> pd.DataFrame:
    rows = [
        {
            "date": pd.to_datetime(t.date, errors="coerce"),
            "title": t.title,
            "category": t.category,
            "type": t.type.value,
            "amount": float(t.amount),
        }
        for t in tx_list
    ]
    return pd.DataFrame(rows, columns=["date", "title", "category", "type", "amount"])


menu = st.sidebar.radio("Menu", ["🏠 Overview", "💰 Budgets", "🧾 Transactions", "🎯 Goals"])
st.sidebar.caption(f"User: {user_id} · Currency: {config.currency}")

if menu == "🏠 Overview":
    st.title("🏠 Financial Overview")
    transactions = repo.list_transactions(user_id)
    today = date.today()
    default_month = max((pd.Timestamp(t.date) for t in transactions), default=pd.Timestamp(today))

    col_y, col_m = st.columns(2)
    with col_y:
        year = st.number_input("Year", min_value=2000, max_value=2100, value=default_month.year, step=1)
    with col_m:
        month = st.selectbox("Month", list(range(1, 13)), index=default_month.month - 1)

    summary = report_service.monthly_summary(user_id, int(year), int(month))
    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("Income", money(summary.income))
    with k2:
        st.metric("Expenses", money(summary.expenses))
    with k3:
        st.metric("Net Savings", money(summary.net_savings))

    trend = report_service.monthly_trend(user_id)
    if trend:
        fig_ts = go.Figure()
        fig_ts.add_trace(go.Bar(x=[m.month for m in trend], y=[float(m.income) for m in trend], name="Income"))
        fig_ts.add_trace(go.Bar(x=[m.month for m in trend], y=[float(m.expenses) for m in trend], name="Expenses"))
        fig_ts.update_layout(barmode="group", margin=dict(t=30, b=10, l=10, r=10))
        st.plotly_chart(fig_ts, use_container_width=True)

    breakdown = report_service.category_breakdown(user_id)
    if breakdown:
        df_cat = pd.DataFrame(
            [{"Category": c.category, "Total": float(c.amount), "Share %": float(c.percentage)} for c in breakdown]
        )
        fig_cat = px.pie(df_cat, values="Total", names="Category", title="Expenses by Category")
        st.plotly_chart(fig_cat, use_container_width=True)
    else:
        st.info("No expenses recorded yet.")

elif menu == "💰 Budgets":
    st.title("💰 Budgets")

    with st.form("budget_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            name = st.text_input("Name")
            category = st.selectbox("Category", categories)
            amount = st.number_input("Amount", min_value=0.0, step=10.0, format="%.2f")
        with col2:
            start_date = st.date_input("Start date")
            end_date = st.date_input("End date")
            is_recurring = st.checkbox("Recurring")
            recurring_type = st.selectbox("Repeats", RECURRING_TYPES, index=1)
        submitted = st.form_submit_button("Create Budget")

    if submitted:
        try:
            budget_service.create_budget(
                user_id,
                {
                    "name": name,
                    "category": category,
                    "amount": str(amount),
                    "start_date": start_date,
                    "end_date": end_date,
                    "is_recurring": is_recurring,
                    "recurring_type": recurring_type,
                },
            )
            st.success("Budget created")
        except ValidationError as e:
            for msg in e.errors:
                st.error(msg)

    report = budget_service.budget_report(user_id)
    budgets_by_id = {b.id: b for b in budget_service.get_budgets(user_id)}

    for failure in report["errors"]:
        st.warning(f"Budget {failure['budget_id']} could not be computed: {failure['error']}")

    if not report["statuses"]:
        st.info("No budgets defined")

    for status in report["statuses"]:
        budget = budgets_by_id[status.budget_id]
        st.subheader(f"{budget.name} · {budget.category}")
        st.caption(f"{budget.start_date} → {budget.end_date}" + (f" · {budget.recurring_type}" if budget.is_recurring else ""))
        c1, c2, c3 = st.columns(3)
        with c1:
            st.metric("Spent", money(status.total_spent), f"{status.percentage}%")
        with c2:
            st.metric("Remaining", money(status.remaining))
        with c3:
            st.markdown(f"**{STATUS_BADGES[status.status]}**")
        st.progress(min(float(status.percentage), 100.0) / 100)

        with st.expander(f"{status.transaction_count} transaction(s)"):
            if status.transactions:
                st.dataframe(tx_to_df(status.transactions), use_container_width=True)
            if st.button("Delete budget", key=f"del_{budget.id}"):
                try:
                    budget_service.delete_budget(user_id, budget.id)
                except BudgetNotFoundError as e:
                    st.error(str(e))
                st.rerun()

elif menu == "🧾 Transactions":
    st.title("🧾 Transactions")

    with st.form("tx_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            tx_date = st.date_input("Date")
            tx_amount = st.number_input("Amount", min_value=0.0, step=1.0, format="%.2f")
            tx_type = st.radio("Type", [TransactionType.EXPENSE.value, TransactionType.INCOME.value], horizontal=True)
        with col2:
            tx_category = st.selectbox("Category", categories)
            tx_title = st.text_input("Description (optional)")
        added = st.form_submit_button("Add Transaction")

    if added:
        if tx_amount <= 0:
            st.error("Amount must be a positive number")
        else:
            repo.add_transaction(
                user_id,
                Transaction(
                    id=str(uuid4()),
                    amount=Decimal(str(tx_amount)),
                    category=tx_category,
                    type=TransactionType(tx_type),
                    date=tx_date,
                    title=tx_title,
                ),
            )
            st.success("Transaction added")

    df = tx_to_df(repo.list_transactions(user_id))
    if df.empty:
        st.info("No transactions to display.")
    else:
        selected = st.multiselect("Category", options=list(categories), default=[])
        if selected:
            df = df[df["category"].isin(selected)]
        disp = df.sort_values("date", ascending=False).assign(
            date=lambda x: x["date"].dt.strftime("%Y-%m-%d").fillna("-"),
            amount=lambda x: x["amount"].map(lambda v: money(v)),
        )
        st.dataframe(disp.reset_index(drop=True), use_container_width=True)

elif menu == "🎯 Goals":
    st.title("🎯 Savings Goals")

    for goal in repo.list_goals(user_id):
        st.subheader(goal.name)
        progress = goal_progress(goal)
        st.progress(float(progress) / 100)
        st.caption(
            f"{money(goal.current_amount)} saved of {money(goal.target_amount)} · target {goal.target_date}"
            + (" · 🎉 reached" if is_goal_reached(goal) else "")
        )
        delta = st.number_input("Add / withdraw", step=50.0, key=f"goal_{goal.id}")
        if st.button("Apply", key=f"apply_{goal.id}"):
            repo.save_goal(user_id, contribute(goal, str(delta)))
            st.rerun()

    st.divider()
    with st.form("goal_form", clear_on_submit=True):
        g_name = st.text_input("Goal name")
        g_target = st.number_input("Target amount", min_value=0.0, step=100.0)
        g_date = st.date_input("Target date")
        g_category = st.text_input("Category")
        created = st.form_submit_button("Add Goal")

    if created:
        form = {"name": g_name, "target_amount": str(g_target), "target_date": g_date, "category": g_category}
        problems = validate_goal(form)
        if problems:
            for msg in problems:
                st.error(msg)
        else:
            repo.save_goal(user_id, goal_from_record({"id": str(uuid4()), **form}))
            st.rerun()
