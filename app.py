"""
app.py
Streamlit Pocket Budget (incomes, expenses, freelance dues, goals, subscriptions).
Run: streamlit run app.py
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date

import pandas as pd
import streamlit as st

import auth
import config
import db
import dues
import entitlement
import reports
import store
import subscriptions
import utils
from models import (
    PLAN_PRICES,
    BudgetGoal,
    DuesStatus,
    EntitlementState,
    Expense,
    FreelanceDetails,
    Income,
    PlanType,
)

logger = logging.getLogger(__name__)

st.set_page_config(page_title="Pocket Budget", layout="wide")


def money(value: float) -> str:
    return f"{config.CURRENCY}{value:,.2f}"


def init_once():
    config.setup_logging()
    db.init_db()
    auth.ensure_admin(utils.utcnow())


def require_login():
    if "uid" not in st.session_state:
        st.session_state.uid = None


def current_profile():
    # Re-read on every run so admin changes apply immediately
    if not st.session_state.uid:
        return None
    return store.get_profile(st.session_state.uid)


def logout():
    st.session_state.uid = None
    st.success("Logged out.")


def login_screen():
    st.title("💰 Pocket Budget")

    tab_login, tab_signup = st.tabs(["Login", "Sign up"])
    with tab_login:
        email = st.text_input("Email", key="login_email")
        password = st.text_input("Password", type="password", key="login_password")
        if st.button("Login", type="primary"):
            profile = auth.login(email.strip(), password)
            if profile:
                st.session_state.uid = profile.uid
                st.rerun()
            else:
                st.error("Invalid email or password.")

    with tab_signup:
        name = st.text_input("Display name")
        email = st.text_input("Email", key="signup_email")
        password = st.text_input("Password", type="password", key="signup_password")
        if st.button("Create account", type="primary"):
            try:
                profile = auth.signup(email, name, password, utils.utcnow())
            except auth.AuthError as e:
                st.error(str(e))
            else:
                st.session_state.uid = profile.uid
                st.success(f"Welcome to Pocket Budget! Your {config.TRIAL_DAYS}-day trial has started.")
                st.rerun()


def force_change_password_screen(profile):
    st.title("⚠️ Change Password (Required)")

    st.warning("You must change the default password before using the app.")
    new1 = st.text_input("New password", type="password")
    new2 = st.text_input("Confirm new password", type="password")

    if st.button("Update password", type="primary"):
        if new1 != new2:
            st.error("Passwords do not match.")
            return
        try:
            auth.change_password(profile.uid, new1)
        except auth.AuthError as e:
            st.error(str(e))
            return
        st.success("Password updated. You can continue.")
        st.rerun()


def write_blocked_notice(ent):
    if ent.state is EntitlementState.PENDING:
        st.info("Your plan request is pending admin approval.")
    else:
        st.warning("Your trial or subscription has ended. Visit the Subscription page to request a plan.")


# ---------- Pages ----------

def freelance_report(incomes, can_write: bool):
    st.subheader("🧑‍💻 Freelance projects")
    with_dues, settled = dues.split_projects(incomes)
    if not with_dues and not settled:
        st.caption("No project-tracked incomes yet.")
        return

    if with_dues:
        st.markdown("**Projects with dues**")
        for inc in with_dues:
            f = inc.freelance
            c1, c2 = st.columns([4, 1])
            with c1:
                workers = f" | Workers: {f.number_of_workers}" if f.number_of_workers else ""
                st.write(
                    f"**{inc.description}** ({f.client_name}) | Cost: {money(f.project_cost)} | "
                    f"Paid: {money(inc.amount)} | Due: **{money(dues.outstanding_due(inc))}**{workers}"
                )
            with c2:
                if st.button("Clear dues", key=f"clear_{inc.id}", disabled=not can_write):
                    clear_income_dues(inc)

    if settled:
        st.markdown("**Cleared / fully paid projects**")
        rows = []
        for inc in settled:
            cleared = inc.freelance.dues_cleared_at
            rows.append({
                "description": inc.description,
                "client": inc.freelance.client_name,
                "project_cost": inc.freelance.project_cost,
                "paid": inc.amount,
                "status": f"Cleared {cleared:%Y-%m-%d %H:%M}" if cleared else "Paid in full",
            })
        st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)


def clear_income_dues(inc):
    # Re-read first: another session may have changed the record
    fresh = store.get_income(inc.user_id, inc.id)
    if fresh is None or dues.classify_income(fresh) is not DuesStatus.DUE_OUTSTANDING:
        st.error("Cannot clear dues for this income.")
        return
    store.update_income(dues.clear_dues(fresh, utils.utcnow()))
    logger.info("Cleared dues on income %s for %s", fresh.id, fresh.user_id)
    st.success(f'Dues for "{fresh.description}" marked as cleared.')
    st.rerun()


def dashboard_page(profile, ent):
    st.header("📊 Dashboard")

    now = utils.utcnow()
    incomes = store.list_incomes(profile.uid)
    expenses = store.list_expenses(profile.uid)
    categories = utils.with_default_income_categories(store.list_income_categories(profile.uid))
    m = reports.dashboard_metrics(incomes, expenses, categories, now)

    c1, c2, c3 = st.columns(3)
    c1.metric("Income (this month)", money(m.income_this_month), f"{m.income_change_pct:+.1f}% vs last month")
    c2.metric("Expenses (this month)", money(m.expenses_this_month))
    c3.metric("Net savings (this month)", money(m.net_savings))

    c4, c5, c6 = st.columns(3)
    c4.metric("Total dues (projects)", money(m.total_dues))
    c5.metric(f"Potential loss (>{config.STALE_DUES_DAYS} days)", money(m.potential_loss))
    c6.metric("Daily income (this month)", money(m.daily_income_this_month))

    daily = [c for c in categories if c.is_daily_fixed_income and (c.daily_fixed_amount or 0) > 0]
    if daily:
        st.divider()
        if ent.can_write:
            st.subheader("Quick daily income")
            labels = {f"{c.name} ({money(c.daily_fixed_amount)})": c for c in daily}
            chosen = labels[st.selectbox("Daily category", list(labels.keys()))]
            if st.button("Log today's income"):
                store.add_income(Income(
                    id=None,
                    description=f"Daily Income - {chosen.name}",
                    amount=float(chosen.daily_fixed_amount),
                    date=now,
                    category_id=chosen.id,
                    user_id=profile.uid,
                ))
                st.success("Daily income logged.")
                st.rerun()
        else:
            write_blocked_notice(ent)

    st.divider()
    freelance_report(dues.project_tracking_incomes(incomes, categories), ent.can_write)

    st.divider()
    st.subheader("Monthly overview")
    df = reports.monthly_summary(incomes, expenses)
    if df.empty:
        st.caption("No transactions yet.")
    else:
        st.bar_chart(df.set_index("month")[["income", "expenses"]].head(6).iloc[::-1])


def record_actions(key: str, label: str, options: dict, on_delete, enabled: bool = True, editable: bool = True):
    """Pick a record, then Edit (opens the form below) or Delete behind a confirm box."""
    selected = st.selectbox(label, options=["(none)"] + list(options.keys()), key=f"{key}_pick")
    if selected == "(none)":
        return
    record = options[selected]
    c1, c2 = st.columns(2)
    with c1:
        if editable and st.button("Edit", key=f"{key}_edit", disabled=not enabled):
            st.session_state[f"edit_{key}_id"] = record.id
            st.rerun()
    with c2:
        confirm = st.checkbox("Confirm delete", value=False, key=f"{key}_del_confirm")
        if st.button("Delete", key=f"{key}_delete", type="secondary", disabled=not (enabled and confirm)):
            on_delete(record)
            st.session_state[f"edit_{key}_id"] = None
            logger.info("Deleted %s %s", key, record.id)
            st.success("Deleted.")
            st.rerun()


def editing(key: str, records):
    wanted = st.session_state.get(f"edit_{key}_id")
    if wanted is None:
        return None
    return next((r for r in records if r.id == wanted), None)


def cancel_edit(key: str):
    if st.button("Cancel edit", key=f"{key}_cancel"):
        st.session_state[f"edit_{key}_id"] = None
        st.rerun()


def income_form(profile, categories, clients, existing=None):
    if existing:
        st.subheader(f"✏️ Edit Income (ID: {existing.id})")
    else:
        st.subheader("➕ Add Income")

    labels = {c.name: c for c in categories}
    names = list(labels.keys())
    current = next((c.name for c in categories if existing and c.id == existing.category_id), None)
    category = labels[st.selectbox("Category", names, index=(names.index(current) if current else 0))]
    details = existing.freelance if existing else None

    col1, col2 = st.columns(2)
    with col1:
        description = st.text_input("Description", value=(existing.description if existing else ""))
        amount = st.text_input(
            "Amount received",
            value=(str(existing.amount) if existing else str(category.daily_fixed_amount or "")),
        )
        day = st.date_input("Date", value=(existing.date.date() if existing and existing.date else date.today()))

    project_cost = None
    client_name = ""
    workers = None
    with col2:
        if category.has_project_tracking:
            options = ["(new client)"] + [c.name for c in clients]
            picked = st.selectbox(
                "Client",
                options,
                index=(options.index(details.client_name) if details and details.client_name in options else 0),
            )
            client_name = st.text_input("New client name") if picked == "(new client)" else picked
            project_cost = st.text_input("Project cost", value=(str(details.project_cost) if details else ""))
            workers = st.number_input("Number of workers", min_value=0, step=1,
                                      value=(int(details.number_of_workers or 0) if details else 0))

    errors = utils.validate_income_inputs(description, amount, category.id, project_cost, client_name)
    if errors and (description or amount):
        for e in errors:
            st.error(e)

    if st.button("Save income", type="primary", disabled=bool(errors)):
        freelance = None
        client_id = None
        if category.has_project_tracking and project_cost:
            client = store.find_client_by_name(profile.uid, client_name)
            client_id = client.id if client else store.add_client(profile.uid, client_name)
            freelance = FreelanceDetails(
                client_name=client_name.strip(),
                project_cost=float(project_cost),
                client_number=client.number if client else None,
                client_address=client.address if client else None,
                number_of_workers=int(workers) or None,
                dues_cleared_at=details.dues_cleared_at if details else None,
            )
        record = Income(
            id=existing.id if existing else None,
            description=description,
            amount=float(amount),
            date=utils.day_to_ts(day),
            category_id=category.id,
            user_id=profile.uid,
            client_id=client_id,
            freelance=freelance,
        )
        if existing:
            store.update_income(record)
            st.session_state.edit_income_id = None
            st.success("Income updated.")
        else:
            store.add_income(record)
            st.success("Income added.")
        st.rerun()


def incomes_page(profile, ent):
    st.header("💵 Incomes")

    categories = utils.with_default_income_categories(store.list_income_categories(profile.uid))
    incomes = store.list_incomes(profile.uid)
    df = reports.incomes_frame(incomes, categories)
    st.dataframe(df, use_container_width=True, hide_index=True)

    st.divider()
    if not ent.can_write:
        write_blocked_notice(ent)
        return

    outstanding = [i for i in incomes if dues.classify_income(i) is DuesStatus.DUE_OUTSTANDING]
    if outstanding:
        st.subheader("Clear dues")
        options = {f"{i.description} ({i.freelance.client_name}) - due {money(dues.outstanding_due(i))}": i
                   for i in outstanding}
        chosen = options[st.selectbox("Project", list(options.keys()))]
        if st.button("Mark dues cleared"):
            clear_income_dues(chosen)
        st.divider()

    colA, colB = st.columns([1, 2])
    with colA:
        st.subheader("Select income")
        record_actions("income", "Income", {f"{i.description} (ID {i.id})": i for i in incomes},
                       lambda i: store.delete_income(profile.uid, i.id))
    with colB:
        clients = store.list_clients(profile.uid)
        existing = editing("income", incomes)
        if existing:
            income_form(profile, categories, clients, existing=existing)
            cancel_edit("income")
        else:
            income_form(profile, categories, clients)


def expense_form(profile, categories, existing=None):
    if existing:
        st.subheader(f"✏️ Edit Expense (ID: {existing.id})")
    else:
        st.subheader("➕ Add Expense")

    labels = {c.name: c.id for c in categories}
    names = list(labels.keys())
    current = next((c.name for c in categories if existing and c.id == existing.category_id), None)

    c1, c2, c3, c4 = st.columns([2, 1, 1, 1])
    with c1:
        description = st.text_input("Description", value=(existing.description if existing else ""))
    with c2:
        amount = st.text_input("Amount", value=(str(existing.amount) if existing else ""))
    with c3:
        day = st.date_input("Date", value=(existing.date.date() if existing and existing.date else date.today()))
    with c4:
        category_id = labels[st.selectbox("Category", names, index=(names.index(current) if current else 0))]

    if st.button("Save expense", type="primary"):
        errors = utils.validate_expense_inputs(description, amount, category_id)
        if errors:
            for e in errors:
                st.error(e)
            return
        record = Expense(
            id=existing.id if existing else None,
            description=description,
            amount=float(amount),
            date=utils.day_to_ts(day),
            category_id=category_id,
            user_id=profile.uid,
        )
        if existing:
            store.update_expense(record)
            st.session_state.edit_expense_id = None
            st.success("Expense updated.")
        else:
            store.add_expense(record)
            st.success("Expense added.")
        st.rerun()


def expenses_page(profile, ent):
    st.header("🧾 Expenses")

    categories = utils.with_default_expense_categories(store.list_expense_categories(profile.uid))
    names = {c.id: c.name for c in categories}
    expenses = store.list_expenses(profile.uid)
    st.dataframe(reports.expenses_frame(expenses, names), use_container_width=True, hide_index=True)

    st.divider()
    if not ent.can_write:
        write_blocked_notice(ent)
        return

    record_actions("expense", "Expense", {f"{e.description} (ID {e.id})": e for e in expenses},
                   lambda e: store.delete_expense(profile.uid, e.id))
    st.divider()

    existing = editing("expense", expenses)
    if existing:
        expense_form(profile, categories, existing=existing)
        cancel_edit("expense")
    else:
        expense_form(profile, categories)


def client_form(profile, existing=None):
    st.subheader(f"✏️ Edit Client (ID: {existing.id})" if existing else "➕ Add Client")
    c1, c2, c3 = st.columns(3)
    with c1:
        name = st.text_input("Name", value=(existing.name if existing else ""))
    with c2:
        number = st.text_input("Phone (optional)", value=((existing.number or "") if existing else ""))
    with c3:
        address = st.text_input("Address (optional)", value=((existing.address or "") if existing else ""))
    if st.button("Save client", type="primary"):
        errors = utils.validate_client_inputs(name)
        if errors:
            for e in errors:
                st.error(e)
            return
        if existing:
            store.update_client(replace(existing, name=name, number=number.strip() or None,
                                        address=address.strip() or None))
            st.session_state.edit_client_id = None
            st.success("Client updated.")
        else:
            store.add_client(profile.uid, name, number.strip() or None, address.strip() or None)
            st.success("Client added.")
        st.rerun()


def clients_page(profile, ent):
    st.header("👥 Clients")

    clients = store.list_clients(profile.uid)
    summaries = dues.client_summaries(clients, store.list_incomes(profile.uid))
    rows = [
        {
            "id": s.client.id,
            "name": s.client.name,
            "number": s.client.number,
            "address": s.client.address,
            "total_paid": s.total_paid,
            "total_dues": s.total_dues,
        }
        for s in summaries
    ]
    df = pd.DataFrame(rows) if rows else pd.DataFrame(
        columns=["id", "name", "number", "address", "total_paid", "total_dues"])
    st.dataframe(df, use_container_width=True, hide_index=True)

    st.divider()
    if not ent.can_write:
        write_blocked_notice(ent)
        return

    # Linked incomes keep their copied client name; client_id is nulled
    record_actions("client", "Client", {f"{c.name} (ID {c.id})": c for c in clients},
                   lambda c: store.delete_client(profile.uid, c.id))
    st.divider()

    existing = editing("client", clients)
    if existing:
        client_form(profile, existing=existing)
        cancel_edit("client")
    else:
        client_form(profile)


def categories_page(profile, ent):
    st.header("🗂️ Categories")

    income_cats = store.list_income_categories(profile.uid)
    expense_cats = store.list_expense_categories(profile.uid)

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Income categories")
        st.dataframe(pd.DataFrame([{
            "name": c.name,
            "project_tracking": c.has_project_tracking,
            "daily_fixed": c.daily_fixed_amount if c.is_daily_fixed_income else None,
            "default": c.is_default,
        } for c in utils.with_default_income_categories(income_cats)]), use_container_width=True, hide_index=True)

        if ent.can_write:
            name = st.text_input("New income category")
            tracking = st.checkbox("Enable project tracking")
            daily = st.checkbox("Daily fixed income", disabled=tracking)
            amount = st.text_input("Daily fixed amount", disabled=not daily)
            if st.button("Add income category"):
                errors = utils.validate_category_inputs(name, tracking, daily, amount)
                if errors:
                    for e in errors:
                        st.error(e)
                else:
                    store.add_income_category(profile.uid, name, None, tracking, daily,
                                              float(amount) if daily else None)
                    st.success("Category added.")
                    st.rerun()

            # Built-in defaults are not stored, so only the user's own rows are offered
            record_actions("income_category", "Remove income category", {c.name: c for c in income_cats},
                           lambda c: store.delete_income_category(profile.uid, c.id), editable=False)

    with col2:
        st.subheader("Expense categories")
        st.dataframe(pd.DataFrame([{"name": c.name, "default": c.is_default}
                                   for c in utils.with_default_expense_categories(expense_cats)]),
                     use_container_width=True, hide_index=True)

        allowed = entitlement.can_add_limited_item(ent, len(expense_cats))
        existing = editing("expense_category", expense_cats)
        if existing and allowed:
            st.markdown(f"**Edit {existing.name}**")
            name = st.text_input("Expense category name", value=existing.name)
            if st.button("Save expense category", type="primary"):
                errors = utils.validate_category_inputs(name)
                if errors:
                    for e in errors:
                        st.error(e)
                else:
                    store.update_expense_category(replace(existing, name=name))
                    st.session_state.edit_expense_category_id = None
                    st.success("Category updated.")
                    st.rerun()
            cancel_edit("expense_category")
        elif allowed:
            name = st.text_input("New expense category")
            if st.button("Add expense category"):
                errors = utils.validate_category_inputs(name)
                if errors:
                    for e in errors:
                        st.error(e)
                else:
                    store.add_expense_category(profile.uid, name)
                    st.success("Category added.")
                    st.rerun()
        elif ent.can_write:
            st.info(f"You have reached the trial limit of {config.TRIAL_ITEM_LIMIT} expense categories. "
                    "Upgrade your plan to add or change them.")
        else:
            write_blocked_notice(ent)

        if ent.can_write:
            record_actions("expense_category", "Expense category", {c.name: c for c in expense_cats},
                           lambda c: store.delete_expense_category(profile.uid, c.id), enabled=allowed)


def goal_form(profile, existing=None):
    st.subheader(f"✏️ Edit Goal (ID: {existing.id})" if existing else "➕ Add Goal")
    c1, c2, c3 = st.columns(3)
    with c1:
        name = st.text_input("Goal name", value=(existing.name if existing else ""))
    with c2:
        target = st.text_input("Target amount", value=(str(existing.target_amount) if existing else ""))
    with c3:
        current = st.text_input("Saved so far", value=(str(existing.current_amount) if existing else "0"))
    if st.button("Save goal", type="primary"):
        errors = utils.validate_goal_inputs(name, target, current)
        if errors:
            for e in errors:
                st.error(e)
            return
        record = BudgetGoal(id=existing.id if existing else None, name=name, target_amount=float(target),
                            current_amount=float(current), description=existing.description if existing else None,
                            user_id=profile.uid)
        if existing:
            store.update_goal(record)
            st.session_state.edit_goal_id = None
            st.success("Goal updated.")
        else:
            store.add_goal(record)
            st.success("Goal added.")
        st.rerun()


def goals_page(profile, ent):
    st.header("🎯 Budget Goals")

    goals = store.list_goals(profile.uid)
    if not goals:
        st.caption("No goals yet.")
    for g in goals:
        st.write(f"**{g.name}**: {money(g.current_amount)} / {money(g.target_amount)}")
        st.progress(g.progress)

    st.divider()
    # Same gate as adding: a trial at its limit cannot change goals either
    allowed = entitlement.can_add_limited_item(ent, len(goals))
    if allowed:
        existing = editing("goal", goals)
        if existing:
            goal_form(profile, existing=existing)
            cancel_edit("goal")
        else:
            goal_form(profile)
    elif ent.can_write:
        st.info(f"You have reached the trial limit of {config.TRIAL_ITEM_LIMIT} budget goals. "
                "Upgrade your plan to add or change them.")
    else:
        write_blocked_notice(ent)

    if goals and ent.can_write:
        st.divider()
        record_actions("goal", "Goal", {f"{g.name} (ID {g.id})": g for g in goals},
                       lambda g: store.delete_goal(profile.uid, g.id), enabled=allowed)


def subscription_page(profile, ent):
    st.header("👑 Subscription")

    now = utils.utcnow()
    st.info(entitlement.describe_status(profile, now))

    active_now = ent.state is EntitlementState.ACTIVE
    pending = profile.requested_plan_type if ent.state is EntitlementState.PENDING else None

    cols = st.columns(2)
    for col, plan in zip(cols, (PlanType.MONTHLY, PlanType.YEARLY)):
        with col:
            st.subheader(f"{plan.value.title()} plan")
            st.write(f"{money(PLAN_PRICES[plan.value])} per {'month' if plan is PlanType.MONTHLY else 'year'}")
            if active_now and profile.plan_type is plan:
                label = "Currently active"
            elif pending is plan:
                label = "Request pending"
            else:
                label = "Request plan"
            if st.button(label, key=f"req_{plan.value}", disabled=active_now or pending is plan):
                try:
                    store.save_profile(subscriptions.request_plan(profile, plan))
                except subscriptions.SubscriptionError as e:
                    st.error(str(e))
                else:
                    st.success(f"Your request for the {plan.value} plan is pending admin approval.")
                    st.rerun()

    if ent.state is EntitlementState.TRIAL_ACTIVE:
        st.caption("You are currently on a trial. Requesting a plan will replace your trial upon admin approval.")


def settings_page(profile):
    st.header("⚙️ Settings")

    st.subheader("Profile")
    st.caption(f"Email: {profile.email}")
    display_name = st.text_input("Display name", value=profile.display_name or "")
    if st.button("Save profile"):
        errors = utils.validate_display_name(display_name)
        if errors:
            for e in errors:
                st.error(e)
        else:
            store.save_profile(replace(profile, display_name=display_name.strip()))
            st.success("Profile updated.")
            st.rerun()

    st.divider()

    st.subheader("Change password")
    p1 = st.text_input("New password", type="password")
    p2 = st.text_input("Confirm new password", type="password")
    if st.button("Update password", type="primary"):
        if p1 != p2:
            st.error("Passwords do not match.")
        else:
            try:
                auth.change_password(profile.uid, p1)
            except auth.AuthError as e:
                st.error(str(e))
            else:
                st.success("Password updated.")

    st.divider()

    st.subheader("Export")
    incomes = store.list_incomes(profile.uid)
    expenses = store.list_expenses(profile.uid)
    income_cats = utils.with_default_income_categories(store.list_income_categories(profile.uid))
    expense_names = {c.id: c.name for c in utils.with_default_expense_categories(
        store.list_expense_categories(profile.uid))}
    st.download_button("Download incomes.csv", data=reports.to_csv_bytes(reports.incomes_frame(incomes, income_cats)),
                       file_name="incomes.csv", mime="text/csv")
    st.download_button("Download expenses.csv",
                       data=reports.to_csv_bytes(reports.expenses_frame(expenses, expense_names)),
                       file_name="expenses.csv", mime="text/csv")
    st.dataframe(reports.monthly_summary(incomes, expenses), use_container_width=True, hide_index=True)


def manage_users_page(admin):
    st.header("🛡️ Manage Users")

    now = utils.utcnow()
    users = store.list_profiles()
    st.dataframe(pd.DataFrame([{
        "uid": u.uid,
        "email": u.email,
        "name": u.display_name,
        "status": u.subscription_status.value,
        "plan": u.plan_type.value,
        "requested": u.requested_plan_type.value if u.requested_plan_type else None,
        "trial_ends": utils.format_ts(u.trial_end_date),
        "subscription_ends": utils.format_ts(u.subscription_end_date),
        "access": entitlement.evaluate_entitlement(u, now).state.value,
    } for u in users]), use_container_width=True, hide_index=True)

    options = {f"{u.label} ({u.email})": u for u in users if u.uid != admin.uid}
    if not options:
        st.caption("No other users yet.")
        return
    user = options[st.selectbox("User", list(options.keys()))]

    c1, c2, c3, c4, c5 = st.columns(5)
    updated = None
    with c1:
        if st.button(f"Start {config.TRIAL_DAYS}-day trial"):
            updated = subscriptions.start_trial(user, now)
    with c2:
        if st.button("Activate monthly"):
            updated = subscriptions.activate_plan(user, PlanType.MONTHLY, now)
    with c3:
        if st.button("Activate yearly"):
            updated = subscriptions.activate_plan(user, PlanType.YEARLY, now)
    with c4:
        if st.button("End plan", disabled=not subscriptions.can_end_plan(user)):
            updated = subscriptions.end_plan(user)
    with c5:
        confirm = st.checkbox("Confirm remove", key="remove_user_confirm")
        if st.button("Remove profile", disabled=not confirm):
            store.delete_profile(user.uid)
            st.success(f"Profile data for {user.label} has been removed.")
            st.rerun()

    if updated is not None:
        store.save_profile(updated)
        st.success(f"Updated {user.label}: {updated.subscription_status.value}.")
        st.rerun()


def manage_subscriptions_page():
    st.header("🔔 Pending Subscription Requests")

    pending = store.list_pending_requests()
    if not pending:
        st.caption("No pending subscription requests.")
        return

    for user in pending:
        requested = user.requested_plan_type.value if user.requested_plan_type else "N/A"
        c1, c2 = st.columns([3, 1])
        c1.write(f"**{user.label}** ({user.email}) requested: **{requested}**")
        with c2:
            if st.button(f"Approve {requested}", key=f"approve_{user.uid}", disabled=user.requested_plan_type is None):
                try:
                    store.save_profile(subscriptions.approve_request(user, utils.utcnow()))
                except subscriptions.SubscriptionError as e:
                    st.error(str(e))
                else:
                    st.success(f"User's {requested} plan has been activated.")
                    st.rerun()


def main_app(profile):
    ent = entitlement.evaluate_entitlement(profile, utils.utcnow())

    st.sidebar.title("💰 Pocket Budget")
    st.sidebar.caption(f"Logged in as: {profile.label}")
    st.sidebar.caption(entitlement.describe_status(profile, utils.utcnow()))

    pages = ["Dashboard", "Incomes", "Expenses", "Clients", "Categories", "Budget Goals", "Subscription", "Settings"]
    if auth.is_super_admin(profile):
        pages += ["Manage Users", "Manage Subscriptions"]
    if st.session_state.get("page") not in pages:
        st.session_state.page = "Dashboard"
    st.session_state.page = st.sidebar.radio("Navigate", pages, index=pages.index(st.session_state.page))

    if st.sidebar.button("Logout"):
        logout()
        st.rerun()

    page = st.session_state.page
    if page == "Dashboard":
        dashboard_page(profile, ent)
    elif page == "Incomes":
        incomes_page(profile, ent)
    elif page == "Expenses":
        expenses_page(profile, ent)
    elif page == "Clients":
        clients_page(profile, ent)
    elif page == "Categories":
        categories_page(profile, ent)
    elif page == "Budget Goals":
        goals_page(profile, ent)
    elif page == "Subscription":
        subscription_page(profile, ent)
    elif page == "Settings":
        settings_page(profile)
    elif page == "Manage Users":
        manage_users_page(profile)
    elif page == "Manage Subscriptions":
        manage_subscriptions_page()


# --------- App entry ---------

def run():
    init_once()
    require_login()

    profile = current_profile()
    if profile is None:
        st.session_state.uid = None
        login_screen()
        return

    # Force password change on first login after DB creation
    if profile.is_admin and db.is_force_password_change():
        force_change_password_screen(profile)
        return

    main_app(profile)


if __name__ == "__main__":
    run()
