# percetakan/services/recap_service.py

import calendar
import logging
from typing import Dict, List, Sequence

from domain.models import (
    PAYMENT_PAID,
    PAYMENT_UNPAID,
    AnnualRecap,
    CategoryTotal,
    ChartPoint,
    ExpenseItem,
    Order,
    ProfitAndLoss,
    Snapshot,
)
from services.dashboard_service import active_receivables_total
from services.pricing_service import find_product, price
from utils.dates import MONTH_LABELS, in_range, month_index, parse_iso, year_of

logger = logging.getLogger(__name__)

OTHER_CATEGORY = "Lain-lain"


def available_years(orders: Sequence[Order]) -> List[int]:
    years = {year_of(o.order_date) for o in orders}
    return sorted((y for y in years if y is not None), reverse=True)


def monthly_order_counts(orders: Sequence[Order], year: int) -> List[ChartPoint]:
    counts = [0] * 12
    for order in orders:
        if year_of(order.order_date) != year:
            continue
        counts[month_index(order.order_date)] += 1
    return [ChartPoint(label, count) for label, count in zip(MONTH_LABELS, counts)]


def annual_recap(snapshot: Snapshot, year: int) -> AnnualRecap:
    """
    Year-end recap. Current-system income and expense are limited to `year`;
    legacy totals carry no dates worth partitioning and are added in full.

    Income of the current system is what paid receivables billed
    (amount - discount), attributed to the year of their order.
    """
    orders_this_year = [o for o in snapshot.orders if year_of(o.order_date) == year]
    order_ids = {o.id for o in orders_this_year}

    new_income = sum(
        r.amount - (r.discount or 0)
        for r in snapshot.receivables
        if r.payment_status == PAYMENT_PAID and r.id in order_ids
    )
    new_expense = sum(e.amount for e in snapshot.expenses if year_of(e.date) == year)

    legacy_income = snapshot.legacy_income.amount if snapshot.legacy_income else 0
    legacy_expense = snapshot.legacy_expense.amount if snapshot.legacy_expense else 0

    total_income = legacy_income + new_income
    total_expense = legacy_expense + new_expense

    receivables_this_year = sum(
        r.active_remaining
        for r in snapshot.receivables
        if r.payment_status == PAYMENT_UNPAID and r.id in order_ids
    )

    logger.debug("Recap %s: income=%s expense=%s", year, total_income, total_expense)

    return AnnualRecap(
        year=year,
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
        total_receivables=active_receivables_total(snapshot.receivables, snapshot.legacy_receivables),
        sales_this_year=sum(o.total_price for o in orders_this_year),
        expenses_this_year=new_expense,
        orders_this_year=len(orders_this_year),
        receivables_this_year=receivables_this_year,
        monthly_orders=monthly_order_counts(snapshot.orders, year),
    )


# ---------------------------------------------------------------------------
# Laba Rugi
# ---------------------------------------------------------------------------

def _income_by_category(orders: Sequence[Order], snapshot: Snapshot) -> List[CategoryTotal]:
    """
    Splits each order's stored total over product categories. Derived item
    prices decide the shares; whatever the stored total differs from the
    derived total is spread proportionally so the categories add up to the
    stored sales figure.
    """
    income: Dict[str, float] = {}

    for order in orders:
        shares = []
        for item in order.items:
            product = find_product(item.product_id, snapshot.products)
            if product is None:
                shares.append((OTHER_CATEGORY, 0.0))
                continue
            item_total = price(
                item, order.customer,
                snapshot.products, snapshot.categories, snapshot.customers, snapshot.finishings,
            )
            shares.append((product.category, item_total))

        derived_total = sum(amount for _, amount in shares)
        difference = order.total_price - derived_total

        for category, amount in shares:
            final = amount
            if derived_total > 0:
                final += (amount / derived_total) * difference
            income[category] = income.get(category, 0) + final

    for category in snapshot.categories:
        income.setdefault(category.name, 0)

    return sorted((CategoryTotal(name, total) for name, total in income.items()), key=lambda c: c.name)


def _expense_by_category(expenses: Sequence[ExpenseItem]) -> List[CategoryTotal]:
    totals: Dict[str, float] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, 0) + expense.amount
    return sorted((CategoryTotal(name, total) for name, total in totals.items()), key=lambda c: c.name)


def _sales_chart(orders: Sequence[Order], start: str, period: str) -> List[ChartPoint]:
    if period == "month":
        first = parse_iso(start)
        days = calendar.monthrange(first.year, first.month)[1]
        totals = [0.0] * days
        for order in orders:
            d = parse_iso(order.order_date)
            if d is not None:
                totals[d.day - 1] += order.total_price
        return [ChartPoint(str(i + 1), total) for i, total in enumerate(totals)]

    totals = [0.0] * 12
    for order in orders:
        idx = month_index(order.order_date)
        if idx is not None:
            totals[idx] += order.total_price
    return [ChartPoint(label, total) for label, total in zip(MONTH_LABELS, totals)]


def profit_and_loss(
        snapshot: Snapshot,
        start: str,
        end: str,
        period: str = "month",
) -> ProfitAndLoss:
    """
    Profit and loss over [start, end]. `period` is "month" (chart by day of
    month) or "year" (chart by month).
    """
    if period not in ("month", "year"):
        raise ValueError(f"Unknown period: {period}")

    orders = [o for o in snapshot.orders if in_range(o.order_date, start, end)]
    expenses = [e for e in snapshot.expenses if in_range(e.date, start, end)]

    total_sales = sum(o.total_price for o in orders)
    total_expenses = sum(e.amount for e in expenses)

    expense_by_category = _expense_by_category(expenses)

    return ProfitAndLoss(
        start=start,
        end=end,
        total_sales=total_sales,
        total_expenses=total_expenses,
        profit=total_sales - total_expenses,
        income_by_category=_income_by_category(orders, snapshot),
        expense_by_category=expense_by_category,
        sales_chart=_sales_chart(orders, start, period),
        expense_pie=[ChartPoint(c.name, c.total) for c in expense_by_category if c.total > 0],
    )
