"""Reporting aggregations over orders and tracking events.

Both functions take already-fetched rows and make a single pass over them;
the callers do the range query.
"""
from collections import Counter
from datetime import datetime, time, timedelta

from .models import to_utc_naive, utcnow

# Ten years of daily points.
MAX_ANALYTICS_DAYS = 3650


def _day_key(value):
    return to_utc_naive(value).date().isoformat()


def analytics_window(days=30, now=None):
    """Return (start_date, end_date): UTC midnight ``days - 1`` days back, and now."""
    if not 1 <= days <= MAX_ANALYTICS_DAYS:
        raise ValueError(f"days must be between 1 and {MAX_ANALYTICS_DAYS}")
    end_date = to_utc_naive(now) if now is not None else utcnow()
    start_date = datetime.combine((end_date - timedelta(days=days - 1)).date(), time.min)
    return start_date, end_date


def build_order_analytics(orders, start_date, end_date, top=5):
    daily = {}
    status_counts = {}
    products = {}
    total_revenue = 0
    order_count = 0

    for order in orders:
        revenue = order.total or 0
        order_count += 1
        total_revenue += revenue

        key = _day_key(order.order_date)
        point = daily.setdefault(key, {"date": key, "orders": 0, "revenue": 0})
        point["orders"] += 1
        point["revenue"] += revenue

        status = order.status or "pending"
        status_counts[status] = status_counts.get(status, 0) + 1

        for item in order.items:
            if item.product_id is None:
                continue
            product_id = str(item.product_id)
            product = products.setdefault(
                product_id,
                {"productId": product_id, "name": item.name, "quantity": 0, "revenue": 0},
            )
            product["quantity"] += item.quantity
            product["revenue"] += item.price * item.quantity

    # Every calendar day in the window, zero-filled.
    daily_orders = []
    day = start_date.date()
    last_day = end_date.date()
    while day <= last_day:
        key = day.isoformat()
        daily_orders.append(daily.get(key, {"date": key, "orders": 0, "revenue": 0}))
        day += timedelta(days=1)

    # sorted() is stable, so ties keep first-seen order.
    top_products = sorted(products.values(), key=lambda p: p["quantity"], reverse=True)[:top]

    return {
        "summary": {
            "totalOrders": order_count,
            "totalRevenue": total_revenue,
            "avgOrderValue": total_revenue / order_count if order_count else 0,
        },
        "dailyOrders": daily_orders,
        "statusCounts": status_counts,
        "topProducts": top_products,
    }


def build_tracking_analytics(events):
    by_type = Counter()
    by_page = Counter()
    by_device = Counter()
    by_browser = Counter()
    by_name = Counter()
    by_day = Counter()
    total = 0

    for event in events:
        total += 1
        by_type[event.event_type] += 1
        if event.page:
            by_page[event.page] += 1
        if event.device_type:
            by_device[event.device_type] += 1
        if event.browser:
            by_browser[event.browser] += 1
        by_name[event.event_name] += 1
        by_day[_day_key(event.timestamp)] += 1

    return {
        "totalEvents": total,
        "eventsByType": dict(by_type),
        "eventsByPage": dict(by_page),
        "topPages": [{"page": page, "count": count} for page, count in by_page.most_common(10)],
        "topEvents": [
            {"eventName": name, "count": count} for name, count in by_name.most_common(10)
        ],
        "deviceBreakdown": dict(by_device),
        "browserBreakdown": dict(by_browser),
        "dailyEvents": [{"date": day, "count": by_day[day]} for day in sorted(by_day)],
    }
