"""Courier-history fraud check (bdcourier.com)."""
import logging
import re

import requests

from .. import config
from ..errors import IntegrationNotConfiguredError
from ..site_settings import find_settings

logger = logging.getLogger(__name__)

BASE_URL = "https://bdcourier.com/api/courier-check"


class FraudCheckService:
    def __init__(self, api_key, base_url=BASE_URL):
        self.api_key = api_key
        self.base_url = base_url

    def check_fraud(self, phone):
        """Look up a phone number.

        Returns ``{"success": True, "data": {...}}`` or
        ``{"success": False, "error": ...}``; HTTP and network failures are
        reported in the result rather than raised.
        """
        try:
            response = requests.post(
                self.base_url,
                json={"phone": phone},
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.api_key}",
                },
            )
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error("Fraud check API error: %s", e)
            return {"success": False, "error": str(e) or "Network error"}

        if not response.ok:
            return {
                "success": False,
                "error": data.get("error") or data.get("message") or "Failed to check fraud status",
                "message": data.get("message"),
            }

        # Newer responses put status and courierData at the top level.
        if data.get("status") == "success" and data.get("courierData"):
            payload = dict(data)
            payload["summary"] = data["courierData"].get("summary") or data.get("summary")
            return {"success": True, "data": payload}
        return {"success": True, "data": data.get("data") or data}


def get_fraud_check_service(db):
    settings = find_settings(db)
    if settings is not None and settings.fraud_check_api_key:
        return FraudCheckService(settings.fraud_check_api_key)
    if not config.FRAUD_CHECK_API_KEY:
        raise IntegrationNotConfiguredError(
            "fraud-check",
            "Fraud Check API key not configured. Set it in admin settings or "
            "FRAUD_CHECK_API_KEY.",
        )
    return FraudCheckService(config.FRAUD_CHECK_API_KEY)


def _number(value):
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = re.sub(r"[^\d.-]", "", str(value).strip())
    try:
        return float(cleaned)
    except ValueError:
        return None


def _integer(value):
    number = _number(value)
    return None if number is None else int(round(number))


def _percent(value):
    """Ratios in 0..1 become percentages; anything else is clamped to 0..100."""
    number = _number(value)
    if number is None:
        return None
    if 0 <= number <= 1:
        return number * 100
    return min(100.0, max(0.0, number))


def risk_level(success_ratio):
    if success_ratio < 50:
        return "high"
    if success_ratio < 75:
        return "medium"
    return "low"


def summarize_fraud_result(data):
    """Normalize either response shape into the fields the admin UI shows."""
    courier_data = data.get("courierData")
    summary = data.get("summary") or (courier_data or {}).get("summary")

    if summary:
        success_ratio = _percent(summary.get("success_ratio"))
        total_orders = _integer(summary.get("total_parcel"))
        successful_orders = _integer(summary.get("success_parcel"))
        failed_orders = _integer(summary.get("cancelled_parcel"))
    else:
        success_ratio = _percent(data.get("success_ratio", data.get("successRatio")))
        total_orders = _integer(data.get("total_orders", data.get("totalOrders")))
        successful_orders = _integer(data.get("successful_orders", data.get("successfulOrders")))
        failed_orders = _integer(data.get("failed_orders", data.get("failedOrders")))
    success_ratio = success_ratio or 0

    if courier_data:
        courier_data = {k: v for k, v in courier_data.items() if k != "summary"}

    return {
        "success": True,
        "riskLevel": risk_level(success_ratio),
        "successRatio": success_ratio,
        "totalOrders": total_orders,
        "successfulOrders": successful_orders,
        "failedOrders": failed_orders,
        "fraudScore": _number(data.get("fraud_score", data.get("fraudScore"))),
        "status": data.get("status") or "checked",
        "lastOrderDate": data.get("last_order_date") or data.get("lastOrderDate"),
        "courierData": courier_data or None,
        "summary": summary or {
            "total_parcel": total_orders or 0,
            "success_parcel": successful_orders or 0,
            "cancelled_parcel": failed_orders or 0,
            "success_ratio": success_ratio,
        },
    }
