"""Steadfast Courier API client.

Base URL: https://portal.packzy.com/api/v1
"""
import json
import logging
from urllib.parse import quote

import requests

from .. import config
from ..errors import IntegrationNotConfiguredError, SteadfastError
from ..site_settings import find_settings

logger = logging.getLogger(__name__)

BASE_URL = "https://portal.packzy.com/api/v1"
MAX_BULK_ORDERS = 500


class SteadfastCourier:
    def __init__(self, api_key="", secret_key="", base_url=BASE_URL):
        self.api_key = api_key
        self.secret_key = secret_key
        self.base_url = base_url

    def _headers(self):
        return {
            "Api-Key": self.api_key,
            "Secret-Key": self.secret_key,
            "Content-Type": "application/json",
        }

    def _ensure_credentials(self):
        if not self.api_key or not self.secret_key:
            raise IntegrationNotConfiguredError(
                "steadfast",
                "Steadfast API credentials are not configured. Set them in admin "
                "settings or STEADFAST_API_KEY / STEADFAST_SECRET_KEY.",
            )

    def _request(self, method, path, failure_message, payload=None):
        self._ensure_credentials()
        try:
            response = requests.request(
                method, f"{self.base_url}{path}", headers=self._headers(), json=payload
            )
        except requests.exceptions.RequestException as e:
            logger.error("Steadfast API error on %s: %s", path, e)
            raise SteadfastError(failure_message) from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not response.ok:
            message = data.get("message") if isinstance(data, dict) else None
            logger.error("Steadfast API returned %s on %s: %s", response.status_code, path, message)
            raise SteadfastError(message or failure_message)
        return data

    def create_order(self, params):
        """Create one consignment. ``params`` follows the Steadfast field names."""
        return self._request(
            "POST", "/create_order", "Failed to create order in Steadfast Courier", params
        )

    def create_bulk_orders(self, orders):
        if len(orders) > MAX_BULK_ORDERS:
            raise SteadfastError(f"Maximum {MAX_BULK_ORDERS} orders are allowed per bulk request")
        # The bulk endpoint wants the list JSON-encoded inside the body.
        data = self._request(
            "POST",
            "/create_order/bulk-order",
            "Failed to create bulk orders in Steadfast Courier",
            {"data": json.dumps(orders)},
        )
        return data.get("data") or []

    def get_status_by_consignment_id(self, consignment_id):
        return self._request(
            "GET", f"/status_by_cid/{consignment_id}", "Failed to get delivery status"
        )

    def get_status_by_invoice(self, invoice):
        return self._request(
            "GET", f"/status_by_invoice/{quote(str(invoice), safe='')}", "Failed to get delivery status"
        )

    def get_status_by_tracking_code(self, tracking_code):
        return self._request(
            "GET",
            f"/status_by_trackingcode/{quote(str(tracking_code), safe='')}",
            "Failed to get delivery status",
        )

    def get_balance(self):
        return self._request("GET", "/get_balance", "Failed to get balance")


def get_steadfast_courier(db):
    """Client using credentials from settings, falling back to the environment."""
    settings = find_settings(db)
    if settings is not None and settings.steadfast_api_key and settings.steadfast_secret_key:
        return SteadfastCourier(settings.steadfast_api_key, settings.steadfast_secret_key)
    return SteadfastCourier(config.STEADFAST_API_KEY, config.STEADFAST_SECRET_KEY)
