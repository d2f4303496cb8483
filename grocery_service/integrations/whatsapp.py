"""WhatsApp Cloud API messaging: direct sends, cart recovery, order updates, broadcasts."""
import logging
import time

import requests

from .. import config
from ..errors import IntegrationNotConfiguredError
from ..site_settings import find_settings

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://graph.facebook.com/v18.0"

# Pause between broadcast sends to stay under the provider's rate limit.
BROADCAST_DELAY_SECONDS = 1.0


class WhatsAppService:
    def __init__(self, api_key, api_url=None, phone_number_id=None):
        self.api_key = api_key
        self.api_url = api_url or DEFAULT_API_URL
        self.phone_number_id = phone_number_id

    def _messages_url(self):
        if self.phone_number_id:
            return f"{self.api_url}/{self.phone_number_id}/messages"
        return f"{self.api_url}/messages"

    def send_message(self, to, message, message_type="text", template_name=None, template_params=None):
        """Send one message. Returns ``{"success", "messageId"}`` or ``{"success", "error"}``."""
        payload = {"messaging_product": "whatsapp", "to": to, "type": message_type or "text"}
        if message_type == "template" and template_name:
            template = {"name": template_name, "language": {"code": "en"}}
            if template_params:
                template["components"] = [{
                    "type": "body",
                    "parameters": [{"type": "text", "text": p} for p in template_params],
                }]
            payload["template"] = template
        else:
            payload["text"] = {"body": message}

        try:
            response = requests.post(
                self._messages_url(),
                json=payload,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
            )
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error("WhatsApp API error: %s", e)
            return {"success": False, "error": str(e) or "Network error"}

        if not response.ok:
            error = (data.get("error") or {}).get("message")
            return {"success": False, "error": error or "Failed to send WhatsApp message"}
        messages = data.get("messages") or [{}]
        return {"success": True, "messageId": messages[0].get("id")}

    def send_cart_recovery(self, phone, cart_items):
        lines = "\n".join(f"{item['name']} (x{item['quantity']})" for item in cart_items)
        total = sum(item["price"] * item["quantity"] for item in cart_items)
        message = (
            "🛒 Cart Recovery Reminder\n\n"
            f"You have items in your cart:\n{lines}\n\n"
            f"Total: ৳{total:.2f}\n\n"
            "Complete your purchase now!"
        )
        return self.send_message(phone, message)

    def send_order_notification(self, phone, order_id, status, total):
        message = (
            "📦 Order Update\n\n"
            f"Order ID: {order_id}\n"
            f"Status: {status}\n"
            f"Total: ৳{total:.2f}\n\n"
            "Thank you for your purchase!"
        )
        return self.send_message(phone, message)

    def send_broadcast(self, recipients, message, delay=BROADCAST_DELAY_SECONDS):
        """Send to each recipient in turn; one failure does not stop the rest."""
        success = 0
        failed = 0
        errors = []
        for index, recipient in enumerate(recipients):
            if index and delay:
                time.sleep(delay)
            result = self.send_message(recipient, message)
            if result["success"]:
                success += 1
            else:
                failed += 1
                errors.append(f"{recipient}: {result.get('error') or 'Unknown error'}")
        return {"success": success, "failed": failed, "errors": errors}


def get_whatsapp_service(db):
    settings = find_settings(db)
    if settings is not None and settings.whatsapp_api_key:
        return WhatsAppService(
            settings.whatsapp_api_key,
            settings.whatsapp_api_url,
            settings.whatsapp_phone_number_id,
        )
    if not config.WHATSAPP_API_KEY:
        raise IntegrationNotConfiguredError(
            "whatsapp",
            "WhatsApp API key not configured. Set it in admin settings or WHATSAPP_API_KEY.",
        )
    return WhatsAppService(
        config.WHATSAPP_API_KEY,
        config.WHATSAPP_API_URL or None,
        config.WHATSAPP_PHONE_NUMBER_ID or None,
    )
