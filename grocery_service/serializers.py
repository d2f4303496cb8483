# One serializer per entity; every handler that returns an entity goes through
# these so field names and id stringification stay the same everywhere.


def _iso(value):
    return value.isoformat() if value is not None else None


def serialize_product(product):
    return {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "fullDescription": product.full_description,
        "price": product.price,
        "image": product.image,
        "category": product.category,
        "inStock": bool(product.in_stock),
        "stockQuantity": product.stock_quantity or 0,
        "rating": product.rating,
    }


def serialize_category(category):
    return {
        "id": str(category.id),
        "name": category.name,
        "slug": category.slug,
        "createdAt": _iso(category.created_at),
        "updatedAt": _iso(category.updated_at),
    }


def serialize_cart_item(item):
    return {
        "productId": str(item.product_id),
        "quantity": item.quantity,
        "name": item.name,
        "price": item.price,
        "image": item.image,
    }


def serialize_review(review):
    return {
        "id": str(review.id),
        "productId": str(review.product_id),
        "userName": review.user_name,
        "rating": review.rating,
        "comment": review.comment,
        "date": review.date,
        "verified": bool(review.verified),
    }


def serialize_order_item(item):
    return {
        "productId": str(item.product_id),
        "quantity": item.quantity,
        "name": item.name,
        "price": item.price,
        "image": item.image,
    }


def serialize_order(order):
    return {
        "id": str(order.id),
        "orderId": order.order_id,
        "customerName": order.customer_name,
        "phone": order.phone,
        "address": order.address,
        "items": [serialize_order_item(item) for item in order.items],
        "subtotal": order.subtotal,
        "tax": order.tax,
        "shipping": order.shipping,
        "total": order.total,
        "status": order.status,
        "orderDate": _iso(order.order_date),
        "createdAt": _iso(order.created_at),
        "steadfastConsignmentId": order.steadfast_consignment_id,
        "steadfastTrackingCode": order.steadfast_tracking_code,
        "steadfastStatus": order.steadfast_status,
        "steadfastSentAt": _iso(order.steadfast_sent_at),
        "fraudChecked": bool(order.fraud_checked),
        "fraudCheckResult": order.fraud_check_result,
        "fraudCheckAt": _iso(order.fraud_check_at),
    }


def serialize_order_notification(order):
    return {
        "orderId": order.order_id,
        "customerName": order.customer_name,
        "phone": order.phone,
        "total": order.total,
        "createdAt": _iso(order.created_at),
        "status": order.status,
    }


def serialize_module(module):
    return {
        "id": str(module.id),
        "moduleId": module.module_id,
        "name": module.name,
        "description": module.description,
        "version": module.version,
        "enabled": bool(module.enabled),
        "purchased": bool(module.purchased),
        "purchasedAt": _iso(module.purchased_at),
        "settings": dict(module.settings or {}),
    }


# Settings columns in wire order: (attribute, JSON key).
SETTINGS_FIELDS = (
    ("site_name", "siteName"),
    ("site_description", "siteDescription"),
    ("site_logo", "siteLogo"),
    ("site_favicon", "siteFavicon"),
    ("contact_email", "contactEmail"),
    ("contact_phone", "contactPhone"),
    ("contact_address", "contactAddress"),
    ("facebook_url", "facebookUrl"),
    ("twitter_url", "twitterUrl"),
    ("instagram_url", "instagramUrl"),
    ("youtube_url", "youtubeUrl"),
    ("free_delivery_threshold", "freeDeliveryThreshold"),
    ("delivery_fee", "deliveryFee"),
    ("delivery_time", "deliveryTime"),
    ("currency", "currency"),
    ("currency_symbol", "currencySymbol"),
    ("tax_rate", "taxRate"),
    ("banner_text", "bannerText"),
    ("banner_enabled", "bannerEnabled"),
    ("meta_title", "metaTitle"),
    ("meta_description", "metaDescription"),
    ("meta_keywords", "metaKeywords"),
    ("maintenance_mode", "maintenanceMode"),
    ("maintenance_message", "maintenanceMessage"),
    ("theme_color", "themeColor"),
    ("steadfast_api_key", "steadfastApiKey"),
    ("steadfast_secret_key", "steadfastSecretKey"),
    ("fraud_check_api_key", "fraudCheckApiKey"),
    ("whatsapp_api_key", "whatsappApiKey"),
    ("whatsapp_api_url", "whatsappApiUrl"),
    ("whatsapp_phone_number_id", "whatsappPhoneNumberId"),
)

CREDENTIAL_FIELDS = frozenset({
    "steadfast_api_key",
    "steadfast_secret_key",
    "fraud_check_api_key",
    "whatsapp_api_key",
    "whatsapp_api_url",
    "whatsapp_phone_number_id",
})


def serialize_settings(settings, public=False):
    data = {"id": str(settings.id)}
    for attr, key in SETTINGS_FIELDS:
        if public and attr in CREDENTIAL_FIELDS:
            continue
        data[key] = getattr(settings, attr)
    data["updatedAt"] = _iso(settings.updated_at)
    return data


def serialize_transaction(transaction):
    return {
        "id": str(transaction.id),
        "type": transaction.type,
        "category": transaction.category,
        "amount": transaction.amount,
        "description": transaction.description,
        "date": _iso(transaction.date),
        "paymentMethod": transaction.payment_method,
        "reference": transaction.reference,
        "tags": list(transaction.tags or []),
        "createdAt": _iso(transaction.created_at),
    }


def serialize_tracking_event(event):
    return {
        "id": str(event.id),
        "eventType": event.event_type,
        "eventName": event.event_name,
        "sessionId": event.session_id,
        "userId": event.user_id,
        "page": event.page,
        "referrer": event.referrer,
        "metadata": dict(event.event_metadata or {}),
        "productId": event.product_id,
        "productName": event.product_name,
        "orderId": event.order_id,
        "orderTotal": event.order_total,
        "searchQuery": event.search_query,
        "searchResults": event.search_results,
        "userAgent": event.user_agent,
        "ipAddress": event.ip_address,
        "deviceType": event.device_type,
        "browser": event.browser,
        "os": event.os,
        "timestamp": _iso(event.timestamp),
    }


def serialize_menu(menu):
    return {
        "id": str(menu.id),
        "name": menu.name,
        "location": menu.location,
        "items": sorted(menu.items or [], key=lambda item: item.get("order", 0)),
        "isActive": bool(menu.is_active),
        "createdAt": _iso(menu.created_at),
        "updatedAt": _iso(menu.updated_at),
    }
