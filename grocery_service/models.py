from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .database import Base # Import the Base class from our database setup


def utcnow():
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_naive(value):
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# Catalog product shown on the storefront.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    full_description = Column(Text)
    price = Column(Float, nullable=False)
    image = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True) # Category name, not id.
    in_stock = Column(Boolean, default=True)
    stock_quantity = Column(Integer, default=0)
    rating = Column(Float, default=4.0)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    slug = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


# One line of an anonymous shopping cart, keyed by the browser session id.
class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String, nullable=False, index=True)
    product_id = Column(String, nullable=False, index=True)
    quantity = Column(Integer, default=1)
    name = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    image = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(String, nullable=False, index=True)
    user_name = Column(String, nullable=False)
    rating = Column(Integer, nullable=False) # 1..5
    comment = Column(Text, nullable=False)
    date = Column(String, nullable=False) # YYYY-MM-DD
    verified = Column(Boolean, default=False)
    created_at = Column(DateTime, default=utcnow)


# Defines the ORM model for an 'Order' stored in the database.
class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True) # Auto-incrementing primary key.
    order_id = Column(String, unique=True, nullable=False) # Business-level order identifier.
    session_id = Column(String)
    customer_name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    address = Column(String, nullable=False)
    subtotal = Column(Float, nullable=False)
    tax = Column(Float, nullable=False)
    shipping = Column(Float, nullable=False)
    total = Column(Float, nullable=False) # Caller-supplied; not recomputed from the parts.
    status = Column(String, default="pending", index=True)
    order_date = Column(DateTime, default=utcnow, index=True) # When the customer ordered.

    # Courier consignment fields, filled once the order is handed to Steadfast.
    steadfast_consignment_id = Column(Integer)
    steadfast_tracking_code = Column(String)
    steadfast_status = Column(String)
    steadfast_sent_at = Column(DateTime)

    fraud_checked = Column(Boolean, default=False)
    fraud_check_result = Column(JSON)
    fraud_check_at = Column(DateTime)

    created_at = Column(DateTime, default=utcnow) # When the row was written.
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )


# Snapshot of a product at purchase time, owned by exactly one order.
class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_pk = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
    price = Column(Float, nullable=False) # Unit price.
    image = Column(String, nullable=False, default="")

    order = relationship("Order", back_populates="items")


# Entitlement row for a module listed in the static registry.
class Module(Base):
    __tablename__ = "modules"

    id = Column(Integer, primary_key=True, index=True)
    module_id = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    version = Column(String, nullable=False, default="1.0.0")
    enabled = Column(Boolean, default=False)
    purchased = Column(Boolean, default=False)
    purchased_at = Column(DateTime)
    license_key = Column(String)
    settings = Column(JSON, default=dict) # Free-form per-module settings bag.
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


# Site-wide configuration. The unique marker keeps it to a single row.
class Settings(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)
    singleton = Column(Boolean, unique=True, nullable=False, default=True)

    site_name = Column(String, default="Grocery Store")
    site_description = Column(String, default="Your trusted online grocery store")
    site_logo = Column(String)
    site_favicon = Column(String)
    contact_email = Column(String, default="")
    contact_phone = Column(String, default="")
    contact_address = Column(String, default="")
    facebook_url = Column(String)
    twitter_url = Column(String)
    instagram_url = Column(String)
    youtube_url = Column(String)

    free_delivery_threshold = Column(Float, default=500)
    delivery_fee = Column(Float, default=50)
    delivery_time = Column(String, default="2-3 days")
    currency = Column(String, default="BDT")
    currency_symbol = Column(String, default="৳")
    tax_rate = Column(Float, default=5) # Percent.

    banner_text = Column(String)
    banner_enabled = Column(Boolean, default=False)
    meta_title = Column(String)
    meta_description = Column(String)
    meta_keywords = Column(String)
    maintenance_mode = Column(Boolean, default=False)
    maintenance_message = Column(String)
    theme_color = Column(String, default="#16a34a")

    # Third-party credentials; never exposed by the public settings endpoint.
    steadfast_api_key = Column(String)
    steadfast_secret_key = Column(String)
    fraud_check_api_key = Column(String)
    whatsapp_api_key = Column(String)
    whatsapp_api_url = Column(String)
    whatsapp_phone_number_id = Column(String)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


# Income/expense ledger entry.
class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String, nullable=False, index=True) # "income" or "expense".
    category = Column(String, nullable=False, index=True)
    amount = Column(Float, nullable=False) # Always positive; the type carries the sign.
    description = Column(Text, nullable=False)
    date = Column(DateTime, default=utcnow, index=True)
    payment_method = Column(String)
    reference = Column(String)
    tags = Column(JSON, default=list)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


# Append-only analytics event.
class TrackingEvent(Base):
    __tablename__ = "tracking_events"

    id = Column(Integer, primary_key=True, index=True)
    event_type = Column(String, nullable=False, index=True)
    event_name = Column(String, nullable=False)
    session_id = Column(String, index=True)
    user_id = Column(String)
    user_agent = Column(String)
    ip_address = Column(String)
    page = Column(String, index=True)
    referrer = Column(String)
    event_metadata = Column("metadata", JSON, default=dict) # "metadata" is reserved on declarative classes.
    product_id = Column(String)
    product_name = Column(String)
    order_id = Column(String)
    order_total = Column(Float)
    search_query = Column(String)
    search_results = Column(Integer)
    device_type = Column(String)
    browser = Column(String)
    os = Column(String)
    country = Column(String)
    city = Column(String)
    timestamp = Column(DateTime, default=utcnow, index=True)


# Navigation menu; one per location, items kept as an ordered JSON list.
class Menu(Base):
    __tablename__ = "menus"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    location = Column(String, unique=True, nullable=False)
    items = Column(JSON, default=list)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
