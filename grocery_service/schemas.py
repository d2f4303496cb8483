"""Request bodies. Field names are snake_case in Python and camelCase on the wire."""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Catalog ---
class ProductCreate(CamelModel):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    full_description: Optional[str] = None
    price: float = Field(..., gt=0)
    image: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    in_stock: bool = True
    stock_quantity: int = Field(0, ge=0)
    rating: float = Field(4.0, ge=0, le=5)


class ProductUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    full_description: Optional[str] = None
    price: Optional[float] = Field(None, gt=0)
    image: Optional[str] = None
    category: Optional[str] = None
    in_stock: Optional[bool] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    rating: Optional[float] = Field(None, ge=0, le=5)


class StockUpdate(CamelModel):
    id: str
    stock_quantity: int = Field(..., ge=0)
    in_stock: bool


class BulkStockRequest(CamelModel):
    updates: List[StockUpdate] = Field(..., min_length=1)


class CategoryIn(CamelModel):
    name: str


class ReviewCreate(CamelModel):
    product_id: str
    user_name: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1)


# --- Cart ---
class CartAdd(CamelModel):
    product_id: str
    quantity: int = Field(1, gt=0)
    name: str
    price: float = Field(..., ge=0)
    image: str = ""


class CartQuantity(CamelModel):
    product_id: str
    quantity: int


# --- Orders ---
class OrderItemIn(CamelModel):
    product_id: str
    quantity: int = Field(..., gt=0)
    name: str
    price: float = Field(..., ge=0)
    image: str = ""


class OrderCreate(CamelModel):
    order_id: Optional[str] = None
    session_id: Optional[str] = None
    customer_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    items: List[OrderItemIn] = Field(..., min_length=1)
    subtotal: float = Field(..., ge=0)
    tax: float = Field(..., ge=0)
    shipping: float = Field(..., ge=0)
    total: float = Field(..., ge=0)
    order_date: Optional[datetime] = None


class OrderUpdate(CamelModel):
    customer_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    status: Optional[str] = None
    subtotal: Optional[float] = None
    tax: Optional[float] = None
    shipping: Optional[float] = None
    total: Optional[float] = None


class OrderRef(CamelModel):
    order_id: str = Field(..., min_length=1)


class SteadfastSend(OrderRef):
    delivery_type: Literal[0, 1] = 0  # 0 = home delivery, 1 = point delivery / hub pick-up


# --- Modules ---
class ModuleAction(CamelModel):
    module_id: str = Field(..., min_length=1)
    action: Literal["purchase", "enable", "disable"]


class ModuleSettingsUpdate(CamelModel):
    module_id: str = Field(..., min_length=1)
    settings: Dict[str, Any] = Field(default_factory=dict)


# --- Settings ---
class SettingsUpdate(CamelModel):
    site_name: Optional[str] = None
    site_description: Optional[str] = None
    site_logo: Optional[str] = None
    site_favicon: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_address: Optional[str] = None
    facebook_url: Optional[str] = None
    twitter_url: Optional[str] = None
    instagram_url: Optional[str] = None
    youtube_url: Optional[str] = None
    free_delivery_threshold: Optional[float] = Field(None, ge=0)
    delivery_fee: Optional[float] = Field(None, ge=0)
    delivery_time: Optional[str] = None
    currency: Optional[str] = None
    currency_symbol: Optional[str] = None
    tax_rate: Optional[float] = Field(None, ge=0)
    banner_text: Optional[str] = None
    banner_enabled: Optional[bool] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None
    maintenance_mode: Optional[bool] = None
    maintenance_message: Optional[str] = None
    theme_color: Optional[str] = None
    steadfast_api_key: Optional[str] = None
    steadfast_secret_key: Optional[str] = None
    fraud_check_api_key: Optional[str] = None
    whatsapp_api_key: Optional[str] = None
    whatsapp_api_url: Optional[str] = None
    whatsapp_phone_number_id: Optional[str] = None


# --- Transactions ---
TransactionType = Literal["income", "expense"]


class TransactionCreate(CamelModel):
    type: TransactionType
    category: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    description: str = Field(..., min_length=1)
    date: Optional[datetime] = None
    payment_method: Optional[str] = None
    reference: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class TransactionUpdate(CamelModel):
    type: Optional[TransactionType] = None
    category: Optional[str] = None
    amount: Optional[float] = Field(None, gt=0)
    description: Optional[str] = None
    date: Optional[datetime] = None
    payment_method: Optional[str] = None
    reference: Optional[str] = None
    tags: Optional[List[str]] = None


# --- Tracking ---
EventType = Literal[
    "page_view", "click", "purchase", "add_to_cart", "remove_from_cart", "search", "custom"
]


class TrackingEventIn(CamelModel):
    event_type: EventType
    event_name: str = Field(..., min_length=1)
    session_id: Optional[str] = None
    user_id: Optional[str] = None
    page: Optional[str] = None
    referrer: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    order_id: Optional[str] = None
    order_total: Optional[float] = None
    search_query: Optional[str] = None
    search_results: Optional[int] = None


# --- Menus ---
class MenuItemIn(CamelModel):
    id: Optional[str] = None
    label: str
    url: str
    type: Literal["link", "category", "page"] = "link"
    target: Optional[str] = None
    icon: Optional[str] = None
    order: Optional[int] = None
    parent_id: Optional[str] = None


class MenuCreate(CamelModel):
    name: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    items: List[MenuItemIn] = Field(default_factory=list)
    is_active: bool = True


class MenuUpdate(CamelModel):
    name: Optional[str] = None
    location: Optional[str] = None
    items: Optional[List[MenuItemIn]] = None
    is_active: Optional[bool] = None


# --- Auth ---
class LoginRequest(CamelModel):
    username: str
    password: str


# --- WhatsApp ---
class WhatsAppSend(CamelModel):
    to: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    type: Literal["text", "template"] = "text"
    template_name: Optional[str] = None
    template_params: Optional[List[str]] = None


class WhatsAppBroadcast(CamelModel):
    recipients: List[str] = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class CartLine(CamelModel):
    name: str
    quantity: int = Field(..., gt=0)
    price: float = Field(..., ge=0)


class WhatsAppCartRecovery(CamelModel):
    phone: str = Field(..., min_length=1)
    cart_items: List[CartLine] = Field(..., min_length=1)


class FraudCheckRequest(CamelModel):
    phone: str = Field(..., min_length=1, pattern=r"^[0-9+\-\s()]+$")
