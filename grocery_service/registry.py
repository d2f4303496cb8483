"""Static catalog of the modules the store can enable.

The catalog never changes at runtime. Purchase and enablement state lives in
the ``modules`` table and is joined with these definitions at query time
(see entitlements.py).
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

CATEGORIES = ("core", "premium", "integration", "analytics")


@dataclass(frozen=True)
class SettingField:
    key: str
    label: str
    type: str  # text | password | number | boolean
    required: bool = False


@dataclass(frozen=True)
class ModuleDefinition:
    id: str
    name: str
    description: str
    category: str
    version: str = "1.0.0"
    price: float = 0
    requires_purchase: bool = True
    settings: Tuple[SettingField, ...] = ()

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "category": self.category,
            "price": self.price,
            "requiresPurchase": self.requires_purchase,
            "settingsSchema": [
                {"key": f.key, "label": f.label, "type": f.type, "required": f.required}
                for f in self.settings
            ],
        }


_DEFINITIONS = (
    ModuleDefinition(
        id="dashboard",
        name="Dashboard",
        description="Main admin dashboard with statistics and analytics",
        category="core",
        requires_purchase=False,
    ),
    ModuleDefinition(
        id="products",
        name="Product Management",
        description="Manage products, categories, and inventory",
        category="core",
        requires_purchase=False,
    ),
    ModuleDefinition(
        id="orders",
        name="Order Management",
        description="View and manage customer orders",
        category="core",
        requires_purchase=False,
    ),
    ModuleDefinition(
        id="menus",
        name="Menu Management",
        description="Header, footer and mobile navigation menus",
        category="premium",
    ),
    ModuleDefinition(
        id="fraud-check",
        name="Fraud Check",
        description="Check courier order history and fraud risk by phone number",
        category="premium",
        settings=(SettingField("apiKey", "API Key", "password", required=True),),
    ),
    ModuleDefinition(
        id="steadfast-courier",
        name="Steadfast Courier",
        description="Integration with Steadfast Courier for order shipping and tracking",
        category="integration",
        settings=(
            SettingField("apiKey", "API Key", "text", required=True),
            SettingField("secretKey", "Secret Key", "password", required=True),
        ),
    ),
    ModuleDefinition(
        id="analytics",
        name="Advanced Analytics",
        description="Advanced order analytics and reporting with charts and graphs",
        category="analytics",
    ),
    ModuleDefinition(
        id="notifications",
        name="Real-time Notifications",
        description="Real-time order notifications and alerts",
        category="premium",
    ),
    ModuleDefinition(
        id="whatsapp-marketing",
        name="WhatsApp Marketing",
        description=(
            "Send direct messages, cart recovery, notifications, and broadcasts "
            "to increase sales and engagement"
        ),
        category="premium",
        settings=(
            SettingField("apiKey", "API Key", "password", required=True),
            SettingField("apiUrl", "API URL", "text"),
            SettingField("phoneNumberId", "Phone Number ID", "text"),
        ),
    ),
    ModuleDefinition(
        id="income-expense",
        name="Income Expense",
        description="Record income and expenses and see the running balance",
        category="premium",
    ),
    ModuleDefinition(
        id="report-management",
        name="Report Management",
        description="Sales and stock reports for the admin panel",
        category="premium",
    ),
)

MODULE_REGISTRY: Mapping[str, ModuleDefinition] = MappingProxyType(
    {definition.id: definition for definition in _DEFINITIONS}
)

CORE_MODULE_IDS = frozenset(
    definition.id for definition in _DEFINITIONS if definition.category == "core"
)


def get_module_definition(module_id) -> Optional[ModuleDefinition]:
    return MODULE_REGISTRY.get(module_id)


def all_modules():
    return list(MODULE_REGISTRY.values())


def modules_by_category(category):
    return [m for m in MODULE_REGISTRY.values() if m.category == category]


def is_core_module(module_id) -> bool:
    """Core modules cannot be disabled."""
    return module_id in CORE_MODULE_IDS
