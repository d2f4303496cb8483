"""Exceptions raised below the HTTP layer.

main.py maps them onto responses:
- ModuleError subclasses carry their own status code.
- IntegrationError (third-party API failures) becomes a 500.
"""


class ModuleError(Exception):
    """Base class for module entitlement failures."""

    status_code = 400

    def __init__(self, module_id, message=None):
        super().__init__(message or f"Module error: {module_id}")
        self.module_id = module_id


class UnknownModuleError(ModuleError):
    """The id is not in the static module registry."""

    status_code = 404

    def __init__(self, module_id):
        super().__init__(module_id, f"Module not found: {module_id}")


class ModuleNotPurchasedError(ModuleError):
    """enable/disable/update_settings on a module with no entitlement row."""

    status_code = 400

    def __init__(self, module_id):
        super().__init__(module_id, f"Module must be purchased first: {module_id}")


class CoreModuleLockedError(ModuleError):
    """Core modules are always enabled and can never be disabled."""

    status_code = 403

    def __init__(self, module_id):
        super().__init__(module_id, f"Core modules cannot be disabled: {module_id}")


class ModuleNotEnabledError(ModuleError):
    """A gated endpoint was called while its module is off."""

    status_code = 403

    def __init__(self, module_id, name=None):
        super().__init__(module_id, f"{name or module_id} module is not enabled")


class IntegrationError(Exception):
    """A call to a third-party service failed."""

    def __init__(self, service, message):
        super().__init__(message)
        self.service = service


class IntegrationNotConfiguredError(IntegrationError):
    """No credentials in settings or environment."""


class SteadfastError(IntegrationError):
    def __init__(self, message):
        super().__init__("steadfast", message)
