"""Domain errors shared by the repositories, the photo store and the routers."""


class InventoryError(Exception):
    pass


class ConfigError(InventoryError):
    """Startup configuration is invalid; the process must not start."""


class ValidationError(InventoryError):
    """A required field is missing (HTTP 400)."""


class NotFoundError(InventoryError):
    """No item, photo or file under the given identifier (HTTP 404)."""


class StorageError(InventoryError):
    """Database or filesystem failure (HTTP 500)."""
