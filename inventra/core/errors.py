"""
Typed exceptions for the inventory service.

Every error carries a machine-readable ``code`` and the HTTP ``status_code``
the API layer answers with. Structured fields (sku, limit, available...) are
kept as attributes so callers never have to parse messages.

    InventraError
    +-- ValidationError          400  validation_error
    +-- UnauthorizedError        401  unauthorized
    +-- ForbiddenError           403  forbidden
    +-- NotFoundError            404  not_found
    |   +-- ProductNotFoundError
    |   +-- LocationNotFoundError
    |   +-- AdjustmentNotFoundError
    |   +-- OrderNotFoundError
    +-- LimitExceededError       402  limit_exceeded
    +-- FeatureUnavailableError  402  feature_unavailable
    +-- InsufficientStockError   400  insufficient_stock
    +-- ConflictError            409  conflict
    +-- InvalidTransitionError   409  invalid_transition
    +-- UpstreamError            502  upstream_error
"""

from typing import Any


class InventraError(Exception):
    """Base class for all domain errors."""

    code: str = "inventra_error"
    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message, "code": self.code}
        for key, val in vars(self).items():
            if key != "message" and not key.startswith("_"):
                payload[key] = val
        return payload


class ValidationError(InventraError):
    code = "validation_error"
    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class UnauthorizedError(InventraError):
    code = "unauthorized"
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ForbiddenError(InventraError):
    code = "forbidden"
    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class NotFoundError(InventraError):
    code = "not_found"
    status_code = 404


class ProductNotFoundError(NotFoundError):
    code = "product_not_found"

    def __init__(self, sku: str | None = None, product_id: Any = None):
        super().__init__("Product not found")
        self.sku = sku
        self.product_id = str(product_id) if product_id is not None else None


class LocationNotFoundError(NotFoundError):
    code = "location_not_found"

    def __init__(self, names: list[str]):
        super().__init__("Locations not found")
        self.names = names


class AdjustmentNotFoundError(NotFoundError):
    code = "adjustment_not_found"

    def __init__(self, adjustment_id: Any):
        super().__init__("Stock adjustment not found")
        self.adjustment_id = str(adjustment_id)


class OrderNotFoundError(NotFoundError):
    code = "order_not_found"

    def __init__(self, kind: str, order_id: Any):
        super().__init__(f"{kind.replace('_', ' ').capitalize()} not found")
        self.kind = kind
        self.order_id = str(order_id)


class LimitExceededError(InventraError):
    """The tenant's plan does not allow another row of this resource."""

    code = "limit_exceeded"
    status_code = 402

    def __init__(self, plan_name: str, resource_key: str, limit: int, current: int):
        super().__init__(
            f"Plan limit reached ({plan_name}: {limit} {resource_key.replace('_', ' ')})."
        )
        self.plan_name = plan_name
        self.resource_key = resource_key
        self.limit = limit
        self.current = current


class FeatureUnavailableError(InventraError):
    """The tenant's plan switches this feature off."""

    code = "feature_unavailable"
    status_code = 402

    def __init__(self, feature_key: str, message: str):
        super().__init__(message)
        self.feature_key = feature_key


class InsufficientStockError(InventraError):
    code = "insufficient_stock"
    status_code = 400

    def __init__(self, available: int, requested: int):
        super().__init__("Insufficient stock at source location")
        self.available = available
        self.requested = requested


class ConflictError(InventraError):
    code = "conflict"
    status_code = 409


class InvalidTransitionError(InventraError):
    code = "invalid_transition"
    status_code = 409

    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move from {current} to {target}")
        self.current = current
        self.target = target


class UpstreamError(InventraError):
    """A hosted collaborator (auth provider) refused or failed the request."""

    code = "upstream_error"
    status_code = 502
