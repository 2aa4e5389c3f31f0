# shopping/domain/errors.py
from typing import Any, Dict


class ShoppingError(Exception):
    """
    Baza taksonomii bledow.
    kind - maszynowo sprawdzalny rodzaj bledu
    detail - opis dla czlowieka
    extra - dodatkowe pola w odpowiedzi (np. available/requested)
    """

    kind = "ShoppingError"
    status_code = 500

    def __init__(self, detail: str, **extra: Any):
        super().__init__(detail)
        self.detail = detail
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "detail": self.detail, **self.extra}


class InvalidInput(ShoppingError):
    kind = "InvalidInput"
    status_code = 400


class NotFound(ShoppingError):
    kind = "NotFound"
    status_code = 404

    def __init__(self, resource: str, **extra: Any):
        super().__init__(f"{resource} not found", resource=resource, **extra)
        self.resource = resource


class Forbidden(ShoppingError):
    kind = "Forbidden"
    status_code = 403


class InvalidState(ShoppingError):
    kind = "InvalidState"
    status_code = 400


class InsufficientStock(ShoppingError):
    kind = "InsufficientStock"
    status_code = 400

    def __init__(self, product: str, available: int, requested: int):
        super().__init__(
            "insufficient stock",
            product=product,
            available=available,
            requested=requested,
        )
        self.product = product
        self.available = available
        self.requested = requested


class StorageFailure(ShoppingError):
    """Jednostka pracy nie zostala zatwierdzona, wszystko wycofane - mozna ponowic."""

    kind = "StorageFailure"
    status_code = 503
