# telecom_cart/domain/errors.py


class CartError(Exception):
    """Bazowy wyjatek domeny koszyka."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(CartError):
    """Niepoprawne dane wejsciowe pozycji koszyka."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class NotFoundError(CartError):
    """Pozycja nie istnieje albo nalezy do koszyka innego uzytkownika."""


class StoreError(CartError):
    """Awaria warstwy persystencji (polaczenie, constraint inny niz unikalnosc koszyka)."""


class ConflictError(CartError):
    """Rownolegle utworzenie koszyka dla tego samego uzytkownika."""
