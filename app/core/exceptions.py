# app/core/exceptions.py


class InvalidProductError(ValueError):
    """
    Raised when a catalog record handed to the cart is missing required
    fields or carries values of the wrong shape (e.g. negative price,
    no owner id).

    Business-rule rejections (other seller, duplicate free item, quantity
    above stock) are NOT exceptions; they are reported on the cart's
    `error` field instead.
    """

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []
