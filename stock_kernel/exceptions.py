"""
Typed Exception Hierarchy for the Stock Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the ledger (forms, importers, the CLI) turn failures into
user-facing notifications. Matching on message text is fragile, so every
error carries:
  1. A TYPED exception class (catch by type, not message)
  2. A CODE class attribute (machine-readable, safe to hand to a UI)
  3. Structured DATA attributes (the offending id, field or value)

Example:
    try:
        ledger.post_transaction(item_id, MovementKind.OUT, qty)
    except ItemNotFoundError as e:
        notify(code=e.code, item=e.item_id)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    StockKernelError (base)
    |
    +-- NotFoundError
    |   +-- ItemNotFoundError
    |   +-- TransactionNotFoundError
    |   +-- OpnameNotFoundError
    |
    +-- ValidationFailedError
    |   +-- InvalidQuantityError
    |   +-- InvalidMovementKindError
    |   +-- InvalidEffectiveDateError
    |   +-- MissingFieldError
    |   +-- DifferenceMismatchError
    |
    +-- DuplicateKeyError
        +-- DuplicateSkuError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                   | When Raised
----------------|------------------------|----------------------------------------
Not found       | ITEM_NOT_FOUND         | Item id does not resolve
                | TRANSACTION_NOT_FOUND  | Transaction id does not resolve
                | OPNAME_NOT_FOUND       | Opname id does not resolve
----------------|------------------------|----------------------------------------
Validation      | INVALID_QUANTITY       | Quantity not a positive integer
                | INVALID_MOVEMENT_KIND  | Kind is neither IN nor OUT
                | INVALID_EFFECTIVE_DATE | Date string is not YYYY-MM-DD
                | MISSING_FIELD          | Required field absent
                | DIFFERENCE_MISMATCH    | Opname difference != actual - system
----------------|------------------------|----------------------------------------
Duplicate key   | DUPLICATE_SKU          | Seeding an item whose SKU exists

Import never raises DuplicateKeyError: it upserts by SKU instead.
"""


class StockKernelError(Exception):
    """
    Base exception for all stock kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "STOCK_KERNEL_ERROR"


# Lookup failures


class NotFoundError(StockKernelError):
    """Base exception for ids that do not resolve."""

    code: str = "NOT_FOUND"


class ItemNotFoundError(NotFoundError):
    """Item with given ID was not found."""

    code: str = "ITEM_NOT_FOUND"

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Item not found: {item_id}")


class TransactionNotFoundError(NotFoundError):
    """Transaction with given ID was not found."""

    code: str = "TRANSACTION_NOT_FOUND"

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction not found: {transaction_id}")


class OpnameNotFoundError(NotFoundError):
    """Stock opname record with given ID was not found."""

    code: str = "OPNAME_NOT_FOUND"

    def __init__(self, opname_id: str):
        self.opname_id = opname_id
        super().__init__(f"Stock opname not found: {opname_id}")


# Validation failures


class ValidationFailedError(StockKernelError):
    """Base exception for rejected input."""

    code: str = "VALIDATION_FAILED"


class InvalidQuantityError(ValidationFailedError):
    """Quantity is not an acceptable integer."""

    code: str = "INVALID_QUANTITY"

    def __init__(self, value: object, field: str = "quantity", reason: str = "must be a positive integer"):
        self.value = value
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class InvalidMovementKindError(ValidationFailedError):
    """Movement kind is neither IN nor OUT."""

    code: str = "INVALID_MOVEMENT_KIND"

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid movement kind: {value!r}")


class InvalidEffectiveDateError(ValidationFailedError):
    """Effective date cannot be read as a calendar date."""

    code: str = "INVALID_EFFECTIVE_DATE"

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid effective date: {value!r}")


class MissingFieldError(ValidationFailedError):
    """A required field was not supplied."""

    code: str = "MISSING_FIELD"

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Missing required field: {field_name}")


class DifferenceMismatchError(ValidationFailedError):
    """Opname difference does not equal actual_stock - system_stock."""

    code: str = "DIFFERENCE_MISMATCH"

    def __init__(self, system_stock: int, actual_stock: int, difference: int):
        self.system_stock = system_stock
        self.actual_stock = actual_stock
        self.difference = difference
        super().__init__(
            f"Opname difference {difference} != {actual_stock} - {system_stock}"
        )


# Key uniqueness


class DuplicateKeyError(StockKernelError):
    """Base exception for business-key collisions."""

    code: str = "DUPLICATE_KEY"


class DuplicateSkuError(DuplicateKeyError):
    """An item with the same SKU is already stored."""

    code: str = "DUPLICATE_SKU"

    def __init__(self, sku: str, existing_item_id: str):
        self.sku = sku
        self.existing_item_id = existing_item_id
        super().__init__(f"SKU {sku} already used by item {existing_item_id}")
