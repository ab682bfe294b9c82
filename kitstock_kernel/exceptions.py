"""
Typed exception hierarchy for the kitstock kernel.

Every error carries a machine-readable ``code`` class attribute and keeps
its context as attributes, so callers catch by type and read fields
instead of parsing messages.

    KitStockError (base)
    |
    +-- NotFoundError
    |   +-- ItemNotFoundError
    |   +-- ClientNotFoundError
    |   +-- AssignmentNotFoundError
    |   +-- MaterialLineNotFoundError
    |   +-- DanglingMaterialReferenceError
    |
    +-- InvalidArgumentError
    |   +-- UnknownCategoryError
    |
    +-- InsufficientStockError
    +-- InvalidTransitionError
    +-- UnauthenticatedError
    +-- DuplicateSerialNumberError
    +-- DuplicateCategoryError

Code                        | When raised
----------------------------|------------------------------------------------
ITEM_NOT_FOUND              | Raw material / pre-processed good / kit id unknown
CLIENT_NOT_FOUND            | Client id unknown
ASSIGNMENT_NOT_FOUND        | Assignment id unknown
MATERIAL_LINE_NOT_FOUND     | Kit material line id unknown
DANGLING_MATERIAL_REFERENCE | BOM line points at a material that no longer exists
INVALID_ARGUMENT            | Quantity <= 0, malformed date, unknown enum value
UNKNOWN_CATEGORY            | Category tag is neither well-known nor registered
INSUFFICIENT_STOCK          | Decrement would drive a stock level negative
INVALID_TRANSITION          | Assignment status edge not permitted
UNAUTHENTICATED             | No acting user for a mutation
DUPLICATE_SERIAL_NUMBER     | Kit serial number already in use
DUPLICATE_CATEGORY          | Category tag already registered

InsufficientStockError and InvalidTransitionError are business-rule
failures meant to be shown to an operator. NotFound and Unauthenticated
point at programming or session errors. Nothing here is retried.
"""


class KitStockError(Exception):
    """Base exception for all kitstock errors."""

    code: str = "KITSTOCK_ERROR"


# Lookup failures


class NotFoundError(KitStockError):
    """A referenced id does not exist."""

    code: str = "NOT_FOUND"


class ItemNotFoundError(NotFoundError):
    """Stock-bearing item with given id was not found."""

    code: str = "ITEM_NOT_FOUND"

    def __init__(self, kind: str, item_id: str):
        self.kind = kind
        self.item_id = item_id
        super().__init__(f"{kind} not found: {item_id}")


class ClientNotFoundError(NotFoundError):
    code: str = "CLIENT_NOT_FOUND"

    def __init__(self, client_id: str):
        self.client_id = client_id
        super().__init__(f"Client not found: {client_id}")


class AssignmentNotFoundError(NotFoundError):
    code: str = "ASSIGNMENT_NOT_FOUND"

    def __init__(self, assignment_id: str):
        self.assignment_id = assignment_id
        super().__init__(f"Kit assignment not found: {assignment_id}")


class MaterialLineNotFoundError(NotFoundError):
    code: str = "MATERIAL_LINE_NOT_FOUND"

    def __init__(self, line_id: str):
        self.line_id = line_id
        super().__init__(f"Kit material line not found: {line_id}")


class DanglingMaterialReferenceError(NotFoundError):
    """
    A kit material line references a material that no longer exists.

    Reported to the caller; the line is left untouched.
    """

    code: str = "DANGLING_MATERIAL_REFERENCE"

    def __init__(self, line_id: str, material_type: str, material_id: str):
        self.line_id = line_id
        self.material_type = material_type
        self.material_id = material_id
        super().__init__(
            f"Kit material line {line_id} references missing "
            f"{material_type} material {material_id}"
        )


# Input validation


class InvalidArgumentError(KitStockError):
    """Argument failed validation (quantity, date, enum value, ...)."""

    code: str = "INVALID_ARGUMENT"

    def __init__(self, argument: str, reason: str):
        self.argument = argument
        self.reason = reason
        super().__init__(f"Invalid {argument}: {reason}")


class UnknownCategoryError(InvalidArgumentError):
    code: str = "UNKNOWN_CATEGORY"

    def __init__(self, item_kind: str, category: str):
        self.item_kind = item_kind
        self.category = category
        super().__init__(
            "category",
            f"'{category}' is not a known or registered {item_kind} category",
        )


# Business-rule failures


class InsufficientStockError(KitStockError):
    """Requested decrement exceeds the available stock."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, item_label: str, available: int, requested: int):
        self.item_label = item_label
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock: only {available} units of '{item_label}' "
            f"are available ({requested} requested)"
        )


class InvalidTransitionError(KitStockError):
    """Assignment status edge is not permitted by the lifecycle."""

    code: str = "INVALID_TRANSITION"

    def __init__(self, assignment_id: str, from_status: str, to_status: str):
        self.assignment_id = assignment_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Assignment {assignment_id} cannot move from "
            f"'{from_status}' to '{to_status}'"
        )


class UnauthenticatedError(KitStockError):
    """No acting user is available for a mutation."""

    code: str = "UNAUTHENTICATED"

    def __init__(self, operation: str = "mutation"):
        self.operation = operation
        super().__init__(f"Not authenticated: {operation} requires an acting user")


class DuplicateSerialNumberError(KitStockError):
    code: str = "DUPLICATE_SERIAL_NUMBER"

    def __init__(self, serial_number: str):
        self.serial_number = serial_number
        super().__init__(f"Kit with serial number '{serial_number}' already exists")


class DuplicateCategoryError(KitStockError):
    code: str = "DUPLICATE_CATEGORY"

    def __init__(self, item_kind: str, category: str):
        self.item_kind = item_kind
        self.category = category
        super().__init__(f"{item_kind} category '{category}' already exists")
