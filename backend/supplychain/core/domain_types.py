"""Domain Types — enums and rich types shared by the dispatch layer.

Invariants:
    - Every error kind, operation name and invocation mode is an Enum member
    - No raw string matching on these values anywhere outside this module

Design Decisions:
    - str Enums: serialize to JSON and log extras without custom encoders
    - NewType over wrappers: zero runtime cost, type-checker support
"""

from enum import Enum
from typing import NewType


# ─── Value Types ─────────────────────────────────────────────────

TransactionName = NewType("TransactionName", str)   # "Contract:method"
NormalizedResult = NewType("NormalizedResult", str)


# ─── Enums ───────────────────────────────────────────────────────

class OperationName(str, Enum):
    """The nine logical operations exposed at the API boundary."""
    CREATE_PRODUCT = "createProduct"
    READ_PRODUCT = "readProduct"
    UPDATE_PRODUCT_QUANTITY = "updateProductQuantity"
    DELETE_PRODUCT = "deleteProduct"
    CREATE_SHIPMENT = "createShipment"
    GET_SHIPMENT = "getShipment"
    UPDATE_SHIPMENT_STATUS = "updateShipmentStatus"
    PLACE_ORDER = "placeOrder"
    GET_AUDIT_LOG_BY_PRODUCT_ID = "getAuditLogByProductId"


class InvocationMode(str, Enum):
    """Ledger invocation modes — submit mutates state, evaluate reads."""
    SUBMIT = "submit"
    EVALUATE = "evaluate"


class ErrorKind(str, Enum):
    """Stable failure taxonomy consumed by the API boundary."""
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    CONFLICT = "conflict"
    BAD_REQUEST = "bad_request"
    UPSTREAM = "upstream"
    UNKNOWN = "unknown"


class ResolvedVia(str, Enum):
    """How a remote peer base URL was obtained."""
    STATIC = "static"
    DISCOVERY = "discovery"


class FieldPlacement(str, Enum):
    """Where an operation field travels on the remote path."""
    PATH = "path"
    BODY = "body"
