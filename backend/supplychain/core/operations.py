"""Operation Table — immutable descriptors for the nine logical operations.

Invariants:
    - One Operation per OperationName, built once at import, never mutated
    - Ledger argument order and remote field semantics come from the SAME
      ordered `fields` tuple, so both paths stay substitutable
    - Queries use EVALUATE, everything else SUBMIT
    - Queries fall back to UNKNOWN on unclassified failure; user-input-sensitive
      operations (creates, updates, delete, placeOrder) fall back to BAD_REQUEST
    - A create whose peer answers 2xx with an "already exists" message is a
      rejection, not a success
    - Numeric fields are ASCII decimal integers on both paths

Design Decisions:
    - Explicit dict over reflection: every mapping visible in one place
    - Frozen dataclasses: descriptors are shared across concurrent requests
"""

import re
from dataclasses import dataclass
from typing import Mapping

from supplychain.core.domain_types import (
    ErrorKind, FieldPlacement, InvocationMode, OperationName, TransactionName,
)


@dataclass(frozen=True)
class OperationField:
    """One argument of an operation, in ledger order."""
    name: str
    placement: FieldPlacement = FieldPlacement.BODY
    numeric: bool = False  # serialized as a JSON integer on the remote path


@dataclass(frozen=True)
class Operation:
    """Immutable descriptor of a logical operation."""
    name: OperationName
    transaction: TransactionName
    mode: InvocationMode
    method: str
    route: str
    fields: tuple[OperationField, ...]
    envelope_key: str
    fallback_kind: ErrorKind
    failure_message: str
    not_found_message: str
    already_exists_message: str
    empty_body_kind: ErrorKind | None = None
    # 2xx peer body that still reports a rejection of this kind (e.g. duplicate create)
    success_rejection_kind: ErrorKind | None = None
    raw_fallback: bool = True

    @property
    def argument_order(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def is_query(self) -> bool:
        return self.mode == InvocationMode.EVALUATE


@dataclass(frozen=True)
class OperationArgs:
    """Ordered, string-encoded arguments for one invocation."""
    operation: OperationName
    values: tuple[str, ...]

    @property
    def context_id(self) -> str:
        """Primary entity id (first argument) used in messages and logs."""
        return self.values[0] if self.values else ""

    def as_mapping(self, operation: Operation) -> dict[str, str]:
        return dict(zip(operation.argument_order, self.values))


_PRODUCT_NOT_FOUND = "Product with id: {id} is not found"
_PRODUCT_EXISTS = "Product with id: {id} already exists"
_SHIPMENT_NOT_FOUND = "Shipment with id: {id} is not found"
_SHIPMENT_EXISTS = "Shipment with id: {id} already exists"

_PRODUCT_ID_PATH = OperationField("productId", FieldPlacement.PATH)
_SHIPMENT_ID_PATH = OperationField("shipmentId", FieldPlacement.PATH)


def _mutation(
    name: OperationName, transaction: str, method: str, route: str,
    fields: tuple[OperationField, ...], failure_message: str,
    not_found: str = _PRODUCT_NOT_FOUND, exists: str = _PRODUCT_EXISTS,
    create: bool = False,
) -> Operation:
    return Operation(
        name=name,
        transaction=TransactionName(transaction),
        mode=InvocationMode.SUBMIT,
        method=method,
        route=route,
        fields=fields,
        envelope_key="message",
        fallback_kind=ErrorKind.BAD_REQUEST,
        failure_message=failure_message,
        not_found_message=not_found,
        already_exists_message=exists,
        success_rejection_kind=ErrorKind.ALREADY_EXISTS if create else None,
    )


def _query(
    name: OperationName, transaction: str, route: str,
    fields: tuple[OperationField, ...], envelope_key: str,
    failure_message: str, not_found: str, exists: str,
) -> Operation:
    return Operation(
        name=name,
        transaction=TransactionName(transaction),
        mode=InvocationMode.EVALUATE,
        method="GET",
        route=route,
        fields=fields,
        envelope_key=envelope_key,
        fallback_kind=ErrorKind.UNKNOWN,
        failure_message=failure_message,
        not_found_message=not_found,
        already_exists_message=exists,
        empty_body_kind=ErrorKind.NOT_FOUND,
    )


# ADR: every mapping explicit; adding an operation requires editing this table
OPERATIONS: Mapping[OperationName, Operation] = {
    OperationName.CREATE_PRODUCT: _mutation(
        OperationName.CREATE_PRODUCT,
        "AssetContract:createProduct", "POST", "/assets/createProduct",
        (
            OperationField("productId"),
            OperationField("productName"),
            OperationField("category"),
            OperationField("quantity", numeric=True),
        ),
        "Failed to create product",
        create=True,
    ),
    OperationName.READ_PRODUCT: _query(
        OperationName.READ_PRODUCT,
        "AssetContract:readProduct", "/assets/queryProduct/{productId}",
        (_PRODUCT_ID_PATH,), "product",
        "Product not found", _PRODUCT_NOT_FOUND, _PRODUCT_EXISTS,
    ),
    OperationName.UPDATE_PRODUCT_QUANTITY: _mutation(
        OperationName.UPDATE_PRODUCT_QUANTITY,
        "AssetContract:updateProductQuantity", "PUT", "/assets/update/{productId}",
        (_PRODUCT_ID_PATH, OperationField("quantity")),
        "Failed to update product",
    ),
    OperationName.DELETE_PRODUCT: _mutation(
        OperationName.DELETE_PRODUCT,
        "AssetContract:deleteProduct", "DELETE", "/assets/removeProduct/{productId}",
        (_PRODUCT_ID_PATH,),
        "Failed to delete product",
    ),
    OperationName.CREATE_SHIPMENT: _mutation(
        OperationName.CREATE_SHIPMENT,
        "ShipmentContract:createShipment", "POST", "/assets/createShipment",
        (
            OperationField("shipmentId"),
            OperationField("productId"),
            OperationField("origin"),
            OperationField("destination"),
            OperationField("carrier"),
            OperationField("quantity", numeric=True),
        ),
        "Failed to create shipment",
        _SHIPMENT_NOT_FOUND, _SHIPMENT_EXISTS,
        create=True,
    ),
    OperationName.GET_SHIPMENT: _query(
        OperationName.GET_SHIPMENT,
        "ShipmentContract:getShipment", "/assets/queryShipment/{shipmentId}",
        (_SHIPMENT_ID_PATH,), "shipment",
        "Shipment not found", _SHIPMENT_NOT_FOUND, _SHIPMENT_EXISTS,
    ),
    OperationName.UPDATE_SHIPMENT_STATUS: _mutation(
        OperationName.UPDATE_SHIPMENT_STATUS,
        "ShipmentContract:updateShipmentStatus", "PUT",
        "/assets/updateShipment/{shipmentId}",
        (_SHIPMENT_ID_PATH, OperationField("status")),
        "Failed to update shipment",
        _SHIPMENT_NOT_FOUND, _SHIPMENT_EXISTS,
    ),
    OperationName.PLACE_ORDER: _mutation(
        OperationName.PLACE_ORDER,
        "ShipmentContract:placeOrder", "POST", "/assets/placeOrder",
        (OperationField("productId"), OperationField("quantity", numeric=True)),
        "Failed to place order",
    ),
    OperationName.GET_AUDIT_LOG_BY_PRODUCT_ID: _query(
        OperationName.GET_AUDIT_LOG_BY_PRODUCT_ID,
        "AssetContract:getAuditLogsByProductId",
        "/assets/queryLogByProductId/{productId}",
        (_PRODUCT_ID_PATH,), "product",
        "Log not found", "Log not found for product id: {id}", _PRODUCT_EXISTS,
    ),
}


def get_operation(name: OperationName | str) -> Operation:
    """Look up a descriptor by enum member or camelCase name."""
    return OPERATIONS[OperationName(name)]


def build_args(operation: Operation, fields: Mapping[str, object]) -> OperationArgs:
    """Order validated input by the operation's field list, stringifying values.

    Raises:
        KeyError: a field named by the operation is missing from `fields`.
    """
    values = tuple(str(fields[name]) for name in operation.argument_order)
    return OperationArgs(operation=operation.name, values=values)


_DECIMAL_INTEGER = re.compile(r"-?[0-9]+")


def is_decimal_integer(value: str) -> bool:
    """ASCII decimal integer, optionally negative. Unicode digits ("²", "٣") are rejected."""
    return _DECIMAL_INTEGER.fullmatch(value) is not None
