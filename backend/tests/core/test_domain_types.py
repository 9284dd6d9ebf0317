"""Domain Types — verifies enum members and their wire values.

Tests:
    - OperationName values are the camelCase names callers use
    - Enums serialize to plain strings
"""

import json

from supplychain.core.domain_types import (
    ErrorKind, InvocationMode, NormalizedResult, OperationName, TransactionName,
)


def test_nine_operations():
    assert {op.value for op in OperationName} == {
        "createProduct", "readProduct", "updateProductQuantity", "deleteProduct",
        "createShipment", "getShipment", "updateShipmentStatus", "placeOrder",
        "getAuditLogByProductId",
    }


def test_operation_name_from_string():
    assert OperationName("placeOrder") is OperationName.PLACE_ORDER


def test_invocation_modes():
    assert set(InvocationMode) == {InvocationMode.SUBMIT, InvocationMode.EVALUATE}


def test_error_kinds_serialize_as_strings():
    assert json.dumps({"kind": ErrorKind.ALREADY_EXISTS}) == '{"kind": "already_exists"}'


def test_value_types_wrap_str():
    assert TransactionName("AssetContract:readProduct") == "AssetContract:readProduct"
    assert NormalizedResult("") == ""
