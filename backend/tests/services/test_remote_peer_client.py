"""Remote Peer Client — path/payload building and HTTP error mapping."""

import json

import httpx
import pytest

from supplychain.core.domain_types import OperationName, ResolvedVia
from supplychain.core.errors import RemotePeerError, RemoteTransportError
from supplychain.core.operations import build_args, get_operation
from supplychain.services.endpoint_resolver import RemoteEndpoint
from supplychain.services.remote_peer_client import (
    RemotePeerClient,
    build_path,
    build_payload,
)

PEER = RemoteEndpoint("http://peer:9000", ResolvedVia.STATIC)


def _client(handler):
    return RemotePeerClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)))


# --- build_path / build_payload ----------------------------------------------

def test_build_path_substitutes_encoded_id():
    op = get_operation(OperationName.UPDATE_SHIPMENT_STATUS)
    args = build_args(op, {"shipmentId": "S 1", "status": "LOST"})
    assert build_path(op, args) == "/assets/updateShipment/S%201"


def test_build_path_without_path_fields_is_route():
    op = get_operation(OperationName.PLACE_ORDER)
    args = build_args(op, {"productId": "P1", "quantity": "2"})
    assert build_path(op, args) == "/assets/placeOrder"


def test_build_payload_sends_numeric_quantity_as_int():
    op = get_operation(OperationName.CREATE_PRODUCT)
    args = build_args(op, {
        "productId": "P1", "productName": "Widget", "category": "tools", "quantity": "5",
    })
    assert build_payload(op, args) == {
        "productId": "P1", "productName": "Widget", "category": "tools", "quantity": 5,
    }


def test_build_payload_keeps_update_quantity_as_string():
    op = get_operation(OperationName.UPDATE_PRODUCT_QUANTITY)
    args = build_args(op, {"productId": "P1", "quantity": "9"})
    assert build_payload(op, args) == {"quantity": "9"}


def test_build_payload_is_none_for_path_only_routes():
    op = get_operation(OperationName.DELETE_PRODUCT)
    assert build_payload(op, build_args(op, {"productId": "P1"})) is None


def test_build_payload_rejects_non_numeric_quantity():
    op = get_operation(OperationName.PLACE_ORDER)
    with pytest.raises(ValueError):
        build_payload(op, build_args(op, {"productId": "P1", "quantity": "lots"}))


# --- call ---------------------------------------------------------------------

async def test_call_posts_json_and_returns_raw_body():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"message": "Order placed"})

    op = get_operation(OperationName.PLACE_ORDER)
    raw = await _client(handler).call(
        PEER, op, build_args(op, {"productId": "P1", "quantity": "2"}),
    )

    assert seen == {
        "method": "POST",
        "url": "http://peer:9000/assets/placeOrder",
        "body": {"productId": "P1", "quantity": 2},
    }
    assert json.loads(raw) == {"message": "Order placed"}


async def test_call_get_sends_no_body():
    seen = {}

    def handler(request):
        seen["content"] = request.content
        seen["method"] = request.method
        return httpx.Response(200, text="")

    op = get_operation(OperationName.READ_PRODUCT)
    raw = await _client(handler).call(PEER, op, build_args(op, {"productId": "P1"}))
    assert seen == {"content": b"", "method": "GET"}
    assert raw == b""


async def test_non_success_raises_remote_peer_error():
    op = get_operation(OperationName.READ_PRODUCT)
    client = _client(lambda r: httpx.Response(404, json={"error": "x"}))

    with pytest.raises(RemotePeerError) as exc_info:
        await client.call(PEER, op, build_args(op, {"productId": "P1"}))

    assert exc_info.value.status_code == 404
    assert json.loads(exc_info.value.body) == {"error": "x"}
    assert exc_info.value.url == "http://peer:9000/assets/queryProduct/P1"


async def test_transport_failure_raises_remote_transport_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    op = get_operation(OperationName.GET_SHIPMENT)
    with pytest.raises(RemoteTransportError) as exc_info:
        await _client(handler).call(PEER, op, build_args(op, {"shipmentId": "S1"}))
    assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)


@pytest.mark.parametrize("quantity", ["٣", "²", "3.0"])
def test_build_payload_rejects_non_ascii_or_fractional_quantity(quantity):
    op = get_operation(OperationName.CREATE_SHIPMENT)
    args = build_args(op, {
        "shipmentId": "S1", "productId": "P1", "origin": "Lyon",
        "destination": "Porto", "carrier": "DHL", "quantity": quantity,
    })
    with pytest.raises(ValueError):
        build_payload(op, args)
