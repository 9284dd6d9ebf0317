"""Asset Routes — the public /assets surface, one route per logical operation.

Invariants:
    - Routes never classify errors: ClassifiedError propagates to the global handler
    - Paths and verbs are exactly the ones the remote path mirrors
    - Id segments use the :path converter: peers receive ids percent-encoded,
      and an id containing "/" must match the same route it does locally
    - Success bodies use a single-key envelope (message / product / shipment)

Design Decisions:
    - Fixed success messages for writes, payload echo for reads and placeOrder
      (peers normalize these bodies with the same envelope keys)
"""

import logging

from fastapi import APIRouter, Depends

from supplychain.api.dependencies import get_dispatcher
from supplychain.core.domain_types import OperationName
from supplychain.core.operations import build_args, get_operation
from supplychain.schemas.assets import (
    OrderCreate,
    ProductCreate,
    QuantityUpdate,
    ShipmentCreate,
    ShipmentStatusUpdate,
)
from supplychain.services.operation_dispatch import OperationDispatcher

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/assets", tags=["assets"])

PRODUCT_CREATED = "Product created successfully"
PRODUCT_UPDATED = "Product updated successfully"
PRODUCT_DELETED = "Product deleted successfully"
SHIPMENT_CREATED = "Shipment created successfully"
SHIPMENT_UPDATED = "Shipment updated successfully"


async def _run(
    dispatcher: OperationDispatcher, name: OperationName, fields: dict,
) -> str:
    operation = get_operation(name)
    args = build_args(operation, fields)
    logger.info(
        f"Received {name.value} request: id={args.context_id}",
        extra={"operation": name.value, "context_id": args.context_id},
    )
    return await dispatcher.execute(operation, args)


@router.post("/createProduct")
async def create_product(
    payload: ProductCreate, dispatcher: OperationDispatcher = Depends(get_dispatcher),
):
    await _run(dispatcher, OperationName.CREATE_PRODUCT, payload.model_dump())
    return {"message": PRODUCT_CREATED}


@router.get("/queryProduct/{productId:path}")
async def query_product(
    productId: str, dispatcher: OperationDispatcher = Depends(get_dispatcher),
):
    result = await _run(
        dispatcher, OperationName.READ_PRODUCT, {"productId": productId},
    )
    return {"product": result}


@router.put("/update/{productId:path}")
async def update_product(
    productId: str,
    payload: QuantityUpdate,
    dispatcher: OperationDispatcher = Depends(get_dispatcher),
):
    await _run(
        dispatcher, OperationName.UPDATE_PRODUCT_QUANTITY,
        {"productId": productId, "quantity": payload.quantity},
    )
    return {"message": PRODUCT_UPDATED}


@router.delete("/removeProduct/{productId:path}")
async def remove_product(
    productId: str, dispatcher: OperationDispatcher = Depends(get_dispatcher),
):
    await _run(dispatcher, OperationName.DELETE_PRODUCT, {"productId": productId})
    return {"message": PRODUCT_DELETED}


@router.post("/createShipment")
async def create_shipment(
    payload: ShipmentCreate, dispatcher: OperationDispatcher = Depends(get_dispatcher),
):
    await _run(dispatcher, OperationName.CREATE_SHIPMENT, payload.model_dump())
    return {"message": SHIPMENT_CREATED}


@router.get("/queryShipment/{shipmentId:path}")
async def query_shipment(
    shipmentId: str, dispatcher: OperationDispatcher = Depends(get_dispatcher),
):
    result = await _run(
        dispatcher, OperationName.GET_SHIPMENT, {"shipmentId": shipmentId},
    )
    return {"shipment": result}


@router.put("/updateShipment/{shipmentId:path}")
async def update_shipment(
    shipmentId: str,
    payload: ShipmentStatusUpdate,
    dispatcher: OperationDispatcher = Depends(get_dispatcher),
):
    await _run(
        dispatcher, OperationName.UPDATE_SHIPMENT_STATUS,
        {"shipmentId": shipmentId, "status": payload.status},
    )
    return {"message": SHIPMENT_UPDATED}


@router.post("/placeOrder")
async def place_order(
    payload: OrderCreate, dispatcher: OperationDispatcher = Depends(get_dispatcher),
):
    result = await _run(dispatcher, OperationName.PLACE_ORDER, payload.model_dump())
    return {"message": result}


@router.get("/queryLogByProductId/{productId:path}")
async def query_log_by_product_id(
    productId: str, dispatcher: OperationDispatcher = Depends(get_dispatcher),
):
    result = await _run(
        dispatcher, OperationName.GET_AUDIT_LOG_BY_PRODUCT_ID, {"productId": productId},
    )
    return {"product": result}
