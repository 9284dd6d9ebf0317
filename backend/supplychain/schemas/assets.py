"""Asset Schemas — Pydantic request models for the /assets routes.

Invariants:
    - Every required field is present and non-blank after stripping
    - Quantities accept JSON integers or ASCII decimal strings; Unicode digits
      are rejected so both routing paths see the same value
    - Field names are the camelCase JSON keys the remote path sends

Design Decisions:
    - field_validator(mode="before") for coercion: the peer sends integers for
      creates/placeOrder and strings for updates, both must bind
"""

from pydantic import BaseModel, field_validator

from supplychain.core.operations import is_decimal_integer


def _non_blank(v: object) -> object:
    if isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
    return v


def _decimal_string(v: object) -> str:
    if isinstance(v, bool):
        raise ValueError("quantity must be an integer")
    if isinstance(v, int):
        return str(v)
    if isinstance(v, str) and is_decimal_integer(v.strip()):
        return v.strip()
    raise ValueError("quantity must be an integer")


class ProductCreate(BaseModel):
    productId: str
    productName: str
    category: str
    quantity: int

    @field_validator("productId", "productName", "category", mode="before")
    @classmethod
    def strip_required(cls, v: object) -> object:
        return _non_blank(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: object) -> str:
        return _decimal_string(v)


class QuantityUpdate(BaseModel):
    quantity: str

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: object) -> str:
        return _decimal_string(v)


class ShipmentCreate(BaseModel):
    shipmentId: str
    productId: str
    origin: str
    destination: str
    carrier: str
    quantity: str

    @field_validator(
        "shipmentId", "productId", "origin", "destination", "carrier", mode="before",
    )
    @classmethod
    def strip_required(cls, v: object) -> object:
        return _non_blank(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: object) -> str:
        return _decimal_string(v)


class ShipmentStatusUpdate(BaseModel):
    status: str

    @field_validator("status", mode="before")
    @classmethod
    def strip_required(cls, v: object) -> object:
        return _non_blank(v)


class OrderCreate(BaseModel):
    """Order placement — productId and quantity, as the peer route expects."""
    productId: str
    quantity: str

    @field_validator("productId", mode="before")
    @classmethod
    def strip_required(cls, v: object) -> object:
        return _non_blank(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: object) -> str:
        return _decimal_string(v)
