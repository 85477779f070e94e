# zbank/schemas/base.py
from decimal import Decimal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from zbank.services.utils import MAX_AMOUNT


class APIModel(BaseModel):
    """JSON bodies use camelCase; snake_case field names are accepted as well."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


def AmountField(**kwargs):
    """A positive, finite money amount bounded by MAX_AMOUNT."""
    return Field(..., gt=0, le=MAX_AMOUNT, allow_inf_nan=False, **kwargs)


def check_whole_cents(value: float) -> float:
    amount = Decimal(str(value))
    if amount != amount.quantize(Decimal("0.01")):
        raise ValueError("Amount must have at most 2 decimal places")
    return value
