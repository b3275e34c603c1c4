# seller_fees/other_fees.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .rate_parsing import cells, parse_rate
from .results import FeeResult, fallback, matched

PICK_AND_PACK = "Pick & Pack Fee"
STORAGE = "Storage Fee"
REMOVAL = "Removal Fees"

RATE_SUFFIXES = (" per cubic foot per month",)


@dataclass(frozen=True)
class OtherFees:
    pick_and_pack_fee: FeeResult
    storage_fee: FeeResult
    removal_fee: FeeResult


def _size_descriptor(product_size: str) -> str:
    return "Standard Size" if product_size == "Standard" else "Heavy & Bulky"


def _shipping_descriptor(shipping_type: str) -> Optional[str]:
    if shipping_type == "Standard":
        return "Standard Shipping"
    if shipping_type == "Expedited":
        return "Expedited Shipping"
    return None


def _is_pick_and_pack_row(category: str, product_size: str) -> bool:
    if category == "Standard Size":
        return product_size == "Standard"
    if category == "Oversize/Heavy & Bulky":
        return product_size != "Standard"
    return False


def compute_other_fees(
    table: List[List[str]],
    product_size: str,
    shipping_mode: str,
    shipping_type: str,
) -> OtherFees:
    """
    "Other Fees" シート (feeType, category, rate) から
    Pick & Pack / 保管料 / 返送(Removal) 手数料を拾う。

    同じ種類で条件に合う行が複数あれば後の行が優先 (途中で抜けない)。
    shipping_mode は今のところ使っていない。
    """
    pick_and_pack = fallback(0.0, "no pick & pack rate")
    storage = fallback(0.0, "no storage rate")
    removal = fallback(0.0, "no removal rate")

    size_text = _size_descriptor(product_size)
    shipping_text = _shipping_descriptor(shipping_type)

    for row in table[1:]:
        fee_type, category, rate = cells(row, 3)

        if fee_type == PICK_AND_PACK and _is_pick_and_pack_row(category, product_size):
            pick_and_pack = matched(parse_rate(rate, RATE_SUFFIXES, row))

        if fee_type == STORAGE and category == "All Categories":
            storage = matched(parse_rate(rate, RATE_SUFFIXES, row))

        if (
            fee_type == REMOVAL
            and shipping_text is not None
            and size_text in category
            and shipping_text in category
        ):
            removal = matched(parse_rate(rate, RATE_SUFFIXES, row))

    return OtherFees(pick_and_pack, storage, removal)
