# seller_fees/weight_handling_fee.py
"""
重量手数料 (Weight handling fee) の計算。

"Weight handling fees" シートの列:
    descriptor, weightRange, localFee, regionalFee, nationalFee, ixdFee

descriptor は "FBA - Standard - Premium" のような文字列で、
配送モード / 商品サイズ / サービスレベル をテキストで含んでいる。
weightRange は "First 500g", "Additional 500g up to 1kg",
"Additional kg after 1kg" のような段階 (tier) の説明。
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .rate_parsing import MalformedRateRow, cells, parse_fee_cell, round_fee
from .results import FeeResult, fallback, matched

logger = logging.getLogger(__name__)

FIRST = "First"
ADDITIONAL = "Additional"

LOCATION_COLUMNS = {"Local": 2, "Regional": 3, "National": 4, "IXD": 5}

# "Additional ... after Nkg" の N に対応する差し引き重量
ADDITIONAL_OFFSETS = [
    ("after 1kg", 0.5),
    ("after 5kg", 4.5),
    ("after 12kg", 11.5),
]


@dataclass(frozen=True)
class WeightTier:
    kind: Optional[str]          # FIRST / ADDITIONAL / None(対象外の行)
    limit_kg: float              # 1段階あたりの重量 (0 = 読み取れなかった)
    offset_kg: Optional[float] = None
    capped: bool = False         # "up to 1kg": 最大1単位まで


def parse_weight_tier(text: str) -> WeightTier:
    """weightRange のテキストを構造化する (一度だけ)。"""
    if FIRST in text:
        if "500g" in text:
            limit = 0.5
        elif "12kg" in text:
            limit = 12.0
        else:
            limit = 0.0
        return WeightTier(FIRST, limit)

    if ADDITIONAL in text:
        if "500g" in text:
            limit = 0.5
        elif "kg" in text:
            limit = 1.0
        else:
            limit = 0.0
        if "up to 1kg" in text:
            return WeightTier(ADDITIONAL, limit, capped=True)
        for marker, offset in ADDITIONAL_OFFSETS:
            if marker in text:
                return WeightTier(ADDITIONAL, limit, offset_kg=offset)
        return WeightTier(ADDITIONAL, limit)

    return WeightTier(None, 0.0)


def normalize_shipping_mode(shipping_mode: str) -> str:
    if shipping_mode in ("FBA Normal", "FBA Exception"):
        return "FBA"
    return shipping_mode


def is_applicable(descriptor: str, shipping_mode: str, product_size: str, service_level: str) -> bool:
    mode_size_match = shipping_mode in descriptor and product_size in descriptor
    level_match = ("- " + service_level) in descriptor or "- All Levels" in descriptor
    return mode_size_match and level_match


def location_fee(row: List[str], location: str) -> float:
    index = LOCATION_COLUMNS.get(location)
    if index is None:
        return 0.0
    return parse_fee_cell(cells(row, 6)[index], row)


def tier_fee(tier: WeightTier, fee: float, weight: float, processed: float, row: List[str]) -> Tuple[float, float]:
    """
    1段階分の料金を計算し、(料金, 処理済み重量) を返す。
    """
    if tier.kind is None:
        return 0.0, processed
    if tier.limit_kg <= 0 and (tier.kind == FIRST or tier.capped or tier.offset_kg is not None):
        raise MalformedRateRow(f"Cannot read weight limit from tier {row[1]!r}", row)

    if tier.kind == FIRST:
        applicable = min(weight - processed, tier.limit_kg)
        return fee * (applicable / tier.limit_kg), processed + applicable

    # Additional は1回だけ計算し、残り重量はすべて処理済みにする
    remaining = weight - processed
    if tier.capped:
        amount = fee * min(math.ceil(remaining / tier.limit_kg), 1)
    elif tier.offset_kg is not None:
        amount = fee * max(0, math.ceil((remaining - tier.offset_kg) / tier.limit_kg))
    else:
        amount = 0.0
    return amount, weight


def compute_weight_handling_fee(
    table: List[List[str]],
    weight: float,
    service_level: str,
    shipping_mode: str,
    location: str,
    product_size: str,
) -> FeeResult:
    mode = normalize_shipping_mode(shipping_mode)

    applicable_rows = [
        cells(row, 6) for row in table[1:]
        if row and is_applicable(cells(row, 1)[0], mode, product_size, service_level)
    ]
    if not applicable_rows:
        logger.debug(
            "No weight handling rows for mode=%r size=%r level=%r",
            mode, product_size, service_level,
        )
        return fallback(0.0, "no weight handling tiers")

    total_fee = 0.0
    weight_processed = 0.0

    for row in applicable_rows:
        tier = parse_weight_tier(row[1])
        fee = location_fee(row, location)
        amount, weight_processed = tier_fee(tier, fee, weight, weight_processed, row)
        total_fee += amount
        if weight_processed >= weight:
            break

    return matched(round_fee(total_fee))
