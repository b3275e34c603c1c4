# seller_fees/closing_fee.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

from .rate_parsing import PriceBracket, cells, parse_fee_cell, parse_span_bracket
from .results import FeeResult, fallback, matched

logger = logging.getLogger(__name__)

# "Closing fees" シートの列順 (A列は価格帯)
SHIPPING_MODE_COLUMNS = ["FBA Normal", "FBA Exception", "Easy Ship", "Self Ship", "Seller Flex"]
DEFAULT_SHIPPING_MODE = "Self Ship"


@dataclass(frozen=True)
class ClosingRate:
    bracket: PriceBracket
    fees: Dict[str, float]

    def fee_for(self, shipping_mode: str) -> float:
        # 不明な配送モードは Self Ship 扱い
        return self.fees.get(shipping_mode, self.fees[DEFAULT_SHIPPING_MODE])


def parse_closing_rates(table: List[List[str]]) -> List[ClosingRate]:
    rates: List[ClosingRate] = []
    for row in table[1:]:
        price_range, *fee_cells = cells(row, 1 + len(SHIPPING_MODE_COLUMNS))
        if not price_range.strip():
            continue
        fees = {mode: parse_fee_cell(v, row) for mode, v in zip(SHIPPING_MODE_COLUMNS, fee_cells)}
        rates.append(ClosingRate(parse_span_bracket(price_range, row), fees))
    return rates


def compute_closing_fee(table: List[List[str]], price: float, shipping_mode: str) -> FeeResult:
    """成約料: 価格帯 x 配送モード の固定額。該当価格帯が無ければ 0。"""
    price = float(price)
    for rate in parse_closing_rates(table):
        if rate.bracket.contains(price):
            return matched(rate.fee_for(shipping_mode))

    logger.warning("No matching price range found for selling price: %s", price)
    return fallback(0.0, f"no closing fee bracket for price {price}")
