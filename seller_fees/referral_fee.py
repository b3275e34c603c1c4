# seller_fees/referral_fee.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .rate_parsing import (
    PriceBracket,
    cells,
    parse_comparison_bracket,
    parse_percentage,
)
from .results import FeeResult, fallback, matched

logger = logging.getLogger(__name__)

# 該当カテゴリ・価格帯が無いときの既定の紹介料率
DEFAULT_REFERRAL_RATE = 0.15


@dataclass(frozen=True)
class ReferralRate:
    category: str
    bracket: Optional[PriceBracket]  # None = "All" (全価格帯)
    fee_percentage: float

    def applies_to(self, price: float) -> bool:
        return self.bracket is None or self.bracket.contains(price)


def parse_referral_rates(table: List[List[str]]) -> List[ReferralRate]:
    """
    "Referral fees" シート (category, priceRange, feePercentage) を読み込む。
    1行目はヘッダーなので飛ばす。
    """
    rates: List[ReferralRate] = []
    for row in table[1:]:
        category, price_range, pct = cells(row, 3)
        if not category:
            continue
        bracket = None if price_range.strip() == "All" else parse_comparison_bracket(price_range, row)
        rates.append(ReferralRate(category, bracket, parse_percentage(pct, row)))
    return rates


def compute_referral_fee(table: List[List[str]], category: str, price: float) -> FeeResult:
    """
    紹介料 (販売手数料) を計算する。

    同じカテゴリで価格帯違いの行が複数あってもよい。
    価格帯に入る最初の行を採用し、どれにも入らなければ 15% で見積もる。
    """
    for rate in parse_referral_rates(table):
        if rate.category != category:
            continue
        if rate.applies_to(price):
            return matched(price * (rate.fee_percentage / 100))

    logger.debug("No referral rate for category=%r price=%s, using default", category, price)
    return fallback(price * DEFAULT_REFERRAL_RATE, f"no referral rate for {category!r}")
