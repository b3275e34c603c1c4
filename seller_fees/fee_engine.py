# seller_fees/fee_engine.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .closing_fee import compute_closing_fee
from .other_fees import compute_other_fees
from .rate_tables import (
    CLOSING_FEES,
    OTHER_FEES,
    REFERRAL_FEES,
    WEIGHT_HANDLING_FEES,
    RateTableProvider,
    provider_from_config,
)
from .rate_parsing import format_money
from .referral_fee import compute_referral_fee
from .results import FeeResult
from .weight_handling_fee import compute_weight_handling_fee

logger = logging.getLogger(__name__)


class InvalidTransaction(ValueError):
    pass


class FeeComputationError(Exception):
    """手数料計算の失敗 (呼び出し側にはこれ1種類だけを返す)"""


# JSON (camelCase) のキー -> Transaction のフィールド
FIELD_ALIASES = {
    "productCategory": "product_category",
    "sellingPrice": "selling_price",
    "weight": "weight",
    "shippingMode": "shipping_mode",
    "serviceLevel": "service_level",
    "productSize": "product_size",
    "location": "location",
    "shippingType": "shipping_type",
}
NUMERIC_FIELDS = ("selling_price", "weight")


@dataclass(frozen=True)
class Transaction:
    product_category: str
    selling_price: float
    weight: float
    shipping_mode: str
    service_level: str
    product_size: str
    location: str
    shipping_type: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Transaction":
        """
        APIのリクエストボディ (camelCase) でも snake_case でも受け付ける。
        全項目必須。価格・重量は0以上の数値であること。
        """
        values: Dict[str, Any] = {}
        for camel, field in FIELD_ALIASES.items():
            value = data.get(camel, data.get(field))
            if value is None or (isinstance(value, str) and not value.strip()):
                raise InvalidTransaction(f"Missing field: {camel}")
            values[field] = value

        for field in NUMERIC_FIELDS:
            # JSON の true/false は数値として扱わない
            if isinstance(values[field], bool):
                raise InvalidTransaction(f"{field} must be a number: {values[field]!r}")
            try:
                number = float(values[field])
            except (TypeError, ValueError):
                raise InvalidTransaction(f"{field} must be a number: {values[field]!r}") from None
            if not math.isfinite(number) or number < 0:
                raise InvalidTransaction(f"{field} must be a finite non-negative number: {values[field]!r}")
            values[field] = number

        for field, value in values.items():
            if field not in NUMERIC_FIELDS:
                values[field] = str(value).strip()

        return cls(**values)


@dataclass(frozen=True)
class FeeBreakdown:
    selling_price: float
    referral_fee: FeeResult
    weight_handling_fee: FeeResult
    closing_fee: FeeResult
    pick_and_pack_fee: FeeResult
    storage_fee: FeeResult
    removal_fee: FeeResult

    def components(self) -> Dict[str, FeeResult]:
        return {
            "referralFee": self.referral_fee,
            "weightHandlingFee": self.weight_handling_fee,
            "closingFee": self.closing_fee,
            "pickAndPackFee": self.pick_and_pack_fee,
            "storageFee": self.storage_fee,
            "removalFee": self.removal_fee,
        }

    @property
    def total_fees(self) -> float:
        return sum(r.amount for r in self.components().values())

    @property
    def net_earnings(self) -> float:
        return self.selling_price - self.total_fees

    def fallbacks(self) -> List[str]:
        """既定値で埋めた項目名の一覧"""
        return [name for name, r in self.components().items() if r.is_fallback]

    def to_dict(self) -> Dict[str, Any]:
        """レスポンス形式 (金額はすべて小数2桁の文字列)"""
        return {
            "breakdown": {name: format_money(r.amount) for name, r in self.components().items()},
            "totalFees": format_money(self.total_fees),
            "netEarnings": format_money(self.net_earnings),
        }


class FeeEngine:
    def __init__(self, provider: Optional[RateTableProvider] = None):
        self.provider = provider or provider_from_config()

    def compute(self, transaction: Transaction) -> FeeBreakdown:
        """
        4つのルールをそれぞれ計算して合計する。
        どこかで失敗したら部分的な結果は返さず FeeComputationError にまとめる。
        """
        try:
            return self._compute(transaction)
        except Exception as e:
            logger.error("Error in calculation: %s", e)
            raise FeeComputationError("An error occurred while calculating fees") from e

    def _compute(self, t: Transaction) -> FeeBreakdown:
        referral = compute_referral_fee(
            self.provider.get_table(REFERRAL_FEES), t.product_category, t.selling_price
        )
        closing = compute_closing_fee(
            self.provider.get_table(CLOSING_FEES), t.selling_price, t.shipping_mode
        )
        weight_handling = compute_weight_handling_fee(
            self.provider.get_table(WEIGHT_HANDLING_FEES),
            t.weight,
            t.service_level,
            t.shipping_mode,
            t.location,
            t.product_size,
        )
        other = compute_other_fees(
            self.provider.get_table(OTHER_FEES), t.product_size, t.shipping_mode, t.shipping_type
        )

        breakdown = FeeBreakdown(
            selling_price=t.selling_price,
            referral_fee=referral,
            weight_handling_fee=weight_handling,
            closing_fee=closing,
            pick_and_pack_fee=other.pick_and_pack_fee,
            storage_fee=other.storage_fee,
            removal_fee=other.removal_fee,
        )
        if breakdown.fallbacks():
            logger.info("Default fees used for: %s", ", ".join(breakdown.fallbacks()))
        return breakdown


def compute_fees(transaction: Transaction | Mapping[str, Any], provider: Optional[RateTableProvider] = None) -> FeeBreakdown:
    if not isinstance(transaction, Transaction):
        transaction = Transaction.from_dict(transaction)
    return FeeEngine(provider).compute(transaction)
