# seller_fees/rate_parsing.py
"""
レート表セルのパース処理。

手数料ルールで使う 文字列 -> 数値 の変換はすべてここを通す。
(通貨記号 ₹ / カンマ / % / "-" プレースホルダ をまとめて吸収する)
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

CURRENCY_MARKERS = ("₹",)
EMPTY_FEE_MARKERS = ("", "-", "NA")

MONEY_Q = Decimal("0.01")


class DataSourceError(Exception):
    """Rate source unreachable, or a requested table is missing."""


class MalformedRateRow(DataSourceError):
    """A rate row holds text that cannot be read as a number or range."""

    def __init__(self, message: str, row: Optional[List[str]] = None):
        super().__init__(message)
        self.row = row


@dataclass(frozen=True)
class PriceBracket:
    min: float
    max: float = math.inf

    def contains(self, price: float) -> bool:
        # 上限も含む (max == inf のときも含む扱い)
        return self.min <= price <= self.max


def cells(row: List[str], count: int) -> List[str]:
    """Sheets API は末尾の空セルを返さないので、足りない分を "" で埋める"""
    padded = [("" if c is None else str(c)) for c in row[:count]]
    return padded + [""] * (count - len(padded))


def strip_currency(value: str) -> str:
    s = str(value)
    for marker in CURRENCY_MARKERS:
        s = s.replace(marker, "")
    return s.replace(",", "").strip()


def parse_amount(value: str, row: Optional[List[str]] = None) -> float:
    """Parse a currency-marked amount such as "₹1,250.50"."""
    s = strip_currency(value)
    try:
        amount = float(s)
    except ValueError:
        raise MalformedRateRow(f"Not a number: {value!r}", row) from None
    if not math.isfinite(amount):
        raise MalformedRateRow(f"Not a finite number: {value!r}", row)
    return amount


def parse_fee_cell(value: Optional[str], row: Optional[List[str]] = None) -> float:
    """Fee column cell; blank, "-" and "NA" mean no fee."""
    if value is None:
        return 0.0
    if strip_currency(value) in EMPTY_FEE_MARKERS:
        return 0.0
    return parse_amount(value, row)


def parse_rate(value: str, suffixes: Tuple[str, ...] = (), row: Optional[List[str]] = None) -> float:
    """Amount with an optional trailing unit such as " per cubic foot per month"."""
    s = str(value)
    for suffix in suffixes:
        s = s.replace(suffix, "")
    return parse_amount(s, row)


def parse_percentage(value: str, row: Optional[List[str]] = None) -> float:
    """ "8.5%" -> 8.5 """
    return parse_amount(str(value).replace("%", ""), row)


def parse_comparison_bracket(text: str, row: Optional[List[str]] = None) -> PriceBracket:
    """
    Referral fee ranges:
      "<= 500"            -> [0, 500]
      "> 500 and <= 1000" -> [500, 1000]
      "> 1000"            -> [1000, inf]
    """
    s = str(text)
    if "<=" in s and ">" not in s.replace("<=", ""):
        return PriceBracket(0.0, parse_amount(s.replace("<=", ""), row))
    if ">" in s:
        parts = s.split(" and ")
        low = parse_amount(parts[0].replace(">", ""), row)
        if len(parts) > 1:
            return PriceBracket(low, parse_amount(parts[1].replace("<=", ""), row))
        return PriceBracket(low)
    raise MalformedRateRow(f"Unknown price range: {text!r}", row)


def parse_span_bracket(text: str, row: Optional[List[str]] = None) -> PriceBracket:
    """
    Closing fee ranges:
      "₹0-₹250" / "0-250" -> [0, 250]
      "₹250+"   / "250+"  -> [250, inf]
    """
    s = strip_currency(text)
    if "-" in s:
        low, _, high = s.partition("-")
        return PriceBracket(parse_amount(low, row), parse_amount(high, row))
    return PriceBracket(parse_amount(s.split("+")[0], row))


def money(value: float) -> Decimal:
    """Round half away from zero on the exact float value (same as JS toFixed(2))."""
    return Decimal(value).quantize(MONEY_Q, rounding=ROUND_HALF_UP)


def round_fee(value: float) -> float:
    return float(money(value))


def format_money(value: float) -> str:
    return str(money(value))
