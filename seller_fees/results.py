# seller_fees/results.py
from __future__ import annotations

from dataclasses import dataclass

MATCHED = "matched"
FALLBACK = "fallback"


@dataclass(frozen=True)
class FeeResult:
    """
    One fee component.

    status が "fallback" のときは、レート表に該当行が無く
    既定値 (紹介料15% / その他0) を使ったことを示す。
    """
    amount: float
    status: str = MATCHED
    reason: str = ""

    @property
    def is_fallback(self) -> bool:
        return self.status == FALLBACK


def matched(amount: float) -> FeeResult:
    return FeeResult(amount, MATCHED)


def fallback(amount: float, reason: str = "") -> FeeResult:
    return FeeResult(amount, FALLBACK, reason)
