# seller_fees/config.py
from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from typing import Any, Dict, Optional

CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.toml")


@dataclass
class RateSourceConfig:
    """
    レート表の取得元設定。
    kind = "sheets" なら Google スプレッドシート、"csv" ならローカルのCSVフォルダ。
    """
    kind: str = "sheets"
    spreadsheet_id: str = ""
    api_key: Optional[str] = None
    token: Optional[str] = None
    timeout: float = 10.0
    csv_dir: str = "data/rates"


def load_rate_source_config(path: str = CONFIG_PATH) -> RateSourceConfig:
    """
    config.toml の [rate_source] を読み込む。ファイルが無ければデフォルト値。
    秘密情報 (シートID / APIキー) は環境変数を優先する。
    """
    raw: Dict[str, Any] = {}
    if os.path.exists(path):
        with open(path, "rb") as f:
            raw = tomllib.load(f).get("rate_source", {}) or {}

    return RateSourceConfig(
        kind=str(raw.get("kind", "sheets")),
        spreadsheet_id=os.getenv("FEE_SHEET_ID") or str(raw.get("spreadsheet_id", "")),
        api_key=os.getenv("FEE_SHEETS_API_KEY") or raw.get("api_key") or None,
        token=os.getenv("FEE_SHEETS_TOKEN") or raw.get("token") or None,
        timeout=float(raw.get("timeout", 10.0)),
        csv_dir=os.getenv("FEE_RATE_DIR") or str(raw.get("csv_dir", "data/rates")),
    )
