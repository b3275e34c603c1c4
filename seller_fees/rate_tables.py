# seller_fees/rate_tables.py
"""
レート表の取得元 (RateTableProvider)。

どの実装も get_table(name) -> list[list[str]] を返す。
1行目はヘッダー行のまま返す (ルール側で読み飛ばす)。
キャッシュはしない: 計算のたびに読み直す。
"""
from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional, Protocol
from urllib.parse import quote

import pandas as pd
import requests

from .config import RateSourceConfig, load_rate_source_config
from .rate_parsing import DataSourceError

logger = logging.getLogger(__name__)

REFERRAL_FEES = "Referral fees"
CLOSING_FEES = "Closing fees"
WEIGHT_HANDLING_FEES = "Weight handling fees"
OTHER_FEES = "Other Fees"

# シート名 -> 読み込む列範囲
TABLE_RANGES = {
    REFERRAL_FEES: "A:C",
    CLOSING_FEES: "A:F",
    WEIGHT_HANDLING_FEES: "A:F",
    OTHER_FEES: "A:C",
}

SHEETS_API_URL = "https://sheets.googleapis.com/v4/spreadsheets/{sheet_id}/values/{range}"

Table = List[List[str]]


class RateTableProvider(Protocol):
    def get_table(self, name: str) -> Table:
        ...


class StaticProvider:
    """メモリ上のテーブルを返すだけ (テスト・組み込み用)"""

    def __init__(self, tables: Dict[str, Table]):
        self.tables = tables

    def get_table(self, name: str) -> Table:
        if name not in self.tables:
            raise DataSourceError(f"Rate table not found: {name}")
        return [list(row) for row in self.tables[name]]


class GoogleSheetsProvider:
    """Google Sheets API (v4 values.get) からタブごとに読み込む"""

    def __init__(
        self,
        spreadsheet_id: str,
        api_key: Optional[str] = None,
        token: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        if not spreadsheet_id:
            raise ValueError("Spreadsheet ID missing. Set FEE_SHEET_ID or rate_source.spreadsheet_id.")
        self.spreadsheet_id = spreadsheet_id
        self.api_key = api_key
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_table(self, name: str) -> Table:
        cell_range = f"{name}!{TABLE_RANGES.get(name, 'A:Z')}"
        url = SHEETS_API_URL.format(sheet_id=self.spreadsheet_id, range=quote(cell_range, safe=""))

        params = {}
        headers = {}
        if self.api_key:
            params["key"] = self.api_key
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Error fetching %s data: %s", name, e)
            raise DataSourceError(f"Could not fetch {name}: {e}") from e

        if response.status_code != 200:
            logger.error("Error fetching %s data: HTTP %s", name, response.status_code)
            raise DataSourceError(f"Could not fetch {name}: HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise DataSourceError(f"Invalid response for {name}") from e

        values = data.get("values")
        if not values:
            raise DataSourceError(f"Rate table not found or empty: {name}")
        return [[str(c) for c in row] for row in values]


class CsvDirectoryProvider:
    """<dir>/<シート名>.csv を読み込む (スプレッドシートをCSVでエクスポートしたもの)"""

    def __init__(self, directory: str):
        self.directory = directory

    def path_for(self, name: str) -> str:
        return os.path.join(self.directory, f"{name}.csv")

    def get_table(self, name: str) -> Table:
        path = self.path_for(name)
        if not os.path.exists(path):
            raise DataSourceError(f"Rate table not found: {path}")

        try:
            # ヘッダーも1行目として残す / 数値変換はパース層でやるので全部文字列
            df = pd.read_csv(path, header=None, dtype=str, keep_default_na=False, encoding="utf-8-sig")
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise DataSourceError(f"Could not read {path}: {e}") from e

        return [[str(c).strip() for c in row] for row in df.itertuples(index=False, name=None)]


def provider_from_config(config: Optional[RateSourceConfig] = None) -> RateTableProvider:
    config = config or load_rate_source_config()
    if config.kind == "csv":
        return CsvDirectoryProvider(config.csv_dir)
    if config.kind == "sheets":
        return GoogleSheetsProvider(
            config.spreadsheet_id,
            api_key=config.api_key,
            token=config.token,
            timeout=config.timeout,
        )
    raise ValueError(f"Unknown rate source kind: {config.kind!r}")
