"""
calc_fees.py
出品手数料 (紹介料・成約料・重量手数料・その他手数料) を計算するCLI。

  1件だけ:
    python -m seller_fees.calc_fees --category Electronics --price 600 --weight 0.7 \
        --shipping-mode "Easy Ship" --service-level Standard --product-size Standard \
        --location Local --shipping-type Standard

  CSVでまとめて:
    python -m seller_fees.calc_fees --input data/transactions.csv --output data/fees.csv

レート表は config.toml の [rate_source] から読む (--rates-dir でCSVフォルダを指定可)。
"""
from __future__ import annotations

import argparse
import json
import logging
import os
from typing import Any, Dict, List, Optional

import pandas as pd

from seller_fees.config import load_rate_source_config
from seller_fees.fee_engine import (
    FIELD_ALIASES,
    FeeComputationError,
    FeeEngine,
    InvalidTransaction,
    Transaction,
)
from seller_fees.rate_tables import CsvDirectoryProvider, RateTableProvider, provider_from_config

RESULT_COLUMNS = [
    "referralFee",
    "weightHandlingFee",
    "closingFee",
    "pickAndPackFee",
    "storageFee",
    "removalFee",
    "totalFees",
    "netEarnings",
]


def build_provider(rates_dir: Optional[str]) -> RateTableProvider:
    if rates_dir:
        return CsvDirectoryProvider(rates_dir)
    return provider_from_config(load_rate_source_config())


def calc_row(engine: FeeEngine, row: Dict[str, Any]) -> Dict[str, Any]:
    """1行分を計算。失敗しても行は残し、status / error に理由を書く"""
    result: Dict[str, Any] = dict(row)
    try:
        breakdown = engine.compute(Transaction.from_dict(row))
    except (InvalidTransaction, FeeComputationError) as e:
        reason = e.__cause__ if e.__cause__ is not None else e
        result.update({col: "" for col in RESULT_COLUMNS})
        result["status"] = "NG"
        result["error"] = str(reason)
        result["defaulted"] = ""
        return result

    data = breakdown.to_dict()
    result.update(data["breakdown"])
    result["totalFees"] = data["totalFees"]
    result["netEarnings"] = data["netEarnings"]
    result["status"] = "OK"
    result["error"] = ""
    result["defaulted"] = ",".join(breakdown.fallbacks())
    return result


def calc_csv(engine: FeeEngine, input_csv: str, output_csv: str) -> List[Dict[str, Any]]:
    print(f"[INFO] Loading transactions from: {input_csv}")
    if not os.path.exists(input_csv):
        raise FileNotFoundError(f"Input CSV not found: {input_csv}")

    df = pd.read_csv(input_csv, dtype=str, keep_default_na=False)

    missing = [c for c in FIELD_ALIASES if c not in df.columns and FIELD_ALIASES[c] not in df.columns]
    if missing:
        raise ValueError(f"Missing columns: {missing}, actual columns: {list(df.columns)}")

    results = []
    total = len(df)
    for i, row in enumerate(df.to_dict(orient="records"), 1):
        r = calc_row(engine, row)
        if r["status"] == "OK":
            print(f"[{i}/{total}] total fees {r['totalFees']} / net {r['netEarnings']}")
        else:
            print(f"[{i}/{total}] NG: {r['error']}")
        results.append(r)

    if results:
        out_dir = os.path.dirname(output_csv)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        pd.DataFrame(results).to_csv(output_csv, index=False, encoding="utf-8-sig")
        print(f"[INFO] Wrote {len(results)} rows to: {output_csv}")
    else:
        print("[WARN] No transactions in input file.")
    return results


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Marketplace seller fee calculator")
    parser.add_argument("--input", help="transactions CSV (batch mode)")
    parser.add_argument("--output", help="result CSV (batch mode)")
    parser.add_argument("--rates-dir", help="read rate tables from <dir>/<table>.csv")
    parser.add_argument("--category")
    parser.add_argument("--price")
    parser.add_argument("--weight")
    parser.add_argument("--shipping-mode")
    parser.add_argument("--service-level")
    parser.add_argument("--product-size")
    parser.add_argument("--location")
    parser.add_argument("--shipping-type")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    engine = FeeEngine(build_provider(args.rates_dir))

    if args.input:
        if not args.output:
            parser.error("--output is required with --input")
        calc_csv(engine, args.input, args.output)
        return 0

    transaction = {
        "productCategory": args.category,
        "sellingPrice": args.price,
        "weight": args.weight,
        "shippingMode": args.shipping_mode,
        "serviceLevel": args.service_level,
        "productSize": args.product_size,
        "location": args.location,
        "shippingType": args.shipping_type,
    }
    try:
        breakdown = engine.compute(Transaction.from_dict(transaction))
    except InvalidTransaction as e:
        parser.error(str(e))
    except FeeComputationError as e:
        print(f"[ERROR] {e}: {e.__cause__}")
        return 1

    print(json.dumps(breakdown.to_dict(), indent=2, ensure_ascii=False))
    if breakdown.fallbacks():
        print(f"[WARN] Default fees used for: {', '.join(breakdown.fallbacks())}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
