"""Command line front end."""

from __future__ import annotations

import json

import pandas as pd
import pytest

from seller_fees.calc_fees import build_provider, calc_row, main
from seller_fees.fee_engine import FeeEngine

SINGLE_ARGS = [
    "--category", "Electronics",
    "--price", "600",
    "--weight", "0.7",
    "--shipping-mode", "Easy Ship",
    "--service-level", "Premium",
    "--product-size", "Standard",
    "--location", "Local",
    "--shipping-type", "Standard",
]


def test_single_transaction(rates_dir, capsys) -> None:
    assert main(["--rates-dir", str(rates_dir)] + SINGLE_ARGS) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["totalFees"] == "218.00"
    assert out["netEarnings"] == "382.00"


def test_single_transaction_missing_field(rates_dir) -> None:
    with pytest.raises(SystemExit):
        main(["--rates-dir", str(rates_dir), "--category", "Books"])


def test_missing_rate_table_returns_error(tmp_path, capsys) -> None:
    assert main(["--rates-dir", str(tmp_path)] + SINGLE_ARGS) == 1
    assert "[ERROR]" in capsys.readouterr().out


def test_batch_keeps_failed_rows(rates_dir, tmp_path) -> None:
    input_csv = tmp_path / "transactions.csv"
    output_csv = tmp_path / "out" / "fees.csv"
    pd.DataFrame([
        {
            "productCategory": "Electronics", "sellingPrice": "600", "weight": "0.7",
            "shippingMode": "Easy Ship", "serviceLevel": "Premium", "productSize": "Standard",
            "location": "Local", "shippingType": "Standard",
        },
        {
            "productCategory": "Books", "sellingPrice": "abc", "weight": "1",
            "shippingMode": "Self Ship", "serviceLevel": "Standard", "productSize": "Standard",
            "location": "Local", "shippingType": "Standard",
        },
    ]).to_csv(input_csv, index=False)

    assert main(["--rates-dir", str(rates_dir), "--input", str(input_csv), "--output", str(output_csv)]) == 0

    df = pd.read_csv(output_csv, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    assert list(df["status"]) == ["OK", "NG"]
    assert df.loc[0, "totalFees"] == "218.00"
    assert "sellingPrice" in df.loc[1, "error"] or "selling_price" in df.loc[1, "error"]


def test_batch_requires_output(rates_dir, tmp_path) -> None:
    with pytest.raises(SystemExit):
        main(["--rates-dir", str(rates_dir), "--input", str(tmp_path / "x.csv")])


def test_batch_row_with_infinite_price_is_ng(rates_dir, transaction_data) -> None:
    engine = FeeEngine(build_provider(str(rates_dir)))
    transaction_data["sellingPrice"] = "1e400"
    result = calc_row(engine, transaction_data)
    assert result["status"] == "NG"
    assert "finite" in result["error"]
    assert result["totalFees"] == ""
