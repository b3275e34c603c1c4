from __future__ import annotations

from seller_fees.config import load_rate_source_config


def test_defaults_without_file(tmp_path, monkeypatch) -> None:
    for var in ("FEE_SHEET_ID", "FEE_SHEETS_API_KEY", "FEE_SHEETS_TOKEN", "FEE_RATE_DIR"):
        monkeypatch.delenv(var, raising=False)
    cfg = load_rate_source_config(str(tmp_path / "missing.toml"))
    assert cfg.kind == "sheets"
    assert cfg.spreadsheet_id == ""
    assert cfg.api_key is None
    assert cfg.timeout == 10.0


def test_reads_toml_and_env_overrides(tmp_path, monkeypatch) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        '[rate_source]\nkind = "csv"\nspreadsheet_id = "from-file"\napi_key = ""\ntimeout = 4\ncsv_dir = "rates"\n',
        encoding="utf-8",
    )
    monkeypatch.setenv("FEE_SHEET_ID", "from-env")
    monkeypatch.delenv("FEE_SHEETS_API_KEY", raising=False)
    monkeypatch.delenv("FEE_SHEETS_TOKEN", raising=False)
    monkeypatch.delenv("FEE_RATE_DIR", raising=False)

    cfg = load_rate_source_config(str(path))

    assert cfg.kind == "csv"
    assert cfg.spreadsheet_id == "from-env"
    assert cfg.api_key is None
    assert cfg.timeout == 4.0
    assert cfg.csv_dir == "rates"
