from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from marketdata.cli import apply_cli_overrides, build_parser, main
from marketdata.config import Settings
from marketdata.domain.models import Interval
from marketdata.errors import ConfigError

ENV_KEYS = [
    "DATA_SOURCE",
    "HISTORICAL_DATA_DIR",
    "SYMBOLS",
    "INTERVAL",
    "INDICATORS",
    "LOG_LEVEL",
    "ALPHAVANTAGE_API_KEY",
    "ALPHAVANTAGE_OUTPUT_SIZE",
    "MAX_WORKERS",
]


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("marketdata.config.load_dotenv", lambda *args, **kwargs: None)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def _write_csv(path: Path, rows: int = 30) -> None:
    closes = [100.0 + (index % 7) - (index % 3) * 0.5 + index * 0.2 for index in range(rows)]
    frame = pd.DataFrame(
        {
            "date": pd.date_range("2025-01-01", periods=rows, freq="D").strftime("%Y-%m-%d"),
            "open": closes,
            "high": [close + 1.0 for close in closes],
            "low": [close - 1.0 for close in closes],
            "close": closes,
            "volume": [1000.0 + index for index in range(rows)],
        }
    )
    frame.to_csv(path, index=False)


def test_cli_overrides_produce_expected_settings() -> None:
    parser = build_parser()
    args = parser.parse_args(
        [
            "--source",
            "csv",
            "--symbols",
            "spy,aapl",
            "--data-dir",
            "data",
            "--interval",
            "1week",
            "--indicators",
            "sma:3,rsi:5",
            "--log-level",
            "warning",
            "--max-workers",
            "2",
        ]
    )
    settings = apply_cli_overrides(Settings(), args)

    assert settings.data_source == "csv"
    assert settings.symbols == ["SPY", "AAPL"]
    assert settings.historical_data_dir == "data"
    assert settings.interval is Interval.WEEK
    assert settings.indicators == "sma:3,rsi:5"
    assert settings.log_level == "WARNING"
    assert settings.max_workers == 2


def test_cli_rejects_non_positive_workers() -> None:
    args = build_parser().parse_args(["--max-workers", "0"])

    with pytest.raises(ConfigError):
        apply_cli_overrides(Settings(), args)


def test_main_prints_enhanced_text(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _clear_env(monkeypatch)
    _write_csv(tmp_path / "SPY.csv")

    code = main(["--data-dir", str(tmp_path), "--indicators", "sma:3,macd:3:6:4"])

    out = capsys.readouterr().out
    assert code == 0
    assert out.startswith(
        "EnhancedSeries: Symbol = SPY, Interval = 1day, Indicators = [SMA 3, MACD (3,6,4)]"
    )
    assert "  Date: 2025-01-30, " in out


def test_main_prints_csv(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _clear_env(monkeypatch)
    _write_csv(tmp_path / "SPY.csv")
    _write_csv(tmp_path / "QQQ.csv")

    code = main(
        [
            "--data-dir",
            str(tmp_path),
            "--symbols",
            "SPY,QQQ",
            "--indicators",
            "rsi:5",
            "--format",
            "csv",
        ]
    )

    lines = capsys.readouterr().out.strip().splitlines()
    assert code == 0
    assert lines[0] == "date,symbol,open,high,low,close,volume,RSI 5"
    assert len(lines) == 61
    assert lines[1].startswith("2025-01-01,SPY,")
    assert lines[1].endswith(",")
    assert lines[-1].startswith("2025-01-30,QQQ,")


def test_main_reports_configuration_errors(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _clear_env(monkeypatch)

    code = main(["--indicators", "sma:zero"])

    assert code == 2
    assert "Configuration error:" in capsys.readouterr().out


def test_main_continues_past_failing_symbol(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _clear_env(monkeypatch)
    _write_csv(tmp_path / "SPY.csv")

    code = main(["--data-dir", str(tmp_path), "--symbols", "MISSING,SPY", "--indicators", "ema:4"])

    assert code == 1
    assert "Symbol = SPY" in capsys.readouterr().out


def test_main_writes_html_report(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _clear_env(monkeypatch)
    _write_csv(tmp_path / "SPY.csv")
    report = tmp_path / "out" / "report.html"

    code = main(
        ["--data-dir", str(tmp_path), "--indicators", "sma:3,rsi:5", "--report", str(report)]
    )

    capsys.readouterr()
    assert code == 0
    assert report.exists()
    assert "SMA 3" in report.read_text(encoding="utf-8")
