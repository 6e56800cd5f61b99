import pytest

from app.utils.watchlist import parse_stocks, read_stocks

HEADER = "Watchlist export\nGenerated 2026-10-16\n\nSymbol,Name,Last\n"


@pytest.fixture
def watchlists(tmp_path):
    first = tmp_path / "first.csv"
    first.write_text(HEADER + "aapl,Apple,230\nMSFT,Microsoft,420\n\nNVDA,Nvidia,180\n", encoding="utf-8")
    second = tmp_path / "second.csv"
    second.write_text(HEADER + "MSFT,Microsoft,420\nTSLA,Tesla,250\nGME,GameStop,25\n", encoding="utf-8")
    return [first, second]


def test_parse_stocks_skips_header_and_blank_lines(watchlists):
    assert parse_stocks(watchlists[0], 4) == ["AAPL", "MSFT", "NVDA"]


def test_parse_stocks_handles_bom(tmp_path):
    path = tmp_path / "bom.csv"
    path.write_bytes("\ufeffAAPL,Apple\nMSFT,Microsoft\n".encode("utf-8"))
    assert parse_stocks(path, 0) == ["AAPL", "MSFT"]


def test_read_stocks_dedupes_in_order(watchlists):
    assert read_stocks(watchlists, 4, shuffle=False, ignored=[]) == [
        "AAPL", "MSFT", "NVDA", "TSLA", "GME",
    ]


def test_read_stocks_skips(watchlists):
    stocks = read_stocks(watchlists, 4, skip_stocks="nvda, TSLA", ignored=["GME"], shuffle=False)
    assert stocks == ["AAPL", "MSFT"]


def test_read_stocks_uses_configured_ignores(watchlists, monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "IGNORED_STOCKS", ["AAPL"])
    assert "AAPL" not in read_stocks(watchlists, 4, shuffle=False)


def test_read_stocks_shuffle_keeps_members(watchlists):
    assert sorted(read_stocks(watchlists, 4, ignored=[])) == ["AAPL", "GME", "MSFT", "NVDA", "TSLA"]


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_stocks([tmp_path / "missing.csv"], 4)
