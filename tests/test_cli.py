"""Tests for the command-line entry point."""

from stonecart.cli import main


class TestQuote:
    def test_quote_prints_pricing(self, capsys):
        code = main(["--console-logs", "quote", "--crates", "1", "--pieces", "3", "--per-crate", "10", "--price", "100", "--weight", "40"])

        out = capsys.readouterr().out
        assert code == 0
        assert "Total pieces:   13" in out
        assert "Filler pieces:  7" in out
        assert "₹350.00" in out
        assert "520 lbs" in out


class TestDemo:
    def test_demo_writes_invoice(self, tmp_path, capsys, monkeypatch):
        monkeypatch.delenv("STONECART_TIER_TABLE", raising=False)
        output = tmp_path / "invoice.html"

        code = main(["--console-logs", "--log-level", "WARNING", "demo", "--output", str(output)])

        assert code == 0
        html = output.read_text(encoding="utf-8")
        assert "PRO-FORMA INVOICE" in html
        assert "Blue Mist Granite Step" in html
        assert "Invoice written to" in capsys.readouterr().out
