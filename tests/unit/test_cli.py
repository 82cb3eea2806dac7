"""
CLI Unit Tests

Runs the pricer commands in-process and inspects their output.
Built-in sample data: variable 3.45 and fixed 75 per month.
"""

import json

import pytest

from scripts.cli import main
from tests.factories import make_report_dict


def _write_costs(tmp_path, variable, fixed):
    path = tmp_path / "costs.json"
    path.write_text(json.dumps({"variableCosts": variable, "fixedCosts": fixed}))
    return str(path)


class TestCogsCommand:
    """Test `pricer cogs`."""

    def test_sample_data_json(self, capsys):
        main(["cogs", "--output", "json", "--price", "29"])

        captured = capsys.readouterr()
        data = json.loads(captured.out)
        assert "Using sample data" in captured.err
        assert data["customerCount"] == 100
        assert data["currency"] == "MYR"
        assert data["breakdown"]["totalCOGS"] == pytest.approx(4.20)
        assert data["marginAnalysis"]["health"] == "healthy"
        assert data["marginAnalysis"]["breakEvenCustomers"] == 3

    def test_input_file(self, capsys, tmp_path, variable_cost_dicts, fixed_cost_dicts):
        path = _write_costs(tmp_path, variable_cost_dicts, fixed_cost_dicts)

        main(["cogs", "-i", path, "-c", "100", "-o", "json"])

        data = json.loads(capsys.readouterr().out)
        assert data["breakdown"]["totalCOGS"] == pytest.approx(3.95)
        assert "marginAnalysis" not in data

    def test_invalid_items_warned_and_skipped(self, capsys, tmp_path, variable_cost_dicts):
        path = _write_costs(tmp_path, variable_cost_dicts + [{"name": "bad"}], [])

        main(["cogs", "-i", path, "-o", "json"])

        captured = capsys.readouterr()
        assert "variableCosts[2]: id is required" in captured.err
        assert len(json.loads(captured.out)["variableCosts"]) == 2

    def test_fully_invalid_list_skipped_when_other_list_valid(
        self, capsys, tmp_path, variable_cost_dicts
    ):
        path = _write_costs(tmp_path, variable_cost_dicts, [{"monthlyCost": 5}])

        main(["cogs", "-i", path, "-o", "json"])

        captured = capsys.readouterr()
        assert "fixedCosts[0]: id is required" in captured.err
        data = json.loads(captured.out)
        assert data["fixedCosts"] == []
        assert data["breakdown"]["fixedPerCustomer"] == 0
        assert data["breakdown"]["totalCOGS"] == pytest.approx(3.20)

    def test_no_valid_items(self, capsys, tmp_path):
        path = _write_costs(tmp_path, [{"name": "bad"}], [{"monthlyCost": 5}])

        with pytest.raises(SystemExit) as exc_info:
            main(["cogs", "-i", path])

        assert exc_info.value.code == 1
        assert "Error: No valid cost items found in file" in capsys.readouterr().err

    def test_markdown(self, capsys):
        main(["cogs", "-o", "markdown", "-p", "29"])

        out = capsys.readouterr().out
        assert "## COGS Breakdown" in out
        assert "| **Total Variable** | | | | **RM 3.45** |" in out
        assert "## Margin Analysis" in out
        assert "| Break-even | 3 customers |" in out

    def test_table_with_currency(self, capsys):
        main(["cogs", "--currency", "USD"])

        out = capsys.readouterr().out
        assert "COGS Breakdown" in out
        assert "$ 4.20" in out

    def test_save(self, capsys, tmp_path):
        target = tmp_path / "out.md"

        main(["cogs", "-o", "markdown", "--save", str(target)])

        assert target.read_text().startswith("## COGS Breakdown")
        assert f"Saved to {target}" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "argv,message",
        [
            (["cogs", "-c", "abc"], 'Customer count must be a valid number, got: "abc"'),
            (["cogs", "-c", "0"], "Customer count must be a positive integer"),
            (["cogs", "-p", "free"], 'Price must be a valid number, got: "free"'),
            (["cogs", "-o", "xml"], 'Invalid output format: "xml"'),
            (["cogs", "--currency", "JPY"], "Invalid currency code: JPY"),
            (["cogs", "-i", "missing.json"], "File not found: missing.json"),
        ],
    )
    def test_errors_exit_1(self, capsys, argv, message):
        with pytest.raises(SystemExit) as exc_info:
            main(argv)

        assert exc_info.value.code == 1
        assert f"Error: {message}" in capsys.readouterr().err


def test_thresholds(capsys):
    main(["thresholds"])

    out = capsys.readouterr().out
    assert "healthy     >= 70%" in out
    assert "acceptable  >= 50%" in out


def test_share_then_open(capsys, tmp_path):
    path = tmp_path / "report.json"
    path.write_text(json.dumps(make_report_dict()))

    main(["share", "-i", str(path), "-s", "marketer", "--base-url", "https://pricer.test"])
    url = capsys.readouterr().out.strip()
    assert url.startswith("https://pricer.test/report/marketer?d=")

    main(["open", url])
    out = capsys.readouterr().out
    assert "Acme Analytics (portable link, for marketer)" in out
    assert "COGS:      3.95 per customer" in out


def test_open_rejects_other_urls(capsys):
    with pytest.raises(SystemExit):
        main(["open", "https://pricer.test/pricing"])

    assert "Error: Not a report link" in capsys.readouterr().err


def test_no_command_exits_1():
    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 1
