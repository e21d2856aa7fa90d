"""Tests for the lhdn-calc CLI commands."""

import json

import yaml
from click.testing import CliRunner

from lhdncalc.cli.__main__ import cli
from lhdncalc.sdk.taxes.rules import get_rules_dir


def invoke(*args):
    runner = CliRunner()
    return runner.invoke(cli, [str(a) for a in args])


def add_standard_year():
    """Record a typical YA 2024: three relief claims and twelve months of PCB."""
    for category, amount in (("SELF_DEPENDENTS", 9000), ("lifestyle", 3000), ("EPF_LIFE_INSURANCE", 7000)):
        assert invoke("deductions", "add", 2024, category, amount).exit_code == 0
    for month in range(1, 13):
        assert invoke("pcb", "set", 2024, month, "--pcb", 300, "--gross", 7000).exit_code == 0


class TestDeductionsCommands:
    """Tests for deductions add/list/remove."""

    def test_add_and_list(self):
        result = invoke("deductions", "add", 2024, "lifestyle", "1200.50", "--month", 3, "-d", "Books")
        assert result.exit_code == 0
        assert "LIFESTYLE RM 1,200.50" in result.output

        result = invoke("deductions", "list", 2024)
        assert result.exit_code == 0
        assert "Books" in result.output
        assert "1 deduction(s), total RM 1,200.50" in result.output

    def test_add_warns_over_limit(self):
        invoke("deductions", "add", 2024, "LIFESTYLE", 2000)
        result = invoke("deductions", "add", 2024, "LIFESTYLE", 1000)
        assert result.exit_code == 0
        assert "exceeds the annual limit of RM 2,500.00" in result.output

    def test_add_unknown_category(self):
        result = invoke("deductions", "add", 2024, "GYM_MEMBERSHIP", 100)
        assert result.exit_code == 1
        assert "Unknown relief category 'GYM_MEMBERSHIP'" in result.output

    def test_add_invalid_amount(self):
        result = invoke("deductions", "add", 2024, "LIFESTYLE", "-50")
        assert result.exit_code == 1
        assert "negative" in result.output

    def test_add_amount_above_maximum(self):
        result = invoke("deductions", "add", 2024, "LIFESTYLE", "1e30")
        assert result.exit_code == 1
        assert "maximum" in result.output

    def test_add_attribution(self, isolated_env):
        result = invoke("deductions", "add", 2024, "MEDICAL_PARENTS", 500, "--for", "parent")
        assert result.exit_code == 0
        stored = next((isolated_env["records_dir"] / "2024" / "deductions").glob("*.json"))
        data = json.loads(stored.read_text())["data"]
        assert data["for_parent"] is True
        assert data["for_self"] is False

    def test_remove(self):
        invoke("deductions", "add", 2024, "LIFESTYLE", 100)
        record_id = invoke("deductions", "list", 2024).output.splitlines()[2].split()[0]

        assert invoke("deductions", "remove", 2024, record_id).exit_code == 0
        result = invoke("deductions", "remove", 2024, record_id)
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_list_empty(self):
        result = invoke("deductions", "list", 2024)
        assert result.exit_code == 0
        assert "No deductions recorded for YA 2024" in result.output


class TestPcbCommands:
    """Tests for pcb set/list/remove."""

    def test_set_then_update(self):
        result = invoke("pcb", "set", 2024, 1, "--pcb", 300, "--gross", 7000)
        assert "Added PCB 2024-01: RM 300.00 on income RM 7,000.00" in result.output

        result = invoke("pcb", "set", 2024, 1, "--pcb", 450, "--gross", 7000, "--bonus", 3000)
        assert "Updated PCB 2024-01: RM 450.00 on income RM 10,000.00" in result.output

    def test_list_shows_missing_months(self):
        invoke("pcb", "set", 2024, 1, "--pcb", 300, "--gross", 7000)
        result = invoke("pcb", "list", 2024)
        assert result.exit_code == 0
        assert "Months without records: 02, 03" in result.output

    def test_month_out_of_range(self):
        result = invoke("pcb", "set", 2024, 13, "--pcb", 300)
        assert result.exit_code == 2

    def test_remove_missing(self):
        result = invoke("pcb", "remove", 2024, 4)
        assert result.exit_code == 1
        assert "No PCB record for 2024-04" in result.output


class TestTaxCommands:
    """Tests for tax calc and tax brackets."""

    def test_calc_json_from_stored_records(self):
        add_standard_year()
        result = invoke("tax", "calc", 2024, "--format", "json")
        assert result.exit_code == 0

        data = json.loads(result.output)
        assert data["income_source"] == "pcb_records"
        assert data["gross_income"] == "84000.00"
        assert data["chargeable_income"] == "65500.00"
        assert data["net_tax_payable"] == "3205.00"
        assert data["result"]["status"] == "refund"
        assert data["result"]["amount"] == "395.00"

    def test_calc_explicit_income(self):
        result = invoke("tax", "calc", 2024, "--income", 50000, "--format", "json")
        data = json.loads(result.output)
        assert data["income_source"] == "explicit"
        assert data["net_tax_payable"] == "1500.00"
        assert data["result"]["status"] == "owed"

    def test_calc_profile_income(self, isolated_env):
        (isolated_env["config_dir"] / "profile.yaml").write_text(yaml.dump({"income": {"monthly_salary": 5000}}))
        data = json.loads(invoke("tax", "calc", 2024, "--format", "json").output)
        assert data["income_source"] == "profile_salary"
        assert data["gross_income"] == "60000.00"

    def test_calc_table(self):
        add_standard_year()
        result = invoke("tax", "calc", 2024)
        assert result.exit_code == 0
        assert "REFUND" in result.output
        assert "LIFESTYLE" in result.output

    def test_calc_rules_fallback_reports_rules_year(self):
        data = json.loads(invoke("tax", "calc", 2031, "--income", 1000, "--format", "json").output)
        assert data["year"] == 2031
        assert data["rules_year"] == 2025

    def test_calc_year_without_rules(self):
        result = invoke("tax", "calc", 1990, "--income", 1000)
        assert result.exit_code == 1
        assert "No tax rules for YA 1990" in result.output

    def test_calc_invalid_income(self):
        result = invoke("tax", "calc", 2024, "--income", "lots")
        assert result.exit_code == 1
        assert "gross_income" in result.output

    def test_brackets(self):
        result = invoke("tax", "brackets", 2024, "--income", 60000)
        assert result.exit_code == 0
        assert "Total tax: RM 2,600.00 (effective rate 4.33%)" in result.output


class TestReliefsCommands:
    """Tests for reliefs list."""

    def test_list_claimed_only(self):
        invoke("deductions", "add", 2024, "LIFESTYLE", 3000)
        result = invoke("reliefs", "list", 2024)
        assert result.exit_code == 0
        assert "LIFESTYLE" in result.output
        assert "SSPN" not in result.output
        assert "Warning: LIFESTYLE" in result.output

    def test_list_all(self):
        result = invoke("reliefs", "list", 2024, "--all")
        assert result.exit_code == 0
        assert "SSPN" in result.output

    def test_list_nothing_claimed(self):
        result = invoke("reliefs", "list", 2024)
        assert "No reliefs claimed for YA 2024" in result.output


class TestCommitmentsCommands:
    """Tests for commitments add/list/mark-paid/remove."""

    def test_add_and_list_json(self):
        result = invoke("commitments", "add", "Car loan", 500, "monthly", "2024-01-01")
        assert result.exit_code == 0
        commitment_id = result.output.split()[1].rstrip(":")

        data = json.loads(invoke("commitments", "list", "--as-of", "2024-04-15", "--format", "json").output)
        assert data["commitments"][0]["id"] == commitment_id
        assert data["commitments"][0]["payments_made"] == 3
        assert data["commitments"][0]["total_paid"] == "1500.00"
        assert data["summary"]["monthly_total"] == "500.00"

        assert invoke("commitments", "mark-paid", commitment_id).exit_code == 0
        data = json.loads(invoke("commitments", "list", "--as-of", "2024-04-15", "--format", "json").output)
        assert data["commitments"][0]["payments_made"] == 4

        assert invoke("commitments", "remove", commitment_id).exit_code == 0
        assert "No commitments recorded" in invoke("commitments", "list").output

    def test_invalid_frequency(self):
        result = invoke("commitments", "add", "Gym", 100, "weekly", "2024-01-01")
        assert result.exit_code == 2

    def test_mark_paid_missing(self):
        result = invoke("commitments", "mark-paid", "deadbeef")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_remove_rejects_path_outside_data_dir(self, tmp_path):
        outside = tmp_path / "x.json"
        outside.write_text("{}")

        result = invoke("commitments", "remove", "../../x")
        assert result.exit_code == 1
        assert outside.exists()


class TestSettingsAndProfile:
    """Tests for settings and profile commands."""

    def test_settings_show(self, isolated_env):
        result = invoke("settings", "show")
        assert result.exit_code == 0
        assert str(isolated_env["data_dir"]) in result.output
        assert "tax rules available: 2024, 2025" in result.output

    def test_settings_data_dir(self, tmp_path):
        new_dir = tmp_path / "elsewhere"
        result = invoke("settings", "data-dir", new_dir)
        assert result.exit_code == 0
        assert new_dir.is_dir()

        result = invoke("settings", "data-dir", "--clear")
        assert "Cleared data_dir." in result.output

    def test_settings_rules_dir(self, tmp_path):
        rules_dir = tmp_path / "rules"
        rules_dir.mkdir()
        (rules_dir / "2024.yaml").write_text((get_rules_dir() / "2024.yaml").read_text())

        result = invoke("settings", "rules-dir", rules_dir)
        assert result.exit_code == 0
        assert "tax rules available: 2024" in result.output
        assert "tax rules available: 2024" in invoke("settings", "show").output

        result = invoke("settings", "rules-dir", "--clear")
        assert "Cleared rules_dir." in result.output
        assert "tax rules available: 2024, 2025" in invoke("settings", "show").output

    def test_settings_rules_dir_requires_rules_files(self, tmp_path):
        result = invoke("settings", "rules-dir", tmp_path)
        assert result.exit_code == 1
        assert "No <year>.yaml tax rules files" in result.output

    def test_profile_set_and_show(self, isolated_env):
        result = invoke("profile", "set", "income.monthly_salary", "7000")
        assert result.exit_code == 0

        profile = yaml.safe_load((isolated_env["config_dir"] / "profile.yaml").read_text())
        assert profile == {"income": {"monthly_salary": 7000}}

        result = invoke("profile", "show")
        assert "monthly_salary: 7000" in result.output

    def test_profile_fractional_amount_stored_as_string(self, isolated_env):
        assert invoke("profile", "set", "income.monthly_salary", "7000.50").exit_code == 0

        profile = yaml.safe_load((isolated_env["config_dir"] / "profile.yaml").read_text())
        assert profile == {"income": {"monthly_salary": "7000.50"}}

        data = json.loads(invoke("tax", "calc", 2024, "--format", "json").output)
        assert data["gross_income"] == "84006.00"
        assert data["income_source"] == "profile_salary"

    def test_profile_rejects_unknown_key(self):
        result = invoke("profile", "set", "drive.folder", "abc")
        assert result.exit_code == 1
        assert "Unknown top-level key 'drive'" in result.output

    def test_profile_rejects_bad_amount(self):
        result = invoke("profile", "set", "income.annual_income", "-5")
        assert result.exit_code == 1

    def test_profile_choices(self):
        assert invoke("profile", "set", "marital_status", "married").exit_code == 0
        result = invoke("profile", "set", "marital_status", "complicated")
        assert result.exit_code == 1
        assert "must be one of" in result.output
