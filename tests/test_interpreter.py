"""Tests for result interpretation: deployment outputs and Cobertura coverage."""

import os

import pytest

from wingops.constants import EXPECTED_BACKUP_OUTPUTS, OPTIONAL_BACKUP_OUTPUTS
from wingops.exceptions import ParseError
from wingops.models.coverage import CoverageSummary
from wingops.models.deployment import DeploymentResult
from wingops.services.interpreter import (
    evaluate_coverage,
    find_coverage_report,
    interpret_deployment,
    parse_azure_outputs,
    parse_cobertura,
    parse_what_if,
)


class TestDeploymentOutputs:
    def test_flattens_typed_outputs(self):
        raw = {
            "storageAccountName": {"type": "String", "value": "stbackup01"},
            "retentionDays": {"type": "Int", "value": 30},
            "empty": {"type": "String", "value": None},
        }

        assert parse_azure_outputs(raw) == {
            "storageAccountName": "stbackup01",
            "retentionDays": "30",
            "empty": "",
        }
        assert parse_azure_outputs(None) == {}

    def test_missing_expected_output_is_a_warning(self):
        result = DeploymentResult(
            succeeded=True,
            provisioning_state="Succeeded",
            outputs={"storageAccountName": "stbackup01", "keyVaultName": "kv-wing-dev"},
        )

        outputs = interpret_deployment(result, EXPECTED_BACKUP_OUTPUTS, OPTIONAL_BACKUP_OUTPUTS)

        assert outputs.storage_account_name == "stbackup01"
        assert outputs.vault_name is None
        assert outputs.get("keyVaultName") == "kv-wing-dev"
        assert outputs.warnings == ["Expected output 'vaultName' missing from deployment"]

    def test_what_if_changes(self):
        plan = parse_what_if({"status": "Succeeded", "changes": [{"changeType": "NoChange"}]})

        assert plan.status == "Succeeded"
        assert plan.counts() == {"NoChange": 1}
        assert not plan.has_changes


class TestCobertura:
    def test_rates_become_percentages(self, tmp_path, cobertura):
        path = cobertura(tmp_path / "coverage.cobertura.xml", 0.8531, 0.7249)

        summary = parse_cobertura(path, target="backend")

        assert summary.line_rate == pytest.approx(85.31)
        assert summary.branch_rate == pytest.approx(72.49)
        assert summary.target == "backend"
        assert summary.source == path

    def test_missing_file(self, tmp_path):
        with pytest.raises(ParseError):
            parse_cobertura(tmp_path / "nope.xml")

    def test_malformed_xml(self, tmp_path):
        path = tmp_path / "coverage.cobertura.xml"
        path.write_text("<coverage line-rate='0.5'")

        with pytest.raises(ParseError) as excinfo:
            parse_cobertura(path)

        assert "Malformed" in excinfo.value.message

    def test_wrong_root_element(self, tmp_path):
        path = tmp_path / "report.xml"
        path.write_text("<testsuites />")

        with pytest.raises(ParseError):
            parse_cobertura(path)

    def test_missing_rates(self, tmp_path):
        path = tmp_path / "coverage.cobertura.xml"
        path.write_text('<coverage line-rate="0.9" />')

        with pytest.raises(ParseError):
            parse_cobertura(path)

    def test_newest_report_wins(self, tmp_path, cobertura):
        old = cobertura(tmp_path / "run1" / "coverage.cobertura.xml", 0.1, 0.1)
        new = cobertura(tmp_path / "run2" / "coverage.cobertura.xml", 0.9, 0.9)
        os.utime(old, (1_000_000, 1_000_000))
        os.utime(new, (2_000_000, 2_000_000))

        assert find_coverage_report(tmp_path, "coverage.cobertura.xml") == new

    def test_no_report_at_all(self, tmp_path):
        with pytest.raises(ParseError) as excinfo:
            find_coverage_report(tmp_path / "TestResults", "coverage.cobertura.xml")

        assert "No coverage file" in excinfo.value.message


class TestThreshold:
    def test_branch_below_threshold_fails_overall(self):
        evaluation = evaluate_coverage(CoverageSummary(line_rate=85, branch_rate=72), 80)

        assert evaluation.line_passed
        assert not evaluation.branch_passed
        assert not evaluation.passed
        assert evaluation.failed_metrics == ["branch"]

    def test_exactly_at_threshold_passes(self):
        evaluation = evaluate_coverage(CoverageSummary(line_rate=80.0, branch_rate=80.0), 80)

        assert evaluation.passed
        assert evaluation.failed_metrics == []

    def test_just_below_threshold_is_not_rounded_up(self, tmp_path, cobertura):
        path = cobertura(tmp_path / "coverage.cobertura.xml", 0.79996, 0.8)

        evaluation = evaluate_coverage(parse_cobertura(path), 80)

        assert evaluation.summary.line_rate < 80
        assert not evaluation.line_passed
        assert evaluation.branch_passed
        assert evaluation.failed_metrics == ["line"]
