from pathlib import Path

import yaml
from click.testing import CliRunner

from odata_openapi.cli import main

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliGenerate:
    def test_generate_document(self, tmp_path):
        output_file = tmp_path / "openapi.yaml"
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(FIXTURES / "customers.yaml"),
            "-o", str(output_file),
        ])

        assert result.exit_code == 0, result.output
        assert "Found 21 paths." in result.output
        document = yaml.safe_load(output_file.read_text())
        assert document["paths"]["/Customers"]["get"]["operationId"] == "Customers.Customer.ListCustomer"
        assert "components" in document

    def test_generate_with_settings(self, tmp_path):
        settings_file = tmp_path / "settings.yaml"
        settings_file.write_text("KeyAsSegment: true\nEnableOperationId: false\n")
        output_file = tmp_path / "out" / "openapi.yaml"

        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(FIXTURES / "customers.yaml"),
            "-o", str(output_file),
            "--settings", str(settings_file),
        ])

        assert result.exit_code == 0, result.output
        document = yaml.safe_load(output_file.read_text())
        assert "/Customers/{ID}" in document["paths"]
        assert "operationId" not in document["paths"]["/Customers"]["get"]

    def test_operation_count_reported(self, tmp_path):
        output_file = tmp_path / "openapi.yaml"
        runner = CliRunner()
        result = runner.invoke(main, ["generate", str(FIXTURES / "customers.yaml"), "-o", str(output_file)])
        assert "39 operations saved to" in result.output

    def test_invalid_fixture(self, tmp_path):
        fixture = tmp_path / "broken.yaml"
        fixture.write_text("paths: []\n")
        runner = CliRunner()
        result = runner.invoke(main, ["generate", str(fixture), "-o", str(tmp_path / "out.yaml")])
        assert result.exit_code == 1
        assert "'model'" in result.output

    def test_invalid_annotation(self, tmp_path):
        fixture = tmp_path / "bad_annotation.yaml"
        fixture.write_text(
            "model:\n"
            "  namespace: NS\n"
            "  container: Default\n"
            "  entity_types:\n"
            "    - name: Customer\n"
            "      key: [ID]\n"
            "      properties:\n"
            "        - {name: ID, type: Edm.Int32, nullable: false}\n"
            "  entity_sets:\n"
            "    - {name: Customers, entity_type: NS.Customer}\n"
            "annotations:\n"
            "  NS.Default/Customers:\n"
            "    Org.OData.Capabilities.V1.ReadRestrictions:\n"
            "      Permissions: oops\n"
            "paths:\n"
            "  - [Customers]\n"
        )
        output_file = tmp_path / "out.yaml"
        runner = CliRunner()
        result = runner.invoke(main, ["generate", str(fixture), "-o", str(output_file)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Invalid Org.OData.Capabilities.V1.ReadRestrictions annotation" in result.output
        assert not output_file.exists()

    def test_missing_output_option(self):
        runner = CliRunner()
        result = runner.invoke(main, ["generate", str(FIXTURES / "customers.yaml")])
        assert result.exit_code != 0
