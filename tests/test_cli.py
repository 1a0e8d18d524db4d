"""
Tests for the openapi-merge CLI module.
"""

import json
import logging
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from openapi_merge.cli import _handler, configure_logging, load_commands, logger, main
from openapi_merge.settings import settings


def service(title, schema, path, operation_id):
    return {
        "openapi": "3.0.3",
        "info": {"title": title, "version": "1.0.0"},
        "paths": {
            path: {
                "get": {
                    "operationId": operation_id,
                    "responses": {
                        "200": {
                            "description": "OK",
                            "content": {
                                "application/json": {
                                    "schema": {"$ref": "#/components/schemas/User"}
                                }
                            },
                        }
                    },
                }
            }
        },
        "components": {"schemas": {"User": schema}},
    }


USER_NAME = {"type": "object", "properties": {"name": {"type": "string"}}}
USER_EMAIL = {"type": "object", "properties": {"email": {"type": "string"}}}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def services(write_json):
    """Two service documents with conflicting User schemas."""
    svc1 = write_json("svc1.json", service("Service 1", USER_NAME, "/users", "listUsers"))
    svc2 = write_json("svc2.json", service("Service 2", USER_EMAIL, "/accounts", "listAccounts"))
    return svc1, svc2


class TestCLICore:
    """Test cases for core CLI functionality."""

    def test_main_cli_group_creation(self, runner):
        """Test that main CLI group is created properly."""
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "openapi-merge CLI" in result.output

    def test_cli_with_log_level_option(self, runner):
        """Test CLI with log level option."""
        result = runner.invoke(main, ["--log-level", "DEBUG", "--help"])

        assert result.exit_code == 0

    def test_commands_are_registered(self):
        """Test that plugin commands are discovered."""
        assert {"merge", "strategies", "info"} <= set(main.commands)

    def test_configure_logging_adds_handler_once(self):
        """Test that repeated logging setup does not duplicate output."""
        level, configured = logger.level, settings.log_level
        try:
            configure_logging("debug")
            configure_logging("INFO")

            assert logger.handlers.count(_handler) == 1
            assert logger.level == logging.INFO
            assert settings.log_level == "INFO"
        finally:
            logger.removeHandler(_handler)
            logger.setLevel(level)
            settings.log_level = configured

    @patch("openapi_merge.cli.logger")
    def test_load_commands_with_plugin_error(self, mock_logger):
        """Test load_commands handles plugin loading errors gracefully."""
        with patch("openapi_merge.cli.importlib.import_module") as mock_import:
            mock_import.side_effect = ImportError("Test import error")

            load_commands()

            mock_logger.error.assert_called()


class TestMergeCommand:
    """Test cases for the merge command."""

    def test_direct_merge(self, runner, services, tmp_path):
        svc1, svc2 = services
        output = tmp_path / "merged.json"

        result = runner.invoke(
            main,
            ["merge", "--title", "Gateway", "--version", "2.0.0", "-o", str(output), str(svc1), str(svc2)],
        )

        assert result.exit_code == 0, result.output
        assert "Merged 2 specifications" in result.output
        assert "Warning: [SchemaRenamed] svc2:" in result.output

        merged = json.loads(output.read_text(encoding="utf-8"))
        assert merged["info"] == {"title": "Gateway", "version": "2.0.0"}
        assert set(merged["components"]["schemas"]) == {"User", "svc2_User"}
        schema = merged["paths"]["/accounts"]["get"]["responses"]["200"]["content"]["application/json"]["schema"]
        assert schema == {"$ref": "#/components/schemas/svc2_User"}

    def test_yaml_output(self, runner, services, tmp_path):
        svc1, _ = services
        output = tmp_path / "merged.yaml"

        result = runner.invoke(
            main, ["merge", "--title", "A", "--version", "1", "-o", str(output), str(svc1)]
        )

        assert result.exit_code == 0, result.output
        assert output.read_text(encoding="utf-8").startswith("openapi:")

    def test_config_merge(self, runner, services, write_json, tmp_path):
        config = write_json(
            "merge.config.json",
            {
                "info": {"title": "Gateway", "version": "1.0.0"},
                "servers": [{"url": "https://api.example.com"}],
                "sources": [
                    {"path": "svc1.json", "pathPrefix": "/one"},
                    {"path": "svc2.json", "pathPrefix": "/two", "operationIdPrefix": "two_"},
                ],
                "output": "out/gateway.json",
            },
        )

        result = runner.invoke(main, ["merge", "--config", str(config), "--verbose"])

        assert result.exit_code == 0, result.output
        assert "Loading configuration from" in result.output
        assert "Merge completed successfully with 1 warning(s)." in result.output

        merged = json.loads((tmp_path / "out" / "gateway.json").read_text(encoding="utf-8"))
        assert list(merged["paths"]) == ["/one/users", "/two/accounts"]
        assert merged["paths"]["/two/accounts"]["get"]["operationId"] == "two_listAccounts"
        assert merged["servers"] == [{"url": "https://api.example.com"}]

    def test_output_option_overrides_config(self, runner, services, write_json, tmp_path):
        config = write_json(
            "merge.config.json",
            {"info": {"title": "G", "version": "1"}, "sources": [{"path": "svc1.json"}]},
        )
        output = tmp_path / "override.json"

        result = runner.invoke(main, ["merge", "--config", str(config), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert output.exists()

    def test_title_and_version_required(self, runner, services):
        svc1, _ = services

        result = runner.invoke(main, ["merge", str(svc1)])

        assert result.exit_code == 1
        assert "--title and --version are required" in result.output

    def test_nothing_to_merge(self, runner):
        result = runner.invoke(main, ["merge"])

        assert result.exit_code == 1
        assert "Either --config or input files must be specified" in result.output

    def test_missing_source_file(self, runner, tmp_path):
        result = runner.invoke(
            main,
            ["merge", "--title", "A", "--version", "1", "-o", str(tmp_path / "m.json"), str(tmp_path / "none.json")],
        )

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_incomplete_config(self, runner, write_json):
        config = write_json("merge.config.json", {"sources": []})

        result = runner.invoke(main, ["merge", "--config", str(config)])

        assert result.exit_code == 1
        assert "Missing required fields: info.title, info.version, sources" in result.output

    def test_fail_strategy_conflict(self, runner, services, tmp_path):
        svc1, svc2 = services

        result = runner.invoke(
            main,
            [
                "merge", "--title", "A", "--version", "1",
                "--schema-conflict", "fail",
                "-o", str(tmp_path / "m.json"), str(svc1), str(svc2),
            ],
        )

        assert result.exit_code == 2
        assert "Schema merge conflict" in result.output
        assert not (tmp_path / "m.json").exists()

    def test_invalid_source_document(self, runner, write_json, tmp_path):
        bad = write_json("bad.json", {"swagger": "2.0", "info": {"title": "Old", "version": "1"}})

        result = runner.invoke(
            main, ["merge", "--title", "A", "--version", "1", "-o", str(tmp_path / "m.json"), str(bad)]
        )

        assert result.exit_code == 3
        assert "Invalid OpenAPI specification" in result.output

    def test_dangling_reference_in_output(self, runner, write_json, tmp_path):
        document = service("Broken", USER_NAME, "/users", "listUsers")
        del document["components"]
        broken = write_json("broken.json", document)

        result = runner.invoke(
            main, ["merge", "--title", "A", "--version", "1", "-o", str(tmp_path / "m.json"), str(broken)]
        )

        assert result.exit_code == 3
        assert "#/components/schemas/User" in result.output


class TestInfoCommands:
    """Test cases for the strategies and info commands."""

    def test_strategies(self, runner):
        result = runner.invoke(main, ["strategies"])

        assert result.exit_code == 0
        assert "rename" in result.output
        assert "first-wins (aliases: firstwins)" in result.output
        assert "fail" in result.output

    def test_info(self, runner):
        result = runner.invoke(main, ["info"])

        assert result.exit_code == 0
        assert "openapi-merge version:" in result.output
        assert "default_schema_conflict: rename" in result.output
