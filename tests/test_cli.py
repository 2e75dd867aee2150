"""Tests for the paramkit CLI.

Exercises dump and get against parameter files written to a temporary
directory.
"""

import textwrap

import pytest
from typer.testing import CliRunner

from paramkit.cli.__main__ import app


@pytest.fixture
def param_file(tmp_path):
    path = tmp_path / "run.params"
    path.write_text(textwrap.dedent("""
        # experiment settings
        seed: 42
        model.beta: 0.5
        model.decoder.kind = greedy
        output: results
    """).lstrip())
    return path


class TestDumpCommand:
    """Tests for 'paramkit dump'."""

    def setup_method(self):
        """Set up test runner."""
        self.runner = CliRunner()

    def test_dump_sorted(self, param_file):
        """Test that dump prints sorted key: value lines."""
        result = self.runner.invoke(app, ["dump", str(param_file), "--no-timestamp"])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == [
            "model.beta: 0.5",
            "model.decoder.kind: greedy",
            "output: results",
            "seed: 42",
        ]

    def test_dump_timestamp(self, param_file):
        """Test that the default dump starts with a timestamp comment."""
        result = self.runner.invoke(app, ["dump", str(param_file)])

        assert result.exit_code == 0
        assert result.stdout.startswith("#")
        assert "seed: 42" in result.stdout

    def test_dump_namespace(self, param_file):
        """Test dumping a namespace with full keys."""
        result = self.runner.invoke(
            app, ["dump", str(param_file), "--namespace", "model", "--no-timestamp"]
        )

        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["model.beta: 0.5", "model.decoder.kind: greedy"]

    def test_dump_relative_keys(self, param_file):
        """Test dumping a namespace with keys relative to it."""
        result = self.runner.invoke(
            app, ["dump", str(param_file), "-n", "model.decoder", "--no-timestamp", "--relative-keys"]
        )

        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["kind: greedy"]

    def test_dump_missing_namespace(self, param_file):
        """Test that an absent namespace is an error."""
        result = self.runner.invoke(app, ["dump", str(param_file), "-n", "training"])

        assert result.exit_code == 1
        assert "Namespace 'training' not present" in result.output

    def test_dump_missing_file(self, tmp_path):
        """Test that an unreadable file is an error."""
        result = self.runner.invoke(app, ["dump", str(tmp_path / "absent.params")])

        assert result.exit_code == 1
        assert "cannot read parameter file" in result.output


class TestGetCommand:
    """Tests for 'paramkit get' and 'paramkit version'."""

    def setup_method(self):
        """Set up test runner."""
        self.runner = CliRunner()

    def test_get(self, param_file):
        """Test reading a dotted key."""
        result = self.runner.invoke(app, ["get", str(param_file), "model.decoder.kind"])

        assert result.exit_code == 0
        assert result.stdout.strip() == "greedy"

    def test_get_missing_key(self, param_file):
        """Test that a missing key exits with an error."""
        result = self.runner.invoke(app, ["get", str(param_file), "model.gamma"])

        assert result.exit_code == 1
        assert "Missing required parameter: model.gamma" in result.output

    def test_version(self):
        """Test the version command."""
        result = self.runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "paramkit version" in result.stdout

    def test_no_command(self):
        """Test that invoking without a command fails with help."""
        result = self.runner.invoke(app, [])

        assert result.exit_code == 1
        assert "dump" in result.output
