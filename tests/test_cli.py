"""Tests for the propcheck command line."""

import json
import textwrap
import xml.etree.ElementTree as ET

import pytest
from click.testing import CliRunner

from propcheck import __version__
from propcheck.cli.commands import cli, discover_properties
from propcheck.errors import PropertyNotFound

PASSING = textwrap.dedent(
    """
    from propcheck import arbitrary as arb
    from propcheck import PropertySuite, for_all, property_test

    suite = PropertySuite("lists")

    @suite.property(arb.lists(arb.integers()))
    def sort_idempotent(xs):
        return sorted(sorted(xs)) == sorted(xs)

    reflexive = for_all(arb.integers(), body=lambda n: n == n)

    @property_test(arb.lists(arb.integers()))
    def test_reverse(xs):
        return xs[::-1][::-1] == xs
    """
)

FAILING = textwrap.dedent(
    """
    from propcheck import arbitrary as arb
    from propcheck import for_all

    small = for_all(arb.integers(), body=lambda n: n < 10)
    """
)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def passing_module(tmp_path) -> str:
    path = tmp_path / "passing_props.py"
    path.write_text(PASSING)
    return str(path)


@pytest.fixture
def failing_module(tmp_path) -> str:
    path = tmp_path / "failing_props.py"
    path.write_text(FAILING)
    return str(path)


class TestDiscovery:
    def test_finds_suites_properties_and_tests(self, passing_module):
        assert sorted(discover_properties(passing_module)) == ["reflexive", "sort_idempotent", "test_reverse"]

    def test_single_name(self, passing_module):
        assert list(discover_properties(f"{passing_module}:reflexive")) == ["reflexive"]

    def test_unknown_name(self, passing_module):
        with pytest.raises(PropertyNotFound):
            discover_properties(f"{passing_module}:missing")

    def test_missing_file(self, tmp_path):
        with pytest.raises(PropertyNotFound):
            discover_properties(str(tmp_path / "absent.py"))

    def test_missing_module(self):
        with pytest.raises(PropertyNotFound):
            discover_properties("propcheck_no_such_module")


class TestRunCommand:
    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_passing_run(self, runner, passing_module):
        result = runner.invoke(cli, ["run", passing_module, "--seed", "42", "--no-color"])
        assert result.exit_code == 0, result.output
        assert "propcheck: PASSED" in result.output
        assert "[PASSED] sort_idempotent" in result.output

    def test_failing_run(self, runner, failing_module):
        result = runner.invoke(cli, ["run", failing_module, "--seed", "1", "--no-color"])
        assert result.exit_code == 1
        assert "Counterexample: 10" in result.output

    def test_json_format(self, runner, failing_module):
        result = runner.invoke(cli, ["run", failing_module, "--seed", "1", "--format", "json"])
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["summary"]["falsified"] == 1
        assert data["properties"][0]["shrunk_witness"] == ["10"]

    def test_junit_output_file(self, runner, passing_module, tmp_path):
        output = tmp_path / "reports" / "junit.xml"
        result = runner.invoke(
            cli, ["run", passing_module, "--seed", "3", "--max-tests", "20", "-f", "junit", "-o", str(output), "-w", "2"]
        )
        assert result.exit_code == 0
        root = ET.parse(output).getroot()
        assert root.find("testsuite").get("tests") == "3"

    def test_invalid_option_value(self, runner, passing_module):
        result = runner.invoke(cli, ["run", passing_module, "--max-tests", "0"])
        assert result.exit_code == 1
        assert "max_tests" in result.output

    def test_config_file(self, runner, failing_module, tmp_path):
        config = tmp_path / "propcheck.yaml"
        config.write_text("seed: 1\nmax_shrinks: 0\n")
        result = runner.invoke(cli, ["--config", str(config), "run", failing_module, "-f", "json"])
        data = json.loads(result.stdout)
        assert data["properties"][0]["seed"] == 1
        assert data["properties"][0]["shrink_steps"] == 0


class TestListCommand:
    def test_lists_properties(self, runner, passing_module):
        result = runner.invoke(cli, ["list", passing_module])
        assert result.exit_code == 0
        assert "sort_idempotent" in result.output
        assert "reflexive" in result.output

    def test_empty_module(self, runner, tmp_path):
        path = tmp_path / "empty_props.py"
        path.write_text("VALUE = 1\n")
        result = runner.invoke(cli, ["list", str(path)])
        assert result.exit_code == 1
        assert "No properties found" in result.output

    def test_verbose_errors_include_suggestions(self, runner, passing_module):
        result = runner.invoke(cli, ["-v", "list", f"{passing_module}:missing"])
        assert result.exit_code == 1
        assert "Error [E401]" in result.output
        assert "Suggestions:" in result.output
        assert "Available: reflexive, sort_idempotent, test_reverse" in result.output
