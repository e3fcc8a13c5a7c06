"""
Tests for the selal command line.
"""

from typer.testing import CliRunner

from selal import __version__
from selal.main import app

runner = CliRunner()


class TestCli:

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_quote(self):
        result = runner.invoke(app, ["quote", "50", "100", "--plan", "annual"])
        assert result.exit_code == 0
        assert "150" in result.stdout
        assert "3825.00" in result.stdout

    def test_quote_unknown_plan(self):
        result = runner.invoke(app, ["quote", "50", "--plan", "weekly"])
        assert result.exit_code == 1

    def test_health(self):
        result = runner.invoke(app, ["health"])
        assert result.exit_code == 0
        assert "Configuration loaded" in result.stdout

    def test_register_customer(self):
        answers = "\n".join([
            "4",
            "Mona Adel",
            "01198765432",
            "29501011234567",
            "Adel Trading",
            "y",
            "123456",
            "cash",
            "",
            "2024-07-01",
        ]) + "\n"
        result = runner.invoke(app, ["register"], input=answers)
        assert result.exit_code == 0
        assert "Registration Successful" in result.stdout
