"""Tests for the sealed-tally CLI."""

import asyncio
import json

import pytest
from typer.testing import CliRunner

from sealed_tally.cli import app
from sealed_tally.config import STUB_KEY_ENV
from sealed_tally.domain.errors import InvalidBallotError
from sealed_tally.infrastructure.stubs import CiphertextCapabilityStub

runner = CliRunner()


class TestCLIVersion:
    """Tests for the version flag."""

    def test_cli_version_command(self, project_version: str) -> None:
        """Verify --version flag shows version."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "sealed-tally version" in result.stdout
        assert project_version in result.stdout

    def test_cli_version_short_flag(self) -> None:
        """Verify -v flag shows version."""
        result = runner.invoke(app, ["-v"])

        assert result.exit_code == 0
        assert "sealed-tally version" in result.stdout


class TestCLIDemo:
    """Tests for the demo command."""

    def test_demo_help(self) -> None:
        """Verify demo command exists with its options."""
        result = runner.invoke(app, ["demo", "--help"])

        assert result.exit_code == 0
        assert "--yes" in result.stdout
        assert "--format" in result.stdout

    def test_demo_default_scenario_passes(self) -> None:
        """Two YES and one NO ballots pass."""
        result = runner.invoke(app, ["demo", "--authority", "board"])

        assert result.exit_code == 0
        assert "3 ballots cast" in result.stdout
        assert "sealed until close" in result.stdout
        assert "PASSED" in result.stdout

    def test_demo_json_output(self) -> None:
        """JSON output reports the revealed counts."""
        result = runner.invoke(
            app,
            [
                "demo",
                "--yes",
                "1",
                "--no",
                "3",
                "--format",
                "json",
                "--authority",
                "board",
            ],
        )

        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert output["yes_count"] == 1
        assert output["no_count"] == 3
        assert output["total"] == 4
        assert output["yes_percentage"] == 25.0
        assert output["passed"] is False
        assert output["sealed_before_close"] is True

    def test_demo_without_ballots(self) -> None:
        result = runner.invoke(
            app,
            [
                "demo",
                "--yes",
                "0",
                "--no",
                "0",
                "--format",
                "json",
                "--authority",
                "board",
            ],
        )

        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert output["total"] == 0
        assert output["passed"] is False

    def test_demo_rejects_clashing_principals(self) -> None:
        """The authority cannot double as the revealer."""
        result = runner.invoke(app, ["demo", "--authority", "tally-revealer"])

        assert result.exit_code == 2
        assert "Invalid configuration" in result.stdout


class TestCLIEncryptBallot:
    """Tests for the encrypt-ballot command."""

    KEY = "6b" * 32

    def test_json_ballot_is_accepted_by_backend_with_same_key(self) -> None:
        """The printed ballot imports into a backend sharing the key."""
        result = runner.invoke(
            app,
            ["encrypt-ballot", "--choice", "yes", "--format", "json"],
            env={STUB_KEY_ENV: self.KEY},
        )

        assert result.exit_code == 0
        body = json.loads(result.stdout)
        capability = CiphertextCapabilityStub(secret_key=bytes.fromhex(self.KEY))
        ciphertext = asyncio.run(
            capability.import_external(
                bytes.fromhex(body["encrypted_choice"]),
                bytes.fromhex(body["validity_proof"]),
            )
        )
        assert capability.peek(ciphertext) == 1

    def test_text_output_lists_both_fields(self) -> None:
        result = runner.invoke(
            app, ["encrypt-ballot", "-c", "no", "--key", self.KEY]
        )

        assert result.exit_code == 0
        assert "encrypted_choice: " in result.stdout
        assert "validity_proof: " in result.stdout

    def test_ballot_rejected_by_backend_with_other_key(self) -> None:
        result = runner.invoke(
            app,
            ["encrypt-ballot", "-c", "no", "-o", "json", "--key", self.KEY],
        )
        body = json.loads(result.stdout)

        capability = CiphertextCapabilityStub(secret_key=b"\x00" * 32)
        with pytest.raises(InvalidBallotError, match="does not verify"):
            asyncio.run(
                capability.import_external(
                    bytes.fromhex(body["encrypted_choice"]),
                    bytes.fromhex(body["validity_proof"]),
                )
            )

    def test_missing_key_exits_2(self) -> None:
        result = runner.invoke(
            app, ["encrypt-ballot", "--choice", "yes"], env={STUB_KEY_ENV: None}
        )

        assert result.exit_code == 2
        assert STUB_KEY_ENV in result.stdout

    def test_non_hex_key_exits_2(self) -> None:
        result = runner.invoke(
            app, ["encrypt-ballot", "--choice", "yes", "--key", "not-hex"]
        )

        assert result.exit_code == 2
        assert "Invalid configuration" in result.stdout

    def test_unknown_choice_rejected(self) -> None:
        result = runner.invoke(
            app, ["encrypt-ballot", "--choice", "maybe", "--key", self.KEY]
        )

        assert result.exit_code != 0
