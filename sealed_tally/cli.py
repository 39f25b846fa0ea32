"""Command-line interface for Sealed Tally.

Commands:
    demo            Run a create, vote, close and reveal round against the
                    in-memory development backend
    encrypt-ballot  Build a ballot the development backend accepts, for
                    submission to POST /v1/proposals/{id}/votes
"""

import asyncio
import json
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from sealed_tally import __version__
from sealed_tally.bootstrap import build_engine, configure_logging
from sealed_tally.config import (
    AUTHORITY_ID_ENV,
    DEFAULT_REVEALER_ID,
    STUB_KEY_ENV,
    TallyConfig,
    parse_stub_key,
)
from sealed_tally.domain.errors import BallotEngineError
from sealed_tally.domain.models.tally import RevealedResult, VoteChoice
from sealed_tally.infrastructure.stubs import (
    CiphertextCapabilityStub,
    TimeAuthorityStub,
)


class OutputFormat(str, Enum):
    """Output format options."""

    text = "text"
    json = "json"


class BallotChoice(str, Enum):
    """Plaintext choice accepted by encrypt-ballot."""

    yes = "yes"
    no = "no"


app = typer.Typer(
    name="sealed-tally",
    help="Confidential yes/no ballot tallying",
    add_completion=False,
)
console = Console()


@dataclass(frozen=True)
class DemoOutcome:
    """Everything the demo reports."""

    proposal_id: int
    title: str
    ballots_cast: int
    sealed_before_close: bool
    result: RevealedResult


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"sealed-tally version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Sealed Tally: encrypted ballots, counts revealed only at close."""
    load_dotenv()


@app.command()
def demo(
    yes_votes: int = typer.Option(2, "--yes", min=0, help="Number of YES ballots"),
    no_votes: int = typer.Option(1, "--no", min=0, help="Number of NO ballots"),
    duration: int = typer.Option(
        3600,
        "--duration",
        "-d",
        min=1,
        help="Voting window length in seconds",
    ),
    title: str = typer.Option(
        "Should we adopt the new policy?",
        "--title",
        help="Proposal title",
    ),
    authority: str = typer.Option(
        "demo-authority",
        "--authority",
        envvar=AUTHORITY_ID_ENV,
        help="Authority principal",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show engine logs"),
    output_format: OutputFormat = typer.Option(
        OutputFormat.text,
        "--format",
        "-o",
        help="Output format: text or json",
    ),
) -> None:
    """Run one full voting round on a simulated clock.

    The proposal opens 60 seconds after creation. The clock is advanced
    into the window, ballots are cast, then advanced past the end so the
    authority can close the proposal and reveal the counts.

    Example:
        sealed-tally demo --yes 5 --no 3 --format json
    """
    try:
        config = TallyConfig(
            authority_id=authority,
            revealer_id=DEFAULT_REVEALER_ID,
            environment="development",
        )
    except ValueError as e:
        console.print(f"[red]Invalid configuration[/red] - {e}")
        raise typer.Exit(code=2) from None

    configure_logging(
        config,
        log_level="DEBUG" if verbose else "ERROR",
        cache_loggers=False,
    )

    try:
        outcome = asyncio.run(
            _run_demo(config, title, yes_votes, no_votes, duration)
        )
    except BallotEngineError as e:
        console.print(f"[red]FAILED[/red] - {e}")
        raise typer.Exit(code=1) from None

    _output_outcome(outcome, output_format.value)


@app.command("encrypt-ballot")
def encrypt_ballot(
    choice: BallotChoice = typer.Option(
        ...,
        "--choice",
        "-c",
        help="Plaintext choice: yes or no",
    ),
    key: str = typer.Option(
        None,
        "--key",
        envvar=STUB_KEY_ENV,
        help="Hex key the API's development backend was started with",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.text,
        "--format",
        "-o",
        help="Output format: text or json",
    ),
) -> None:
    """Encrypt a choice and print the ciphertext and validity proof as hex.

    The JSON output is a ready-made body for POST /v1/proposals/{id}/votes.

    Example:
        SEALED_TALLY_STUB_KEY=... sealed-tally encrypt-ballot --choice yes -o json
    """
    try:
        secret_key = parse_stub_key(key)
    except ValueError as e:
        console.print(f"[red]Invalid configuration[/red] - {e}")
        raise typer.Exit(code=2) from None
    if secret_key is None:
        console.print(f"[red]Invalid configuration[/red] - {STUB_KEY_ENV} must be set")
        raise typer.Exit(code=2)

    capability = CiphertextCapabilityStub(secret_key=secret_key)
    ballot = capability.encrypt_input(int(VoteChoice[choice.name.upper()]))

    if output_format == OutputFormat.json:
        console.print_json(
            json.dumps(
                {
                    "encrypted_choice": ballot.ciphertext.hex(),
                    "validity_proof": ballot.proof.hex(),
                }
            )
        )
        return

    console.print(f"encrypted_choice: {ballot.ciphertext.hex()}", soft_wrap=True)
    console.print(f"validity_proof: {ballot.proof.hex()}", soft_wrap=True)


async def _run_demo(
    config: TallyConfig,
    title: str,
    yes_votes: int,
    no_votes: int,
    duration: int,
) -> DemoOutcome:
    clock = TimeAuthorityStub()
    capability = CiphertextCapabilityStub()
    engine = build_engine(config, capability=capability, time_authority=clock)

    proposal_id = await engine.registry.create_proposal(
        caller=config.authority_id,
        title=title,
        description="Demo proposal",
        start_time=clock.now() + timedelta(seconds=60),
        duration_seconds=duration,
    )
    clock.advance(seconds=61)

    choices = [VoteChoice.YES] * yes_votes + [VoteChoice.NO] * no_votes
    for number, choice in enumerate(choices, start=1):
        ballot = capability.encrypt_input(int(choice))
        await engine.accumulator.cast_vote(
            proposal_id=proposal_id,
            voter_id=f"participant-{number}",
            encrypted_choice=ballot.ciphertext,
            validity_proof=ballot.proof,
        )

    pending = await engine.revealer.get_results(proposal_id)

    clock.advance(seconds=duration)
    result = await engine.revealer.close_proposal(proposal_id, config.authority_id)

    return DemoOutcome(
        proposal_id=proposal_id,
        title=title,
        ballots_cast=len(choices),
        sealed_before_close=not pending.revealed and pending.total == 0,
        result=result,
    )


def _output_outcome(outcome: DemoOutcome, output_format: str) -> None:
    """Output demo outcome in requested format."""
    result = outcome.result
    if output_format == "json":
        output = {
            "proposal_id": outcome.proposal_id,
            "title": outcome.title,
            "ballots_cast": outcome.ballots_cast,
            "sealed_before_close": outcome.sealed_before_close,
            "yes_count": result.yes_count,
            "no_count": result.no_count,
            "total": result.total,
            "yes_percentage": result.yes_percentage,
            "no_percentage": result.no_percentage,
            "passed": result.passed,
        }
        console.print_json(json.dumps(output))
        return

    console.print(
        f"Proposal {outcome.proposal_id}: {outcome.title} "
        f"({outcome.ballots_cast} ballots cast)"
    )
    if outcome.sealed_before_close:
        console.print("[dim]Counts stayed sealed until close[/dim]")

    table = Table(title="Results")
    table.add_column("Choice")
    table.add_column("Votes", justify="right")
    table.add_column("Share", justify="right")
    table.add_row("YES", str(result.yes_count), f"{result.yes_percentage}%")
    table.add_row("NO", str(result.no_count), f"{result.no_percentage}%")
    table.add_row("Total", str(result.total), "")
    console.print(table)

    if result.passed:
        console.print("[green]PASSED[/green]")
    else:
        console.print("[red]REJECTED[/red]")
