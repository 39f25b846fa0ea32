"""Unit tests for the proposal and ballot API routes."""

import json
from collections.abc import Iterator
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from typer.testing import CliRunner

from sealed_tally.api.dependencies.voting import get_engine
from sealed_tally.api.main import app
from sealed_tally.bootstrap import BallotEngine, build_engine
from sealed_tally.cli import app as cli_app
from sealed_tally.config import AUTHORITY_ID_ENV, STUB_KEY_ENV, TallyConfig
from sealed_tally.infrastructure.stubs import (
    CiphertextCapabilityStub,
    TimeAuthorityStub,
)


@pytest.fixture
def client(engine: BallotEngine) -> Iterator[TestClient]:
    """Create a test client wired to the fixture engine."""
    app.dependency_overrides[get_engine] = lambda: engine
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _as(principal: str) -> dict[str, str]:
    return {"X-Principal-Id": principal}


def _create(client: TestClient, clock: TimeAuthorityStub, principal: str):
    return client.post(
        "/v1/proposals",
        json={
            "title": "Adopt the new policy",
            "description": "Yes adopts it",
            "start_time": (clock.now() + timedelta(seconds=60)).isoformat(),
            "duration_seconds": 3600,
        },
        headers=_as(principal),
    )


def _vote(
    client: TestClient,
    capability: CiphertextCapabilityStub,
    proposal_id: int,
    voter: str,
    value: int,
):
    ballot = capability.encrypt_input(value)
    return client.post(
        f"/v1/proposals/{proposal_id}/votes",
        json={
            "encrypted_choice": ballot.ciphertext.hex(),
            "validity_proof": ballot.proof.hex(),
        },
        headers=_as(voter),
    )


class TestCreateProposalRoute:
    """Tests for POST /v1/proposals."""

    def test_authority_creates_proposal(
        self, client: TestClient, clock: TimeAuthorityStub, authority_id: str
    ) -> None:
        response = _create(client, clock, authority_id)

        assert response.status_code == 201
        data = response.json()
        assert data["proposal_id"] == 0
        assert data["state"] == "scheduled"
        assert data["voting_open"] is False
        assert data["start_time"] == "2026-01-01T00:01:00Z"
        assert data["end_time"] == "2026-01-01T01:01:00Z"
        assert data["time_remaining_seconds"] == 3660
        assert data["closed_at"] is None

    def test_non_authority_gets_403_problem(
        self, client: TestClient, clock: TimeAuthorityStub
    ) -> None:
        """RFC 7807 body with type, title, status, detail and instance."""
        response = _create(client, clock, "mallory")

        assert response.status_code == 403
        detail = response.json()["detail"]
        assert detail["type"] == "urn:sealed-tally:access:unauthorized"
        assert detail["status"] == 403
        assert detail["caller"] == "mallory"
        assert detail["instance"].endswith("/v1/proposals")

    def test_missing_principal_header(
        self, client: TestClient, clock: TimeAuthorityStub
    ) -> None:
        response = client.post(
            "/v1/proposals",
            json={
                "title": "t",
                "start_time": (clock.now() + timedelta(seconds=60)).isoformat(),
                "duration_seconds": 60,
            },
        )

        assert response.status_code == 401
        assert response.json()["detail"]["title"] == "Principal Required"

    def test_past_start_time_is_422(
        self, client: TestClient, clock: TimeAuthorityStub, authority_id: str
    ) -> None:
        response = client.post(
            "/v1/proposals",
            json={
                "title": "Too late",
                "start_time": clock.now().isoformat(),
                "duration_seconds": 60,
            },
            headers=_as(authority_id),
        )

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["type"] == "urn:sealed-tally:proposal:invalid-schedule"
        assert detail["detail"] == "Start time must be in the future"

    def test_oversized_duration_is_422(
        self, client: TestClient, clock: TimeAuthorityStub, authority_id: str
    ) -> None:
        response = client.post(
            "/v1/proposals",
            json={
                "title": "Forever",
                "start_time": (clock.now() + timedelta(seconds=60)).isoformat(),
                "duration_seconds": 10**12,
            },
            headers=_as(authority_id),
        )

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["type"] == "urn:sealed-tally:proposal:invalid-schedule"
        assert detail["detail"] == "Duration out of range"
        assert detail["duration_seconds"] == 10**12
        assert client.get("/v1/proposals").json()["count"] == 0


class TestReadRoutes:
    """Tests for GET routes."""

    def test_list_and_get(
        self, client: TestClient, clock: TimeAuthorityStub, authority_id: str
    ) -> None:
        _create(client, clock, authority_id)
        _create(client, clock, authority_id)

        listing = client.get("/v1/proposals").json()
        assert listing["count"] == 2
        assert [p["proposal_id"] for p in listing["proposals"]] == [0, 1]

        response = client.get("/v1/proposals/1")
        assert response.status_code == 200
        assert response.json()["title"] == "Adopt the new policy"

    def test_unknown_proposal_is_404(self, client: TestClient) -> None:
        response = client.get("/v1/proposals/5")

        assert response.status_code == 404
        assert response.json()["detail"]["proposal_id"] == 5

    def test_unknown_proposal_results_is_404(self, client: TestClient) -> None:
        assert client.get("/v1/proposals/0/results").status_code == 404


class TestVotingFlow:
    """End-to-end voting through the HTTP surface."""

    def test_vote_close_and_reveal(
        self,
        client: TestClient,
        clock: TimeAuthorityStub,
        capability: CiphertextCapabilityStub,
        authority_id: str,
    ) -> None:
        """alice YES, bob NO, charlie YES reveals 2 to 1."""
        _create(client, clock, authority_id)
        clock.advance(seconds=61)

        for voter, value in (("alice", 1), ("bob", 0), ("charlie", 1)):
            response = _vote(client, capability, 0, voter, value)
            assert response.status_code == 201
            assert set(response.json()) == {"proposal_id", "voter_id", "cast_at"}

        sealed = client.get("/v1/proposals/0/results").json()
        assert sealed["revealed"] is False
        assert (sealed["yes_count"], sealed["no_count"]) == (0, 0)

        early = client.post("/v1/proposals/0/close", headers=_as(authority_id))
        assert early.status_code == 409
        assert early.json()["detail"]["type"] == (
            "urn:sealed-tally:proposal:voting-still-open"
        )

        clock.advance(seconds=3600)
        closed = client.post("/v1/proposals/0/close", headers=_as(authority_id))

        assert closed.status_code == 200
        result = closed.json()
        assert (result["yes_count"], result["no_count"]) == (2, 1)
        assert result["revealed"] is True
        assert result["passed"] is True
        assert result["yes_percentage"] == 66.7
        assert client.get("/v1/proposals/0/results").json() == result
        assert client.get("/v1/proposals/0").json()["state"] == "closed"

    def test_duplicate_vote_is_409(
        self,
        client: TestClient,
        clock: TimeAuthorityStub,
        capability: CiphertextCapabilityStub,
        authority_id: str,
    ) -> None:
        _create(client, clock, authority_id)
        clock.advance(seconds=61)
        _vote(client, capability, 0, "alice", 1)

        response = _vote(client, capability, 0, "alice", 0)

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["type"] == "urn:sealed-tally:ballot:duplicate-vote"
        has_voted = client.get("/v1/proposals/0/votes/alice").json()
        assert has_voted == {"proposal_id": 0, "voter_id": "alice", "has_voted": True}

    def test_vote_before_start_is_409_not_started(
        self,
        client: TestClient,
        clock: TimeAuthorityStub,
        capability: CiphertextCapabilityStub,
        authority_id: str,
    ) -> None:
        _create(client, clock, authority_id)

        response = _vote(client, capability, 0, "alice", 1)

        assert response.status_code == 409
        assert response.json()["detail"]["window_status"] == "not_started"

    def test_invalid_hex_is_422(
        self, client: TestClient, clock: TimeAuthorityStub, authority_id: str
    ) -> None:
        _create(client, clock, authority_id)
        clock.advance(seconds=61)

        response = client.post(
            "/v1/proposals/0/votes",
            json={"encrypted_choice": "zz", "validity_proof": "00"},
            headers=_as("alice"),
        )

        assert response.status_code == 422
        assert response.json()["detail"]["type"] == "urn:sealed-tally:ballot:invalid"
        voted = client.get("/v1/proposals/0/votes/alice").json()["has_voted"]
        assert voted is False

    def test_non_authority_cannot_close(
        self, client: TestClient, clock: TimeAuthorityStub, authority_id: str
    ) -> None:
        _create(client, clock, authority_id)
        clock.advance(seconds=3661)

        response = client.post("/v1/proposals/0/close", headers=_as("alice"))

        assert response.status_code == 403


class TestExternalBallots:
    """Ballots built outside the server process with the shared stub key."""

    KEY = "5a" * 32

    @pytest.fixture
    def env_client(
        self, monkeypatch: pytest.MonkeyPatch, clock: TimeAuthorityStub
    ) -> Iterator[TestClient]:
        """Client whose engine is configured only from the environment."""
        monkeypatch.setenv(AUTHORITY_ID_ENV, "board")
        monkeypatch.setenv(STUB_KEY_ENV, self.KEY)
        engine = build_engine(TallyConfig.from_environment(), time_authority=clock)
        app.dependency_overrides[get_engine] = lambda: engine
        try:
            yield TestClient(app)
        finally:
            app.dependency_overrides.clear()

    def _ballot(self, choice: str) -> dict[str, str]:
        result = CliRunner().invoke(
            cli_app,
            ["encrypt-ballot", "--choice", choice, "--format", "json"],
            env={STUB_KEY_ENV: self.KEY},
        )
        assert result.exit_code == 0
        return json.loads(result.stdout)

    def test_cli_ballots_are_counted(
        self, env_client: TestClient, clock: TimeAuthorityStub
    ) -> None:
        _create(env_client, clock, "board")
        clock.advance(seconds=61)

        for voter, choice in (("alice", "yes"), ("bob", "no"), ("carol", "yes")):
            response = env_client.post(
                "/v1/proposals/0/votes",
                json=self._ballot(choice),
                headers=_as(voter),
            )
            assert response.status_code == 201

        clock.advance(seconds=3600)
        closed = env_client.post("/v1/proposals/0/close", headers=_as("board"))

        assert closed.status_code == 200
        data = closed.json()
        assert (data["yes_count"], data["no_count"]) == (2, 1)
        assert data["revealed"] is True

    def test_ballot_for_other_key_is_422(
        self, env_client: TestClient, clock: TimeAuthorityStub
    ) -> None:
        _create(env_client, clock, "board")
        clock.advance(seconds=61)
        body = CliRunner().invoke(
            cli_app,
            ["encrypt-ballot", "-c", "yes", "-o", "json", "--key", "a5" * 32],
        ).stdout

        response = env_client.post(
            "/v1/proposals/0/votes", json=json.loads(body), headers=_as("alice")
        )

        assert response.status_code == 422
        assert response.json()["detail"]["detail"] == (
            "Invalid ballot: validity proof does not verify"
        )


class TestCorrelationHeader:
    def test_correlation_id_is_echoed(self, client: TestClient) -> None:
        response = client.get("/v1/proposals", headers={"X-Correlation-ID": "req-42"})

        assert response.headers["X-Correlation-ID"] == "req-42"

    def test_correlation_id_is_generated(self, client: TestClient) -> None:
        response = client.get("/v1/proposals")

        assert response.headers["X-Correlation-ID"]
