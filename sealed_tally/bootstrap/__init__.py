"""Composition root: wires services to their collaborators."""

from sealed_tally.bootstrap.engine import BallotEngine, build_engine
from sealed_tally.bootstrap.logging import configure_logging

__all__ = ["BallotEngine", "build_engine", "configure_logging"]
