"""API routers."""

from sealed_tally.api.routes.proposals import router as proposals_router

__all__ = ["proposals_router"]
