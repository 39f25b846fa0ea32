"""FastAPI application entry point for Sealed Tally."""

from fastapi import FastAPI

from sealed_tally import __version__
from sealed_tally.api.middleware import LoggingMiddleware
from sealed_tally.api.routes import proposals_router

app = FastAPI(
    title="Sealed Tally API",
    description="Confidential yes/no ballot tallying",
    version=__version__,
)

app.add_middleware(LoggingMiddleware)
app.include_router(proposals_router)
