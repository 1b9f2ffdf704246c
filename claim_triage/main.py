"""FastAPI application entrypoint for the Claim Triage service."""

import logging
import os
import sys

import uvicorn
from fastapi import FastAPI

from claim_triage.api.routes import router
from claim_triage.config import DEFAULT_PORT
from claim_triage.services.rule_store import RuleStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    stream=sys.stdout,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Claim Triage",
    description="Classifies claims-report rows into teams and ranks the work queue.",
    version="0.1.0",
)

# In-process key-value handle; deployments swap in their own store handle.
app.state.rule_store = RuleStore({})

app.include_router(router)


def main() -> None:
    """Launch the Uvicorn server with configuration from environment variables."""
    port = int(os.getenv("PORT", str(DEFAULT_PORT)))
    logger.info("Starting server on port %d", port)
    uvicorn.run(
        "claim_triage.main:app",
        host="0.0.0.0",
        port=port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
