"""
ChefGenie Web - FastAPI application.

Hosts the generation passthrough for clients that must not hold the API key.
"""

from fastapi import FastAPI

from chefgenie import __version__
from chefgenie.web.passthrough import router as passthrough_router

app = FastAPI(title="ChefGenie", version=__version__)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


app.include_router(passthrough_router)
