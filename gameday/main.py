"""FastAPI application entry point."""
from fastapi import FastAPI

from gameday.logging_config import configure_logging
from gameday.routers import chat, coach, metrics


configure_logging()

app = FastAPI(title="GameDay Coach API")


@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Simple health probe for liveness checks."""
    return {"status": "ok"}


# Include routers
app.include_router(coach.router)
app.include_router(chat.router)
app.include_router(metrics.router)
