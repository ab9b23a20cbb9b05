"""
Main FastAPI application for the slate optimizer.

The API exposes lineup generation over HTTP:
- /health for monitoring
- /api/config for the effective (non-sensitive) optimizer settings
- /api/optimize/* for lineup generation

Run with:
    uvicorn slate_optimizer.api.main:app --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from slate_optimizer import __version__
from slate_optimizer.api.routers import optimization
from slate_optimizer.config.settings import settings

app = FastAPI(
    title="Slate Optimizer API",
    description="Exposure-aware DraftKings NBA lineup portfolio generation",
    version=__version__,
)

# Configure restrictively for production
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Basic API information."""
    return {
        "message": "Slate Optimizer API",
        "version": __version__,
        "docs": f"http://{settings.api_host}:{settings.api_port}/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for system monitoring."""
    return {"status": "healthy", "service": "Slate Optimizer"}


@app.get("/api/config")
async def get_config():
    """Current optimizer defaults (non-sensitive values only)."""
    return {
        "salary_cap": settings.dk_classic_salary_cap,
        "num_lineups": settings.default_num_lineups,
        "max_exposure": settings.default_max_exposure,
        "cap_slack_threshold": settings.cap_slack_threshold,
        "shuffle_window": settings.shuffle_window,
        "attempts_per_lineup": settings.attempts_per_lineup,
        "min_attempts": settings.min_attempts,
    }


app.include_router(optimization.router, prefix="/api")
