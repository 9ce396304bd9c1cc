from fastapi import FastAPI
from contextlib import asynccontextmanager
from tournament_pool import __version__
from tournament_pool.database import create_db_and_tables
from tournament_pool.logging_config import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: configure logging and create database tables
    setup_logging()
    create_db_and_tables()
    yield


# Initialize FastAPI app
app = FastAPI(
    title="Tournament Prediction Pool",
    description="Scoring engine for tournament prediction pools",
    version=__version__,
    lifespan=lifespan
)

# Include routers
from tournament_pool.routers import standings, scores, boosts

app.include_router(standings.router)
app.include_router(scores.router)
app.include_router(boosts.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
