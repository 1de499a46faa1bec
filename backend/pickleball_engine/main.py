import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pickleball_engine import config
from pickleball_engine.routes import brackets, rankings, scoring

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Pickleball Scoring Engine API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Scoring (set evaluation, validation, resolution)
app.include_router(scoring.router, prefix="/api", tags=["scoring"])

# Brackets (generation, advancement, round state)
app.include_router(brackets.router, prefix="/api", tags=["brackets"])

# Standings
app.include_router(rankings.router, prefix="/api", tags=["rankings"])


@app.get("/api/health")
def health():
    return {"status": "ok"}
