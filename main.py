"""
Vedic Daily Engine — FastAPI Backend
====================================
Endpoints:
  POST /api/choghadiya        — Sunrise/sunset + 16 Choghadiya periods
  POST /api/birth-profile     — Moon sign, nakshatra, dasha, ascendant
  POST /api/vedic-elements    — Moon/sidereal snapshot for an instant
  POST /api/prediction/parse  — Structure a generated prediction text
  GET  /api/health            — Health check
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from vedic_engine import (
    VedicEngineError, __version__,
    birth_profile, daily_choghadiya, parse, vedic_elements,
)
from vedic_engine.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Vedic Daily Engine API",
    version=__version__,
    description="Choghadiya, nakshatra, dasha and prediction-text parsing",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Models ─────────────────────────────────────────────

class ChoghadiyaRequest(BaseModel):
    year:      int             = Field(..., ge=settings.MIN_YEAR, le=settings.MAX_YEAR)
    month:     int             = Field(..., ge=1,   le=12)
    day:       int             = Field(..., ge=1,   le=31)
    latitude:  Optional[float] = Field(None, ge=-90,  le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    now:       Optional[datetime] = Field(None, description="Instant to resolve the current period for")


class BirthProfileRequest(BaseModel):
    birth:     datetime        = Field(..., description="Birth instant, ISO 8601 (naive = UTC)")
    latitude:  Optional[float] = Field(None, ge=-90,  le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    now:       Optional[datetime] = None
    ayanamsa:  Optional[str]   = Field(None, pattern="^(lahiri|raman|kp|fagan)$")


class VedicElementsRequest(BaseModel):
    instant:   Optional[datetime] = None
    latitude:  Optional[float] = Field(None, ge=-90,  le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class ParseRequest(BaseModel):
    text: str


# ── Utilities ──────────────────────────────────────────────────

def _coords(latitude: Optional[float], longitude: Optional[float]):
    if latitude is None or longitude is None:
        return settings.DEFAULT_LATITUDE, settings.DEFAULT_LONGITUDE
    return latitude, longitude


def _engine_error(e: VedicEngineError) -> HTTPException:
    logger.warning("%s: %s", type(e).__name__, e)
    return HTTPException(status_code=400, detail=f"{type(e).__name__}: {e}")


# ── Endpoints ──────────────────────────────────────────────────

@app.get("/api/health")
def health():
    return {
        "status": "ok",
        "service": "Vedic Daily Engine API",
        "version": __version__,
        "endpoints": [
            "POST /api/choghadiya",
            "POST /api/birth-profile",
            "POST /api/vedic-elements",
            "POST /api/prediction/parse",
        ],
    }


@app.post("/api/choghadiya")
def choghadiya_endpoint(data: ChoghadiyaRequest):
    lat, lon = _coords(data.latitude, data.longitude)
    try:
        day = date(data.year, data.month, data.day)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    try:
        result = daily_choghadiya(day, lat, lon, now=data.now)
        return {"success": True, "choghadiya": result}
    except VedicEngineError as e:
        raise _engine_error(e)


@app.post("/api/birth-profile")
def birth_profile_endpoint(data: BirthProfileRequest):
    lat, lon = _coords(data.latitude, data.longitude)
    try:
        profile = birth_profile(data.birth, lat, lon, now=data.now, ayanamsa=data.ayanamsa)
        return {"success": True, "profile": profile}
    except VedicEngineError as e:
        raise _engine_error(e)


@app.post("/api/vedic-elements")
def vedic_elements_endpoint(data: VedicElementsRequest):
    lat, lon = _coords(data.latitude, data.longitude)
    instant = data.instant or datetime.now(timezone.utc)
    try:
        elements = vedic_elements(instant, lat, lon)
        return {"success": True, "location": {"latitude": lat, "longitude": lon},
                "vedic_elements": elements}
    except VedicEngineError as e:
        raise _engine_error(e)


@app.post("/api/prediction/parse")
def parse_endpoint(data: ParseRequest):
    try:
        return {"success": True, "prediction": parse(data.text).to_dict()}
    except VedicEngineError as e:
        raise _engine_error(e)
