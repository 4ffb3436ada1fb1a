import os
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from config import load_settings
from errors import (
    ConfigurationError,
    EmptyResult,
    InvalidVariable,
    NoMatchingState,
    ReportError,
    SourceUnavailable,
)
from models import ReportTable
from report import build_report

load_dotenv()

# Comma-separated list, e.g. "http://localhost:5173,https://reports.example.org"
origins = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if origin.strip()]
logger.debug(f"CORS Origins configured: {origins}")

app = FastAPI(title="County Demographics Report")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)

ERROR_STATUS_CODES = {
    SourceUnavailable: 502,
    EmptyResult: 404,
    NoMatchingState: 404,
    InvalidVariable: 400,
    ConfigurationError: 500,
}


def _status_for(error: ReportError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(error, error_type):
            return status_code
    return 500


@app.get("/")
async def read_root():
    return {"message": "County demographics report service is running"}


@app.get("/report", response_model=ReportTable)
async def get_report(
    state: Optional[str] = Query(default=None, description="Full state name, e.g. Washington"),
    year: Optional[int] = Query(default=None, description="ACS release year"),
):
    try:
        settings = load_settings(state=state, year=year)
        return await build_report(settings)
    except ReportError as e:
        logger.error(f"Report for state={state} year={year} aborted: {type(e).__name__}: {e}")
        raise HTTPException(status_code=_status_for(e), detail=f"{type(e).__name__}: {e}")
