"""
FastAPI Web Application for Telemetry CSV Ingestion

This module provides a REST API for uploading telemetry exports, returning
lap statistics and session metadata, and downloading the parsed lap table.
"""

import logging
import os
from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.responses import JSONResponse, PlainTextResponse
from lapsheet import constants
from lapsheet.errors import LapsheetError
from lapsheet.export import build_session_form, export_laps_csv
from lapsheet.models import ParseResult
from lapsheet.session import build_session_payload


# ============================================================================
# APPLICATION SETUP
# ============================================================================

MAX_UPLOAD_BYTES = int(os.environ.get("LAPSHEET_MAX_UPLOAD_BYTES", constants.MAX_UPLOAD_BYTES))
LOG_LEVEL = os.environ.get("LAPSHEET_LOG_LEVEL", constants.DEFAULT_LOG_LEVEL).upper()

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Lapsheet",
    description="Lap-time statistics and session metadata from telemetry CSV exports",
)


# ============================================================================
# UPLOAD HANDLING
# ============================================================================

async def read_upload(file: UploadFile) -> str:
    """
    Read an uploaded file as text.

    Bytes are decoded as UTF-8 (a leading BOM is dropped) with undecodable
    bytes replaced, so a stray Latin-1 character never fails the upload.

    Args:
        file: The multipart upload.

    Returns:
        Decoded file content.

    Raises:
        HTTPException: If the upload exceeds MAX_UPLOAD_BYTES (status 413).
    """
    content = await file.read()
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large (> {MAX_UPLOAD_BYTES} bytes)"
        )
    return content.decode("utf-8-sig", errors="replace")


async def parse_file(file: UploadFile) -> ParseResult:
    """
    Run the ingestion pipeline on an upload.

    Raises:
        HTTPException: If the file cannot be parsed (status 422), with the
        failure payload (error code, message, raw-line preview) as detail.
    """
    text = await read_upload(file)
    try:
        return build_session_payload(text)
    except LapsheetError as exc:
        logger.warning("Rejected upload %r (%s): %s", file.filename, exc.code, exc.message)
        raise HTTPException(status_code=422, detail=exc.to_dict()) from exc


# ============================================================================
# API ROUTES
# ============================================================================

@app.get("/api/health")
def health_check():
    """Health check endpoint."""
    return {"ok": True}


@app.post("/api/parse")
async def parse_session(file: UploadFile = File(..., description="Telemetry CSV export")):
    """
    Parse an uploaded telemetry export.

    Returns the detected format, lap durations, statistics and metadata,
    plus the values that prefill the session report form.

    Args:
        file: Telemetry CSV export (tabular or SCCA).

    Returns:
        JSONResponse with the parse result and a "form" object.
    """
    result = await parse_file(file)
    payload = result.to_dict()
    payload["form"] = build_session_form(result)
    return JSONResponse(payload)


@app.post("/api/export/laps")
async def export_laps(file: UploadFile = File(..., description="Telemetry CSV export")):
    """
    Export the laps of an uploaded telemetry file as CSV.

    Returns:
        PlainTextResponse: CSV file with Content-Disposition header
        for download. Filename: laps.csv
    """
    result = await parse_file(file)
    headers = {"Content-Disposition": "attachment; filename=laps.csv"}
    return PlainTextResponse(
        export_laps_csv(result),
        media_type="text/csv",
        headers=headers
    )


# ============================================================================
# RUN INSTRUCTIONS
# ============================================================================
# Run with: uvicorn app:app --reload
