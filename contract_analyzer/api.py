"""
HTTP API for the Contract Analyzer.

Endpoints:
    POST /api/analyze   Analyze a document: {"text": ..., "filename": ...}
    GET  /api/test      Liveness check for the API routes
    POST /api/test      Echo a JSON body back
    GET  /health        Health check

Errors are returned as {"message": ...} with the status code attached to
the failure (400 for invalid input, 429 for quota, 500 for service errors...).

Run with:
    uvicorn contract_analyzer.api:app --port 8000
    python -m contract_analyzer.api          # API_HOST / API_PORT from settings
"""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import settings
from contract_analyzer.workflow import run_analysis

logger = logging.getLogger(__name__)

app = FastAPI(title="Contract Analyzer API")

origins = [
    "http://localhost:3000",   # Next.js frontend
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

router = APIRouter()


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 instead of FastAPI's 422."""
    logger.warning(f"Invalid request body for {request.url.path}")
    return JSONResponse(
        {"status": "error", "message": "Invalid JSON in request body", "timestamp": _timestamp()},
        status_code=400,
    )


@router.post("/analyze")
def analyze_document(payload: dict[str, Any] = Body(...)) -> JSONResponse:
    """
    Analyze a contract and return the structured analysis.

    The body carries plain text, or a base64 data URI for PDF/image/DOCX
    files, plus the original filename.
    """
    logger.info("Received analysis request")

    try:
        state = run_analysis(payload.get("text"), payload.get("filename"))
    except Exception as e:
        logger.exception("Unexpected error in analysis route")
        return JSONResponse({"message": f"Internal server error: {e}"}, status_code=500)

    if state.get("error"):
        return JSONResponse(
            {"message": state["error"]},
            status_code=state.get("status_code") or 500,
        )

    logger.info("Analysis complete, returning result")
    return JSONResponse(state["result"].to_json_dict())


@router.get("/test")
def test_get() -> dict[str, str]:
    return {"status": "ok", "message": "API is working", "timestamp": _timestamp()}


@router.post("/test")
def test_post(payload: Any = Body(...)) -> dict[str, Any]:
    return {
        "status": "ok",
        "message": "POST request received",
        "receivedData": payload,
        "timestamp": _timestamp(),
    }


app.include_router(router, prefix="/api", tags=["analysis"])


@app.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=settings.LOG_LEVEL)
    logger.info(f"🚀 Starting Contract Analyzer API on {settings.API_HOST}:{settings.API_PORT}")
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
