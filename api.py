"""
Legal-Ease AI - FastAPI Backend

Serves keyword search over the legal case corpus, plus case,
advocate and suggestion lookups.
"""

import logging
import re
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings, setup_logging
from corpus import CorpusLoadError, CorpusStore, load_corpus
from search import LegalSearchEngine

logger = logging.getLogger(__name__)

ENDPOINTS = [
    ("GET", "/api/health", "Health check"),
    ("POST", "/api/search", "Search legal cases"),
    ("GET", "/api/cases", "Get all cases"),
    ("GET", "/api/cases/{id}", "Get specific case"),
    ("GET", "/api/advocates", "Get all advocates"),
    ("GET", "/api/advocates/{id}", "Get specific advocate"),
    ("GET", "/api/suggestions", "Get search suggestions"),
]

RECENT_CASES_LIMIT = 3

# Leading integer, as JavaScript parseInt reads it
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


# ─── Request Models ──────────────────────────────────────────────────────────

class SearchRequest(BaseModel):
    query: Optional[str] = Field(default=None, examples=["landlord security deposit"])


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_case_id(raw: str) -> Optional[int]:
    match = _LEADING_INT.match(raw)
    return int(match.group(1)) if match else None


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message})


def _server_error(message: str) -> JSONResponse:
    return _error(500, "Internal server error", message)


# ─── Dependencies ────────────────────────────────────────────────────────────

def get_store(request: Request) -> CorpusStore:
    """The corpus loaded at startup."""
    return request.app.state.store


def get_engine(request: Request) -> LegalSearchEngine:
    return request.app.state.engine


# ─── Lifespan ────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: the corpus must be fully loaded before any request is served
    data_path = app.state.data_path
    logger.info("Loading legal cases data from %s", data_path)
    try:
        store = load_corpus(data_path)
    except CorpusLoadError:
        logger.critical("Error loading legal cases data", exc_info=True)
        raise

    app.state.store = store
    app.state.engine = LegalSearchEngine(store)

    logger.info("Legal-Ease AI backend started")
    logger.info("Available endpoints:")
    for method, path, description in ENDPOINTS:
        logger.info("  %-4s %s - %s", method, path, description)
    logger.warning(
        "DISCLAIMER: This is a simulated educational tool. "
        "All legal content is fictional and for demonstration only."
    )
    yield
    # Shutdown
    logger.info("Server shutting down.")


# ─── Application ─────────────────────────────────────────────────────────────

def create_app(data_path: Optional[Union[str, Path]] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        data_path: Corpus file; defaults to the configured data_path.
    """
    settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Keyword search over simulated legal cases and advocates",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.data_path = Path(data_path) if data_path is not None else settings.data_path

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Wrong method on a known path is reported like an unknown path
        if exc.status_code in (404, 405):
            return _error(
                404,
                "API endpoint not found",
                f"The endpoint {request.url.path} does not exist",
            )
        return _error(exc.status_code, str(exc.detail), f"{request.method} {request.url.path} failed")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
        return _error(400, "Invalid request", "The request body could not be parsed")

    @app.get("/api/health")
    def health_check(store: CorpusStore = Depends(get_store)):
        return {
            "status": "OK",
            "message": "Legal-Ease AI Backend is running",
            "timestamp": _timestamp(),
            "casesLoaded": len(store.cases),
            "advocatesLoaded": len(store.advocates),
        }

    @app.post("/api/search")
    def search(
        body: Optional[SearchRequest] = None,
        store: CorpusStore = Depends(get_store),
        engine: LegalSearchEngine = Depends(get_engine),
    ):
        if body is None or not body.query:
            return _error(400, "Query parameter is required", "Please provide a search query")

        try:
            logger.info("Search query received: %r", body.query)
            matches = engine.search(body.query)
            results = [
                m.to_dict(advocate=store.find_advocate_by_id(m.case.advocate_id))
                for m in matches
            ]
            logger.info("Found %d matching cases", len(results))
            return {
                "query": body.query,
                "results": results,
                "totalMatches": len(results),
                "timestamp": _timestamp(),
            }
        except Exception:
            logger.error("Error in search endpoint", exc_info=True)
            return _server_error("An error occurred while processing your search")

    @app.get("/api/cases")
    def list_cases(store: CorpusStore = Depends(get_store)):
        try:
            return {
                "cases": [c.to_dict() for c in store.cases],
                "total": len(store.cases),
                "timestamp": _timestamp(),
            }
        except Exception:
            logger.error("Error in cases endpoint", exc_info=True)
            return _server_error("An error occurred while fetching cases")

    @app.get("/api/cases/{case_id}")
    def get_case(case_id: str, store: CorpusStore = Depends(get_store)):
        try:
            parsed_id = _parse_case_id(case_id)
            legal_case = store.find_case_by_id(parsed_id) if parsed_id is not None else None

            if legal_case is None:
                return _error(404, "Case not found", f"No case found with ID {case_id}")

            advocate = store.find_advocate_by_id(legal_case.advocate_id)
            case_data = legal_case.to_dict()
            case_data["advocate"] = advocate.to_dict() if advocate else None
            return {"case": case_data, "timestamp": _timestamp()}
        except Exception:
            logger.error("Error in case detail endpoint", exc_info=True)
            return _server_error("An error occurred while fetching case details")

    @app.get("/api/advocates")
    def list_advocates(store: CorpusStore = Depends(get_store)):
        try:
            return {
                "advocates": [a.to_dict() for a in store.advocates],
                "total": len(store.advocates),
                "timestamp": _timestamp(),
            }
        except Exception:
            logger.error("Error in advocates endpoint", exc_info=True)
            return _server_error("An error occurred while fetching advocates")

    @app.get("/api/advocates/{advocate_id}")
    def get_advocate(advocate_id: str, store: CorpusStore = Depends(get_store)):
        try:
            advocate = store.find_advocate_by_id(advocate_id)
            if advocate is None:
                return _error(
                    404, "Advocate not found", f"No advocate found with ID {advocate_id}"
                )

            handled = store.find_cases_by_advocate_id(advocate_id)
            profile = advocate.to_dict()
            profile["casesHandled"] = len(handled)
            profile["recentCases"] = [c.to_dict() for c in handled[:RECENT_CASES_LIMIT]]
            return {"advocate": profile, "timestamp": _timestamp()}
        except Exception:
            logger.error("Error in advocate detail endpoint", exc_info=True)
            return _server_error("An error occurred while fetching advocate details")

    @app.get("/api/suggestions")
    def suggestions(store: CorpusStore = Depends(get_store)):
        try:
            keywords = store.suggestions()
            return {
                "suggestions": keywords,
                "total": len(keywords),
                "timestamp": _timestamp(),
            }
        except Exception:
            logger.error("Error in suggestions endpoint", exc_info=True)
            return _server_error("An error occurred while fetching suggestions")

    return app


app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
