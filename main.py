import logging

from fastapi import FastAPI, HTTPException, Depends, Request, BackgroundTasks
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from config import settings
import schemas
from locations import get_locations
from service import CollegeSearchService
from session import SearchSession

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(title="College Finder Backend")

# One search session per process
_session = SearchSession(CollegeSearchService())

def get_session() -> SearchSession:
    """Dependency to get the search session."""
    return _session

@app.on_event("startup")
def startup_event():
    settings.validate()

# Global Custom Error Handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Convert 422 to 400 for frontend compatibility."""
    return JSONResponse(
        status_code=400,
        content={"error": "VALIDATION_ERROR", "message": f"Invalid data format: {str(exc)}"},
    )

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions."""
    logger.exception("[ERROR] Unhandled error: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_SERVER_ERROR", "message": "An unexpected error occurred. Please try again."},
    )

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

def _require_location(request: schemas.SearchRequest) -> str:
    if not request.location.strip():
        raise HTTPException(status_code=400, detail="Location must not be empty.")
    return request.location

def mask_api_key(api_key: str) -> str:
    if not api_key:
        return "Not set"
    return f"{api_key[:8]}...{api_key[-4:]}"

# ============================================
# ENDPOINTS
# ============================================

@app.get("/")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "college-finder-backend"}

@app.get("/locations", response_model=schemas.LocationsResponse)
async def locations():
    """States and cities offered by the location picker."""
    return schemas.LocationsResponse(**get_locations())

@app.get("/debug", response_model=schemas.DebugResponse)
async def debug(session: SearchSession = Depends(get_session)):
    """API key status and troubleshooting hints."""
    api_key = session.service.api_key
    return schemas.DebugResponse(
        api_key_status="Configured" if api_key else "Missing",
        api_key=mask_api_key(api_key),
        environment=settings.ENVIRONMENT,
        troubleshooting=[
            "Ensure your environment contains GEMINI_API_KEY",
            "Check the server log for detailed error messages",
            "Verify your Gemini API key is valid and has quota remaining",
            "Try searching for major cities like Mumbai, Delhi, Bangalore",
        ],
    )

@app.get("/search", response_model=schemas.SearchStateResponse)
async def search_state(session: SearchSession = Depends(get_session)):
    """Current results, loading flag and error."""
    return session.snapshot()

@app.post("/search", response_model=schemas.SearchStateResponse)
async def search(
    request: schemas.SearchRequest,
    session: SearchSession = Depends(get_session)
):
    """
    Foreground search.
    Search failures are reported in the "error" field, not as HTTP errors.
    """
    location = _require_location(request)
    logger.info("[ENDPOINT] /search called for %s", location)

    await session.search(location)
    return session.snapshot()

@app.post("/search/more", response_model=schemas.SearchStateResponse)
async def load_more(session: SearchSession = Depends(get_session)):
    """Show the next page of already-loaded results."""
    session.load_more()
    return session.snapshot()

@app.post("/search/prefetch", response_model=schemas.PrefetchResponse, status_code=202)
async def prefetch(
    request: schemas.SearchRequest,
    background_tasks: BackgroundTasks,
    session: SearchSession = Depends(get_session)
):
    """Debounced background pre-fetch for the location the user just picked."""
    location = _require_location(request)
    background_tasks.add_task(session.select_location, location)
    return schemas.PrefetchResponse(location=location)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
