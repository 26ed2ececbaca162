from fastapi import FastAPI, HTTPException, Depends, Query
import os
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from wanderlust.models.trip_models import Trip
from wanderlust.models.view_models import SearchRequest, SessionSnapshot
from wanderlust.services.destination_service import VertexDestinationService
from wanderlust.services.session_controller import SessionController
from wanderlust.services.trip_store import TripStore
from wanderlust.utils.config import Settings, get_settings, validate_settings
from wanderlust.utils.errors import InvalidTransitionError, TripNotFoundError
from wanderlust.utils.formatters import TripFormatter
from wanderlust.utils.trip_storage import build_trip_storage

# Configure logging
logging.basicConfig(
    level=get_settings().LOG_LEVEL,
    format=get_settings().LOG_FORMAT
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Wanderlust Trip Planner API",
    description="Search destinations with Google Vertex AI Gemini Flash and plan trips around them",
    version=get_settings().API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One planning session per process (initialized on startup)
session_controller: Optional[SessionController] = None


def build_session(settings: Settings) -> SessionController:
    """Wire storage, trip store and the destination lookup into a session."""
    storage = build_trip_storage(settings)
    store = TripStore.load(storage)
    lookup = VertexDestinationService(
        project_id=settings.GOOGLE_CLOUD_PROJECT,
        location=settings.GOOGLE_CLOUD_LOCATION,
        model_name=settings.GEMINI_MODEL,
        temperature=settings.LOOKUP_TEMPERATURE,
        max_attempts=settings.LOOKUP_MAX_ATTEMPTS,
        cache_ttl_seconds=settings.CACHE_TTL_SECONDS,
    )
    return SessionController(store, lookup)


@app.on_event("startup")
async def startup_event():
    """Initialize the session on startup"""
    global session_controller

    settings = get_settings()
    if not validate_settings():
        logger.error("Invalid settings configuration")
        raise Exception("Invalid settings configuration")

    # Ensure GOOGLE_APPLICATION_CREDENTIALS is exported for ADC (Vertex AI)
    if settings.GOOGLE_APPLICATION_CREDENTIALS:
        os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = settings.GOOGLE_APPLICATION_CREDENTIALS
        logger.info("ADC path set from settings", extra={"gac_path": settings.GOOGLE_APPLICATION_CREDENTIALS})

    logger.info("Initializing session...")
    session_controller = build_session(settings)
    logger.info(f"Session ready with {len(session_controller.store)} saved trips")


def get_session() -> SessionController:
    if session_controller is None:
        raise HTTPException(status_code=503, detail="Session not initialized")
    return session_controller


def _get_trip_or_404(session: SessionController, trip_id: str) -> Trip:
    trip = session.store.get(trip_id)
    if trip is None:
        raise HTTPException(status_code=404, detail="Trip not found")
    return trip


# =============================================================================
# SESSION & SEARCH
# =============================================================================

@app.get("/api/v1/session", response_model=SessionSnapshot)
async def get_session_state(session: SessionController = Depends(get_session)):
    """Current screen, loading flag and notice"""
    return session.snapshot()


@app.post("/api/v1/search", response_model=SessionSnapshot)
async def search_destination(request: SearchRequest, session: SessionController = Depends(get_session)):
    """Look up a destination and open it in the explorer"""
    if request.query.strip() and not session.navigation.can_search:
        raise HTTPException(
            status_code=409,
            detail=f"Search is not available on the {session.navigation.view_name.value} screen"
        )

    found = await session.search(request.query)
    if not found and session.notice is not None:
        raise HTTPException(status_code=502, detail=session.notice.message)
    return session.snapshot()


@app.post("/api/v1/plan", response_model=Trip)
async def start_planning(session: SessionController = Depends(get_session)):
    """Create a trip from the destination shown in the explorer"""
    if session.selected_destination is None:
        raise HTTPException(status_code=409, detail="No destination selected")
    return session.start_planning()


@app.post("/api/v1/navigate/{target}", response_model=SessionSnapshot)
async def navigate(target: Literal["home", "my-trips", "back"], session: SessionController = Depends(get_session)):
    if target == "home":
        session.go_home()
    elif target == "my-trips":
        session.go_my_trips()
    else:
        session.back()
    return session.snapshot()


@app.delete("/api/v1/notice", response_model=SessionSnapshot)
async def dismiss_notice(session: SessionController = Depends(get_session)):
    session.dismiss_notice()
    return session.snapshot()


# =============================================================================
# TRIPS
# =============================================================================

@app.get("/api/v1/trips", response_model=List[Trip])
async def list_trips(session: SessionController = Depends(get_session)):
    """All saved trips, oldest first"""
    return session.store.list()


@app.get("/api/v1/trips/summary")
async def list_trip_summaries(session: SessionController = Depends(get_session)) -> List[Dict[str, Any]]:
    """Display-ready cards for the My Trips screen"""
    return [TripFormatter.format_trip_summary(trip) for trip in session.store.list()]


@app.get("/api/v1/trips/{trip_id}", response_model=Trip)
async def get_trip(trip_id: str, session: SessionController = Depends(get_session)):
    return _get_trip_or_404(session, trip_id)


@app.put("/api/v1/trips/{trip_id}", response_model=Trip)
async def update_trip(trip_id: str, trip: Trip, session: SessionController = Depends(get_session)):
    """Replace a trip with an edited copy"""
    if trip.id != trip_id:
        raise HTTPException(status_code=400, detail="Trip id in body does not match the URL")
    if not session.update_trip(trip):
        raise HTTPException(status_code=404, detail="Trip not found")
    logger.info(f"Trip {trip_id} updated via API")
    return _get_trip_or_404(session, trip_id)


@app.delete("/api/v1/trips/{trip_id}")
async def delete_trip(trip_id: str, confirm: bool = Query(False), session: SessionController = Depends(get_session)):
    """Delete a trip. Irreversible, so the caller must pass confirm=true."""
    if not confirm:
        raise HTTPException(status_code=400, detail="Deleting a trip requires confirm=true")
    if not session.delete_trip(trip_id):
        raise HTTPException(status_code=404, detail="Trip not found")
    return {"message": f"Trip {trip_id} deleted successfully"}


@app.post("/api/v1/trips/{trip_id}/select", response_model=SessionSnapshot)
async def select_trip(trip_id: str, session: SessionController = Depends(get_session)):
    """Open a saved trip in the planner"""
    session.select_trip(trip_id)
    return session.snapshot()


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy" if session_controller is not None else "degraded",
        "timestamp": datetime.utcnow().isoformat(),
        "version": get_settings().API_VERSION
    }


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Wanderlust Trip Planner API",
        "version": get_settings().API_VERSION,
        "docs": "/docs",
        "health": "/health"
    }


# ============================================================================
# Error Handlers
# ============================================================================
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Handle HTTP exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "timestamp": datetime.utcnow().isoformat(),
            "path": str(request.url)
        }
    )

@app.exception_handler(TripNotFoundError)
async def trip_not_found_handler(request, exc):
    return JSONResponse(
        status_code=404,
        content={
            "error": str(exc),
            "timestamp": datetime.utcnow().isoformat(),
            "path": str(request.url)
        }
    )

@app.exception_handler(InvalidTransitionError)
async def invalid_transition_handler(request, exc):
    logger.warning(f"Rejected navigation: {exc}")
    return JSONResponse(
        status_code=409,
        content={
            "error": str(exc),
            "timestamp": datetime.utcnow().isoformat(),
            "path": str(request.url)
        }
    )

@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """Handle general exceptions"""
    logger.error(f"Unhandled exception: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "timestamp": datetime.utcnow().isoformat(),
            "path": str(request.url)
        }
    )
