"""
Route Matcher: FastAPI Application Entry Point.

This module defines the FastAPI application exposing route-overlap
matching between van-dwelling nomads.

Endpoints:
    - GET /api/v1/users/{user_id}/route-matches: Ranked route-overlap candidates
    - GET /api/v1/users/{user_id}/sync/{other_user_id}: Live sync status
    - POST /api/v1/swipes: Record a like/pass decision
    - DELETE /api/v1/users/{user_id}/swipes: Reset a user's decisions
    - GET /api/v1/health: Service health check
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .schemas import (
    DateRange,
    RouteOverlapResponse,
    MatchCandidateResponse,
    RouteMatchesResponse,
    SyncStatusResponse,
    SwipeRequest,
    SwipeResponse,
    SwipeResetResponse,
    HealthResponse,
    ErrorResponse,
)
from .core.matcher import get_matcher
from .core.sync import compute_sync_status
from .repository import RepositoryError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup/shutdown events.

    Startup:
        - Connect the user repository

    Shutdown:
        - Close the repository connection, if it holds one
    """
    logger.info("Starting Route Matcher...")

    try:
        matcher = get_matcher()
        logger.info(f"Repository ready: {type(matcher.repository).__name__}")
    except Exception as e:
        logger.warning(f"Repository failed to initialize: {e}")

    logger.info(f"Route Matcher ready on port {settings.PORT}")

    yield

    logger.info("Shutting down Route Matcher...")

    try:
        close = getattr(get_matcher().repository, "close", None)
        if callable(close):
            close()
            logger.info("Repository connection closed")
    except Exception as e:
        logger.warning(f"Repository failed to close: {e}")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
    ## Route Matcher

    Finds nomads whose planned stops cross yours:

    - **Overlap Detection**: stops within 150 km sharing at least one day
    - **Scoring**: base reward per overlap, proximity bonus, shared interests
    - **Sync Status**: same stop, syncing, crossing soon or recently departed
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# MATCHING ENDPOINTS
# =============================================================================

@app.get(
    f"{settings.API_V1_PREFIX}/users/{{user_id}}/route-matches",
    response_model=RouteMatchesResponse,
    tags=["Matching"],
    summary="Find users whose routes overlap",
    description="""
    Rank other users by how their planned stops overlap the requester's.

    Users already swiped on are excluded. Unknown users and users without
    a route get an empty list.
    """
)
async def get_route_matches(user_id: str):
    """
    Route matches endpoint.

    Args:
        user_id: Requesting user

    Returns:
        RouteMatchesResponse with up to 20 ranked candidates
    """
    try:
        matcher = get_matcher()
        candidates = matcher.find_route_matches(user_id)

        matches = [
            MatchCandidateResponse(
                rank=i,
                user=c.user,
                overlaps=[
                    RouteOverlapResponse(
                        location_name=o.location_name,
                        date_range=DateRange(start=o.start, end=o.end),
                        distance_km=o.distance_km,
                    )
                    for o in c.overlaps
                ],
                score=round(c.score, 4),
                shared_interests=c.shared_interests,
            )
            for i, c in enumerate(candidates, start=1)
        ]

        return RouteMatchesResponse(user_id=user_id, count=len(matches), matches=matches)

    except RepositoryError:
        raise
    except Exception as e:
        logger.error(f"Route matches endpoint error: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get(
    f"{settings.API_V1_PREFIX}/users/{{user_id}}/sync/{{other_user_id}}",
    response_model=SyncStatusResponse,
    tags=["Matching"],
    summary="Live sync status between two users",
)
async def get_sync_status(user_id: str, other_user_id: str):
    """Sync status of `other_user_id`'s route as seen by `user_id`."""
    try:
        repository = get_matcher().repository
        me = repository.get_user(user_id)
        other = repository.get_user(other_user_id)
        if me is None or other is None:
            missing = user_id if me is None else other_user_id
            raise HTTPException(status_code=404, detail=f"User not found: {missing}")

        result = compute_sync_status(
            me.current_route,
            other.current_route,
            distance_threshold_km=settings.DISTANCE_THRESHOLD_KM,
            departed_window_days=settings.DEPARTED_WINDOW_DAYS,
        )

        return SyncStatusResponse(
            user_id=user_id,
            other_user_id=other_user_id,
            status=result.status.value,
            location=result.location,
            days_until=result.days_until,
            moving_to=result.moving_to,
        )

    except (HTTPException, RepositoryError):
        raise
    except Exception as e:
        logger.error(f"Sync status endpoint error: {e}")
        raise HTTPException(status_code=500, detail=str(e))


# =============================================================================
# SWIPE ENDPOINTS
# =============================================================================

@app.post(
    f"{settings.API_V1_PREFIX}/swipes",
    response_model=SwipeResponse,
    tags=["Swipes"],
    summary="Record a like or pass",
    description="Only the first decision per (swiper, swiped) pair is kept."
)
async def record_swipe(request: SwipeRequest):
    """Record a swipe decision."""
    if request.swiper_id == request.swiped_id:
        raise HTTPException(status_code=400, detail="Users cannot swipe on themselves")

    try:
        recorded = get_matcher().repository.record_swipe(
            request.swiper_id, request.swiped_id, request.action
        )
        logger.info(
            f"Swipe {request.action.value} {request.swiper_id} -> {request.swiped_id} "
            f"({'recorded' if recorded else 'duplicate'})"
        )
        return SwipeResponse(recorded=recorded)

    except RepositoryError:
        raise
    except Exception as e:
        logger.error(f"Swipe endpoint error: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.delete(
    f"{settings.API_V1_PREFIX}/users/{{user_id}}/swipes",
    response_model=SwipeResetResponse,
    tags=["Swipes"],
    summary="Reset a user's swipe history",
)
async def reset_swipes(user_id: str):
    """Delete every decision made by `user_id`."""
    try:
        deleted = get_matcher().repository.reset_swipes(user_id)
        logger.info(f"Reset {deleted} swipes for {user_id}")
        return SwipeResetResponse(user_id=user_id, deleted=deleted)

    except RepositoryError:
        raise
    except Exception as e:
        logger.error(f"Swipe reset endpoint error: {e}")
        raise HTTPException(status_code=500, detail=str(e))


# =============================================================================
# SYSTEM ENDPOINTS
# =============================================================================

@app.get(
    f"{settings.API_V1_PREFIX}/health",
    response_model=HealthResponse,
    tags=["System"],
    summary="Health check",
    description="Check the health of the user repository."
)
async def health_check():
    """Health check endpoint."""
    components = {}
    status = "healthy"

    try:
        repository = get_matcher().repository
        components["repository"] = type(repository).__name__
        components["data_version"] = repository.get_data_version()
    except Exception as e:
        components["repository"] = f"error: {str(e)}"
        status = "degraded"

    return HealthResponse(
        status=status,
        version=settings.APP_VERSION,
        components=components
    )


@app.get("/", tags=["System"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": f"{settings.API_V1_PREFIX}/health"
    }


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(RepositoryError)
async def repository_error_handler(request: Request, exc: RepositoryError):
    """Storage failures are reported as 503, never as an empty result."""
    logger.error(f"Repository unavailable on {request.url.path}: {exc}")
    error = ErrorResponse(
        error="repository_unavailable",
        message="User storage is temporarily unavailable",
        details={"exception": str(exc)} if settings.DEBUG else None,
    )
    return JSONResponse(status_code=503, content=error.model_dump())
