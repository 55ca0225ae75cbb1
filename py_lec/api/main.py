"""FastAPI main application."""

from typing import List, Optional, Tuple

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .. import __version__
from ..config import settings
from ..core.errors import (
    DegenerateInputError, EmptyCandidateSetError, InvalidBoundaryError, InvalidSiteError,
    LargestEmptyCircleError,
)
from ..core.solver import largest_empty_circle
from ..logging_setup import configure_logging

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

app = FastAPI(
    title="Largest Empty Circle API",
    description="Largest circle centred in a convex region that contains no site",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class CircleRequest(BaseModel):
    """Sites and an optional convex boundary."""

    sites: List[Tuple[float, float]] = Field(..., description="Site coordinates as [x, y] pairs")
    boundary: Optional[List[Tuple[float, float]]] = Field(
        None, description="Convex polygon to search in instead of the sites' convex hull"
    )
    include_diagram: bool = Field(False, description="Return Voronoi edges, region and candidates")


class CircleResponse(BaseModel):
    """Largest empty circle and optional diagram layers."""

    center: Tuple[float, float]
    radius: float
    nearest_site: int
    site_count: int
    candidate_count: int
    voronoi_edges: Optional[List[Tuple[Tuple[float, float], Tuple[float, float]]]] = None
    hull: Optional[List[Tuple[float, float]]] = None
    candidates: Optional[List[Tuple[float, float]]] = None


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Largest Empty Circle API",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "max_sites": settings.max_sites}


@app.post("/circle", response_model=CircleResponse)
def compute_circle(request: CircleRequest):
    """
    Compute the largest empty circle of the posted sites.

    Degenerate or invalid input is answered with 422, oversized input
    with 413.
    """
    if len(request.sites) > settings.max_sites:
        logger.warning("Site limit exceeded", sites=len(request.sites), limit=settings.max_sites)
        raise HTTPException(
            status_code=413,
            detail=f"at most {settings.max_sites} sites are accepted, got {len(request.sites)}",
        )

    logger.info("Circle requested", sites=len(request.sites),
                boundary=request.boundary is not None)

    try:
        result = largest_empty_circle(
            request.sites,
            boundary=request.boundary,
            margin_factor=settings.margin_factor,
            workers=settings.workers,
        )
    except (DegenerateInputError, InvalidSiteError, InvalidBoundaryError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except EmptyCandidateSetError as e:
        logger.error("Candidate generation failed", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))
    except LargestEmptyCircleError as e:
        logger.error("Computation failed", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    response = CircleResponse(
        center=result.circle.center,
        radius=result.circle.radius,
        nearest_site=result.nearest_site,
        site_count=len(request.sites),
        candidate_count=len(result.candidates),
    )
    if request.include_diagram:
        response.voronoi_edges = [tuple(segment) for segment in result.voronoi_edges]
        response.hull = list(result.region)
        response.candidates = list(result.candidates)
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
