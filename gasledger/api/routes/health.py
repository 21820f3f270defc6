"""Health check route."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
def health_check():
    """Report service liveness."""
    return {"status": "healthy", "service": "gasledger"}
