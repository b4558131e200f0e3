"""Health check route"""

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/healthz")
def health_check(request: Request):
    """Liveness probe; does not touch the database"""
    return {"status": "ok", "service": request.app.title}
