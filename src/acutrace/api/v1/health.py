from fastapi import APIRouter

from acutrace import __version__

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """Basic health check."""
    return {"status": "ok", "version": __version__}
