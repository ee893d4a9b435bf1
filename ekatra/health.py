from fastapi import APIRouter

from ekatra import __version__
from ekatra.config import config

router = APIRouter()


@router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": __version__,
        "services": {
            "mime_probe": config.MIME_PROBE_ENABLED,
            "sentry": config.has_sentry
        }
    }
