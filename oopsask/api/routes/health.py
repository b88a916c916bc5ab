from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from oopsask.api.deps import current_translation_cache_service
from oopsask.services.translation_cache import TranslationCacheService

router = APIRouter()


@router.get("/healthz")
async def healthcheck(
    service: TranslationCacheService | None = Depends(current_translation_cache_service),
) -> dict[str, object]:
    """Liveness check; also reports which languages are being generated right now."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "filling": service.filling_languages() if service is not None else [],
    }
