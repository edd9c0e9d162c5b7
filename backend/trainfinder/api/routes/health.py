from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from trainfinder.api.schemas.trains import HealthResponse, IndexInfo
from trainfinder.core.deps import Services, get_services

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health(services: Services = Depends(get_services)):
    meta = services.store.meta()
    return HealthResponse(
        timestamp=datetime.now(timezone.utc),
        train_index=IndexInfo(
            status=meta.status.value,
            entries=meta.entry_count,
            last_updated=meta.last_updated,
        ),
    )
