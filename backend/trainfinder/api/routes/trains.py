from __future__ import annotations

import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query

from trainfinder.api.schemas.trains import (
    AutocompleteCandidate,
    AutocompleteResponse,
    IndexStatusResponse,
    RebuildResponse,
    TrainSearchResponse,
    TrainSummary,
)
from trainfinder.core.deps import Services, get_services
from trainfinder.index.builder import RebuildInProgressError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trains", tags=["trains"])


@router.get("/search", response_model=TrainSearchResponse)
def search_train(
    q: Optional[str] = Query(None, description="Train designator, e.g. 'ICE 513' or '513'"),
    services: Services = Depends(get_services),
):
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Missing q (query) parameter")

    result = services.lookup.search(q)
    if not result.found:
        return TrainSearchResponse(
            found=False,
            query=q,
            index_status=result.index_status.value,
            index_size=result.index_size,
        )

    entry = result.entry
    train = TrainSummary(
        line_name=entry.line_name,
        train_number=entry.train_number,
        train_type=entry.train_type,
        direction=entry.direction,
        found_at_station=entry.station_name,
        trip_id=entry.trip_id,
    )

    # The hit stands even if the itinerary cannot be fetched.
    try:
        trip = services.client.trip(entry.trip_id, stopovers=True)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Trip fetch for %s failed: %r", entry.trip_id, e)
        return TrainSearchResponse(found=True, query=q, train=train, trip_error=str(e))

    return TrainSearchResponse(found=True, query=q, train=train, trip=trip)


@router.get("/autocomplete", response_model=AutocompleteResponse)
def autocomplete(
    q: Optional[str] = Query(None, description="Partial train number or label"),
    services: Services = Depends(get_services),
):
    if not q:
        return AutocompleteResponse(query="", count=0, results=[])

    candidates = services.lookup.autocomplete(q)
    results = [
        AutocompleteCandidate(
            train_number=c.train_number,
            line_name=c.line_name,
            train_type=c.train_type,
            direction=c.direction,
            trip_id=c.trip_id,
        )
        for c in candidates
    ]
    return AutocompleteResponse(query=q, count=len(results), results=results)


@router.post("/rebuild-index", response_model=RebuildResponse)
def rebuild_index(services: Services = Depends(get_services)):
    try:
        result = services.scheduler.trigger()
    except RebuildInProgressError:
        raise HTTPException(status_code=409, detail="Index is already being built")
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Rebuild failed: {e}")

    return RebuildResponse(success=True, **result.as_dict())


@router.get("/index-status", response_model=IndexStatusResponse)
def index_status(services: Services = Depends(get_services)):
    meta = services.store.meta()
    return IndexStatusResponse(
        status=meta.status.value,
        entries=meta.entry_count,
        unique_trains=meta.unique_trains,
        last_updated=meta.last_updated,
        stations=len(services.builder.stations),
    )
