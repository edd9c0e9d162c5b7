from datetime import datetime
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query

from trainfinder.core.deps import Services, get_services

router = APIRouter(tags=["transport"])


def _upstream_failed(e: Exception) -> HTTPException:
    status = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
    if status == 404:
        return HTTPException(status_code=404, detail="Not found upstream")
    return HTTPException(status_code=502, detail=f"Upstream request failed: {e}")


@router.get("/stops/{stop_id}/departures")
def stop_departures(
    stop_id: str,
    duration: int = Query(120, ge=1, le=1440),
    results: int = Query(30, ge=1, le=500),
    when: Optional[str] = Query(None, description="ISO datetime; defaults to now"),
    services: Services = Depends(get_services),
):
    when_dt = None
    if when:
        try:
            when_dt = datetime.fromisoformat(when)
        except ValueError:
            raise HTTPException(status_code=400, detail="when must be an ISO datetime")
    try:
        departures = services.client.departures(stop_id, when=when_dt, duration=duration, results=results)
    except (httpx.HTTPError, ValueError) as e:
        raise _upstream_failed(e)
    return {"departures": departures}


@router.get("/trips/{trip_id}")
def trip(
    trip_id: str,
    stopovers: bool = Query(False),
    services: Services = Depends(get_services),
):
    try:
        data = services.client.trip(trip_id, stopovers=stopovers)
    except (httpx.HTTPError, ValueError) as e:
        raise _upstream_failed(e)
    return {"trip": data}


@router.get("/journeys")
def journeys(
    from_: Optional[str] = Query(None, alias="from"),
    to: Optional[str] = Query(None),
    services: Services = Depends(get_services),
):
    if not from_ or not to:
        raise HTTPException(status_code=400, detail="Missing from or to parameter")
    try:
        data = services.client.journeys(from_, to)
    except (httpx.HTTPError, ValueError) as e:
        raise _upstream_failed(e)
    return {"journeys": data}


@router.get("/locations")
def locations(
    query: Optional[str] = Query(None),
    services: Services = Depends(get_services),
):
    if not query:
        raise HTTPException(status_code=400, detail="Missing query parameter")
    try:
        data = services.client.locations(query)
    except (httpx.HTTPError, ValueError) as e:
        raise _upstream_failed(e)
    return {"locations": data}
