from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class IndexInfo(BaseModel):
    status: Literal["not_initialized", "building", "ready"]
    entries: int
    last_updated: Optional[datetime] = None


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    timestamp: datetime
    train_index: IndexInfo


class IndexStatusResponse(IndexInfo):
    unique_trains: int
    stations: int = Field(..., description="Number of stations polled per rebuild")


class TrainSummary(BaseModel):
    line_name: str
    train_number: str
    train_type: Optional[str] = None
    direction: Optional[str] = None
    found_at_station: str
    trip_id: str


class TrainSearchResponse(BaseModel):
    found: bool
    query: str

    # found
    train: Optional[TrainSummary] = None
    trip: Optional[dict[str, Any]] = Field(None, description="Full upstream itinerary, best effort")
    trip_error: Optional[str] = None

    # not found
    index_status: Optional[Literal["not_initialized", "building", "ready"]] = None
    index_size: Optional[int] = None


class AutocompleteCandidate(BaseModel):
    train_number: str
    line_name: str
    train_type: Optional[str] = None
    direction: Optional[str] = None
    trip_id: str


class AutocompleteResponse(BaseModel):
    query: str
    count: int
    results: list[AutocompleteCandidate]


class RebuildResponse(BaseModel):
    success: bool
    entries: int
    unique_trains: int
    departures: int
    arrivals: int
    stations: int
    errors: int
    duration_seconds: float
    last_updated: datetime
