import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


@dataclass(frozen=True)
class RetryPolicy:
    attempts: int
    base_delay: float
    growth_factor: float


@dataclass(frozen=True)
class Settings:
    base_url: str
    user_agent: str

    connect_timeout: float
    read_timeout: float
    write_timeout: float
    pool_timeout: float

    window_count: int
    window_minutes: int
    results_per_query: int
    delay: float
    rebuild_interval: float
    progress_every: int
    scheduler_enabled: bool

    index_retry: RetryPolicy
    search_retry: RetryPolicy
    trip_retry: RetryPolicy
    journeys_retry: RetryPolicy

    cache_max_entries: int
    departures_ttl: float
    trip_ttl: float
    journeys_ttl: float
    locations_ttl: float
    search_cache_ttl: float
    search_cache_max_entries: int

    log_level: str


def _retry_policy(prefix: str, attempts: str, base_delay: str, growth_factor: str) -> RetryPolicy:
    policy = RetryPolicy(
        attempts=int(os.getenv(f"{prefix}_RETRIES", attempts)),
        base_delay=float(os.getenv(f"{prefix}_BACKOFF_BASE_SECONDS", base_delay)),
        growth_factor=float(os.getenv(f"{prefix}_BACKOFF_FACTOR", growth_factor)),
    )
    if policy.attempts < 1:
        raise ValueError(f"{prefix}_RETRIES must be >= 1")
    return policy


def load_config() -> Settings:
    load_dotenv()

    window_count = int(os.getenv("INDEX_WINDOW_COUNT", "4"))
    window_minutes = int(os.getenv("INDEX_WINDOW_MINUTES", "360"))
    if window_count < 1 or window_minutes < 1:
        raise ValueError("INDEX_WINDOW_COUNT and INDEX_WINDOW_MINUTES must be positive")

    return Settings(
        base_url=os.getenv("TRANSPORT_BASE_URL", "https://v6.db.transport.rest"),
        user_agent=os.getenv("TRANSPORT_USER_AGENT", "trainfinder/0.1"),
        connect_timeout=float(os.getenv("TRANSPORT_CONNECT_TIMEOUT_SECONDS", "10")),
        read_timeout=float(os.getenv("TRANSPORT_READ_TIMEOUT_SECONDS", "30")),
        write_timeout=float(os.getenv("TRANSPORT_WRITE_TIMEOUT_SECONDS", "30")),
        pool_timeout=float(os.getenv("TRANSPORT_POOL_TIMEOUT_SECONDS", "30")),
        window_count=window_count,
        window_minutes=window_minutes,
        results_per_query=int(os.getenv("INDEX_RESULTS_PER_QUERY", "500")),
        delay=float(os.getenv("INDEX_REQUEST_DELAY_SECONDS", "0.15")),
        rebuild_interval=float(os.getenv("INDEX_REBUILD_INTERVAL_SECONDS", "3600")),
        progress_every=int(os.getenv("INDEX_PROGRESS_EVERY", "10")),
        scheduler_enabled=os.getenv("INDEX_SCHEDULER_ENABLED", "1") == "1",
        index_retry=_retry_policy("INDEX", "3", "1.0", "2.0"),
        search_retry=_retry_policy("SEARCH", "3", "1.0", "2.0"),
        trip_retry=_retry_policy("TRIP", "2", "0.5", "1.5"),
        journeys_retry=_retry_policy("JOURNEYS", "2", "1.0", "1.5"),
        cache_max_entries=int(os.getenv("CACHE_MAX_ENTRIES", "200")),
        departures_ttl=float(os.getenv("CACHE_DEPARTURES_TTL_SECONDS", "60")),
        trip_ttl=float(os.getenv("CACHE_TRIP_TTL_SECONDS", "60")),
        journeys_ttl=float(os.getenv("CACHE_JOURNEYS_TTL_SECONDS", "300")),
        locations_ttl=float(os.getenv("CACHE_LOCATIONS_TTL_SECONDS", "3600")),
        search_cache_ttl=float(os.getenv("SEARCH_CACHE_TTL_SECONDS", "300")),
        search_cache_max_entries=int(os.getenv("SEARCH_CACHE_MAX_ENTRIES", "20")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_config()
