"""
Per-IP fixed-window rate limiting for the /api routes.
In-memory counters, periodically mirrored to Redis when REDIS_URL is set.
"""

import logging
import time
from datetime import datetime, timezone
from threading import Lock
from typing import Optional

import redis
from fastapi import Request

from .config import RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_MS, REDIS_URL

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Zu viele Anfragen. Bitte versuchen Sie es später erneut."

# Format: {key: {'count': int, 'reset_time': int, 'last_redis_sync': int}}
memory_cache: dict[str, dict] = {}
cache_lock = Lock()

redis_client: Optional[redis.Redis] = None
_redis_unavailable = False

MEMORY_CACHE_SYNC_INTERVAL = 10
MEMORY_CACHE_CLEANUP_INTERVAL = 60
last_cleanup_time = 0


class RateLimitExceeded(Exception):
    def __init__(self, retry_after: int, reset_time: int):
        super().__init__(RATE_LIMIT_MESSAGE)
        self.retry_after = retry_after
        self.reset_time = reset_time

    def to_body(self) -> dict:
        reset = datetime.fromtimestamp(self.reset_time, tz=timezone.utc)
        return {"error": RATE_LIMIT_MESSAGE, "resetTime": reset.isoformat()}


def get_redis_client() -> Optional[redis.Redis]:
    """Redis client for counter sync, or None when not configured or unreachable"""
    global redis_client, _redis_unavailable

    if not REDIS_URL or _redis_unavailable:
        return None

    if redis_client is None:
        try:
            client = redis.from_url(
                REDIS_URL,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            client.ping()
            redis_client = client
            logger.info("Redis connected for rate limiting")
        except redis.RedisError as e:
            _redis_unavailable = True
            logger.warning(f"⚠️ Redis unavailable, rate limiting uses memory only: {e}")
            return None

    return redis_client


def reset_rate_limits() -> None:
    with cache_lock:
        memory_cache.clear()


def cleanup_expired_cache():
    """Remove expired entries from memory cache"""
    global last_cleanup_time
    current_time = int(time.time())

    if current_time - last_cleanup_time < MEMORY_CACHE_CLEANUP_INTERVAL:
        return

    with cache_lock:
        expired_keys = [k for k, v in memory_cache.items() if current_time >= v["reset_time"]]
        for k in expired_keys:
            del memory_cache[k]

        if expired_keys:
            logger.debug(f"🧹 Cleaned up {len(expired_keys)} expired rate limit entries")

    last_cleanup_time = current_time


def _load_entry(key: str, window_seconds: int, current_time: int, client: Optional[redis.Redis]) -> dict:
    entry = {"count": 0, "reset_time": current_time + window_seconds, "last_redis_sync": current_time}
    if client is None:
        return entry
    try:
        redis_count = client.get(key)
        redis_ttl = client.ttl(key)
        if redis_count and redis_ttl > 0:
            entry["count"] = int(redis_count)
            entry["reset_time"] = current_time + redis_ttl
    except redis.RedisError as e:
        logger.warning(f"⚠️ Failed to load {key} from Redis, using memory only: {e}")
    return entry


def check_rate_limit(
    key: str, limit: int, window_seconds: int, client: Optional[redis.Redis] = None
) -> tuple[bool, int, int]:
    """
    Count one request against a fixed window.

    Returns:
        Tuple of (is_allowed, current_count, reset_time)
    """
    current_time = int(time.time())
    cleanup_expired_cache()

    with cache_lock:
        if key not in memory_cache:
            memory_cache[key] = _load_entry(key, window_seconds, current_time, client)

        entry = memory_cache[key]

        if current_time >= entry["reset_time"]:
            entry["count"] = 0
            entry["reset_time"] = current_time + window_seconds
            entry["last_redis_sync"] = 0

        is_allowed = entry["count"] < limit
        if is_allowed:
            entry["count"] += 1

        if client is not None and current_time - entry["last_redis_sync"] >= MEMORY_CACHE_SYNC_INTERVAL:
            try:
                client.set(key, entry["count"], ex=max(1, entry["reset_time"] - current_time))
                entry["last_redis_sync"] = current_time
            except redis.RedisError as e:
                logger.warning(f"⚠️ Failed to sync {key} to Redis: {e}")

        return is_allowed, entry["count"], entry["reset_time"]


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def create_rate_limiter(limit: int, window_seconds: int, key_prefix: str = "rate_limit"):
    """
    Create a per-IP rate limiter dependency.

    Example usage:
        router = APIRouter(dependencies=[Depends(create_rate_limiter(10, 900, "api"))])
    """

    async def rate_limiter(request: Request):
        key = f"{key_prefix}:{client_ip(request)}"
        is_allowed, current_count, reset_time = check_rate_limit(
            key, limit, window_seconds, get_redis_client()
        )
        if not is_allowed:
            retry_after = max(0, reset_time - int(time.time()))
            logger.warning(f"🚫 Rate limit exceeded for {key} - {current_count}/{limit} requests used")
            raise RateLimitExceeded(retry_after=retry_after, reset_time=reset_time)

        request.state.rate_limit_remaining = limit - current_count

    return rate_limiter


api_rate_limiter = create_rate_limiter(
    limit=RATE_LIMIT_MAX_REQUESTS,
    window_seconds=max(1, RATE_LIMIT_WINDOW_MS // 1000),
    key_prefix="api",
)
