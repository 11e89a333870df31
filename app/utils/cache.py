"""
Redis cache utility for quiz start views
"""
import redis
import json
import logging
from typing import Optional, Any
from app.config import settings

logger = logging.getLogger(__name__)


class CacheService:
    """
    Redis-based caching service

    The client is created by connect() at application startup and released
    by close() at shutdown. Until then, or when Redis is unreachable, every
    operation is a no-op and reads are misses.
    """

    def __init__(self):
        self.redis_client = None

    def connect(self, url: Optional[str] = None) -> None:
        """Open the Redis connection; caching stays disabled on failure"""
        url = settings.REDIS_URL if url is None else url
        if not url:
            logger.info("REDIS_URL not set. Caching disabled.")
            self.redis_client = None
            return

        try:
            self.redis_client = redis.from_url(
                url,
                decode_responses=True,
                socket_connect_timeout=5
            )
            # Test connection
            self.redis_client.ping()
            logger.info("Redis connection established")
        except redis.RedisError as e:
            logger.warning(f"Redis connection failed: {str(e)}. Caching disabled.")
            self.redis_client = None

    def close(self) -> None:
        if self.redis_client is not None:
            self.redis_client.close()
            self.redis_client = None
            logger.info("Redis connection closed")

    def start_view_key(self, quiz_id: str) -> str:
        """Cache key for the answer-stripped view of a quiz"""
        return f"quiz:{quiz_id}:start"

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache

        Args:
            key: Cache key

        Returns:
            Cached value or None
        """
        if not self.redis_client:
            return None

        try:
            value = self.redis_client.get(key)
            if value:
                logger.info(f"Cache hit: {key}")
                return json.loads(value)
            logger.info(f"Cache miss: {key}")
            return None
        except redis.RedisError as e:
            logger.error(f"Cache get error: {str(e)}")
            return None

    def set(
        self,
        key: str,
        value: Any,
        ttl: int = None
    ) -> bool:
        """
        Set value in cache

        Args:
            key: Cache key
            value: Value to cache (must be JSON serializable)
            ttl: Time to live in seconds (default from settings)

        Returns:
            Success status
        """
        if not self.redis_client:
            return False

        try:
            ttl = ttl or settings.QUIZ_CACHE_TTL
            serialized = json.dumps(value, default=str)
            self.redis_client.setex(key, ttl, serialized)
            logger.info(f"Cache set: {key} (TTL: {ttl}s)")
            return True
        except redis.RedisError as e:
            logger.error(f"Cache set error: {str(e)}")
            return False

    def delete(self, key: str) -> bool:
        """Delete key from cache"""
        if not self.redis_client:
            return False

        try:
            self.redis_client.delete(key)
            logger.info(f"Cache delete: {key}")
            return True
        except redis.RedisError as e:
            logger.error(f"Cache delete error: {str(e)}")
            return False

    def clear_quiz_cache(self, quiz_id: str) -> bool:
        """Clear all cached views of a quiz"""
        if not self.redis_client:
            return False

        try:
            pattern = f"quiz:{quiz_id}:*"
            keys = self.redis_client.keys(pattern)
            if keys:
                self.redis_client.delete(*keys)
                logger.info(f"Cleared {len(keys)} cache entries for quiz {quiz_id}")
            return True
        except redis.RedisError as e:
            logger.error(f"Cache clear error: {str(e)}")
            return False


# Global instance
cache_service = CacheService()
