"""
Config Store
Version: 1.0

Redis-backed JSON blobs for app, content, data and taxonomy configs.
Failures are logged and reported as None / False, never raised.
"""

import json
import logging
from typing import Any, Optional

from services.metrics import CONFIG_STORE_ERRORS

logger = logging.getLogger(__name__)

CONFIG_KEYS = {
    "app": "app-config",
    "content": "content-config",
    "data": "data-config",
    "taxonomy": "taxonomy-config",
}


class UnknownConfigTypeError(KeyError):
    """Config type is not one of CONFIG_KEYS."""


def config_key(config_type: str) -> str:
    try:
        return CONFIG_KEYS[config_type]
    except KeyError:
        raise UnknownConfigTypeError(config_type) from None


class ConfigStore:
    """Redis config blob wrapper."""

    def __init__(self, redis_client):
        """
        Initialize config store.

        Args:
            redis_client: Redis async client (decode_responses=True)
        """
        self.redis = redis_client

    async def get_config(self, config_type: str) -> Optional[Any]:
        """Get decoded config blob, None if missing or unreadable."""
        key = config_key(config_type)
        try:
            raw = await self.redis.get(key)
        except Exception as e:
            CONFIG_STORE_ERRORS.labels(operation="get").inc()
            logger.warning(f"Config get failed for {key}: {e}")
            return None

        if raw is None:
            return None

        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            CONFIG_STORE_ERRORS.labels(operation="decode").inc()
            logger.warning(f"Config {key} is not valid JSON: {e}")
            return None

    async def set_config(self, config_type: str, value: Any) -> bool:
        """Store config blob. Returns True if successful."""
        key = config_key(config_type)
        try:
            await self.redis.set(key, json.dumps(value))
            return True
        except Exception as e:
            CONFIG_STORE_ERRORS.labels(operation="set").inc()
            logger.warning(f"Config set failed for {key}: {e}")
            return False

    async def delete_config(self, config_type: str) -> bool:
        key = config_key(config_type)
        try:
            await self.redis.delete(key)
            return True
        except Exception as e:
            CONFIG_STORE_ERRORS.labels(operation="delete").inc()
            logger.warning(f"Config delete failed for {key}: {e}")
            return False

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except Exception:
            return False
