"""Redis client construction.

``redis_type="fake"`` gives an in-process FakeRedis for local runs and
tests; anything else connects to the configured server.
"""

import fakeredis
import redis

from docspace.settings import settings
from docspace.utils import get_logger

logger = get_logger(__name__)


def create_redis_client(db: int | None = None) -> redis.Redis:
    """Client for db (default: settings.redis_index), decoding responses to str."""
    if db is None:
        db = settings.redis_index

    if settings.redis_type == "fake":
        logger.info(f"Namespace store on FakeRedis db={db}")
        return fakeredis.FakeRedis(db=db, decode_responses=True)

    options: dict = dict(
        host=settings.redis_host,
        port=settings.redis_port,
        db=db,
        socket_connect_timeout=settings.redis_socket_connect_timeout,
        socket_timeout=settings.redis_socket_timeout,
        decode_responses=True,
    )
    if settings.redis_password:
        options["password"] = settings.redis_password

    logger.info(f"Namespace store on Redis {settings.redis_host}:{settings.redis_port} db={db}")
    return redis.Redis(**options)
