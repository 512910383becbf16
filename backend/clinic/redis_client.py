# backend/clinic/redis_client.py

from redis import Redis

from .config import settings

# from_url does not connect until the first command is issued
redis_client: Redis = Redis.from_url(
    settings.redis_url,
    decode_responses=True,
    socket_connect_timeout=2.0,
    socket_timeout=2.0,
)
