import redis

REDIS_EXTENSION_KEY = 'redis_client'


def get_redis_client(app):
    """Get the Redis client for ``app``.

    The client is created from ``REDIS_URL`` on first use and reused afterwards.

    Returns:
        redis.Redis: Redis client if connection successful, None otherwise
    """
    client = app.extensions.get(REDIS_EXTENSION_KEY)
    if client is not None:
        return client

    redis_url = app.config.get('REDIS_URL') or 'redis://localhost:6379/0'
    try:
        # Short timeouts so an unreachable Redis never blocks a request for long
        client = redis.from_url(
            redis_url,
            socket_connect_timeout=1,
            socket_timeout=1,
            socket_keepalive=False,
            retry_on_timeout=False,
            health_check_interval=0
        )
        client.ping()
    except (redis.ConnectionError, redis.TimeoutError, OSError) as e:
        app.logger.warning(f"Redis connection failed: {str(e)}. Rate limiting disabled.")
        return None

    app.extensions[REDIS_EXTENSION_KEY] = client
    return client
