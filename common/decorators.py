import functools

import redis
from flask import request, current_app

from common.cache import get_redis_client
from common.errors import RateLimitExceeded

DEFAULT_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


def check_rate_limit(key_prefix, limit, per, message=DEFAULT_LIMIT_MESSAGE):
    """
    Count one request from the client IP in a fixed window of ``per`` seconds.

    Raises:
        RateLimitExceeded: more than ``limit`` requests in the current window
    """
    app = current_app._get_current_object()
    if not app.config.get('RATELIMIT_ENABLED', True):
        return

    redis_client = get_redis_client(app)
    if not redis_client:
        # If Redis is not available, skip rate limiting
        return

    key = f"{key_prefix}:ip:{request.remote_addr}"
    try:
        p = redis_client.pipeline()
        p.incr(key)
        p.ttl(key)
        count, ttl = p.execute()
        if ttl is None or ttl < 0:
            redis_client.expire(key, per)
            ttl = per
    except redis.RedisError as e:
        app.logger.warning(f"Rate limit check skipped: {str(e)}")
        return

    if count > limit:
        raise RateLimitExceeded(message, retry_after=int(ttl))


def rate_limit(limit_config, window_config, key_prefix='rl', message=DEFAULT_LIMIT_MESSAGE):
    """
    Rate limiting decorator.

    Args:
        limit_config (str): config key holding the maximum number of requests per window
        window_config (str): config key holding the window length in seconds
        key_prefix (str): Redis key prefix for rate limit counters
        message (str): error returned once the limit is exceeded
    """
    def decorator(f):
        @functools.wraps(f)
        def wrapped(*args, **kwargs):
            check_rate_limit(
                key_prefix,
                limit=current_app.config[limit_config],
                per=current_app.config[window_config],
                message=message,
            )
            return f(*args, **kwargs)
        return wrapped
    return decorator
