"""
Process-wide managers.

Import from the specific modules; ``cache_manager`` and ``rate_limiter``
pull in Redis and slowapi at import time.
"""
