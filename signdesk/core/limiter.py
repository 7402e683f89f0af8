"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

SIGNATURE_WRITE_LIMIT = "30/minute"
GENERATION_LIMIT = "10/minute"

limit_signature_writes = limiter.limit(SIGNATURE_WRITE_LIMIT)
limit_generation = limiter.limit(GENERATION_LIMIT)
