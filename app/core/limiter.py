"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports. Central limit strings and decorators keep
rate limits in one place.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

WRITE_ENDPOINT_LIMIT = "120/minute"
# Export and deletion scheduling are expensive or irreversible.
SENSITIVE_ENDPOINT_LIMIT = "5/minute"
PAYMENT_LINK_LIMIT = "30/minute"

limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
limit_sensitive = limiter.limit(SENSITIVE_ENDPOINT_LIMIT)
limit_payment_links = limiter.limit(PAYMENT_LINK_LIMIT)
