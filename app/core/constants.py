"""Core constants: query cache key structure and shared literal values."""

# Prefix for per-request query cache keys (query:<name>:<args...>)
CACHE_PREFIX_QUERY = "query"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Header carrying the shared secret for POST /internal/deletion-sweep
DELETION_SWEEP_SECRET_HEADER = "X-Sweep-Secret"
