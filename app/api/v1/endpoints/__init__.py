"""API v1 endpoint modules; each exposes a router included by app.api.v1.router."""
