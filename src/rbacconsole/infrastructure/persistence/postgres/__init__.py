"""PostgreSQL remote store adapters."""
