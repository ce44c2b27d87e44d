"""
Core utilities shared across the expense API.

This package hosts:
- configuration helpers (env vars, storage path, feature flags)
- cross-cutting services such as logging setup, the optional single-writer
  lock and clock helpers.

Routers/services depend on these primitives instead of reading os.environ or
configuring logging themselves.
"""
