"""
High-level use cases for the expense API.

Routers (FastAPI endpoints) call these services instead of reading or writing
the JSON document directly.
"""
