"""
FastAPI routers grouped by domain.

Each module exposes an APIRouter included by the application factory
(app.py). Routers translate service exceptions into HTTP responses.
"""
