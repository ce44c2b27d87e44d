"""Entry point for the expense FastAPI app."""
from expense_api.app import create_app

__all__ = ["create_app"]
