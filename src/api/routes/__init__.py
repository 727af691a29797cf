from fastapi import FastAPI

from . import assets, health, users


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(assets.router)
    app.include_router(users.router)
