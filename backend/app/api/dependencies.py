"""
app/api/dependencies.py
───────────────────────
FastAPI dependency functions shared across all endpoints.

Usage
-----
    from app.api.dependencies import get_app_settings

    @router.post("/foo")
    def my_route(settings = Depends(get_app_settings)):
        ...
"""

from core.config import Settings, get_settings


def get_app_settings() -> Settings:
    """
    FastAPI dependency that returns the cached settings object.

    Inject via ``Depends(get_app_settings)``; tests swap it out through
    ``app.dependency_overrides``.

    Returns:
        Validated application ``Settings``.
    """
    return get_settings()
