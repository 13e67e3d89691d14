# Routes package __init__.py - re-exports routers for main.py convenience
from .study import router as study_router
from .manage import router as manage_router
from .settings import router as settings_router
from .api import router as api_router

__all__ = ['study_router', 'manage_router', 'settings_router', 'api_router']
