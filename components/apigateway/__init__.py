from .app import create_app
from .settings import AppSettings

__all__ = ["create_app", "AppSettings"]
