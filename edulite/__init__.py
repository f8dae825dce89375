from .app import create_app
from .seed import init_database

__all__ = ["create_app", "init_database"]
