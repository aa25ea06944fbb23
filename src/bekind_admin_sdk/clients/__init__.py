from .actions import ActionsClient
from .auth import AuthClient

__all__ = ["ActionsClient", "AuthClient"]
