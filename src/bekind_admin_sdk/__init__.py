from .action_validation import ClientValidationError, ValidationIssue, validate_new_action
from .clients import ActionsClient, AuthClient
from .config import ClientConfig, ConfigError, load_config
from .controller import AdminController, LoginResult, MutationResult
from .credential_store import CredentialStore, FileCredentialStore, MemoryCredentialStore
from .exceptions import (
    ApiError,
    AuthError,
    ForbiddenError,
    InvalidLoginResponseError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from .http_client import HttpGateway, LoginRequired
from .listing import ListController
from .models import ActionItem, IconUpload, NewAction
from .normalizers import normalize_page
from .pagination import PageQuery, PageResult
from .session import Session, SessionManager, SessionStatus
from .tracing import TraceContext

__version__ = "0.1.0"

__all__ = [
    "ActionItem",
    "ActionsClient",
    "AdminController",
    "ApiError",
    "AuthClient",
    "AuthError",
    "ClientConfig",
    "ClientValidationError",
    "ConfigError",
    "CredentialStore",
    "FileCredentialStore",
    "ForbiddenError",
    "HttpGateway",
    "IconUpload",
    "InvalidLoginResponseError",
    "ListController",
    "LoginRequired",
    "LoginResult",
    "MemoryCredentialStore",
    "MutationResult",
    "NewAction",
    "NotFoundError",
    "PageQuery",
    "PageResult",
    "Session",
    "SessionManager",
    "SessionStatus",
    "TraceContext",
    "TransportError",
    "ValidationError",
    "ValidationIssue",
    "load_config",
    "normalize_page",
    "validate_new_action",
]
