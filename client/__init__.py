"""client/ -- Python client for the employee directory API.

SessionManager owns the bearer token and the anonymous/authenticated
lifecycle; token_store decides where the token lives between runs.

Layer rule: client/ talks to the server over HTTP only. It does NOT import
from api/, auth/, or directory/.
"""

from client.session import ApiError, AuthenticationRequired, SessionManager, SessionState
from client.token_store import FileTokenStore, MemoryTokenStore

__all__ = [
    "ApiError",
    "AuthenticationRequired",
    "FileTokenStore",
    "MemoryTokenStore",
    "SessionManager",
    "SessionState",
]
