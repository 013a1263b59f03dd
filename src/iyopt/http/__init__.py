from iyopt.http.app import apply_cookies
from iyopt.http.app import create_app
from iyopt.http.app import get_client

__all__ = [
    "apply_cookies",
    "create_app",
    "get_client",
]
