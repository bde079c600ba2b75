"""HTTP integration - Starlette/FastAPI middleware."""

from .csrf import csrf_token_from_request
from .encrypt_cookies import EncryptCookiesMiddleware

__all__ = ["EncryptCookiesMiddleware", "csrf_token_from_request"]
