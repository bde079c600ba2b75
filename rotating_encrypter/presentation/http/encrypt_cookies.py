"""Cookie encryption middleware.

Incoming cookies розшифровуються перед route handler'ом, outgoing Set-Cookie
values шифруються. Cookie яку не вдалось розшифрувати (tampered, старий ключ
якого вже немає) просто відкидається.
"""

from collections.abc import Iterable
from http.cookies import CookieError, SimpleCookie

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request, cookie_parser
from starlette.responses import Response
from starlette.types import ASGIApp

from rotating_encrypter.config import get_logger, get_settings
from rotating_encrypter.domain.encryption import DecryptError, StringEncrypter
from rotating_encrypter.infrastructure.encryption import get_encrypter

logger = get_logger(__name__)


class EncryptCookiesMiddleware(BaseHTTPMiddleware):
    """Encrypt outgoing and decrypt incoming cookies.

    Example:
        >>> app = FastAPI()
        >>> app.add_middleware(EncryptCookiesMiddleware, encrypter=encrypter)
    """

    def __init__(
        self,
        app: ASGIApp,
        encrypter: StringEncrypter | None = None,
        never_encrypt: Iterable[str] | None = None,
    ) -> None:
        """Initialize middleware.

        Args:
            app: Wrapped ASGI app.
            encrypter: Encrypter to use; the configured singleton if omitted.
            never_encrypt: Cookie names left untouched
                (COOKIE_NEVER_ENCRYPT if omitted).
        """
        super().__init__(app)
        self._encrypter = encrypter
        if never_encrypt is None:
            never_encrypt = get_settings().never_encrypt_cookies
        self._never_encrypt = frozenset(never_encrypt)

    @property
    def encrypter(self) -> StringEncrypter:
        if self._encrypter is None:
            self._encrypter = get_encrypter()
        return self._encrypter

    def is_disabled(self, name: str) -> bool:
        """Check if the cookie is excluded from encryption."""
        return name in self._never_encrypt

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Decrypt request cookies, encrypt response cookies."""
        self._decrypt_request(request)
        response = await call_next(request)
        self._encrypt_response(response)
        return response

    def _decrypt_request(self, request: Request) -> None:
        raw = request.headers.get("cookie")
        if not raw:
            return

        decrypted = []
        for name, value in cookie_parser(raw).items():
            if self.is_disabled(name):
                decrypted.append((name, value))
                continue
            try:
                decrypted.append((name, self.encrypter.decrypt_string(value).decode("utf-8")))
            except (DecryptError, UnicodeDecodeError):
                logger.debug("cookies.decrypt.failed", cookie_name=name)

        quoter = SimpleCookie()
        header = "; ".join(f"{name}={quoter.value_encode(value)[1]}" for name, value in decrypted)

        headers = [(k, v) for k, v in request.scope["headers"] if k != b"cookie"]
        if header:
            headers.append((b"cookie", header.encode("latin-1")))
        request.scope["headers"] = headers

    def _encrypt_response(self, response: Response) -> None:
        set_cookies = response.headers.getlist("set-cookie")
        if not set_cookies:
            return

        del response.headers["set-cookie"]
        for header in set_cookies:
            response.headers.append("set-cookie", self._encrypt_set_cookie(header))

    def _encrypt_set_cookie(self, header: str) -> str:
        cookie = SimpleCookie()
        try:
            cookie.load(header)
        except CookieError:
            cookie = SimpleCookie()
        if not cookie:
            logger.warning("cookies.encrypt.unparsable_header")
            return header

        name, morsel = next(iter(cookie.items()))
        # Deletion cookies carry an empty value.
        if self.is_disabled(name) or morsel.value == "":
            return header

        encrypted = self.encrypter.encrypt_string(morsel.value)
        morsel.set(name, encrypted, encrypted)
        return morsel.OutputString()
