"""CSRF token lookup.

SPA clients echo the (encrypted) XSRF-TOKEN cookie back in the X-XSRF-TOKEN
header, тому значення треба розшифрувати перед порівнянням з session token.
"""

from starlette.requests import Request

from rotating_encrypter.domain.encryption import DecryptError, StringEncrypter
from rotating_encrypter.infrastructure.encryption import get_encrypter


def csrf_token_from_request(
    request: Request,
    form_token: str | None = None,
    encrypter: StringEncrypter | None = None,
) -> str:
    """Get the CSRF token sent with the request.

    Order: ``_token`` form field (passed in by the caller), X-CSRF-TOKEN header,
    then the encrypted X-XSRF-TOKEN header.

    Returns:
        Token, or "" if none was sent or X-XSRF-TOKEN does not decrypt.
    """
    token = form_token or request.headers.get("x-csrf-token")
    if token:
        return token

    header = request.headers.get("x-xsrf-token")
    if not header:
        return ""

    try:
        return (encrypter or get_encrypter()).decrypt_string(header).decode("utf-8")
    except (DecryptError, UnicodeDecodeError):
        return ""
