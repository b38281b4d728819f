"""
Reads storefront sign-in tokens.

Tokens are issued by the storefront's login flow; this service only needs
to know which customer, if any, is placing or tracking an order.
"""
import os
import warnings
from typing import Optional

from jose import JWTError, jwt

SECRET_KEY = os.getenv("JWT_SECRET_KEY", "")
if not SECRET_KEY:
    warnings.warn(
        "JWT_SECRET_KEY is not set. Signed-in checkouts will only accept tokens "
        "signed with the insecure default. Set this env var in production!",
        stacklevel=2,
    )
    SECRET_KEY = "insecure-jwt-secret-change-me"

ALGORITHM = "HS256"


def token_subject(token: Optional[str]) -> Optional[str]:
    """User id ("sub") of a valid, unexpired token; None for anything else."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    subject = payload.get("sub")
    return str(subject) if subject is not None else None
