from .jwt_handler import token_subject
from .api_key import verify_api_key
from .dependencies import get_optional_user, verify_internal_api_key
from .rate_limiter import limiter, user_id_or_ip

__all__ = [
    "token_subject",
    "verify_api_key",
    "get_optional_user",
    "verify_internal_api_key",
    "limiter",
    "user_id_or_ip"
]
