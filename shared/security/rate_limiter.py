from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request
from .jwt_handler import token_subject

def user_id_or_ip(request: Request) -> str:
    """
    Key function for SlowAPI.

    Tracking pages are mostly hit by guests, so the bucket is the client IP
    unless the caller is a signed-in customer, in which case it is their user ID.
    """
    auth_header = request.headers.get("Authorization")

    if auth_header and auth_header.startswith("Bearer "):
        user_id = token_subject(auth_header.split(" ", 1)[1])
        if user_id:
            return f"user:{user_id}"

    # Handles proxies if X-Forwarded-For is set correctly by Uvicorn
    return f"ip:{get_remote_address(request)}"

# Shared across mounted apps; limits are declared per route
limiter = Limiter(key_func=user_id_or_ip)
