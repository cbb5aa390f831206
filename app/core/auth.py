# app/core/auth.py
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import SQLModel

from app.core.config import get_settings

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so we can return a clean 401 from require_buyer.
bearer_scheme = HTTPBearer(auto_error=False)


class Buyer(SQLModel):
    """
    Identity of the buyer behind a request.

    `id` is the Supabase auth.users.id ("sub" claim). It keys the buyer's
    cart session and the order history lookup.
    """

    id: str
    email: str | None = None


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def get_current_buyer(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Buyer | None:
    """
    Resolve the current buyer from a Supabase JWT.

    Returns:
        Buyer if a valid token was sent, else None for guests.

    Raises:
        HTTPException(401): if token is malformed or missing 'sub'.
    """
    if credentials is None:
        return None  # guest mode

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub",
        )

    return Buyer(id=str(sub), email=payload.get("email"))


def require_buyer(buyer: Buyer | None = Depends(get_current_buyer)) -> Buyer:
    """
    Enforce authentication for cart routes.

    Every cart belongs to exactly one buyer, so guests are rejected.

    Raises:
        HTTPException(401): if buyer is None.
    """
    if buyer is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return buyer
