from datetime import datetime, timedelta, timezone

import jwt
from django.conf import settings

from tasktracker.constants.messages import AuthErrorMessages
from tasktracker.exceptions.auth_exceptions import TokenExpiredError, TokenInvalidError


def generate_access_token(user_data: dict) -> str:
    """
    Mint an access token. The identity service issues tokens in production;
    this is used by tests and local tooling that need a valid principal.
    """
    try:
        now = datetime.now(timezone.utc)
        expiry = now + timedelta(seconds=settings.JWT_CONFIG.get("ACCESS_TOKEN_LIFETIME"))

        payload = {
            "iss": settings.JWT_CONFIG.get("ISSUER"),
            "exp": int(expiry.timestamp()),
            "iat": int(now.timestamp()),
            "sub": user_data["user_id"],
            "user_id": user_data["user_id"],
            "token_type": "access",
        }

        return jwt.encode(
            payload=payload,
            key=settings.JWT_CONFIG.get("PRIVATE_KEY"),
            algorithm=settings.JWT_CONFIG.get("ALGORITHM"),
        )

    except (KeyError, TypeError, jwt.PyJWTError) as e:
        raise TokenInvalidError(f"Token generation failed: {str(e)}")


def validate_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(
            jwt=token,
            key=settings.JWT_CONFIG.get("PUBLIC_KEY"),
            algorithms=[settings.JWT_CONFIG.get("ALGORITHM")],
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError()
    except jwt.InvalidTokenError as e:
        raise TokenInvalidError(f"Invalid token: {str(e)}")

    if payload.get("token_type") != "access" or not payload.get("user_id"):
        raise TokenInvalidError(AuthErrorMessages.TOKEN_INVALID)

    return payload
