import logging

from django.conf import settings
from django.http import JsonResponse
from rest_framework import status

from tasktracker.constants.messages import ApiErrors, AuthErrorMessages
from tasktracker.dto.responses.error_response import ApiErrorDetail, ApiErrorKind, ApiErrorResponse, ApiErrorSource
from tasktracker.exceptions.auth_exceptions import (
    TokenExpiredError,
    TokenInvalidError,
    TokenMissingError,
    UserNotFoundException,
)
from tasktracker.repositories.user_repository import UserRepository
from tasktracker.utils.jwt_utils import validate_access_token

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class JWTAuthenticationMiddleware:
    """
    Resolves the request's principal from a bearer token (or the access cookie)
    and exposes it as ``request.user_id``, ``request.user_email`` and ``request.user_name``.
    """

    def __init__(self, get_response) -> None:
        self.get_response = get_response

    def __call__(self, request):
        if request.method == "OPTIONS" or self._is_public_path(request.path):
            return self.get_response(request)

        try:
            self._authenticate(request)
        except (TokenMissingError, TokenExpiredError, TokenInvalidError, UserNotFoundException) as e:
            logger.debug(f"Rejected request to {request.path}: {e}")
            return self._handle_auth_error(e)

        return self.get_response(request)

    def _extract_token(self, request) -> str:
        header = request.headers.get("Authorization", "")
        if header.startswith(BEARER_PREFIX) and header[len(BEARER_PREFIX) :].strip():
            return header[len(BEARER_PREFIX) :].strip()

        cookie_token = request.COOKIES.get(settings.AUTH_COOKIE_NAME)
        if cookie_token:
            return cookie_token
        raise TokenMissingError()

    def _authenticate(self, request) -> None:
        payload = validate_access_token(self._extract_token(request))
        self._set_user_data(request, payload)

    def _set_user_data(self, request, payload):
        """Set user data on request with database verification"""
        user = UserRepository.get_by_id(payload["user_id"])
        if not user or user.isDeleted:
            raise UserNotFoundException()

        request.user_id = str(user.id)
        request.user_email = user.email
        request.user_name = user.name

    def _is_public_path(self, path: str) -> bool:
        return any(path.startswith(public_path) for public_path in settings.PUBLIC_PATHS)

    def _handle_auth_error(self, exception):
        if isinstance(exception, TokenExpiredError):
            title = AuthErrorMessages.TOKEN_EXPIRED_TITLE
        elif isinstance(exception, TokenMissingError):
            title = AuthErrorMessages.AUTHENTICATION_REQUIRED
        elif isinstance(exception, TokenInvalidError):
            title = AuthErrorMessages.INVALID_TOKEN_TITLE
        else:
            title = ApiErrors.AUTHENTICATION_FAILED

        error_response = ApiErrorResponse(
            statusCode=status.HTTP_401_UNAUTHORIZED,
            kind=ApiErrorKind.UNAUTHORIZED,
            message=str(exception),
            errors=[
                ApiErrorDetail(
                    source={ApiErrorSource.HEADER: "Authorization"},
                    title=title,
                    detail=str(exception),
                )
            ],
        )
        return JsonResponse(
            data=error_response.model_dump(mode="json", exclude_none=True),
            status=status.HTTP_401_UNAUTHORIZED,
        )


def get_current_user_info(request) -> dict | None:
    if not hasattr(request, "user_id"):
        return None

    return {
        "user_id": request.user_id,
        "email": request.user_email,
        "name": request.user_name,
    }
