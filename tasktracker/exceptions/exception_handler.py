import logging
import uuid
from typing import List

from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.utils.serializer_helpers import ReturnDict
from rest_framework.views import exception_handler as drf_exception_handler

from tasktracker.constants.messages import ApiErrors, AuthErrorMessages
from tasktracker.dto.responses.error_response import ApiErrorDetail, ApiErrorKind, ApiErrorResponse, ApiErrorSource
from tasktracker.exceptions.auth_exceptions import TokenExpiredError, TokenInvalidError, TokenMissingError
from tasktracker.exceptions.common_exceptions import ConflictException, InvalidInputException
from tasktracker.exceptions.permission_exceptions import PermissionDeniedError
from tasktracker.exceptions.task_exceptions import TaskNotFoundException
from tasktracker.exceptions.team_exceptions import (
    InvalidInvitationStateException,
    InvitationNotFoundException,
    MemberNotFoundException,
    TeamNotFoundException,
)

logger = logging.getLogger(__name__)

# URL kwarg that identifies the resource each not-found exception refers to.
NOT_FOUND_PATH_PARAMS = {
    TaskNotFoundException: "task_id",
    TeamNotFoundException: "team_id",
    MemberNotFoundException: "member_id",
    InvitationNotFoundException: "invitation_id",
}


def format_validation_errors(errors) -> List[ApiErrorDetail]:
    formatted_errors = []
    if isinstance(errors, ReturnDict | dict):
        for field, messages in errors.items():
            details = messages if isinstance(messages, list) else [messages]
            for message_detail in details:
                if isinstance(message_detail, dict):
                    nested_errors = format_validation_errors(message_detail)
                    formatted_errors.extend(nested_errors)
                else:
                    formatted_errors.append(
                        ApiErrorDetail(
                            detail=str(message_detail),
                            source={ApiErrorSource.PARAMETER: field},
                            title=ApiErrors.VALIDATION_ERROR,
                        )
                    )
    elif isinstance(errors, list):
        for message_detail in errors:
            formatted_errors.append(ApiErrorDetail(detail=str(message_detail), title=ApiErrors.VALIDATION_ERROR))
    return formatted_errors


def _path_source(exc, context):
    param = next((name for cls, name in NOT_FOUND_PATH_PARAMS.items() if isinstance(exc, cls)), None)
    if param and param in context.get("kwargs", {}):
        return {ApiErrorSource.PATH: param}
    return None


def handle_exception(exc, context):
    response = drf_exception_handler(exc, context)

    error_list = []
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind = ApiErrorKind.INTERNAL
    correlation_id = None

    if isinstance(exc, TokenExpiredError):
        status_code = status.HTTP_401_UNAUTHORIZED
        kind = ApiErrorKind.UNAUTHORIZED
        error_list.append(
            ApiErrorDetail(
                source={ApiErrorSource.HEADER: "Authorization"},
                title=AuthErrorMessages.TOKEN_EXPIRED_TITLE,
                detail=str(exc),
            )
        )
    elif isinstance(exc, TokenMissingError):
        status_code = status.HTTP_401_UNAUTHORIZED
        kind = ApiErrorKind.UNAUTHORIZED
        error_list.append(
            ApiErrorDetail(
                source={ApiErrorSource.HEADER: "Authorization"},
                title=AuthErrorMessages.AUTHENTICATION_REQUIRED,
                detail=str(exc),
            )
        )
    elif isinstance(exc, TokenInvalidError):
        status_code = status.HTTP_401_UNAUTHORIZED
        kind = ApiErrorKind.UNAUTHORIZED
        error_list.append(
            ApiErrorDetail(
                source={ApiErrorSource.HEADER: "Authorization"},
                title=AuthErrorMessages.INVALID_TOKEN_TITLE,
                detail=str(exc),
            )
        )
    elif isinstance(exc, PermissionDeniedError):
        status_code = status.HTTP_403_FORBIDDEN
        kind = ApiErrorKind.FORBIDDEN
        error_list.append(
            ApiErrorDetail(title=ApiErrors.FORBIDDEN_TITLE, detail=exc.message, reason=exc.reason.value)
        )
    elif isinstance(exc, tuple(NOT_FOUND_PATH_PARAMS)):
        status_code = status.HTTP_404_NOT_FOUND
        kind = ApiErrorKind.NOT_FOUND
        error_list.append(
            ApiErrorDetail(
                source=_path_source(exc, context),
                title=ApiErrors.RESOURCE_NOT_FOUND_TITLE,
                detail=exc.message,
                reason="not-found",
            )
        )
    elif isinstance(exc, ConflictException):
        status_code = status.HTTP_409_CONFLICT
        kind = ApiErrorKind.CONFLICT
        error_list.append(ApiErrorDetail(title=ApiErrors.CONFLICT_TITLE, detail=exc.message, reason=exc.reason))
    elif isinstance(exc, InvalidInvitationStateException):
        status_code = status.HTTP_409_CONFLICT
        kind = ApiErrorKind.INVALID_STATE
        error_list.append(ApiErrorDetail(title=ApiErrors.INVALID_STATE_TITLE, detail=exc.message, reason=exc.status))
    elif isinstance(exc, InvalidInputException):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        kind = ApiErrorKind.INVALID_INPUT
        error_list = format_validation_errors(exc.field_errors)
    elif isinstance(exc, DRFValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
        kind = ApiErrorKind.INVALID_INPUT
        error_list = format_validation_errors(exc.detail)
        if not error_list and exc.detail:
            error_list.append(ApiErrorDetail(detail=str(exc.detail), title=ApiErrors.VALIDATION_ERROR))
    elif response is not None:
        status_code = response.status_code
        kind = {
            status.HTTP_401_UNAUTHORIZED: ApiErrorKind.UNAUTHORIZED,
            status.HTTP_403_FORBIDDEN: ApiErrorKind.FORBIDDEN,
            status.HTTP_404_NOT_FOUND: ApiErrorKind.NOT_FOUND,
        }.get(status_code, ApiErrorKind.INVALID_INPUT if status_code < 500 else ApiErrorKind.INTERNAL)
        if isinstance(response.data, dict) and "detail" in response.data:
            detail_str = str(response.data["detail"])
            error_list.append(ApiErrorDetail(detail=detail_str, title=detail_str))
        else:
            error_list.append(ApiErrorDetail(detail=str(response.data), title=str(exc)))
    else:
        correlation_id = uuid.uuid4().hex
        view = context.get("view")
        logger.exception(
            f"Unhandled error [{correlation_id}] in {view.__class__.__name__ if view else 'unknown view'}: {exc}",
            exc_info=exc,
        )
        error_list.append(
            ApiErrorDetail(
                title=ApiErrors.INTERNAL_SERVER_ERROR,
                detail=str(exc) if settings.DEBUG else ApiErrors.UNEXPECTED_ERROR_OCCURRED,
            )
        )

    if not error_list:
        error_list.append(ApiErrorDetail(detail=ApiErrors.VALIDATION_ERROR, title=ApiErrors.VALIDATION_ERROR))

    final_response_data = ApiErrorResponse(
        statusCode=status_code,
        kind=kind,
        message=error_list[0].detail,
        errors=error_list,
        correlationId=correlation_id,
    )
    return Response(data=final_response_data.model_dump(mode="json", exclude_none=True), status=status_code)
