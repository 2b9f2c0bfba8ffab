from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from tasktracker.constants.messages import ApiErrors
from tasktracker.dto.responses.api_response import ApiResponse
from tasktracker.dto.responses.error_response import ApiErrorDetail, ApiErrorKind, ApiErrorResponse, ApiErrorSource


class EnvelopeAPIView(APIView):
    """
    Shared response helpers. Service exceptions are left to propagate to the
    configured DRF exception handler.
    """

    def _success(self, data=None, message: str | None = None, status_code: int = status.HTTP_200_OK) -> Response:
        if hasattr(data, "model_dump"):
            data = data.model_dump(mode="json", by_alias=True)
        elif isinstance(data, list):
            data = [item.model_dump(mode="json", by_alias=True) if hasattr(item, "model_dump") else item for item in data]
        envelope = ApiResponse(message=message, data=data).model_dump(mode="json")
        if envelope["message"] is None:
            envelope.pop("message")
        return Response(data=envelope, status=status_code)

    def _handle_validation_errors(self, errors):
        formatted_errors = []
        for field, messages in errors.items():
            if isinstance(messages, list):
                for message in messages:
                    formatted_errors.append(
                        ApiErrorDetail(
                            source={ApiErrorSource.PARAMETER: field},
                            title=ApiErrors.VALIDATION_ERROR,
                            detail=str(message),
                        )
                    )
            else:
                formatted_errors.append(
                    ApiErrorDetail(
                        source={ApiErrorSource.PARAMETER: field}, title=ApiErrors.VALIDATION_ERROR, detail=str(messages)
                    )
                )

        error_response = ApiErrorResponse(
            statusCode=status.HTTP_400_BAD_REQUEST,
            kind=ApiErrorKind.INVALID_INPUT,
            message=formatted_errors[0].detail if formatted_errors else ApiErrors.VALIDATION_ERROR,
            errors=formatted_errors,
        )

        return Response(
            data=error_response.model_dump(mode="json", exclude_none=True), status=status.HTTP_400_BAD_REQUEST
        )
