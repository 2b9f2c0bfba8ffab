from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from tasktracker_project.db.config import DatabaseManager


class HealthView(APIView):
    @extend_schema(
        operation_id="health_check",
        summary="Health check",
        description="Check the health status of the application and its MongoDB connection",
        tags=["health"],
        responses={
            200: OpenApiResponse(description="Application is healthy"),
            503: OpenApiResponse(description="Application is unhealthy"),
        },
    )
    def get(self, request):
        is_db_healthy = DatabaseManager().check_database_health()
        response = {
            "status": "UP" if is_db_healthy else "DOWN",
            "components": {
                "mongodb": {"status": "UP" if is_db_healthy else "DOWN"},
            },
        }
        return Response(
            response, status.HTTP_200_OK if is_db_healthy else status.HTTP_503_SERVICE_UNAVAILABLE
        )
