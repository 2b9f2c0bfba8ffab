import json
from unittest import TestCase
from unittest.mock import Mock, patch

from django.conf import settings
from django.http import HttpRequest, JsonResponse

from tasktracker.exceptions.auth_exceptions import TokenExpiredError
from tasktracker.middlewares.jwt_auth import JWTAuthenticationMiddleware, get_current_user_info
from tasktracker.tests.fixtures.user import make_user


class JWTAuthenticationMiddlewareTests(TestCase):
    def setUp(self):
        self.get_response = Mock(return_value=JsonResponse({"data": "test"}))
        self.middleware = JWTAuthenticationMiddleware(self.get_response)
        self.request = Mock(spec=HttpRequest)
        self.request.method = "GET"
        self.request.path = "/api/tasks"
        self.request.headers = {}
        self.request.COOKIES = {}
        self.user = make_user("Olivia Owner", "owner@example.com")

    def test_public_path_bypasses_authentication(self):
        self.request.path = "/api/health"

        response = self.middleware(self.request)

        self.get_response.assert_called_once_with(self.request)
        self.assertEqual(response.status_code, 200)

    def test_preflight_bypasses_authentication(self):
        self.request.method = "OPTIONS"

        self.middleware(self.request)

        self.get_response.assert_called_once_with(self.request)

    def test_missing_token_is_rejected(self):
        response = self.middleware(self.request)

        self.assertEqual(response.status_code, 401)
        body = json.loads(response.content)
        self.assertEqual(body["kind"], "unauthorized")
        self.get_response.assert_not_called()

    @patch("tasktracker.middlewares.jwt_auth.UserRepository.get_by_id")
    @patch("tasktracker.middlewares.jwt_auth.validate_access_token")
    def test_bearer_token_takes_precedence(self, mock_validate, mock_get_user):
        mock_validate.return_value = {"user_id": str(self.user.id), "token_type": "access"}
        mock_get_user.return_value = self.user
        self.request.headers = {"Authorization": "Bearer header-token"}
        self.request.COOKIES = {settings.AUTH_COOKIE_NAME: "cookie-token"}

        response = self.middleware(self.request)

        mock_validate.assert_called_once_with("header-token")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.request.user_id, str(self.user.id))
        self.assertEqual(self.request.user_email, "owner@example.com")

    @patch("tasktracker.middlewares.jwt_auth.UserRepository.get_by_id")
    @patch("tasktracker.middlewares.jwt_auth.validate_access_token")
    def test_cookie_token_is_used_without_header(self, mock_validate, mock_get_user):
        mock_validate.return_value = {"user_id": str(self.user.id), "token_type": "access"}
        mock_get_user.return_value = self.user
        self.request.COOKIES = {settings.AUTH_COOKIE_NAME: "cookie-token"}

        self.middleware(self.request)

        mock_validate.assert_called_once_with("cookie-token")
        self.get_response.assert_called_once_with(self.request)

    @patch("tasktracker.middlewares.jwt_auth.validate_access_token")
    def test_expired_token_is_rejected(self, mock_validate):
        mock_validate.side_effect = TokenExpiredError()
        self.request.headers = {"Authorization": "Bearer stale"}

        response = self.middleware(self.request)

        self.assertEqual(response.status_code, 401)
        self.assertEqual(json.loads(response.content)["errors"][0]["title"], "Token Expired")

    @patch("tasktracker.middlewares.jwt_auth.UserRepository.get_by_id")
    @patch("tasktracker.middlewares.jwt_auth.validate_access_token")
    def test_deleted_user_is_rejected(self, mock_validate, mock_get_user):
        mock_validate.return_value = {"user_id": str(self.user.id), "token_type": "access"}
        mock_get_user.return_value = self.user.model_copy(update={"isDeleted": True})
        self.request.headers = {"Authorization": "Bearer token"}

        response = self.middleware(self.request)

        self.assertEqual(response.status_code, 401)
        self.get_response.assert_not_called()


class GetCurrentUserInfoTests(TestCase):
    def test_returns_none_for_anonymous_request(self):
        self.assertIsNone(get_current_user_info(Mock(spec=HttpRequest)))

    def test_returns_principal(self):
        request = Mock(spec=HttpRequest)
        request.user_id = "u1"
        request.user_email = "u1@example.com"
        request.user_name = "User One"

        self.assertEqual(
            get_current_user_info(request), {"user_id": "u1", "email": "u1@example.com", "name": "User One"}
        )
