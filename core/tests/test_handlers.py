from unittest import mock

from django.http import Http404
from django.test import SimpleTestCase, override_settings
from rest_framework import exceptions, status

from core.exceptions import ConflictError, TokenExpiredError, ValidationError
from core.handlers import api_exception_handler
from core.responses import success_response


class ApiExceptionHandlerTests(SimpleTestCase):
    def _handle(self, exc):
        return api_exception_handler(exc, {"view": None})

    def test_domain_error(self):
        response = self._handle(ConflictError("Already taken"))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data, {"success": False, "error": "Already taken", "code": "conflict"})

    def test_expired_token(self):
        response = self._handle(TokenExpiredError())
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["code"], "token_expired")
        self.assertEqual(response.data["error"], "Access token expired")

    def test_validation_error_with_details(self):
        response = self._handle(ValidationError("Bad input", details={"field": ["nope"]}))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["details"], {"field": ["nope"]})

    def test_serializer_validation_error(self):
        response = self._handle(exceptions.ValidationError({"name": ["This field is required."]}))
        self.assertEqual(response.data["error"], "Validation failed")
        self.assertEqual(response.data["code"], "validation_error")
        self.assertIn("name", response.data["details"])

    def test_django_404(self):
        response = self._handle(Http404())
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["code"], "not_found")

    @override_settings(DEBUG=False)
    def test_unexpected_error_is_hidden(self):
        with mock.patch("core.handlers.logger") as logger:
            response = self._handle(RuntimeError("boom"))

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {"success": False, "error": "Internal server error", "code": "server_error"})
        logger.error.assert_called_once()

    @override_settings(DEBUG=True)
    def test_unexpected_error_details_in_debug(self):
        with mock.patch("core.handlers.logger"):
            response = self._handle(RuntimeError("boom"))
        self.assertEqual(response.data["details"], "boom")


class SuccessResponseTests(SimpleTestCase):
    def test_envelope(self):
        response = success_response({"id": 1}, message="Done", count=1)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"success": True, "data": {"id": 1}, "message": "Done", "count": 1})

    def test_without_data(self):
        response = success_response(status=status.HTTP_201_CREATED)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data, {"success": True})
