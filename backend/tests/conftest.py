"""
Shared pytest fixtures for all tests.

Factories
---------
Import factories directly from their modules:

    from tests.accounts.factories import UserFactory
    from tests.otp.factories import PendingVerificationFactory

Example usage:

    @pytest.mark.django_db
    def test_something():
        user = UserFactory.create(phone="+919999999999")
"""

from collections.abc import Callable, Iterator
from typing import Any, cast

import pytest
from django.test import Client, RequestFactory
from django.test.client import WSGIRequest  # type: ignore[attr-defined]

from apps.accounts.tokens import SessionClaims, decode_session_token, issue_session_token
from apps.core.config import AuthConfig, get_auth_config
from apps.core.types import AuthenticatedHttpRequest

TEST_PHONE = "+919999999999"


@pytest.fixture(autouse=True)
def _reset_auth_config() -> Iterator[None]:
    """Rebuild AuthConfig from settings for every test so override_settings applies."""
    get_auth_config.cache_clear()
    yield
    get_auth_config.cache_clear()


@pytest.fixture
def auth_config() -> AuthConfig:
    """AuthConfig matching the test settings."""
    return get_auth_config()


@pytest.fixture
def request_factory() -> RequestFactory:
    """
    Django request factory for unit testing views.

    Use this to call Django Ninja endpoint functions directly.
    """
    return RequestFactory()


@pytest.fixture
def api_client() -> Client:
    """
    Django test client for full HTTP request/response cycle tests.

    Use this when the response envelope, status codes or auth handling
    matter, since those are produced by the API layer.
    """
    return Client()


def make_request_with_auth(request: "WSGIRequest", claims: SessionClaims) -> AuthenticatedHttpRequest:
    """
    Set auth claims on a request and return it typed as AuthenticatedHttpRequest.

    Mirrors what SessionBearerAuth does for a valid bearer token.
    """
    request.auth = claims  # type: ignore[attr-defined]
    return cast(AuthenticatedHttpRequest, request)


def claims_for(user: Any) -> SessionClaims:
    """Issue a real session token for a user and return its decoded claims."""
    return decode_session_token(issue_session_token(user))


def bearer_header(user: Any) -> dict[str, str]:
    """Authorization header carrying a fresh session token for a user."""
    return {"HTTP_AUTHORIZATION": f"Bearer {issue_session_token(user)}"}


@pytest.fixture
def authenticated_request(
    request_factory: RequestFactory,
) -> Callable[..., AuthenticatedHttpRequest]:
    """
    Factory fixture for creating authenticated requests.

    Example:
        def test_endpoint(authenticated_request):
            user = UserFactory.create()
            request = authenticated_request(user, method="post", path="/api/v1/auth/me")
    """

    def _make_request(
        user: Any,
        method: str = "get",
        path: str = "/",
    ) -> AuthenticatedHttpRequest:
        method_func = getattr(request_factory, method.lower())
        return make_request_with_auth(method_func(path), claims_for(user))

    return _make_request


@pytest.fixture
def user(db):
    """A verified user with an empty profile."""
    from tests.accounts.factories import UserFactory

    return UserFactory.create(phone=TEST_PHONE)
