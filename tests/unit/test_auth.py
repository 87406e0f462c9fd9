"""Unit tests for authentication strategies."""

import pytest
from starlette.requests import Request

from music_catalog.auth import (
    AuthStrategy,
    DemoAuthStrategy,
    TokenAuthStrategy,
    build_auth_strategy,
    require_principal,
)
from music_catalog.exceptions import UnauthorizedError
from tests.conftest import make_settings


def _request(headers: dict) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/artists",
        "query_string": b"",
        "headers": [(key.lower().encode(), value.encode()) for key, value in headers.items()],
    }
    return Request(scope)


class TestDemoAuthStrategy:
    def test_accepts_every_request(self) -> None:
        principal = DemoAuthStrategy().authenticate(_request({}))
        assert principal is not None
        assert principal.id == "demo-user-123"


class TestTokenAuthStrategy:
    def test_accepts_bearer_token(self) -> None:
        strategy = TokenAuthStrategy(["s3cret"])
        assert strategy.authenticate(_request({"Authorization": "Bearer s3cret"})) is not None

    def test_accepts_api_key_header(self) -> None:
        strategy = TokenAuthStrategy(["s3cret"])
        assert strategy.authenticate(_request({"X-API-Key": "s3cret"})) is not None

    def test_rejects_wrong_or_missing_token(self) -> None:
        strategy = TokenAuthStrategy(["s3cret"])
        assert strategy.authenticate(_request({"Authorization": "Bearer nope"})) is None
        assert strategy.authenticate(_request({"Authorization": "Basic s3cret"})) is None
        assert strategy.authenticate(_request({})) is None

    def test_no_configured_tokens_rejects_everything(self) -> None:
        strategy = TokenAuthStrategy([])
        assert strategy.authenticate(_request({"Authorization": "Bearer anything"})) is None


class TestBuildAuthStrategy:
    def test_demo_mode(self) -> None:
        assert isinstance(build_auth_strategy(make_settings(auth_mode="demo")), DemoAuthStrategy)

    def test_token_mode(self) -> None:
        strategy = build_auth_strategy(make_settings(auth_mode="token", auth_tokens=["a"]))
        assert isinstance(strategy, TokenAuthStrategy)

    def test_unknown_mode_fails_fast(self) -> None:
        with pytest.raises(ValueError):
            build_auth_strategy(make_settings(auth_mode="oauth"))


def test_require_principal_raises_unauthorized() -> None:
    with pytest.raises(UnauthorizedError) as exc_info:
        require_principal(TokenAuthStrategy(["s3cret"]), _request({}))
    assert exc_info.value.to_dict() == {
        "error": "Authentication required",
        "message": "Please log in to access this resource",
    }


def test_auth_strategy_must_implement_authenticate() -> None:
    with pytest.raises(TypeError):
        AuthStrategy()

    class Incomplete(AuthStrategy):
        name = "incomplete"

    with pytest.raises(TypeError):
        Incomplete()
