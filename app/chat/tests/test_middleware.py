"""
Tests for JWTAuthMiddleware.

The wrapped app records the scope it receives so each test can check
which user the middleware attached.
"""

import pytest
from asgiref.sync import sync_to_async
from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.tokens import AccessToken

from chat.middleware import JWTAuthMiddleware

pytestmark = [pytest.mark.asyncio, pytest.mark.django_db(transaction=True)]


class ScopeRecorder:
    def __init__(self):
        self.scope = None

    async def __call__(self, scope, receive, send):
        self.scope = scope


async def run_middleware(query_string=b"", subprotocols=None):
    inner = ScopeRecorder()
    scope = {
        "type": "websocket",
        "path": "/ws/chat/",
        "query_string": query_string,
        "subprotocols": subprotocols or [],
    }
    await JWTAuthMiddleware(inner)(scope, None, None)
    return inner.scope


async def token_for(user):
    return await sync_to_async(lambda: str(AccessToken.for_user(user)))()


class TestJWTAuthMiddleware:
    async def test_query_string_token(self, alice):
        token = await token_for(alice)

        scope = await run_middleware(query_string=f"token={token}".encode())

        assert scope["user"].pk == alice.pk

    async def test_subprotocol_token(self, alice):
        token = await token_for(alice)

        scope = await run_middleware(subprotocols=["jwt", token])

        assert scope["user"].pk == alice.pk

    async def test_no_token_is_anonymous(self):
        scope = await run_middleware()

        assert isinstance(scope["user"], AnonymousUser)

    async def test_invalid_token_is_anonymous(self):
        scope = await run_middleware(query_string=b"token=not-a-jwt")

        assert isinstance(scope["user"], AnonymousUser)

    async def test_deleted_user_is_anonymous(self, alice):
        token = await token_for(alice)
        await sync_to_async(alice.delete)()

        scope = await run_middleware(query_string=f"token={token}".encode())

        assert isinstance(scope["user"], AnonymousUser)

    async def test_inactive_user_is_anonymous(self, alice):
        token = await token_for(alice)
        alice.is_active = False
        await sync_to_async(alice.save)()

        scope = await run_middleware(query_string=f"token={token}".encode())

        assert isinstance(scope["user"], AnonymousUser)
