"""Tests for the sign-in flow."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from conftest import FakeClient, make_response
from wgdash import AsyncWGDashboardClient
from wgdash.auth_flow import AuthFlow, AuthState
from wgdash.exceptions import ValidationError
from wgdash.models import AuthResult


@pytest.fixture
def signed_out_store(store):
    store.set_server("http://192.168.2.43:10086", "secret-key")
    return store


def _record(flow: AuthFlow) -> list[AuthState]:
    transitions: list[AuthState] = []
    flow.subscribe(transitions.append)
    return transitions


@pytest.mark.asyncio
class TestAuthFlowStart:
    async def test_requires_validated_server(self, store):
        flow = AuthFlow(FakeClient(), store)
        with pytest.raises(ValidationError):
            await flow.start()
        assert flow.state is AuthState.IDLE

    async def test_configures_client_from_session(self, signed_out_store):
        client = FakeClient()
        await AuthFlow(client, signed_out_store).start()
        assert client.calls[0] == ("configure", "http://192.168.2.43:10086", "secret-key")
        assert client.calls[1][0] == "is_otp_enabled"

    async def test_otp_required(self, signed_out_store):
        flow = AuthFlow(FakeClient(otp_enabled=True), signed_out_store)
        transitions = _record(flow)

        assert await flow.start() is True

        assert flow.otp_required is True
        assert transitions == [AuthState.CHECKING_OTP, AuthState.READY_TO_SIGN_IN]

    async def test_indeterminate_otp_behaves_like_disabled(self, signed_out_store):
        results = []
        for side_effect in (httpx.ConnectError("refused"), None):
            kwargs = {"side_effect": side_effect} if side_effect else {"return_value": make_response(200, {"data": False})}
            with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock, **kwargs):
                async with AsyncWGDashboardClient() as client:
                    flow = AuthFlow(client, signed_out_store)
                    await flow.start()
                    results.append((flow.otp_required, flow.state))

        assert results[0] == results[1] == (False, AuthState.READY_TO_SIGN_IN)


class TestCanSubmit:
    def test_needs_username_and_password(self, signed_out_store):
        flow = AuthFlow(FakeClient(), signed_out_store)
        assert flow.can_submit is False
        flow.username = "admin"
        assert flow.can_submit is False
        flow.password = "hunter2"
        assert flow.can_submit is True

    def test_disabled_while_signing_in(self, signed_out_store):
        flow = AuthFlow(FakeClient(), signed_out_store)
        flow.username, flow.password = "admin", "hunter2"
        flow.state = AuthState.SIGNING_IN
        assert flow.can_submit is False


@pytest.mark.asyncio
class TestAuthFlowSubmit:
    async def test_success_authenticates_once(self, signed_out_store):
        client = FakeClient(auth_results=[AuthResult(success=True)])
        flow = AuthFlow(client, signed_out_store)
        await flow.start()
        flow.username, flow.password = "admin", "hunter2"
        transitions = _record(flow)
        session_changes = []
        signed_out_store.subscribe(session_changes.append)

        assert await flow.submit() is True

        assert transitions == [AuthState.SIGNING_IN, AuthState.AUTHENTICATED]
        assert flow.state is AuthState.AUTHENTICATED
        assert signed_out_store.authenticated is True
        assert len(session_changes) == 1
        assert client.call_names().count("authenticate") == 1

    async def test_otp_required_but_missing(self, signed_out_store):
        client = FakeClient(otp_enabled=True, auth_results=[AuthResult(success=False, message="TOTP required")])
        flow = AuthFlow(client, signed_out_store)
        await flow.start()
        flow.username, flow.password = "admin", "hunter2"
        transitions = _record(flow)

        assert await flow.submit() is False

        assert client.submitted[0].otp is None
        assert client.submitted[0].to_payload()["totp"] == ""
        assert flow.error == "TOTP required"
        assert transitions == [AuthState.SIGNING_IN, AuthState.FAILED, AuthState.READY_TO_SIGN_IN]
        assert flow.state is AuthState.READY_TO_SIGN_IN
        assert signed_out_store.authenticated is False

    async def test_otp_is_sent(self, signed_out_store):
        client = FakeClient(otp_enabled=True, auth_results=[AuthResult(success=True)])
        flow = AuthFlow(client, signed_out_store)
        await flow.start()
        flow.username, flow.password, flow.otp = "admin", "hunter2", "123456"

        await flow.submit()

        assert client.submitted[0].otp == "123456"

    async def test_repeated_failures_keep_form(self, signed_out_store):
        client = FakeClient(
            auth_results=[
                AuthResult(success=False, message="Sorry, your username or password is incorrect."),
                AuthResult(success=False, message=None),
            ]
        )
        flow = AuthFlow(client, signed_out_store)
        await flow.start()
        flow.username, flow.password = "admin", "hunter2"

        assert await flow.submit() is False
        assert flow.error == "Sorry, your username or password is incorrect."
        assert await flow.submit() is False
        assert flow.error == "Authentication failed"

        assert (flow.username, flow.password) == ("admin", "hunter2")
        assert flow.can_submit is True

    async def test_retry_after_failure(self, signed_out_store):
        client = FakeClient(auth_results=[AuthResult(success=False, message="Network error"), AuthResult(success=True)])
        flow = AuthFlow(client, signed_out_store)
        await flow.start()
        flow.username, flow.password = "admin", "hunter2"

        assert await flow.submit() is False
        assert await flow.submit() is True
        assert flow.error is None
        assert signed_out_store.authenticated is True

    async def test_submit_before_start_returns_to_form(self, signed_out_store):
        async with AsyncWGDashboardClient() as client:
            flow = AuthFlow(client, signed_out_store)
            flow.username, flow.password = "admin", "hunter2"
            transitions = _record(flow)

            assert await flow.submit() is False

        assert flow.error == "Authentication failed"
        assert transitions == [AuthState.SIGNING_IN, AuthState.FAILED, AuthState.READY_TO_SIGN_IN]
        assert flow.can_submit is True
        assert signed_out_store.authenticated is False

    async def test_incomplete_form_does_not_submit(self, signed_out_store):
        client = FakeClient(auth_results=[AuthResult(success=True)])
        flow = AuthFlow(client, signed_out_store)
        await flow.start()
        flow.username = "admin"

        assert await flow.submit() is False
        assert "authenticate" not in client.call_names()
        assert flow.state is AuthState.READY_TO_SIGN_IN

    async def test_reset_clears_form(self, signed_out_store):
        flow = AuthFlow(FakeClient(otp_enabled=True), signed_out_store)
        await flow.start()
        flow.username, flow.password, flow.otp = "admin", "hunter2", "123456"

        flow.reset()

        assert flow.state is AuthState.IDLE
        assert (flow.username, flow.password, flow.otp, flow.otp_required) == ("", "", "", False)
