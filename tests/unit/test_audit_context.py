"""Unit tests for audit context module."""

from dataclasses import FrozenInstanceError

import pytest

from src.gatekeeper.core.audit_context import (
    MAX_USER_AGENT_LENGTH,
    AuditContext,
    get_audit_context,
    get_client_ip,
    reset_audit_context,
    set_audit_context,
)

pytestmark = pytest.mark.unit


class TestAuditContext:
    def test_audit_context_is_immutable(self):
        ctx = AuditContext(ip_address="1.2.3.4")
        with pytest.raises(FrozenInstanceError):
            ctx.ip_address = "5.6.7.8"  # type: ignore[misc]


class TestSetAndResetAuditContext:
    def test_set_and_get_context(self):
        token = set_audit_context(
            ip_address="192.168.1.1",
            user_agent="Mozilla/5.0",
            request_id="abc-123",
        )
        try:
            ctx = get_audit_context()
            assert ctx is not None
            assert ctx.ip_address == "192.168.1.1"
            assert ctx.user_agent == "Mozilla/5.0"
            assert ctx.request_id == "abc-123"
        finally:
            reset_audit_context(token)

    def test_reset_restores_previous_context(self):
        outer = set_audit_context(ip_address="10.0.0.1")
        inner = set_audit_context(ip_address="10.0.0.2")

        reset_audit_context(inner)
        ctx = get_audit_context()
        assert ctx is not None
        assert ctx.ip_address == "10.0.0.1"

        reset_audit_context(outer)
        assert get_audit_context() is None

    def test_user_agent_truncation(self):
        token = set_audit_context(user_agent="x" * 600)
        try:
            ctx = get_audit_context()
            assert ctx is not None
            assert len(ctx.user_agent) == MAX_USER_AGENT_LENGTH
        finally:
            reset_audit_context(token)


class TestGetClientIp:
    def test_returns_first_ip_from_forwarded_for(self):
        assert get_client_ip("1.2.3.4, 5.6.7.8, 9.10.11.12", "192.168.1.1") == "1.2.3.4"

    def test_strips_whitespace_from_forwarded_for(self):
        assert get_client_ip("  1.2.3.4  , 5.6.7.8", "192.168.1.1") == "1.2.3.4"

    def test_returns_client_host_when_no_forwarded_for(self):
        assert get_client_ip(None, "192.168.1.1") == "192.168.1.1"
        # Empty string is falsy, so the client host wins
        assert get_client_ip("", "192.168.1.1") == "192.168.1.1"

    def test_returns_none_when_both_are_none(self):
        assert get_client_ip(None, None) is None

    def test_handles_ipv6(self):
        assert get_client_ip("2001:db8::1, 2001:db8::2", None) == "2001:db8::1"
