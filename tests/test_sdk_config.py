"""
Tests for the SDK configuration cache and the boolean probes.
"""

import httpx
import pytest
from structlog.testing import capture_logs

from otp_sdk import client as client_module
from otp_sdk.errors import OtpError, OtpTransportError

CONFIG_RESPONSE = {
    "version": "1.0.0",
    "otpConfig": {"length": 6, "ttl": 300, "maxAttempts": 3},
    "rateLimits": {
        "perPhone": {"limit": 5, "window": "1h"},
        "perAccount": {"limit": 1000, "window": "1h"},
        "perIP": {"limit": 50, "window": "1h"},
    },
    "supportedCountries": ["GE", "US"],
    "pricing": {"currency": "GEL", "regions": {}, "defaultPrice": 0.05},
    "features": {
        "georgianLanguage": True,
        "customBranding": True,
        "webhooks": False,
        "idempotency": True,
        "testMode": False,
        "longPolling": False,
        "batchOperations": False,
    },
    "endpoints": {"base": "https://otp.test", "docs": "/docs", "status": "/health"},
}

TEST_MODE_CONFIG = {
    **CONFIG_RESPONSE,
    "features": {**CONFIG_RESPONSE["features"], "testMode": True},
    "testMode": {
        "enabled": True,
        "testPhoneNumbers": ["+15005550006", "+15005550007"],
        "fixedOtpCode": "123456",
    },
}


class FakeTime:
    """Deterministic clock for TTL checks."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.current = start

    def time(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def fake_time(monkeypatch) -> FakeTime:
    clock = FakeTime()
    monkeypatch.setattr(client_module, "time", clock)
    return clock


class TestGetConfig:
    """Tests for get_config caching."""

    @pytest.mark.asyncio
    async def test_fetch_config(self, server, client):
        server.reply(CONFIG_RESPONSE)

        config = await client.get_config()

        assert server.requests[0].method == "GET"
        assert server.requests[0].url.path == "/api/v1/sdk/config"
        assert config.version == "1.0.0"
        assert config.otp_config.max_attempts == 3
        assert config.rate_limits.per_ip.limit == 50
        assert config.pricing.default_price == 0.05
        assert config.features.idempotency is True
        assert config.test_mode is None

    @pytest.mark.asyncio
    async def test_cached_within_ttl(self, server, client, fake_time):
        """Two calls inside the hour: one fetch."""
        server.reply(CONFIG_RESPONSE)

        first = await client.get_config()
        fake_time.advance(3599)
        second = await client.get_config()

        assert server.call_count == 1
        assert second is first

    @pytest.mark.asyncio
    async def test_refetch_after_ttl(self, server, client, fake_time):
        server.reply(CONFIG_RESPONSE).reply({**CONFIG_RESPONSE, "version": "1.1.0"})

        await client.get_config()
        fake_time.advance(3600)
        config = await client.get_config()

        assert server.call_count == 2
        assert config.version == "1.1.0"

    @pytest.mark.asyncio
    async def test_force_refresh(self, server, client, fake_time):
        """force_refresh always fetches."""
        server.reply(CONFIG_RESPONSE).reply({**CONFIG_RESPONSE, "version": "2.0.0"})

        await client.get_config()
        config = await client.get_config(force_refresh=True)

        assert server.call_count == 2
        assert config.version == "2.0.0"

    @pytest.mark.asyncio
    async def test_failed_fetch_keeps_previous_snapshot(self, server, client, fake_time):
        """A failed refresh must not replace the cached config."""
        server.reply(CONFIG_RESPONSE).fail("INTERNAL_SERVER_ERROR", 500)

        first = await client.get_config()
        with pytest.raises(OtpError):
            await client.get_config(force_refresh=True)
        again = await client.get_config()

        assert again is first
        assert server.call_count == 2

    @pytest.mark.asyncio
    async def test_partial_config_is_accepted(self, server, client):
        """Missing sections fall back to defaults."""
        server.reply({"version": "0.9", "features": {"testMode": True}, "newSection": {"x": 1}})

        config = await client.get_config()

        assert config.features.test_mode is True
        assert config.otp_config.length == 6
        assert config.supported_countries == []

    @pytest.mark.asyncio
    async def test_warns_when_test_mode(self, server, client):
        server.reply(TEST_MODE_CONFIG)

        with capture_logs() as logs:
            config = await client.get_config()

        assert config.test_mode.fixed_otp_code == "123456"
        warnings = [entry for entry in logs if entry["log_level"] == "warning"]
        assert len(warnings) == 1
        assert warnings[0]["test_phone_numbers"] == ["+15005550006", "+15005550007"]

    @pytest.mark.asyncio
    async def test_no_warning_without_test_mode(self, server, client):
        server.reply(CONFIG_RESPONSE)

        with capture_logs() as logs:
            await client.get_config()

        assert [entry for entry in logs if entry["log_level"] == "warning"] == []


class TestConnectionProbe:
    """Tests for test_connection."""

    @pytest.mark.asyncio
    async def test_success(self, server, client):
        server.reply({"success": True, "message": "Connected"})

        assert await client.test_connection() is True
        assert server.requests[0].url.path == "/api/v1/sdk/test"

    @pytest.mark.asyncio
    async def test_service_error(self, server, client):
        server.fail("AUTHENTICATION_FAILED", 401)

        assert await client.test_connection() is False

    @pytest.mark.asyncio
    async def test_network_error(self, server, client):
        server.raise_(httpx.ConnectError("Name or service not known"))

        assert await client.test_connection() is False


class TestIsTestMode:
    """Tests for is_test_mode."""

    @pytest.mark.asyncio
    async def test_enabled(self, server, client):
        server.reply(TEST_MODE_CONFIG)

        assert await client.is_test_mode() is True

    @pytest.mark.asyncio
    async def test_disabled(self, server, client):
        server.reply(CONFIG_RESPONSE)

        assert await client.is_test_mode() is False

    @pytest.mark.asyncio
    async def test_fetch_failure(self, server, client):
        server.raise_(httpx.ConnectError("unreachable"))

        assert await client.is_test_mode() is False

    @pytest.mark.asyncio
    async def test_uses_cache(self, server, client):
        server.reply(TEST_MODE_CONFIG)

        await client.get_config()
        assert await client.is_test_mode() is True
        assert server.call_count == 1


class TestAutoConfig:
    """Tests for the optional prefetch on entering the client context."""

    @pytest.mark.asyncio
    async def test_prefetch(self, server, make_client):
        server.reply(CONFIG_RESPONSE)

        async with make_client(auto_config=True) as client:
            await client.get_config()

        assert server.call_count == 1

    @pytest.mark.asyncio
    async def test_prefetch_failure_is_logged(self, server, make_client):
        server.raise_(httpx.ConnectError("unreachable"))

        with capture_logs() as logs:
            async with make_client(auto_config=True):
                pass

        assert server.call_count == 1
        assert any(entry["event"] == "Failed to auto-fetch SDK configuration" for entry in logs)

    @pytest.mark.asyncio
    async def test_no_prefetch_by_default(self, server, make_client):
        async with make_client():
            pass

        assert server.call_count == 0


class TestErrorCategories:

    @pytest.mark.asyncio
    async def test_config_fetch_errors_propagate(self, server, client):
        """get_config itself does not swallow failures."""
        server.raise_(httpx.ConnectError("unreachable"))

        with pytest.raises(OtpTransportError):
            await client.get_config()
