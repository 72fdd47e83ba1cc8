"""Tests for observable state, connectivity monitors and app wiring."""

import asyncio
from unittest.mock import patch

import pytest

from delcom_client.config.settings import DelcomSettings
from delcom_client.core.connectivity import AlwaysOnline, SocketConnectivity, StaticConnectivity
from delcom_client.core.context import create_app_context
from delcom_client.viewmodels import ActionResult, ActionState, Observable

from fakes import FakeBackend, profile_json


class TestObservable:

    def test_notifies_on_change_only(self) -> None:
        observable = Observable(1)
        seen = []
        observable.subscribe(seen.append)

        observable.value = 1
        observable.value = 2

        assert seen == [2]

    def test_unsubscribe(self) -> None:
        observable = Observable("a")
        seen = []
        unsubscribe = observable.subscribe(seen.append)

        unsubscribe()
        observable.value = "b"

        assert seen == []


class TestActionResult:

    def test_success(self) -> None:
        result = ActionResult.success(5, "done")
        assert result.ok
        assert result.state is ActionState.SUCCESS
        assert result.value == 5

    def test_failure(self) -> None:
        result = ActionResult.failure("nope")
        assert not result.ok
        assert result.value is None
        assert result.message == "nope"


class TestConnectivity:

    @pytest.mark.asyncio
    async def test_static(self) -> None:
        monitor = StaticConnectivity(False)
        assert await monitor.is_available() is False
        monitor.available = True
        assert await monitor.is_available() is True

    def test_socket_port_from_scheme(self) -> None:
        assert SocketConnectivity("https://api.test/api/v1/").port == 443
        assert SocketConnectivity("http://api.test/").port == 80
        assert SocketConnectivity("http://api.test:8080/").port == 8080

    @pytest.mark.asyncio
    async def test_socket_probe_failure(self) -> None:
        monitor = SocketConnectivity("https://api.test/api/v1/")

        with patch("asyncio.open_connection", side_effect=OSError("unreachable")) as mock_open:
            assert await monitor.is_available() is False

        mock_open.assert_called_once_with("api.test", 443)

    @pytest.mark.asyncio
    async def test_socket_probe_reaches_local_server(self) -> None:
        server = await asyncio.start_server(lambda reader, writer: writer.close(), "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        try:
            assert await SocketConnectivity(f"http://127.0.0.1:{port}/").is_available() is True
        finally:
            server.close()
            await server.wait_closed()


class TestAppContext:

    @pytest.mark.asyncio
    async def test_view_models_share_session(self, tmp_path) -> None:
        backend = FakeBackend()
        backend.on("GET", "users/me", json=profile_json())
        settings = DelcomSettings(_env_file=None, data_dir=tmp_path, cache_dir=tmp_path / "cache")

        context = create_app_context(settings, transport=backend.transport, connectivity=AlwaysOnline())
        async with context:
            context.session.token = "shared"
            result = await context.profile.load_profile()

        assert result.ok
        assert context.auth.session is context.posts.session is context.profile.session
        assert context.preferences.path == settings.preferences_path
        assert backend.requests[0].headers["Authorization"] == "Bearer shared"

    def test_connectivity_probe_can_be_disabled(self, tmp_path) -> None:
        settings = DelcomSettings(_env_file=None, data_dir=tmp_path, cache_dir=tmp_path, check_connectivity=False)

        context = create_app_context(settings)

        assert isinstance(context.connectivity, AlwaysOnline)
