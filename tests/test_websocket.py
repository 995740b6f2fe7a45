"""
WebSocket endpoint tests.

Runs the full application (authentication middleware, endpoint, router and
handlers) over the test client, with Keycloak and the session store mocked.
"""

import uuid
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from marketplace import application
from marketplace.api.ws.connection import ClientConnection
from marketplace.api.ws.constants import ClientEvent, PkgID, RSPCode
from marketplace.services.connection_lifecycle import ConnectionLifecycle
from tests.mocks.auth_mocks import create_mock_keycloak_manager
from tests.mocks.connection_mocks import InMemorySessionStore

WS_URL = "/ws?Authorization=Bearer%20mock_access_token"


@pytest.fixture
def store(user_session):
    return InMemorySessionStore(user_session)


@pytest.fixture
def app(store):
    app = application()
    app.state.connection_lifecycle = ConnectionLifecycle(
        app.state.connection_registry, store
    )
    return app


@pytest.fixture
def registry(app):
    return app.state.connection_registry


@pytest.fixture
def client(app, mock_user_data):
    manager = create_mock_keycloak_manager(mock_user_data)
    with patch("marketplace.auth.KeycloakManager", return_value=manager):
        yield TestClient(app)


def request_frame(pkg_id: PkgID, data: dict | None = None) -> dict:
    return {"pkg_id": pkg_id, "req_id": str(uuid.uuid4()), "data": data or {}}


class TestConnect:
    def test_valid_session_is_registered(self, client, registry, user_session):
        with client.websocket_connect(WS_URL) as ws:
            assert ws.receive_json() == {
                "event": "Registered",
                "data": "Session registered successfully",
            }
            assert registry.connection_for(user_session.id) is not None
            assert len(registry.connections_for(user_session.user_id)) == 1

        assert registry.stats() == {"users": 0, "connections": 0, "sessions": 0}

    def test_missing_token_is_rejected(self, client, registry):
        with client.websocket_connect("/ws") as ws:
            assert ws.receive_json() == {
                "event": "Error",
                "data": "Session not found in token",
            }
            with pytest.raises(WebSocketDisconnect) as exc:
                ws.receive_json()

        assert exc.value.code == 1008
        assert registry.stats()["connections"] == 0

    def test_token_without_session_claim_is_rejected(
        self, app, mock_user_data
    ):
        del mock_user_data["sid"]
        manager = create_mock_keycloak_manager(mock_user_data)

        with patch("marketplace.auth.KeycloakManager", return_value=manager):
            with TestClient(app).websocket_connect(WS_URL) as ws:
                assert ws.receive_json()["data"] == "Session not found in token"

    def test_malformed_session_claim_is_rejected(self, app, mock_user_data):
        mock_user_data["sid"] = "not-a-uuid"
        manager = create_mock_keycloak_manager(mock_user_data)

        with patch("marketplace.auth.KeycloakManager", return_value=manager):
            with TestClient(app).websocket_connect(WS_URL) as ws:
                assert ws.receive_json()["data"] == "Invalid sessionId format"

    def test_revoked_session_is_rejected(self, client, user_session):
        user_session.is_revoked = True

        with client.websocket_connect(WS_URL) as ws:
            assert ws.receive_json() == {
                "event": "Error",
                "data": "Session invalid or expired",
            }
            with pytest.raises(WebSocketDisconnect) as exc:
                ws.receive_json()

        assert exc.value.code == 1008

    def test_failed_registration_confirmation_cleans_up(
        self, client, registry
    ):
        send_event = ClientConnection.send_event

        async def fail_on_registered(self, event, data=None):
            if event == ClientEvent.REGISTERED:
                raise RuntimeError("client gone")
            await send_event(self, event, data)

        with patch.object(ClientConnection, "send_event", fail_on_registered):
            with client.websocket_connect(WS_URL) as ws:
                with pytest.raises(WebSocketDisconnect) as exc:
                    ws.receive_json()

        assert exc.value.code == 1011
        assert registry.stats() == {"users": 0, "connections": 0, "sessions": 0}

    def test_connect_failure_still_unregisters(self, app, client, registry):
        lifecycle = app.state.connection_lifecycle
        register = lifecycle.register

        async def register_then_fail(connection, session_id):
            await register(connection, session_id)
            raise RuntimeError("boom")

        with patch.object(lifecycle, "register", register_then_fail):
            with pytest.raises(RuntimeError):
                with client.websocket_connect(WS_URL) as ws:
                    ws.receive_json()
                    ws.receive_json()

        assert registry.stats() == {"users": 0, "connections": 0, "sessions": 0}

    def test_session_store_failure_is_rejected(self, client, store):
        store.fail = True

        with client.websocket_connect(WS_URL) as ws:
            assert ws.receive_json() == {
                "event": "Error",
                "data": "Session lookup failed",
            }


class TestMessages:
    def test_request_session_data(self, client, user_session):
        with client.websocket_connect(WS_URL) as ws:
            ws.receive_json()

            frame = request_frame(PkgID.REQUEST_SESSION_DATA)
            ws.send_json(frame)
            response = ws.receive_json()

        assert response["pkg_id"] == PkgID.REQUEST_SESSION_DATA
        assert response["req_id"] == frame["req_id"]
        assert response["status_code"] == RSPCode.OK
        assert response["data"]["id"] == user_session.id
        assert response["data"]["user_id"] == user_session.user_id

    def test_unknown_pkg_id(self, client):
        with client.websocket_connect(WS_URL) as ws:
            ws.receive_json()

            ws.send_json(request_frame(PkgID.UNREGISTERED_HANDLER))
            response = ws.receive_json()

        assert response["status_code"] == RSPCode.ERROR

    def test_invalid_request_closes_connection(self, client, registry):
        with client.websocket_connect(WS_URL) as ws:
            ws.receive_json()

            ws.send_json({"unexpected": True})
            with pytest.raises(WebSocketDisconnect) as exc:
                ws.receive_json()

        assert exc.value.code == 1003
        assert registry.stats()["connections"] == 0

    def test_malformed_json_closes_connection(self, client):
        with client.websocket_connect(WS_URL) as ws:
            ws.receive_json()

            ws.send_text("{not json")
            with pytest.raises(WebSocketDisconnect) as exc:
                ws.receive_json()

        assert exc.value.code == 1003

    def test_force_logout_local(self, client, registry, user_session):
        with client.websocket_connect(WS_URL) as ws:
            ws.receive_json()

            ws.send_json(
                request_frame(
                    PkgID.FORCE_LOGOUT_LOCAL, {"session_id": user_session.id}
                )
            )
            assert ws.receive_json() == {
                "event": "ForceLogout",
                "data": "Your session was terminated",
            }
            with pytest.raises(WebSocketDisconnect):
                ws.receive_json()

        assert registry.connection_for(user_session.id) is None


class TestSessionScenario:
    def test_revoked_session_fails_re_registration(
        self, client, registry, user_session
    ):
        with client.websocket_connect(WS_URL) as ws:
            assert ws.receive_json()["event"] == ClientEvent.REGISTERED

            ws.send_json(request_frame(PkgID.REQUEST_SESSION_DATA))
            assert ws.receive_json()["data"]["id"] == user_session.id

            user_session.is_revoked = True

            ws.send_json(request_frame(PkgID.RE_REGISTER_SESSION))
            assert ws.receive_json() == {
                "event": "Error",
                "data": "Session invalid or expired",
            }
            with pytest.raises(WebSocketDisconnect) as exc:
                ws.receive_json()

        assert exc.value.code == 1008
        assert registry.connection_for(user_session.id) is None

    def test_notification_reaches_connected_user(
        self, app, client, user_session
    ):
        from marketplace.schemas.notification import NotificationModel

        with client.websocket_connect(WS_URL) as ws:
            ws.receive_json()

            [connection] = app.state.connection_registry.connections_for(
                user_session.user_id
            )
            notification = NotificationModel(
                id="n-1", message="Order shipped", to=user_session.user_id
            )
            dispatcher = app.state.notification_dispatcher
            # Sends must run on the loop owning the socket
            ws.portal.call(dispatcher.send_notification, notification)

            frame = ws.receive_json()

        assert frame["event"] == "ReceiveNotification"
        assert frame["data"]["message"] == "Order shipped"
        assert frame["data"]["from"] == "System"
        assert connection.is_registered is False
