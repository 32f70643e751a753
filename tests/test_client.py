import json
import logging
from typing import Awaitable, List, Union, get_type_hints

import pytest
import requests

from luarmor import (
    LuarmorClient,
    LuarmorClientError,
    LuarmorSettings,
    LuarmorTransportError,
    RequestsTransport,
)
from luarmor.messages import Message, MessageKind
from luarmor.models import ApiKeyDetailsResponse, User


class _DummyResponse:
    def __init__(self, status_code: int, payload=None, url: str = ""):
        self.status_code = status_code
        self.content = json.dumps(payload).encode("utf-8") if payload is not None else b""
        self.url = url


class _FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []
        self.closed = False

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "params": params,
                "json": json,
                "headers": headers,
                "timeout": timeout,
            }
        )
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        response.url = response.url or url
        return response

    def close(self):
        self.closed = True


def _user(user_key="abc123", **overrides):
    payload = {
        "user_key": user_key,
        "identifier": "",
        "identifier_type": "none",
        "discord_id": "",
        "status": "reset",
        "last_reset": 0,
        "total_resets": 0,
        "auth_expire": -1,
        "banned": 0,
        "ban_reason": "",
        "ban_expire": -1,
        "unban_token": "",
        "total_executions": 0,
        "note": "",
        "ban_ip": "",
    }
    payload.update(overrides)
    return payload


def _client(session, project_id="p1"):
    transport = RequestsTransport(session=session, timeout=5)
    return LuarmorClient("secret", project_id=project_id, transport=transport)


def test_create_user_sends_request_and_returns_key():
    session = _FakeSession(
        _DummyResponse(200, {"success": True, "message": "Success!", "user_key": "abc123"})
    )
    client = _client(session)

    user_key = client.create_user(note="vip", key_days=30)

    assert user_key == "abc123"
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://api.luarmor.net/v3/projects/p1/users"
    assert call["json"] == {"note": "vip", "key_days": 30}
    assert call["headers"]["Authorization"] == "secret"
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["params"] is None
    assert call["timeout"] == 5


def test_get_users_with_user_key_filter():
    session = _FakeSession(
        _DummyResponse(200, {"success": True, "message": "Success!", "users": [_user()]})
    )
    client = _client(session)

    users = client.get_users(user_key="abc123")

    assert [user.user_key for user in users] == ["abc123"]
    assert users[0].never_expires is True
    assert session.calls[0]["params"] == [("user_key", "abc123")]
    assert session.calls[0]["json"] is None
    assert "Content-Type" not in session.calls[0]["headers"]


def test_get_users_failure_raises_client_error():
    session = _FakeSession(_DummyResponse(200, {"success": False, "message": "Key not found"}))
    client = _client(session)

    with pytest.raises(LuarmorClientError) as excinfo:
        client.get_users(user_key="missing")

    assert excinfo.value.kind is MessageKind.KEY_NOT_FOUND


def test_get_user_returns_first_match_or_none():
    session = _FakeSession(
        _DummyResponse(
            200, {"success": True, "message": "Success!", "users": [_user("a"), _user("b")]}
        ),
        _DummyResponse(200, {"success": True, "message": "Success!", "users": []}),
    )
    client = _client(session)

    assert client.get_user(discord_id="42").user_key == "a"
    assert client.get_user(discord_id="43") is None
    assert session.calls[1]["params"] == [("discord_id", "43")]


def test_operations_without_data_return_server_message():
    session = _FakeSession(
        _DummyResponse(200, {"success": True, "message": "Successfully reset!"}),
        _DummyResponse(200, {"success": True, "message": "Discord ID successfully linked!"}),
        _DummyResponse(200, {"success": True, "message": "User has been deleted!"}),
    )
    client = _client(session)

    assert client.reset_hwid("abc", force=True).kind is MessageKind.SUCCESS_RESET
    assert client.link_discord("abc", "42").kind is MessageKind.DISCORD_ID_SUCCESS
    assert client.delete_user("abc").kind is MessageKind.USER_DELETED

    assert session.calls[0]["json"] == {"user_key": "abc", "force": True}
    assert session.calls[1]["url"].endswith("/users/linkdiscord")
    assert session.calls[2]["method"] == "DELETE"


def test_explicit_project_overrides_default():
    session = _FakeSession(_DummyResponse(200, {"success": True, "message": "Success!"}))
    client = _client(session)

    client.unblacklist_user("t" * 32, project_id="other")

    assert session.calls[0]["url"] == "https://api.luarmor.net/v3/projects/other/users/unban"
    assert session.calls[0]["params"] == [("unban_token", "t" * 32)]


def test_missing_project_raises_before_request():
    session = _FakeSession()
    client = _client(session, project_id=None)

    with pytest.raises(ValueError):
        client.delete_user("abc")

    assert session.calls == []


def test_key_operations_use_client_api_key():
    session = _FakeSession(
        _DummyResponse(
            200,
            {
                "success": True,
                "message": "Success!",
                "execution_data": {"frequency": 60, "executions": []},
                "stats": {
                    "obfuscations": 1,
                    "scripts": 1,
                    "users": 3,
                    "attacks_blocked": 0,
                    "default": {"scripts": 1, "users": 10, "obfuscations": 1},
                    "reset_at": 1700000000,
                },
            },
        )
    )
    client = _client(session)

    stats = client.key_stats(no_users=False)

    assert stats.stats.users == 3
    assert session.calls[0]["url"] == "https://api.luarmor.net/v3/keys/secret/stats"
    assert session.calls[0]["params"] == [("noUsers", "false")]


def test_update_script_sends_put():
    session = _FakeSession(_DummyResponse(200, {"success": True, "message": "Success!"}))
    client = _client(session)

    client.update_script("s1", "print(1)", silent=True)

    assert session.calls[0]["method"] == "PUT"
    assert session.calls[0]["json"] == {"script": "print(1)", "silent": True, "heartbeat": True}


def test_network_failure_becomes_transport_error():
    session = _FakeSession(requests.ConnectionError("refused"))
    client = _client(session)

    with pytest.raises(LuarmorTransportError) as excinfo:
        client.status()

    assert excinfo.value.response is None
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_empty_server_error_becomes_transport_error():
    session = _FakeSession(_DummyResponse(502))
    client = _client(session)

    with pytest.raises(LuarmorTransportError) as excinfo:
        client.blacklist_user("abc", ban_reason="cheating")

    assert excinfo.value.status_code == 502


def test_client_errors_are_logged_without_api_key(caplog):
    session = _FakeSession(_DummyResponse(401, {"success": False, "message": "Wrong API key"}))
    client = _client(session)

    with caplog.at_level(logging.DEBUG, logger="luarmor"):
        with pytest.raises(LuarmorClientError):
            client.update_user("abc", note="x")

    assert "Wrong API key" in caplog.text
    assert "secret" not in caplog.text


def test_key_paths_are_redacted_in_logs(caplog):
    session = _FakeSession(_DummyResponse(200, {"success": False, "message": "Wrong API key"}))
    client = _client(session)

    with caplog.at_level(logging.DEBUG, logger="luarmor"):
        with pytest.raises(LuarmorClientError):
            client.key_details()

    assert "/v3/keys/***/details" in caplog.text
    assert "secret" not in caplog.text


def test_from_settings_uses_settings_values():
    settings = LuarmorSettings(
        api_key="secret", project_id="p9", api_base_url="https://proxy.test", timeout_seconds=3
    )

    client = LuarmorClient.from_settings(settings)

    assert client.project_id == "p9"
    assert client.base_url == "https://proxy.test"
    assert client.transport.timeout == 3
    assert "secret" not in repr(client)
    client.close()


def test_from_env_reads_environment(monkeypatch):
    monkeypatch.setenv("LUARMOR_API_KEY", "env-key")
    monkeypatch.setenv("LUARMOR_PROJECT_ID", "p2")

    client = LuarmorClient.from_env()

    assert client.api_key == "env-key"
    assert client.project_id == "p2"
    client.close()


def test_context_manager_leaves_injected_session_open():
    session = _FakeSession()

    with _client(session):
        pass

    assert session.closed is False


def test_client_requires_api_key():
    with pytest.raises(ValueError):
        LuarmorClient("")


@pytest.mark.parametrize(
    "method, result",
    [
        (LuarmorClient.create_user, str),
        (LuarmorClient.get_users, List[User]),
        (LuarmorClient.key_details, ApiKeyDetailsResponse),
        (LuarmorClient.delete_user, Message),
    ],
)
def test_operation_signatures_name_result_types(method, result):
    assert get_type_hints(method)["return"] == Union[result, Awaitable[result]]
