import json
from dataclasses import dataclass

import pytest

from luarmor.endpoint import Endpoint
from luarmor.envelope import RawResponse, finalise, parse_envelope
from luarmor.errors import (
    LuarmorClientError,
    LuarmorSerializationError,
    LuarmorTransportError,
)
from luarmor.messages import MessageKind
from luarmor.models import ApiStatus, CreateUser, DeleteUser, GetUsers


@dataclass(frozen=True)
class _LenientEndpoint(Endpoint):
    ignore_errors = True

    def path(self) -> str:
        return "/lenient"


def _response(status_code, payload=None, body=None):
    if body is None:
        body = json.dumps(payload).encode("utf-8") if payload is not None else b""
    return RawResponse(status_code=status_code, body=body, url="https://api.luarmor.net/x")


def test_parse_envelope_splits_flat_payload():
    envelope = parse_envelope(
        b'{"success": true, "message": "Success!", "user_key": "abc", "extra": 1}'
    )

    assert envelope.success is True
    assert envelope.message.kind is MessageKind.SUCCESS
    assert envelope.data == {"user_key": "abc", "extra": 1}


def test_parse_envelope_without_payload_has_no_data():
    envelope = parse_envelope(b'{"success": false, "message": "Key not found"}')

    assert envelope.data is None


def test_parse_envelope_rejects_non_boolean_success():
    with pytest.raises(LuarmorSerializationError):
        parse_envelope(b'{"success": "yes", "message": "Success!"}')


def test_parse_envelope_requires_success_flag_by_default():
    with pytest.raises(LuarmorSerializationError):
        parse_envelope(b'{"message": "Success!"}')


def test_parse_envelope_defaults_success_when_flag_is_optional():
    envelope = parse_envelope(
        b'{"message": "API is up and working!", "version": "v3"}', require_success_flag=False
    )

    assert envelope.success is True
    assert envelope.data == {"version": "v3"}


def test_empty_error_body_is_transport_error():
    with pytest.raises(LuarmorTransportError) as excinfo:
        finalise(CreateUser(project_id="p1"), _response(500))

    assert excinfo.value.status_code == 500
    assert excinfo.value.response.body == b""


def test_empty_error_body_with_ignore_errors_is_parsed():
    with pytest.raises(LuarmorSerializationError):
        finalise(_LenientEndpoint(), _response(500))


def test_invalid_json_is_serialization_error():
    with pytest.raises(LuarmorSerializationError) as excinfo:
        finalise(CreateUser(project_id="p1"), _response(200, body=b"<html>502</html>"))

    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.__cause__ is not None


def test_non_object_json_is_serialization_error():
    with pytest.raises(LuarmorSerializationError):
        finalise(CreateUser(project_id="p1"), _response(200, body=b"[1, 2, 3]"))


def test_create_user_returns_user_key():
    result = finalise(
        CreateUser(project_id="p1"),
        _response(200, {"success": True, "message": "Success!", "user_key": "abc123"}),
    )

    assert result == "abc123"


def test_unsuccessful_envelope_raises_client_error():
    with pytest.raises(LuarmorClientError) as excinfo:
        finalise(
            GetUsers(project_id="p1"),
            _response(200, {"success": False, "message": "Key not found"}),
        )

    assert excinfo.value.kind is MessageKind.KEY_NOT_FOUND
    assert excinfo.value.status_code == 200
    assert str(excinfo.value) == "Key not found"


def test_unsuccessful_envelope_with_error_status_is_client_error():
    with pytest.raises(LuarmorClientError) as excinfo:
        finalise(
            DeleteUser(project_id="p1", user_key="k"),
            _response(403, {"success": False, "message": "Wrong API key"}),
        )

    assert excinfo.value.kind is MessageKind.INVALID_API_KEY
    assert excinfo.value.status_code == 403


def test_unknown_failure_message_is_preserved():
    with pytest.raises(LuarmorClientError) as excinfo:
        finalise(
            DeleteUser(project_id="p1", user_key="k"),
            _response(429, {"success": False, "message": "Too many requests"}),
        )

    assert excinfo.value.kind is MessageKind.OTHER
    assert excinfo.value.message.raw == "Too many requests"


def test_operation_without_data_returns_message():
    result = finalise(
        DeleteUser(project_id="p1", user_key="k"),
        _response(200, {"success": True, "message": "User has been deleted!"}),
    )

    assert result.kind is MessageKind.USER_DELETED


def test_success_without_payload_is_transport_error():
    with pytest.raises(LuarmorTransportError) as excinfo:
        finalise(CreateUser(project_id="p1"), _response(200, {"success": True, "message": "Success!"}))

    assert excinfo.value.status_code == 200


def test_payload_with_wrong_shape_is_serialization_error():
    with pytest.raises(LuarmorSerializationError):
        finalise(
            GetUsers(project_id="p1"),
            _response(200, {"success": True, "message": "Success!", "count": 0}),
        )


def test_status_route_does_not_need_success_flag():
    result = finalise(
        ApiStatus(),
        _response(
            200,
            {
                "version": "v3",
                "active": True,
                "message": "API is up and working!",
                "warning": False,
                "warning_message": "No warning",
            },
        ),
    )

    assert result.version == "v3"
    assert result.active is True
    assert result.message.kind is MessageKind.API_WORKING
    assert result.warning_message == "No warning"


@pytest.mark.parametrize(
    "users",
    [
        ["abc123"],
        [{"user_key": "abc123", "auth_expire": 1e400}],
        [{"user_key": "abc123", "auth_expire": 100000000000000000000}],
        [{"user_key": "abc123", "auth_expire": 0, "total_resets": 1e400}],
        "abc123",
    ],
)
def test_malformed_user_records_are_serialization_errors(users):
    with pytest.raises(LuarmorSerializationError):
        finalise(
            GetUsers(project_id="p1"),
            _response(200, {"success": True, "message": "Success!", "users": users}),
        )


@pytest.mark.parametrize("active", ["false", "yes"])
def test_status_with_textual_flag_is_serialization_error(active):
    with pytest.raises(LuarmorSerializationError):
        finalise(
            ApiStatus(),
            _response(200, {"version": "v3", "active": active, "message": "API is up and working!"}),
        )
