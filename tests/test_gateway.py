# tests/test_gateway.py

import json

import pytest
import requests

from schooladmin.gateway import ApiError, ApiGateway, Envelope, describe_error

BASE = "http://api.test/api"


def make_response(status=200, body=None, raw=None):
    resp = requests.Response()
    resp.status_code = status
    if raw is not None:
        resp._content = raw
    elif body is not None:
        resp._content = json.dumps(body).encode()
    else:
        resp._content = b""
    resp.headers["Content-Type"] = "application/json"
    return resp


@pytest.fixture
def api(monkeypatch):
    gw = ApiGateway(base_url=BASE + "/")
    gw.sent = []
    gw.reply = make_response(200, {"data": [], "success": True})

    def fake_request(method, url, json=None):
        gw.sent.append((method, url, json))
        if isinstance(gw.reply, Exception):
            raise gw.reply
        return gw.reply

    monkeypatch.setattr(gw.session, "request", fake_request)
    return gw


@pytest.mark.parametrize(
    "call, method, path",
    [
        (lambda g: g.instructors.list(), "GET", "/instructors"),
        (lambda g: g.instructors.get(3), "GET", "/instructors/3"),
        (lambda g: g.instructors.delete(3), "DELETE", "/instructors/3"),
        (lambda g: g.instructors.courses(3), "GET", "/instructors/3/courses"),
        (lambda g: g.courses.get(7), "GET", "/courses/7"),
        (lambda g: g.courses.students(7), "GET", "/courses/7/students"),
        (lambda g: g.courses.assign_instructor(7, 3), "POST", "/courses/7/instructor/3"),
        (lambda g: g.students.courses(5), "GET", "/students/5/courses"),
        (lambda g: g.students.enroll(5, 7), "POST", "/students/5/courses/7"),
        (lambda g: g.students.drop(5, 7), "DELETE", "/students/5/courses/7"),
    ],
)
def test_each_operation_issues_one_request(api, call, method, path):
    call(api)

    assert api.sent == [(method, BASE + path, None)]


def test_create_and_update_send_the_attribute_record(api):
    payload = {"courseName": "Compilers", "credits": 4, "instructorId": 1}

    api.courses.create(payload)
    api.courses.update(9, payload)

    assert api.sent == [
        ("POST", BASE + "/courses", payload),
        ("PUT", BASE + "/courses/9", payload),
    ]


def test_envelope_body_is_unwrapped(api):
    api.reply = make_response(200, {"data": {"id": 1}, "message": "ok", "success": True})

    assert api.students.get(1) == Envelope(data={"id": 1}, message="ok", success=True)


def test_bare_json_is_treated_as_data(api):
    api.reply = make_response(200, [{"id": 1}, {"id": 2}])

    assert api.courses.list().data == [{"id": 1}, {"id": 2}]


def test_empty_body_yields_no_data(api):
    api.reply = make_response(204)

    assert api.courses.delete(1).data is None


def test_network_failure_normalizes_to_no_response(api):
    api.reply = requests.ConnectionError("refused")

    with pytest.raises(ApiError) as exc:
        api.students.list()

    assert exc.value.to_dict() == {"status": None, "message": "No response from server"}
    assert exc.value.kind == ApiError.TRANSPORT


def test_server_error_carries_server_message(api):
    api.reply = make_response(404, {"success": False, "message": "Student not found", "data": None})

    with pytest.raises(ApiError) as exc:
        api.students.get(99)

    assert exc.value.status == 404
    assert exc.value.message == "Student not found"


def test_server_error_without_message_uses_fallback(api):
    api.reply = make_response(502, raw=b"<html>bad gateway</html>")

    with pytest.raises(ApiError) as exc:
        api.students.list()

    assert exc.value.message == "Request failed with status 502"


def test_malformed_success_body_is_a_parse_error(api):
    api.reply = make_response(200, raw=b"{not json")

    with pytest.raises(ApiError) as exc:
        api.courses.list()

    assert exc.value.kind == ApiError.PARSE
    assert exc.value.message == "Malformed response from server"


@pytest.mark.parametrize(
    "call",
    [
        lambda g: g.students.list(),
        lambda g: g.instructors.courses(1),
        lambda g: g.courses.students(1),
        lambda g: g.students.courses(1),
    ],
)
def test_collection_that_is_not_a_list_is_a_parse_error(api, call):
    api.reply = make_response(200, {"data": {"id": 1}, "success": True})

    with pytest.raises(ApiError) as exc:
        call(api)

    assert exc.value.kind == ApiError.PARSE
    assert describe_error(exc.value) == "Malformed response from server"


def test_single_record_may_be_an_object(api):
    api.reply = make_response(200, {"data": {"id": 1}, "success": True})

    assert api.students.get(1).data == {"id": 1}


def test_explicit_unsuccessful_envelope_is_an_error(api):
    api.reply = make_response(200, {"success": False, "message": "Course is full", "data": None})

    with pytest.raises(ApiError, match="Course is full"):
        api.students.enroll(1, 2)


@pytest.mark.parametrize(
    "status, message, expected",
    [
        (400, "credits", "Invalid request: credits"),
        (401, "x", "Unauthorized access"),
        (403, "x", "Access forbidden"),
        (404, "Student 9", "Not found: Student 9"),
        (500, "boom", "Server error occurred"),
        (409, "Already enrolled", "Already enrolled"),
    ],
)
def test_describe_error_by_status(status, message, expected):
    assert describe_error(ApiError(status, message)) == expected


def test_describe_transport_error():
    err = ApiError(None, "No response from server", ApiError.TRANSPORT)

    assert describe_error(err) == "No response from server"


def test_init_app_registers_extension():
    from flask import Flask

    app = Flask(__name__)
    app.config["API_BASE_URL"] = "http://elsewhere/api/"
    gw = ApiGateway(app)

    assert app.extensions["school_api"] is gw
    assert gw.base_url == "http://elsewhere/api"
