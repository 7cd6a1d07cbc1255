"""HTTP client for the remote school records API.

Every call issues exactly one request and either returns an ``Envelope`` or
raises ``ApiError`` carrying a normalized ``{status, message}``.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)

NO_RESPONSE = "No response from server"
MALFORMED = "Malformed response from server"

@dataclass
class Envelope:
    data: Any = None
    message: Optional[str] = None
    success: Optional[bool] = None

class ApiError(Exception):
    TRANSPORT = "transport"
    SERVER = "server"
    PARSE = "parse"

    def __init__(self, status: Optional[int], message: str, kind: str = SERVER):
        super().__init__(message)
        self.status = status
        self.message = message
        self.kind = kind

    def to_dict(self):
        return {"status": self.status, "message": self.message}

def describe_error(err: ApiError) -> str:
    if err.status is None:
        return NO_RESPONSE if err.kind == ApiError.TRANSPORT else err.message
    if err.status == 400:
        return f"Invalid request: {err.message}"
    if err.status == 401:
        return "Unauthorized access"
    if err.status == 403:
        return "Access forbidden"
    if err.status == 404:
        return f"Not found: {err.message}"
    if err.status == 500:
        return "Server error occurred"
    return err.message

def _body_message(resp):
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("message")
    return None

def _to_envelope(resp) -> Envelope:
    if not resp.content:
        return Envelope()
    try:
        body = resp.json()
    except ValueError:
        raise ApiError(resp.status_code, MALFORMED, ApiError.PARSE)
    if isinstance(body, dict) and "data" in body:
        env = Envelope(body.get("data"), body.get("message"), body.get("success"))
        if env.success is False:
            raise ApiError(resp.status_code, env.message or "Request was not successful")
        return env
    return Envelope(data=body)


class ApiGateway:
    """Flask extension owning the HTTP session and the resource clients."""

    def __init__(self, app=None, base_url=None):
        self.base_url = (base_url or "").rstrip("/")
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json",
                                     "Accept": "application/json"})
        self.instructors = InstructorClient(self)
        self.courses = CourseClient(self)
        self.students = StudentClient(self)
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.base_url = app.config["API_BASE_URL"].rstrip("/")
        app.extensions["school_api"] = self

    def request(self, method: str, path: str, payload: Optional[dict] = None) -> Envelope:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(method, url, json=payload)
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise ApiError(None, NO_RESPONSE, ApiError.TRANSPORT) from e

        if not 200 <= resp.status_code < 300:
            message = _body_message(resp) or f"Request failed with status {resp.status_code}"
            logger.warning("%s %s -> %s %s", method, url, resp.status_code, message)
            raise ApiError(resp.status_code, message)
        return _to_envelope(resp)


class ResourceClient:
    path = ""

    def __init__(self, gateway: ApiGateway):
        self.gateway = gateway

    def _call(self, method, suffix="", payload=None):
        return self.gateway.request(method, f"/{self.path}{suffix}", payload)

    def _collection(self, suffix=""):
        envelope = self._call("GET", suffix)
        if envelope.data is not None and not isinstance(envelope.data, list):
            logger.warning("GET /%s%s returned %s instead of a list",
                           self.path, suffix, type(envelope.data).__name__)
            raise ApiError(None, MALFORMED, ApiError.PARSE)
        return envelope

    def list(self):
        return self._collection()

    def get(self, entity_id):
        return self._call("GET", f"/{entity_id}")

    def create(self, data: dict):
        return self._call("POST", payload=data)

    def update(self, entity_id, data: dict):
        return self._call("PUT", f"/{entity_id}", data)

    def delete(self, entity_id):
        return self._call("DELETE", f"/{entity_id}")

class InstructorClient(ResourceClient):
    path = "instructors"

    def courses(self, instructor_id):
        return self._collection(f"/{instructor_id}/courses")

class CourseClient(ResourceClient):
    path = "courses"

    def students(self, course_id):
        return self._collection(f"/{course_id}/students")

    def assign_instructor(self, course_id, instructor_id):
        return self._call("POST", f"/{course_id}/instructor/{instructor_id}")

class StudentClient(ResourceClient):
    path = "students"

    def courses(self, student_id):
        return self._collection(f"/{student_id}/courses")

    def enroll(self, student_id, course_id):
        return self._call("POST", f"/{student_id}/courses/{course_id}")

    def drop(self, student_id, course_id):
        return self._call("DELETE", f"/{student_id}/courses/{course_id}")
