# tests/conftest.py

import pytest

from schooladmin import create_app
from schooladmin.gateway import ApiError, Envelope
from schooladmin.notifications import Notifier


class FakeResource:
    """In-memory stand-in for one resource client of ``ApiGateway``."""

    def __init__(self, gateway, name):
        self.gateway = gateway
        self.name = name
        self.records = {}
        self.next_id = 1
        self.calls = []
        self.fail = {}

    def _check(self, op, *args):
        self.calls.append((op,) + args)
        if op in self.fail:
            raise self.fail[op]

    def _record(self, entity_id):
        record = self.records.get(int(entity_id))
        if record is None:
            raise ApiError(404, f"{self.name} {entity_id} not found")
        return record

    def _public(self, record):
        return {k: v for k, v in record.items() if k != "password"}

    def add(self, **fields):
        record = dict(fields, id=self.next_id)
        self.records[self.next_id] = record
        self.next_id += 1
        return record

    def list(self):
        self._check("list")
        return Envelope(data=[self._public(r) for r in self.records.values()], success=True)

    def get(self, entity_id):
        self._check("get", entity_id)
        return Envelope(data=self._public(self._record(entity_id)), success=True)

    def create(self, data):
        self._check("create", data)
        return Envelope(data=self._public(self.add(**data)), success=True)

    def update(self, entity_id, data):
        self._check("update", entity_id, data)
        record = self._record(entity_id)
        record.update(data)
        return Envelope(data=self._public(record), success=True)

    def delete(self, entity_id):
        self._check("delete", entity_id)
        del self.records[self._record(entity_id)["id"]]
        return Envelope(success=True)


class FakeInstructors(FakeResource):
    def courses(self, instructor_id):
        self._check("courses", instructor_id)
        self._record(instructor_id)
        return Envelope(data=[self.gateway.courses._public(c)
                              for c in self.gateway.courses.records.values()
                              if c.get("instructorId") == int(instructor_id)])

    def delete(self, entity_id):
        if any(c.get("instructorId") == int(entity_id)
               for c in self.gateway.courses.records.values()):
            self.calls.append(("delete", entity_id))
            raise ApiError(400, "Instructor has active courses")
        return super().delete(entity_id)


class FakeCourses(FakeResource):
    def _public(self, record):
        out = dict(record)
        instructor = self.gateway.instructors.records.get(record.get("instructorId"))
        out["instructor"] = dict(instructor) if instructor else None
        return out

    def students(self, course_id):
        self._check("students", course_id)
        self._record(course_id)
        students = self.gateway.students
        return Envelope(data=[students._public(students.records[sid])
                              for sid, cid in sorted(self.gateway.enrollments)
                              if cid == int(course_id)])

    def assign_instructor(self, course_id, instructor_id):
        self._check("assign_instructor", course_id, instructor_id)
        self.gateway.instructors._record(instructor_id)
        self._record(course_id)["instructorId"] = int(instructor_id)
        return Envelope(data=self._public(self._record(course_id)))

    def delete(self, entity_id):
        result = super().delete(entity_id)
        self.gateway.enrollments = {e for e in self.gateway.enrollments if e[1] != int(entity_id)}
        return result


class FakeStudents(FakeResource):
    def courses(self, student_id):
        self._check("courses", student_id)
        self._record(student_id)
        courses = self.gateway.courses
        return Envelope(data=[courses._public(courses.records[cid])
                              for sid, cid in sorted(self.gateway.enrollments)
                              if sid == int(student_id)])

    def enroll(self, student_id, course_id):
        self._check("enroll", student_id, course_id)
        self._record(student_id)
        self.gateway.courses._record(course_id)
        pair = (int(student_id), int(course_id))
        if pair in self.gateway.enrollments:
            raise ApiError(409, "Student is already enrolled in this course")
        self.gateway.enrollments.add(pair)
        return Envelope(data={"studentId": pair[0], "courseId": pair[1]}, success=True)

    def drop(self, student_id, course_id):
        self._check("drop", student_id, course_id)
        pair = (int(student_id), int(course_id))
        if pair not in self.gateway.enrollments:
            raise ApiError(404, "Enrollment not found")
        self.gateway.enrollments.discard(pair)
        return Envelope(success=True)


class FakeGateway:
    def __init__(self):
        self.enrollments = set()
        self.instructors = FakeInstructors(self, "Instructor")
        self.courses = FakeCourses(self, "Course")
        self.students = FakeStudents(self, "Student")


class RecordingNotifier(Notifier):
    def __init__(self):
        super().__init__()
        self.history = []

    def show(self, message, severity="success", duration_ms=None):
        notice = super().show(message, severity, duration_ms)
        self.history.append(notice)
        return notice

    @property
    def severities(self):
        return [n.severity for n in self.history]


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def seeded_gateway(gateway):
    grace = gateway.instructors.add(firstName="Grace", lastName="Hopper",
                                    email="grace@navy.mil", department="Computing")
    gateway.instructors.add(firstName="Edsger", lastName="Dijkstra",
                            email="ewd@utexas.edu", department="Mathematics")
    gateway.courses.add(courseName="Compilers", credits=4, instructorId=grace["id"])
    gateway.courses.add(courseName="Databases", credits=3, instructorId=grace["id"])
    gateway.courses.add(courseName="Logic", credits=2, instructorId=2)
    gateway.students.add(firstName="Ada", lastName="Lovelace", email="ada@example.com",
                         password="secret1", major="math")
    gateway.students.add(firstName="Alan", lastName="Turing", email="alan@example.com",
                         password="secret2", major="cs")
    return gateway


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def app(seeded_gateway):
    app = create_app("config.TestConfig")
    app.extensions["school_api"] = seeded_gateway
    return app


@pytest.fixture
def client(app):
    return app.test_client()
