"""Draft records for the create/edit forms and their client-side checks.

Validation runs before any request; an invalid draft is never sent.
"""
import re
from typing import Optional

from .entities import COURSE, INSTRUCTOR, STUDENT, EntityKind
from .gateway import ApiError
from .runner import RequestRunner

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
MIN_PASSWORD = 6


class EntityForm:
    kind: EntityKind
    fields: tuple = ()
    required: dict = {}
    # never seeded from the server, never sent on update
    write_only: tuple = ()

    def __init__(self, data: Optional[dict] = None, entity_id=None):
        self.entity_id = entity_id
        self.data = {f: "" for f in self.fields}
        for f in self.fields:
            value = (data or {}).get(f)
            if value is None:
                continue
            if isinstance(value, str) and f not in self.write_only:
                value = value.strip()
            self.data[f] = value
        self.errors = {}

    @property
    def editing(self):
        return self.entity_id is not None

    @classmethod
    def from_entity(cls, entity: dict):
        seed = {f: entity.get(f) for f in cls.fields if f not in cls.write_only}
        return cls(seed, entity_id=entity.get("id"))

    @classmethod
    def from_form(cls, form, entity_id=None):
        return cls({f: form.get(f) for f in cls.fields}, entity_id=entity_id)

    def validate(self) -> bool:
        errors = {}
        for f, message in self.required.items():
            value = self.data.get(f)
            if value is None or (isinstance(value, str) and not value.strip()):
                errors[f] = message
        if "email" in self.fields and "email" not in errors:
            if not EMAIL_RE.fullmatch(self.data["email"]):
                errors["email"] = "Enter a valid email address"
        errors.update(self.extra_errors(errors))
        self.errors = errors
        return not errors

    def extra_errors(self, errors) -> dict:
        return {}

    def payload(self) -> dict:
        data = dict(self.data)
        if self.editing:
            for f in self.write_only:
                data.pop(f, None)
        return data

    def submit(self, resource, notifier, runner: Optional[RequestRunner] = None) -> bool:
        """Validate, then create or update; reports the outcome through ``notifier``."""
        runner = runner or RequestRunner()
        if not self.validate():
            notifier.warning("Please fill in all required fields correctly.")
            return False
        name = self.kind.display(self.data)
        try:
            if self.editing:
                runner.execute(resource.update, self.entity_id, self.payload())
            else:
                runner.execute(resource.create, self.payload())
        except ApiError:
            notifier.error(f"Could not save {self.kind.name}: {runner.error}")
            return False
        notifier.success(f"{name} was {'updated' if self.editing else 'created'}")
        return True


class InstructorForm(EntityForm):
    kind = INSTRUCTOR
    fields = ("firstName", "lastName", "email", "department")
    required = {
        "firstName": "First name is required",
        "lastName": "Last name is required",
        "email": "Email is required",
        "department": "Department is required",
    }


class CourseForm(EntityForm):
    kind = COURSE
    fields = ("courseName", "credits", "instructorId")
    required = {
        "courseName": "Course name is required",
        "credits": "Credits are required",
        "instructorId": "Select an instructor",
    }

    @classmethod
    def from_entity(cls, entity):
        instructor = entity.get("instructor") or {}
        seed = {
            "courseName": entity.get("courseName"),
            "credits": entity.get("credits"),
            "instructorId": instructor.get("id", entity.get("instructorId")),
        }
        return cls(seed, entity_id=entity.get("id"))

    def extra_errors(self, errors):
        if "credits" in errors:
            return {}
        try:
            credits = int(str(self.data["credits"]).strip())
        except ValueError:
            return {"credits": "Credits must be a whole number"}
        if credits < 1:
            return {"credits": "Credits must be at least 1"}
        return {}

    def payload(self):
        data = super().payload()
        data["credits"] = int(str(data["credits"]).strip())
        instructor_id = str(data["instructorId"]).strip()
        data["instructorId"] = int(instructor_id) if instructor_id.isdigit() else instructor_id
        return data


class StudentForm(EntityForm):
    kind = STUDENT
    fields = ("firstName", "lastName", "email", "password", "major")
    required = {
        "firstName": "First name is required",
        "lastName": "Last name is required",
        "email": "Email is required",
        "major": "Major is required",
    }
    write_only = ("password",)

    def extra_errors(self, errors):
        if self.editing:
            return {}
        password = self.data.get("password") or ""
        if not password:
            return {"password": "Password is required"}
        if len(password) < MIN_PASSWORD:
            return {"password": f"Password must be at least {MIN_PASSWORD} characters"}
        return {}
