"""Enrollment editing for one student or one course.

Both sides edit the same Student x Course edge. The student side picks
from all courses, the course side from all students; enroll and drop
always go through ``/students/{id}/courses/{courseId}``.

State machine::

    IDLE --open_picker--> PICKER_OPEN --enroll--> SUBMITTING --ok--> IDLE
                              ^                        |
                              +--------- failure ------+

    IDLE --request_drop--> CONFIRMING --resolve_drop(yes)--> SUBMITTING --> IDLE
                               |
                               +--resolve_drop(no)--> IDLE

Local collections only change after a successful re-fetch.
"""
from enum import Enum
from typing import Callable, Optional

from .entities import COURSE, STUDENT, EntityKind, same_id
from .gateway import ApiError
from .screens import ViewState


class EnrollmentState(str, Enum):
    IDLE = "idle"
    PICKER_OPEN = "picker_open"
    CONFIRMING = "confirming"
    SUBMITTING = "submitting"


class EnrollmentManager(ViewState):
    # kind of the records listed in the enrolled collection / picker
    member_kind: EntityKind

    def __init__(self, gateway, owner_id, notifier, runner=None):
        super().__init__(notifier, runner)
        self.gateway = gateway
        self.owner_id = owner_id
        self.state = EnrollmentState.IDLE
        self.enrolled = []
        self.catalog = []
        self.catalog_loaded = False
        self.pending_drop = None

    # --- scope hooks ---

    def _fetch_enrolled(self):
        raise NotImplementedError

    def _fetch_catalog(self):
        raise NotImplementedError

    def _enroll(self, member_id):
        raise NotImplementedError

    def _drop(self, member_id):
        raise NotImplementedError

    # --- queries ---

    @property
    def available(self):
        taken = {str(m.get("id")) for m in self.enrolled}
        return [m for m in self.catalog if str(m.get("id")) not in taken]

    def is_enrolled(self, member_id) -> bool:
        return any(same_id(m.get("id"), member_id) for m in self.enrolled)

    def _member(self, collection, member_id):
        return next((m for m in collection if same_id(m.get("id"), member_id)), None)

    def _label(self, member_id, collection=None):
        member = self._member(collection if collection is not None else self.catalog, member_id)
        return self.member_kind.display(member) if member else f"{self.member_kind.name} {member_id}"

    # --- loading ---

    def load(self) -> bool:
        ok = self.refresh()
        ok_catalog, data = self._fetch(self._fetch_catalog,
                                       failure=f"Could not load available {self.member_kind.plural}")
        if ok_catalog:
            self._apply(catalog=list(data or []), catalog_loaded=True)
        return ok and ok_catalog

    def refresh(self) -> bool:
        """Re-fetch the enrolled collection; the only way it ever changes."""
        ok, data = self._fetch(self._fetch_enrolled,
                               failure=f"Could not load enrolled {self.member_kind.plural}")
        if ok:
            self._apply(enrolled=list(data or []))
        return ok

    # --- enroll ---

    def open_picker(self) -> bool:
        if self.state != EnrollmentState.IDLE:
            return False
        if not self.catalog_loaded:
            # the failed catalog fetch already reported why
            return False
        if not self.available:
            self._notify("warning", f"There are no {self.member_kind.plural} left to add")
            return False
        return self._apply(state=EnrollmentState.PICKER_OPEN)

    def enroll(self, member_id) -> bool:
        if self.state != EnrollmentState.PICKER_OPEN:
            return False
        if not member_id:
            self._notify("warning", f"Select a {self.member_kind.name} first")
            return False
        if self.is_enrolled(member_id):
            self._notify("error", f"{self._label(member_id, self.enrolled)} is already enrolled")
            return False
        if self._member(self.available, member_id) is None:
            self._notify("error", f"{self.member_kind.title} {member_id} is not available")
            return False

        label = self._label(member_id)
        self._apply(state=EnrollmentState.SUBMITTING)
        try:
            self.runner.execute(self._enroll, member_id)
        except ApiError:
            self._apply(state=EnrollmentState.PICKER_OPEN)
            self._notify("error", f"Enrollment failed: {self.runner.error}")
            return False
        self._notify("success", f"Enrolled {label}")
        self.refresh()
        self._apply(state=EnrollmentState.IDLE)
        return True

    # --- drop ---

    def drop_prompt(self, member_id) -> str:
        raise NotImplementedError

    def request_drop(self, member_id) -> Optional[str]:
        """Move to CONFIRMING and return the prompt, or None if refused."""
        if self.state != EnrollmentState.IDLE:
            return None
        if not self.is_enrolled(member_id):
            self._notify("error", f"{self.member_kind.title} {member_id} is not enrolled")
            return None
        self._apply(state=EnrollmentState.CONFIRMING, pending_drop=member_id)
        return self.drop_prompt(member_id)

    def resolve_drop(self, confirmed: bool) -> bool:
        if self.state != EnrollmentState.CONFIRMING:
            return False
        member_id = self.pending_drop
        self._apply(pending_drop=None)
        if not confirmed:
            self._apply(state=EnrollmentState.IDLE)
            return False

        label = self._label(member_id, self.enrolled)
        self._apply(state=EnrollmentState.SUBMITTING)
        try:
            self.runner.execute(self._drop, member_id)
        except ApiError:
            self._apply(state=EnrollmentState.IDLE)
            self._notify("error", f"Could not remove the enrollment: {self.runner.error}")
            return False
        self._notify("success", f"Removed {label}")
        self.refresh()
        self._apply(state=EnrollmentState.IDLE)
        return True

    def drop(self, member_id, confirm: Callable[[str], bool]) -> bool:
        prompt = self.request_drop(member_id)
        if prompt is None:
            return False
        return self.resolve_drop(bool(confirm(prompt)))


class StudentEnrollments(EnrollmentManager):
    """Courses of one student; the picker offers courses."""

    member_kind = COURSE

    def _fetch_enrolled(self):
        return self.gateway.students.courses(self.owner_id)

    def _fetch_catalog(self):
        return self.gateway.courses.list()

    def _enroll(self, course_id):
        return self.gateway.students.enroll(self.owner_id, course_id)

    def _drop(self, course_id):
        return self.gateway.students.drop(self.owner_id, course_id)

    def drop_prompt(self, course_id):
        return f"Drop {self._label(course_id, self.enrolled)} for this student?"

    def stats(self):
        credits = [int(c.get("credits") or 0) for c in self.enrolled]
        total = sum(credits)
        return {
            "courses": len(credits),
            "credits": total,
            "average": round(total / len(credits), 1) if credits else 0,
        }


class CourseEnrollments(EnrollmentManager):
    """Students of one course; the picker offers students."""

    member_kind = STUDENT

    def _fetch_enrolled(self):
        return self.gateway.courses.students(self.owner_id)

    def _fetch_catalog(self):
        return self.gateway.students.list()

    def _enroll(self, student_id):
        return self.gateway.students.enroll(student_id, self.owner_id)

    def _drop(self, student_id):
        return self.gateway.students.drop(student_id, self.owner_id)

    def drop_prompt(self, student_id):
        return f"Remove {self._label(student_id, self.enrolled)} from this course?"
