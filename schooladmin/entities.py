from dataclasses import dataclass
from typing import Callable


def full_name(person) -> str:
    if not person:
        return ""
    return f"{person.get('firstName', '')} {person.get('lastName', '')}".strip()

def course_title(course) -> str:
    return (course or {}).get("courseName", "")

def same_id(a, b) -> bool:
    # ids come back as ints from the API and as strings from URLs/forms
    return a is not None and b is not None and str(a) == str(b)


@dataclass(frozen=True)
class EntityKind:
    name: str
    plural: str
    display: Callable[[dict], str]

    @property
    def title(self):
        return self.name.capitalize()

INSTRUCTOR = EntityKind("instructor", "instructors", full_name)
COURSE = EntityKind("course", "courses", course_title)
STUDENT = EntityKind("student", "students", full_name)
