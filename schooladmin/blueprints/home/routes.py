from flask import render_template
from . import bp

SECTIONS = [
    {"title": "Instructors", "endpoint": "instructors.list_instructors",
     "description": "View and manage the instructor list."},
    {"title": "Courses", "endpoint": "courses.list_courses",
     "description": "View and manage the course catalog."},
    {"title": "Students", "endpoint": "students.list_students",
     "description": "View and manage students and their enrollments."},
]

@bp.get("/")
def index():
    return render_template("home.html", sections=SECTIONS)
