from flask import render_template, request, redirect, url_for
from ...entities import STUDENT, full_name
from ...enrollment import StudentEnrollments
from ...extensions import get_gateway
from ...filters import distinct_majors, filter_students
from ...forms import StudentForm
from ...notifications import get_notifier
from ...screens import DetailScreen, ListScreen
from ..common import confirmed, render_confirm, render_picker
from . import bp

def list_screen(notifier):
    return ListScreen(get_gateway().students, STUDENT, notifier, matcher=filter_students)

def detail_screen(sid, notifier):
    return DetailScreen(get_gateway().students, STUDENT, sid, notifier)

@bp.get("")
def list_students():
    q     = (request.args.get("q") or "").strip()
    major = (request.args.get("major") or "").strip()
    screen = list_screen(get_notifier())
    screen.load()
    return render_template("students/list.html", screen=screen,
                           items=screen.filtered(q, major=major),
                           majors=distinct_majors(screen.items), q=q, major=major)

@bp.get("/<int:sid>")
def student_detail(sid):
    notifier = get_notifier()
    screen = detail_screen(sid, notifier)
    if not screen.load():
        return redirect(url_for("students.list_students"))
    manager = StudentEnrollments(get_gateway(), sid, notifier)
    manager.load()
    return render_template("students/detail.html", student=screen.entity,
                           manager=manager, stats=manager.stats())

@bp.route("/create", methods=["GET", "POST"])
def create_student():
    form = StudentForm()
    if request.method == "POST":
        form = StudentForm.from_form(request.form)
        if form.submit(get_gateway().students, get_notifier()):
            return redirect(url_for("students.list_students"))
    return render_template("students/form.html", form=form)

@bp.route("/edit/<int:sid>", methods=["GET", "POST"])
def edit_student(sid):
    notifier = get_notifier()
    if request.method == "POST":
        form = StudentForm.from_form(request.form, entity_id=sid)
        if form.submit(get_gateway().students, notifier):
            return redirect(url_for("students.list_students"))
    else:
        screen = detail_screen(sid, notifier)
        if not screen.load():
            return redirect(url_for("students.list_students"))
        form = StudentForm.from_entity(screen.entity)
    return render_template("students/form.html", form=form)

@bp.get("/<int:sid>/delete")
def confirm_delete_student(sid):
    screen = list_screen(get_notifier())
    screen.load()
    student = screen.find(sid)
    if student is None:
        screen.notifier.error(f"Student {sid} is not in the list")
        return redirect(url_for("students.list_students"))
    return render_confirm(screen.delete_prompt(student),
                          url_for("students.delete_student", sid=sid),
                          url_for("students.list_students"))

@bp.post("/<int:sid>/delete")
def delete_student(sid):
    screen = list_screen(get_notifier())
    screen.load()
    screen.delete(sid, confirm=lambda prompt: confirmed())
    return redirect(url_for("students.list_students"))

# ---------- Enrollments ----------
def picker(sid, manager, notifier):
    screen = detail_screen(sid, notifier)
    if not screen.load():
        return redirect(url_for("students.list_students"))
    return render_picker(manager, full_name(screen.entity),
                         url_for("students.enroll_course", sid=sid),
                         url_for("students.student_detail", sid=sid), "course_id")

@bp.get("/<int:sid>/enroll")
def enroll_picker(sid):
    notifier = get_notifier()
    manager = StudentEnrollments(get_gateway(), sid, notifier)
    manager.load()
    if not manager.open_picker():
        return redirect(url_for("students.student_detail", sid=sid))
    return picker(sid, manager, notifier)

@bp.post("/<int:sid>/enroll")
def enroll_course(sid):
    notifier = get_notifier()
    manager = StudentEnrollments(get_gateway(), sid, notifier)
    manager.load()
    if not manager.open_picker():
        return redirect(url_for("students.student_detail", sid=sid))
    if manager.enroll(request.form.get("course_id", type=int)):
        return redirect(url_for("students.student_detail", sid=sid))
    return picker(sid, manager, notifier)

@bp.get("/<int:sid>/courses/<int:cid>/drop")
def confirm_drop_course(sid, cid):
    manager = StudentEnrollments(get_gateway(), sid, get_notifier())
    manager.refresh()
    prompt = manager.request_drop(cid)
    if prompt is None:
        return redirect(url_for("students.student_detail", sid=sid))
    return render_confirm(prompt, url_for("students.drop_course", sid=sid, cid=cid),
                          url_for("students.student_detail", sid=sid), label="Drop")

@bp.post("/<int:sid>/courses/<int:cid>/drop")
def drop_course(sid, cid):
    manager = StudentEnrollments(get_gateway(), sid, get_notifier())
    manager.refresh()
    manager.drop(cid, confirm=lambda prompt: confirmed())
    return redirect(url_for("students.student_detail", sid=sid))
