from flask import render_template, request, redirect, url_for
from ...entities import COURSE, INSTRUCTOR
from ...enrollment import CourseEnrollments
from ...extensions import get_gateway
from ...filters import filter_courses
from ...forms import CourseForm
from ...gateway import ApiError
from ...notifications import get_notifier
from ...runner import RequestRunner
from ...screens import DetailScreen, ListScreen
from ..common import confirmed, render_confirm, render_picker
from . import bp

def list_screen(notifier):
    return ListScreen(get_gateway().courses, COURSE, notifier, matcher=filter_courses)

def detail_screen(cid, notifier):
    return DetailScreen(get_gateway().courses, COURSE, cid, notifier)

def load_instructors(notifier):
    screen = ListScreen(get_gateway().instructors, INSTRUCTOR, notifier)
    screen.load()
    return screen.items

def render_form(form, notifier):
    return render_template("courses/form.html", form=form,
                           instructors=load_instructors(notifier))

@bp.get("")
def list_courses():
    q = (request.args.get("q") or "").strip()
    screen = list_screen(get_notifier())
    screen.load()
    return render_template("courses/list.html", screen=screen,
                           items=screen.filtered(q), q=q)

@bp.get("/<int:cid>")
def course_detail(cid):
    notifier = get_notifier()
    screen = detail_screen(cid, notifier)
    if not screen.load():
        return redirect(url_for("courses.list_courses"))
    manager = CourseEnrollments(get_gateway(), cid, notifier)
    manager.load()
    return render_template("courses/detail.html", course=screen.entity, manager=manager,
                           instructors=load_instructors(notifier))

@bp.route("/create", methods=["GET", "POST"])
def create_course():
    notifier = get_notifier()
    form = CourseForm()
    if request.method == "POST":
        form = CourseForm.from_form(request.form)
        if form.submit(get_gateway().courses, notifier):
            return redirect(url_for("courses.list_courses"))
    return render_form(form, notifier)

@bp.route("/edit/<int:cid>", methods=["GET", "POST"])
def edit_course(cid):
    notifier = get_notifier()
    if request.method == "POST":
        form = CourseForm.from_form(request.form, entity_id=cid)
        if form.submit(get_gateway().courses, notifier):
            return redirect(url_for("courses.list_courses"))
    else:
        screen = detail_screen(cid, notifier)
        if not screen.load():
            return redirect(url_for("courses.list_courses"))
        form = CourseForm.from_entity(screen.entity)
    return render_form(form, notifier)

@bp.get("/<int:cid>/delete")
def confirm_delete_course(cid):
    screen = list_screen(get_notifier())
    screen.load()
    course = screen.find(cid)
    if course is None:
        screen.notifier.error(f"Course {cid} is not in the list")
        return redirect(url_for("courses.list_courses"))
    return render_confirm(screen.delete_prompt(course),
                          url_for("courses.delete_course", cid=cid),
                          url_for("courses.list_courses"))

@bp.post("/<int:cid>/delete")
def delete_course(cid):
    screen = list_screen(get_notifier())
    screen.load()
    screen.delete(cid, confirm=lambda prompt: confirmed())
    return redirect(url_for("courses.list_courses"))

@bp.post("/<int:cid>/instructor")
def assign_instructor(cid):
    notifier = get_notifier()
    instructor_id = request.form.get("instructor_id", type=int)
    if not instructor_id:
        notifier.warning("Select an instructor")
        return redirect(url_for("courses.course_detail", cid=cid))
    runner = RequestRunner()
    try:
        runner.execute(get_gateway().courses.assign_instructor, cid, instructor_id)
    except ApiError:
        notifier.error(f"Could not change the instructor: {runner.error}")
    else:
        notifier.success("Instructor updated")
    return redirect(url_for("courses.course_detail", cid=cid))

# ---------- Enrollments ----------
def picker(cid, manager, notifier):
    screen = detail_screen(cid, notifier)
    if not screen.load():
        return redirect(url_for("courses.list_courses"))
    return render_picker(manager, screen.entity.get("courseName", ""),
                         url_for("courses.enroll_student", cid=cid),
                         url_for("courses.course_detail", cid=cid), "student_id")

@bp.get("/<int:cid>/enroll")
def enroll_picker(cid):
    notifier = get_notifier()
    manager = CourseEnrollments(get_gateway(), cid, notifier)
    manager.load()
    if not manager.open_picker():
        return redirect(url_for("courses.course_detail", cid=cid))
    return picker(cid, manager, notifier)

@bp.post("/<int:cid>/enroll")
def enroll_student(cid):
    notifier = get_notifier()
    manager = CourseEnrollments(get_gateway(), cid, notifier)
    manager.load()
    if not manager.open_picker():
        return redirect(url_for("courses.course_detail", cid=cid))
    if manager.enroll(request.form.get("student_id", type=int)):
        return redirect(url_for("courses.course_detail", cid=cid))
    return picker(cid, manager, notifier)

@bp.get("/<int:cid>/students/<int:sid>/drop")
def confirm_remove_student(cid, sid):
    manager = CourseEnrollments(get_gateway(), cid, get_notifier())
    manager.refresh()
    prompt = manager.request_drop(sid)
    if prompt is None:
        return redirect(url_for("courses.course_detail", cid=cid))
    return render_confirm(prompt, url_for("courses.remove_student", cid=cid, sid=sid),
                          url_for("courses.course_detail", cid=cid), label="Remove")

@bp.post("/<int:cid>/students/<int:sid>/drop")
def remove_student(cid, sid):
    manager = CourseEnrollments(get_gateway(), cid, get_notifier())
    manager.refresh()
    manager.drop(sid, confirm=lambda prompt: confirmed())
    return redirect(url_for("courses.course_detail", cid=cid))
