from flask import render_template, request, redirect, url_for
from ...entities import INSTRUCTOR
from ...extensions import get_gateway
from ...filters import filter_instructors
from ...forms import InstructorForm
from ...notifications import get_notifier
from ...screens import DetailScreen, InstructorListScreen
from ..common import confirmed, render_confirm
from . import bp

def list_screen(notifier):
    return InstructorListScreen(get_gateway().instructors, INSTRUCTOR, notifier,
                                matcher=filter_instructors)

def detail_screen(iid, notifier, with_courses=False):
    gw = get_gateway()
    related = gw.instructors.courses if with_courses else None
    return DetailScreen(gw.instructors, INSTRUCTOR, iid, notifier,
                        related=related, related_label="courses")

@bp.get("")
def list_instructors():
    q = (request.args.get("q") or "").strip()
    screen = list_screen(get_notifier())
    screen.load()
    return render_template("instructors/list.html", screen=screen,
                           items=screen.filtered(q), q=q)

@bp.get("/<int:iid>")
def instructor_detail(iid):
    screen = detail_screen(iid, get_notifier(), with_courses=True)
    if not screen.load():
        return redirect(url_for("instructors.list_instructors"))
    courses = screen.related
    stats = {
        "courses": len(courses),
        "students": sum(len(c.get("students") or []) for c in courses),
        "credits": sum(int(c.get("credits") or 0) for c in courses),
    }
    return render_template("instructors/detail.html", instructor=screen.entity,
                           courses=courses, stats=stats)

@bp.route("/create", methods=["GET", "POST"])
def create_instructor():
    form = InstructorForm()
    if request.method == "POST":
        form = InstructorForm.from_form(request.form)
        if form.submit(get_gateway().instructors, get_notifier()):
            return redirect(url_for("instructors.list_instructors"))
    return render_template("instructors/form.html", form=form)

@bp.route("/edit/<int:iid>", methods=["GET", "POST"])
def edit_instructor(iid):
    notifier = get_notifier()
    if request.method == "POST":
        form = InstructorForm.from_form(request.form, entity_id=iid)
        if form.submit(get_gateway().instructors, notifier):
            return redirect(url_for("instructors.list_instructors"))
    else:
        screen = detail_screen(iid, notifier)
        if not screen.load():
            return redirect(url_for("instructors.list_instructors"))
        form = InstructorForm.from_entity(screen.entity)
    return render_template("instructors/form.html", form=form)

@bp.get("/<int:iid>/delete")
def confirm_delete_instructor(iid):
    screen = list_screen(get_notifier())
    screen.load()
    instructor = screen.find(iid)
    if instructor is None:
        screen.notifier.error(f"Instructor {iid} is not in the list")
        return redirect(url_for("instructors.list_instructors"))
    return render_confirm(screen.delete_prompt(instructor),
                          url_for("instructors.delete_instructor", iid=iid),
                          url_for("instructors.list_instructors"))

@bp.post("/<int:iid>/delete")
def delete_instructor(iid):
    screen = list_screen(get_notifier())
    screen.load()
    screen.delete(iid, confirm=lambda prompt: confirmed())
    return redirect(url_for("instructors.list_instructors"))
