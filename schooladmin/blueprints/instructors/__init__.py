from flask import Blueprint

bp = Blueprint("instructors", __name__)

from . import routes  # noqa: E402,F401
