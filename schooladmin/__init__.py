import logging

from flask import Flask, render_template, request
from werkzeug.exceptions import HTTPException

from .entities import full_name
from .extensions import api
from .notifications import get_notifier

logger = logging.getLogger(__name__)

def register_filters(app):
    @app.template_filter("full_name")
    def full_name_filter(person):
        return full_name(person)

    @app.template_filter("credits")
    def credits_filter(n):
        try:
            n = int(n)
        except (TypeError, ValueError):
            return str(n)
        return f"{n} credit" if n == 1 else f"{n} credits"

def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def http_error(e):
        return render_template("error.html", code=e.code, title=e.name,
                               description=e.description), e.code

    @app.errorhandler(Exception)
    def unexpected_error(e):
        logger.exception("Unhandled error while rendering %s", request.path)
        return render_template(
            "error.html", code=500, title="Something went wrong",
            description="An unexpected error occurred while rendering this page.",
        ), 500

def configure_logging(app):
    level = app.config.get("LOG_LEVEL", "INFO")
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger(__name__).setLevel(level)

def create_app(config_object="config.Config"):
    app = Flask(__name__)
    app.config.from_object(config_object)
    configure_logging(app)

    api.init_app(app)

    @app.context_processor
    def inject_notice():
        return {"notice": get_notifier().pop()}

    from .blueprints.home import bp as home_bp
    from .blueprints.instructors import bp as instructors_bp
    from .blueprints.courses import bp as courses_bp
    from .blueprints.students import bp as students_bp
    app.register_blueprint(home_bp)
    app.register_blueprint(instructors_bp, url_prefix="/instructors")
    app.register_blueprint(courses_bp, url_prefix="/courses")
    app.register_blueprint(students_bp, url_prefix="/students")
    register_filters(app)
    register_error_handlers(app)

    return app
