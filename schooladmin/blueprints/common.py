from flask import render_template, request


def confirmed():
    """Answer for a confirmation callback: the user posted ``confirm=yes``."""
    return request.form.get("confirm") == "yes"

def render_confirm(prompt, action, cancel, label="Delete"):
    return render_template("confirm.html", prompt=prompt, action=action,
                           cancel=cancel, label=label)

def render_picker(manager, owner_name, action, cancel, field):
    return render_template("enroll.html", manager=manager, owner_name=owner_name,
                           action=action, cancel=cancel, field=field,
                           options=manager.available)
