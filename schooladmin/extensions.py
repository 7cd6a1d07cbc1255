from flask import current_app
from .gateway import ApiGateway

api = ApiGateway()

def get_gateway():
    return current_app.extensions["school_api"]
