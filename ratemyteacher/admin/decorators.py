from flask import redirect, url_for, request, g
from functools import wraps
import logging

from .session import current_admin


def admin_required(f):
    """Only lets requests with a valid admin cookie through."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        payload = current_admin()
        if payload is None:
            logging.debug(f"Admin cookie missing or invalid on {request.path}")
            return redirect(url_for('admin.login', next=request.path))
        g.admin_username = payload['u']
        return f(*args, **kwargs)
    return decorated_function
