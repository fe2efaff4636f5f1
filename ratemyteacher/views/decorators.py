from collections import namedtuple
from functools import wraps
import logging

from flask import redirect, request, url_for
from flask_login import current_user, logout_user

from ..extensions import db
from ..utils import is_allowed_email, redirect_with

# Row the current student must own: model class, URL argument holding its id,
# and the keyword the loaded row is passed to the view as.
Owned = namedtuple('Owned', 'model id_arg name not_found not_owner')


def owned(model, id_arg, name, not_found='Not found.', not_owner='You can only change your own entries.'):
    return Owned(model, id_arg, name, not_found, not_owner)


def _default_return_to():
    if request.method == 'GET':
        return request.full_path.rstrip('?')
    return request.path


def student_required(owns=None, return_to=None, on_denied='me.ratings'):
    """Guard for student pages and actions.

    Order of checks: signed in (else login with `next`), allowed email
    domain, then ownership of the targeted row when `owns` is given.
    `return_to(**view_args)` picks the path to come back to after login,
    `on_denied` the endpoint that receives the ownership error.
    """
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                next_path = return_to(**kwargs) if return_to else _default_return_to()
                logging.debug(f"Anonymous access to {request.path}, sending to login (next={next_path})")
                return redirect(url_for('auth.login', next=next_path))

            if not is_allowed_email(current_user.email):
                logging.warning(f"User {current_user.id} outside the allowed email domain")
                logout_user()
                return redirect_with('auth.login', error='Please use your school email to continue.')

            if owns is not None:
                row = db.session.get(owns.model, kwargs.get(owns.id_arg))
                if row is None:
                    return redirect_with(on_denied, error=owns.not_found)
                if row.user_id != current_user.id:
                    logging.info(f"User {current_user.id} denied on {owns.model.__tablename__} {row.id}")
                    return redirect_with(on_denied, error=owns.not_owner)
                kwargs[owns.name] = row

            return f(*args, **kwargs)
        return wrapper
    return decorator
