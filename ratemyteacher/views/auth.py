from flask import Blueprint, request, render_template, redirect, current_app
from flask_login import login_user, current_user, logout_user
from sqlalchemy.exc import IntegrityError
import logging

from ..extensions import db
from ..forms.student_forms import SignInForm, SignUpForm
from ..models.user import addUser, getUserByEmail
from ..utils import first_form_error, is_allowed_email, path_with_params, sanitize_redirect_to

auth_bp = Blueprint('auth', __name__)


def _domain_error():
    suffix = current_app.config['ALLOWED_EMAIL_DOMAIN']
    return f'Please use a school email ending with {suffix}.'


def _back_to_login(mode, next_url, error):
    return redirect(path_with_params('/login', mode=mode, next=next_url, error=error))


@auth_bp.route('/login', methods=['GET'])
def login():
    next_url = sanitize_redirect_to(request.args.get('next'))
    if current_user.is_authenticated:
        return redirect(next_url)

    mode = 'signup' if request.args.get('mode') in ('signup', 'register') else 'signin'
    return render_template(
        'auth/login.html',
        mode=mode,
        next=next_url,
        signin_form=SignInForm(formdata=None, next=next_url),
        signup_form=SignUpForm(formdata=None, next=next_url),
    )


@auth_bp.route('/login', methods=['POST'])
def login_post():
    form = SignInForm()
    next_url = sanitize_redirect_to(form.next.data)
    if not form.validate_on_submit():
        return _back_to_login('signin', next_url, first_form_error(form))

    email = form.email.data.strip().lower()
    if not is_allowed_email(email):
        logging.info(f"Sign-in rejected for domain of {email}")
        return _back_to_login('signin', next_url, _domain_error())

    user = getUserByEmail(email)
    if user is None or not user.check_password(form.password.data):
        return _back_to_login('signin', next_url, 'Invalid email or password.')

    login_user(user)
    logging.info(f"User {user.id} signed in")
    return redirect(next_url)


@auth_bp.route('/signup', methods=['POST'])
def signup():
    form = SignUpForm()
    next_url = sanitize_redirect_to(form.next.data)
    if not form.validate_on_submit():
        return _back_to_login('signup', next_url, first_form_error(form))

    email = form.email.data.strip().lower()
    if not is_allowed_email(email):
        logging.info(f"Sign-up rejected for domain of {email}")
        return _back_to_login('signup', next_url, _domain_error())

    if getUserByEmail(email) is not None:
        return _back_to_login('signup', next_url, 'An account with this email already exists.')

    try:
        user = addUser(email, form.password.data)
    except IntegrityError as e:
        db.session.rollback()
        logging.error(f"Database error: {str(e)}")
        return _back_to_login('signup', next_url, 'An account with this email already exists.')

    login_user(user)
    logging.info(f"User {user.id} signed up")
    return redirect(next_url)


@auth_bp.route('/logout', methods=['POST'])
def logout():
    logout_user()
    return redirect('/')
