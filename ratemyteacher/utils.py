from urllib.parse import urlencode

from flask import current_app, redirect, url_for


def redirect_with(endpoint, error=None, message=None, _anchor=None, **values):
    """Redirect to `endpoint`, carrying a banner text in the query string."""
    if error:
        values['error'] = error
    if message:
        values['message'] = message
    return redirect(url_for(endpoint, _anchor=_anchor, **values))


def path_with_params(path, **params):
    params = {k: v for k, v in params.items() if v}
    return f'{path}?{urlencode(params)}' if params else path


def sanitize_redirect_to(value, fallback='/teachers'):
    """Only same-site relative paths are allowed as a redirect target."""
    v = (value or '').strip()
    if not v or not v.startswith('/'):
        return fallback
    if v.startswith('//') or '://' in v:
        return fallback
    if '\\' in v or '\n' in v or '\r' in v:
        return fallback
    return v


def safe_next_path(value, fallback='/admin/teachers'):
    v = sanitize_redirect_to(value, fallback=None)
    if v is None or not v.startswith('/admin'):
        return fallback
    return v


def is_allowed_email(email):
    suffix = current_app.config['ALLOWED_EMAIL_DOMAIN'].lower()
    return bool(email) and email.strip().lower().endswith(suffix)


def email_to_hey(email):
    """"jane.doe@school" -> "JANE DOE" for the greeting in the header."""
    if not email:
        return 'GUEST'
    name = email.split('@')[0] or 'USER'
    return name.replace('.', ' ').upper()


def ordinal(n):
    if 10 <= n % 100 <= 20:
        suffix = 'th'
    else:
        suffix = {1: 'st', 2: 'nd', 3: 'rd'}.get(n % 10, 'th')
    return f'{n}{suffix}'


def format_review_date(value):
    if value is None:
        return ''
    return f"{value.strftime('%b')} {ordinal(value.day)}, {value.year}"


def fmt1(value):
    if value is None:
        return '—'
    return f'{value:.1f}'


def fmt_pct(value):
    if value is None:
        return '—'
    return f'{int(value + 0.5)}%'


def first_form_error(form):
    for field_errors in form.errors.values():
        if field_errors:
            return field_errors[0]
    return 'Please check your input and try again.'
