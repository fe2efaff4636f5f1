"""Signed admin session cookie.

A token is ``base64url(JSON payload) + "." + base64url(HMAC-SHA256(secret, payload segment))``
with the padding stripped. The payload carries the username (``u``), the
issue time (``iat``) and the expiry (``exp``), both in epoch seconds.
"""
import base64
import hashlib
import hmac
import json
import time

from flask import current_app, request

from ..config import must_get_config

COOKIE_NAME = 'rmt_admin'
COOKIE_PATH = '/admin'


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode('ascii').rstrip('=')


def _b64url_decode(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + '=' * (-len(segment) % 4))


def _sign(secret: str, body: str) -> str:
    digest = hmac.new(secret.encode('utf-8'), body.encode('ascii'), hashlib.sha256).digest()
    return _b64url_encode(digest)


def create_admin_token(username, secret, max_age, now=None):
    now = int(time.time() if now is None else now)
    payload = {'u': username, 'iat': now, 'exp': now + int(max_age)}
    body = _b64url_encode(json.dumps(payload, separators=(',', ':')).encode('utf-8'))
    return f'{body}.{_sign(secret, body)}'


def verify_admin_token(token, secret, now=None):
    """Return the payload dict of a valid, unexpired token, else None."""
    if not token:
        return None
    parts = token.split('.')
    if len(parts) != 2:
        return None
    body, sig = parts
    try:
        expected = _sign(secret, body)
    except UnicodeEncodeError:
        return None
    if not hmac.compare_digest(sig.encode('utf-8'), expected.encode('utf-8')):
        return None

    try:
        payload = json.loads(_b64url_decode(body).decode('utf-8'))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(payload, dict) or not payload.get('u'):
        return None
    exp = payload.get('exp')
    if not isinstance(exp, int) or isinstance(exp, bool):
        return None
    now = int(time.time() if now is None else now)
    if exp <= now:
        return None
    return payload


def current_admin():
    """Payload of the admin cookie on the current request, if valid."""
    secret = must_get_config(current_app, 'ADMIN_COOKIE_SECRET')
    return verify_admin_token(request.cookies.get(COOKIE_NAME), secret)


def set_admin_session(response, username):
    max_age = current_app.config['ADMIN_SESSION_MAX_AGE']
    token = create_admin_token(username, must_get_config(current_app, 'ADMIN_COOKIE_SECRET'), max_age)
    response.set_cookie(
        COOKIE_NAME,
        token,
        max_age=max_age,
        path=COOKIE_PATH,
        httponly=True,
        secure=current_app.config.get('SESSION_COOKIE_SECURE', False),
        samesite='Lax',
    )
    return response


def clear_admin_session(response):
    response.set_cookie(
        COOKIE_NAME,
        '',
        max_age=0,
        path=COOKIE_PATH,
        httponly=True,
        secure=current_app.config.get('SESSION_COOKIE_SECURE', False),
        samesite='Lax',
    )
    return response
