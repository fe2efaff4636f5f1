import logging

from flask import Flask
from flask_login import current_user

from .config import Config
from .extensions import db, migrate, csrf, login_manager, talisman
from .models.user import User
from .models.support_ticket import status_label
from . import utils


def create_app(config_class=Config):
    app = Flask(__name__, static_folder='static')
    app.config.from_object(config_class)

    logging.basicConfig(level=app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)

    login_manager.init_app(app)
    login_manager.login_view = app.config.get('LOGIN_VIEW', 'auth.login')
    login_manager.session_protection = app.config.get('SESSION_PROTECTION', 'strong')

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    # CSP: pages are server rendered without third-party scripts
    csp = {
        'default-src': "'self'",
        'script-src': ["'self'", "'unsafe-inline'"],
        'style-src': ["'self'", "'unsafe-inline'"],
        'img-src': ["'self'", 'data:'],
        'connect-src': "'self'",
        'font-src': "'self'",
        'object-src': "'none'",
        'base-uri': "'self'",
        'form-action': "'self'",
    }
    talisman.init_app(
        app,
        content_security_policy=csp,
        force_https=app.config.get('FORCE_HTTPS', False),
        session_cookie_secure=app.config.get('SESSION_COOKIE_SECURE', False),
        frame_options='SAMEORIGIN',
        referrer_policy='no-referrer-when-downgrade',
    )

    from .views.main import main_bp
    from .views.auth import auth_bp
    from .views.me import me_bp
    from .views.api import api_bp
    from .admin import admin_bp
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(me_bp)
    app.register_blueprint(api_bp)
    app.register_blueprint(admin_bp)

    from .cli_commands import register_commands
    register_commands(app)

    with app.app_context():
        db.create_all()
    _register_template_helpers(app)
    return app


def _register_template_helpers(app):
    app.add_template_filter(utils.fmt1, 'fmt1')
    app.add_template_filter(utils.fmt_pct, 'fmt_pct')
    app.add_template_filter(utils.format_review_date, 'review_date')
    app.add_template_filter(status_label, 'status_label')

    @app.template_filter('datetime')
    def format_datetime(value):
        return value.strftime('%b %d, %Y %H:%M') if value else '—'

    @app.context_processor
    def inject_hey_name():
        email = current_user.email if current_user.is_authenticated else None
        return {'hey_name': utils.email_to_hey(email), 'is_authed': current_user.is_authenticated}
