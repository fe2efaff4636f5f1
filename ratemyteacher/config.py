import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _database_uri():
    if os.environ.get('DATABASE_URL'):
        return os.environ['DATABASE_URL']
    if os.environ.get('DB_HOST'):
        return f"mysql+pymysql://{os.environ.get('DB_USER')}:{os.environ.get('DB_PASSWORD')}@{os.environ.get('DB_HOST')}:{os.environ.get('DB_PORT', '3306')}/{os.environ.get('DB_NAME')}?charset=utf8mb4"
    return 'sqlite:///' + os.path.join(BASE_DIR, 'ratemyteacher.db')


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")
    WTF_CSRF_SECRET_KEY = SECRET_KEY
    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOGIN_VIEW = 'auth.login'
    SESSION_PROTECTION = 'strong'
    # Secure cookies only behind HTTPS in production
    SESSION_COOKIE_SECURE = os.environ.get("SESSION_COOKIE_SECURE", "0") == "1"
    FORCE_HTTPS = os.environ.get("FORCE_HTTPS", "0") == "1"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    ALLOWED_EMAIL_DOMAIN = os.environ.get("ALLOWED_EMAIL_DOMAIN", "@basischina.com")

    # Admin panel credentials; checked lazily so the public site runs without them
    ADMIN_USERNAME = os.environ.get("ADMIN_USERNAME")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD")
    ADMIN_COOKIE_SECRET = os.environ.get("ADMIN_COOKIE_SECRET")
    ADMIN_SESSION_MAX_AGE = 60 * 60 * 24 * 7

    TEACHERS_PER_PAGE = 10
    TEACHER_REVIEWS_LIMIT = 25
    ADMIN_PER_PAGE = 20
    DEVICE_REVIEWS_PER_HOUR = int(os.environ.get("DEVICE_REVIEWS_PER_HOUR", "5"))


def must_get_config(app, name):
    value = app.config.get(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value
