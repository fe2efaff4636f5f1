import pytest

from ratemyteacher import create_app
from ratemyteacher.config import Config
from ratemyteacher.extensions import db
from ratemyteacher.models.review import Review, STATUS_PUBLISHED
from ratemyteacher.models.teacher import addTeacher
from ratemyteacher.models.user import addUser

PASSWORD = 'correct horse'


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False
    FORCE_HTTPS = False
    SESSION_COOKIE_SECURE = False
    ALLOWED_EMAIL_DOMAIN = '@basischina.com'
    ADMIN_USERNAME = 'admin'
    ADMIN_PASSWORD = 'admin-pass'
    ADMIN_COOKIE_SECRET = 'test-cookie-secret'
    DEVICE_REVIEWS_PER_HOUR = 2
    LOG_LEVEL = 'WARNING'


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def teacher(app):
    return addTeacher('Jane Smith', 'Math, Physics')


@pytest.fixture
def make_user(app):
    def _make(email='student.one@basischina.com', password=PASSWORD):
        return addUser(email, password)
    return _make


@pytest.fixture
def login(client):
    def _login(email='student.one@basischina.com', password=PASSWORD):
        return client.post('/login', data={'email': email, 'password': password, 'next': '/teachers'})
    return _login


@pytest.fixture
def student(make_user, login):
    user = make_user()
    login()
    return user


@pytest.fixture
def make_review(app):
    def _make(teacher, user=None, **values):
        fields = {
            'quality': 4,
            'difficulty': 3,
            'would_take_again': True,
            'course': 'AP CALC',
            'tags': [],
            'status': STATUS_PUBLISHED,
        }
        fields.update(values)
        review = Review(teacher_id=teacher.id, user_id=user.id if user else None, **fields)
        db.session.add(review)
        db.session.commit()
        return review
    return _make


@pytest.fixture
def admin_client(client):
    client.post('/admin/login', data={'username': 'admin', 'password': 'admin-pass', 'next': '/admin/teachers'})
    return client


def review_form(**overrides):
    data = {
        'quality': '5',
        'difficulty': '2',
        'would_take_again': 'yes',
        'course': 'ap calc',
        'grade': 'A',
        'tags': 'caring, Tough grader, caring',
        'comment': '  Great teacher.  ',
    }
    data.update(overrides)
    return data
