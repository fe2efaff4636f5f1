from flask_login import UserMixin

from ..extensions import db
from .base import BaseModel, utcnow
import bcrypt

MAX_PASSWORD_BYTES = 72


class User(BaseModel, UserMixin):
    """A student account. Admins are not stored here."""
    __tablename__ = 'users'

    email = db.Column(db.String(255), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    reviews = db.relationship('Review', backref='author', lazy='dynamic')
    tickets = db.relationship('SupportTicket', backref='user', lazy='dynamic')

    def check_password(self, password):
        # bcrypt only looks at the first 72 bytes and refuses longer input
        if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(password.encode('utf-8'), self.password.encode('utf-8'))


def hash_password(password):
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def addUser(email, password):
    user = User(email=email.strip().lower(), password=hash_password(password))
    db.session.add(user)
    db.session.commit()
    return user


def getUserByEmail(email):
    return User.query.filter_by(email=(email or '').strip().lower()).first()
