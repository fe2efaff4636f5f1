import secrets

from ..extensions import db
from .base import utcnow
from .user import MAX_PASSWORD_BYTES, hash_password
import bcrypt


class Device(db.Model):
    """Anonymous posting identity used by the legacy JSON API."""
    __tablename__ = 'devices'

    id = db.Column(db.String(64), primary_key=True)
    secret_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    last_used_at = db.Column(db.DateTime, nullable=True)

    reviews = db.relationship('Review', backref='device', lazy='dynamic')

    def check_secret(self, secret):
        if len(secret.encode('utf-8')) > MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(secret.encode('utf-8'), self.secret_hash.encode('utf-8'))


def registerDevice():
    """Create a device and return it with its clear-text secret (shown once)."""
    secret = secrets.token_urlsafe(32)
    device = Device(id=secrets.token_hex(16), secret_hash=hash_password(secret))
    db.session.add(device)
    db.session.commit()
    return device, secret


def authenticateDevice(device_id, secret):
    if not device_id or not secret:
        return None
    device = db.session.get(Device, str(device_id))
    if device is None or not device.check_secret(str(secret)):
        return None
    return device
