from ..extensions import db
from .base import BaseModel, utcnow

STATUS_PUBLISHED = 'published'
STATUS_PENDING = 'pending'
REVIEW_STATUSES = (STATUS_PUBLISHED, STATUS_PENDING)

GRADE_OPTIONS = ["", "A+", "A", "A-", "B+", "B", "B-", "C+", "C", "C-", "D", "F", "P", "NP"]

MAX_TAGS = 10
MAX_TAG_LENGTH = 30


class Review(BaseModel):
    __tablename__ = 'reviews'

    teacher_id = db.Column(db.Integer, db.ForeignKey('teachers.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    # Legacy anonymous posting: device reviews have no user
    device_id = db.Column(db.String(64), db.ForeignKey('devices.id'), nullable=True)

    quality = db.Column(db.Integer, nullable=False)       # 1..5
    difficulty = db.Column(db.Integer, nullable=False)    # 1..5
    would_take_again = db.Column(db.Boolean, nullable=False, default=False)
    course = db.Column(db.String(40), nullable=True)
    grade = db.Column(db.String(4), nullable=True)
    is_online = db.Column(db.Boolean, nullable=False, default=False)
    tags = db.Column(db.JSON, nullable=False, default=list)
    comment = db.Column(db.Text, nullable=True)

    status = db.Column(db.String(20), nullable=False, default=STATUS_PUBLISHED, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    votes = db.relationship('ReviewVote', backref='review', cascade='all, delete-orphan')

    __table_args__ = (
        db.UniqueConstraint('device_id', 'teacher_id', 'course', name='uq_reviews_device_teacher_course'),
    )

    @property
    def is_published(self):
        return self.status == STATUS_PUBLISHED


def unique_tags(raw):
    """Comma separated tags -> unique upper-case list, in input order."""
    result = []
    for part in (raw or '').split(','):
        tag = part.strip().upper()[:MAX_TAG_LENGTH]
        if tag and tag not in result:
            result.append(tag)
    return result


def parse_tags(raw):
    return unique_tags(raw)[:MAX_TAGS]
