from ..extensions import db
from .base import BaseModel, utcnow

MAX_SUBJECTS = 20


class Teacher(BaseModel):
    __tablename__ = 'teachers'

    full_name = db.Column(db.String(255), nullable=False)
    # Primary subject, always the first entry of `subjects`
    subject = db.Column(db.String(120), nullable=True, index=True)
    subjects = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=utcnow)

    reviews = db.relationship('Review', backref='teacher', lazy='dynamic')

    def set_subjects(self, subjects):
        self.subjects = list(subjects)
        self.subject = self.subjects[0] if self.subjects else None

    def __repr__(self):
        return f'<Teacher {self.id} {self.full_name}>'


def parse_subjects(raw):
    """Split "Math, Physics ,  Chemistry" into unique names, first one wins."""
    result = []
    for part in (raw or '').split(','):
        part = part.strip()
        if part and part not in result:
            result.append(part)
    return result[:MAX_SUBJECTS]


def addTeacher(full_name, subjects_csv=''):
    teacher = Teacher(full_name=full_name.strip())
    teacher.set_subjects(parse_subjects(subjects_csv))
    db.session.add(teacher)
    db.session.commit()
    return teacher
