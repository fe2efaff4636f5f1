from datetime import datetime

from ..extensions import db


class BaseModel(db.Model):
    __abstract__ = True
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)


def utcnow():
    return datetime.utcnow()
