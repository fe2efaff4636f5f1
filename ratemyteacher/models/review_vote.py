from ..extensions import db
from .base import utcnow

VOTE_UP = 1
VOTE_DOWN = -1


class ReviewVote(db.Model):
    __tablename__ = 'review_votes'

    id = db.Column(db.Integer, primary_key=True)
    review_id = db.Column(db.Integer, db.ForeignKey('reviews.id', ondelete='CASCADE'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    value = db.Column(db.SmallInteger, nullable=False)  # +1 / -1
    created_at = db.Column(db.DateTime, default=utcnow)

    __table_args__ = (
        db.UniqueConstraint('review_id', 'user_id', name='uq_review_votes_review_user'),
    )


def toggle_vote(review_id, user_id, value):
    """Apply a vote and return what happened: 'created', 'updated' or 'removed'.

    The same value twice removes the vote, the opposite value switches it.
    The caller commits.
    """
    if value not in (VOTE_UP, VOTE_DOWN):
        raise ValueError('Invalid vote value.')

    existing = ReviewVote.query.filter_by(review_id=review_id, user_id=user_id).first()
    if existing is None:
        db.session.add(ReviewVote(review_id=review_id, user_id=user_id, value=value))
        return 'created'
    if existing.value == value:
        db.session.delete(existing)
        return 'removed'
    existing.value = value
    return 'updated'
