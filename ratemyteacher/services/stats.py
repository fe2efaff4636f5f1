"""Aggregations over published reviews.

These replace the database views the site reads from: the teacher list with
its averages, the quality distribution, the top tags and per-review vote
counts.
"""
from collections import Counter
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import case, func

from ..extensions import db
from ..models.review import Review, STATUS_PUBLISHED
from ..models.review_vote import ReviewVote
from ..models.teacher import Teacher

DISTRIBUTION_LABELS = ((5, 'Awesome'), (4, 'Great'), (3, 'Good'), (2, 'OK'), (1, 'Awful'))


@dataclass
class TeacherSummary:
    id: int
    full_name: str
    subject: Optional[str]
    subjects: list
    review_count: int = 0
    avg_quality: Optional[float] = None
    avg_difficulty: Optional[float] = None
    pct_would_take_again: Optional[float] = None


def _stats_subquery():
    return (
        db.session.query(
            Review.teacher_id.label('teacher_id'),
            func.count(Review.id).label('review_count'),
            func.avg(Review.quality).label('avg_quality'),
            func.avg(Review.difficulty).label('avg_difficulty'),
            func.avg(case((Review.would_take_again.is_(True), 100.0), else_=0.0)).label('pct_would_take_again'),
        )
        .filter(Review.status == STATUS_PUBLISHED)
        .group_by(Review.teacher_id)
        .subquery()
    )


def _summary_query():
    stats = _stats_subquery()
    review_count = func.coalesce(stats.c.review_count, 0)
    query = (
        db.session.query(
            Teacher,
            review_count.label('review_count'),
            stats.c.avg_quality,
            stats.c.avg_difficulty,
            stats.c.pct_would_take_again,
        )
        .outerjoin(stats, stats.c.teacher_id == Teacher.id)
    )
    return query, review_count


def _to_summary(row):
    teacher, review_count, avg_quality, avg_difficulty, pct = row
    return TeacherSummary(
        id=teacher.id,
        full_name=teacher.full_name,
        subject=teacher.subject,
        subjects=list(teacher.subjects or []),
        review_count=int(review_count or 0),
        avg_quality=float(avg_quality) if avg_quality is not None else None,
        avg_difficulty=float(avg_difficulty) if avg_difficulty is not None else None,
        pct_would_take_again=float(pct) if pct is not None else None,
    )


def list_teachers(q='', subject='', page=1, per_page=10):
    """Return (summaries, total) for one page, most reviewed first."""
    query, review_count = _summary_query()
    if q:
        pattern = q.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
        query = query.filter(Teacher.full_name.ilike(f'%{pattern}%', escape='\\'))
    if subject:
        query = query.filter(Teacher.subject == subject)

    total = query.count()
    rows = (
        query.order_by(review_count.desc(), Teacher.full_name.asc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )
    return [_to_summary(r) for r in rows], total


def teacher_summary(teacher_id):
    query, _ = _summary_query()
    row = query.filter(Teacher.id == teacher_id).first()
    return _to_summary(row) if row else None


def subject_choices():
    rows = (
        db.session.query(Teacher.subject)
        .filter(Teacher.subject.isnot(None))
        .distinct()
        .order_by(Teacher.subject.asc())
        .all()
    )
    return [s for (s,) in rows if s]


def quality_distribution(teacher_id):
    """Counts per quality score, 5 down to 1, plus each bar's share in percent."""
    rows = (
        db.session.query(Review.quality, func.count(Review.id))
        .filter(Review.teacher_id == teacher_id, Review.status == STATUS_PUBLISHED)
        .group_by(Review.quality)
        .all()
    )
    counts = {score: 0 for score, _ in DISTRIBUTION_LABELS}
    for quality, cnt in rows:
        if quality in counts:
            counts[quality] = cnt
    total = sum(counts.values())
    return [
        {
            'score': score,
            'label': label,
            'count': counts[score],
            'percent': (counts[score] / total * 100) if total else 0,
        }
        for score, label in DISTRIBUTION_LABELS
    ]


def top_tags(teacher_id, limit=10):
    counter = Counter()
    rows = (
        db.session.query(Review.tags)
        .filter(Review.teacher_id == teacher_id, Review.status == STATUS_PUBLISHED)
        .all()
    )
    for (tags,) in rows:
        counter.update(set(tags or []))
    ranked = sorted(counter.items(), key=lambda item: (-item[1], item[0]))
    return [tag for tag, _ in ranked[:limit]]


def course_options(teacher_id):
    rows = (
        db.session.query(Review.course)
        .filter(
            Review.teacher_id == teacher_id,
            Review.status == STATUS_PUBLISHED,
            Review.course.isnot(None),
            Review.course != '',
        )
        .distinct()
        .all()
    )
    return sorted(c for (c,) in rows)


def vote_counts(review_ids, user_id=None):
    """Map review id -> {'up', 'down', 'mine'} for the given reviews."""
    result = {rid: {'up': 0, 'down': 0, 'mine': 0} for rid in review_ids}
    if not review_ids:
        return result

    rows = (
        db.session.query(
            ReviewVote.review_id,
            func.sum(case((ReviewVote.value > 0, 1), else_=0)),
            func.sum(case((ReviewVote.value < 0, 1), else_=0)),
        )
        .filter(ReviewVote.review_id.in_(review_ids))
        .group_by(ReviewVote.review_id)
        .all()
    )
    for rid, up, down in rows:
        result[rid]['up'] = int(up or 0)
        result[rid]['down'] = int(down or 0)

    if user_id is not None:
        mine = (
            ReviewVote.query
            .filter(ReviewVote.review_id.in_(review_ids), ReviewVote.user_id == user_id)
            .all()
        )
        for vote in mine:
            result[vote.review_id]['mine'] = vote.value
    return result
