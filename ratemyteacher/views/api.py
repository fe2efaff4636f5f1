from datetime import datetime, timedelta

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.datastructures import MultiDict
import logging

from ..extensions import db, csrf
from ..forms.student_forms import ReviewForm
from ..models.device import authenticateDevice, registerDevice
from ..models.review import Review, STATUS_PENDING
from ..models.teacher import Teacher
from ..utils import first_form_error

api_bp = Blueprint('api', __name__, url_prefix='/api')
csrf.exempt(api_bp)


def _error(message, status_code):
    return jsonify(ok=False, error=message), status_code


def _review_formdata(data):
    """JSON body -> form data the review form understands."""
    formdata = MultiDict()
    for key in ('quality', 'difficulty', 'course', 'grade', 'comment'):
        if data.get(key) is not None:
            formdata[key] = str(data[key])

    take_again = data.get('would_take_again')
    if isinstance(take_again, bool):
        take_again = 'yes' if take_again else 'no'
    if take_again is not None:
        formdata['would_take_again'] = str(take_again)

    tags = data.get('tags')
    if isinstance(tags, list):
        tags = ', '.join(str(t) for t in tags)
    if tags:
        formdata['tags'] = str(tags)

    if data.get('is_online'):
        formdata['is_online'] = 'y'
    return formdata


@api_bp.route('/devices', methods=['POST'])
def register_device():
    device, secret = registerDevice()
    logging.info(f"Device {device.id} registered")
    return jsonify(ok=True, device_id=device.id, device_secret=secret), 201


@api_bp.route('/reviews', methods=['POST'])
def submit_review():
    """Anonymous review from a registered device.

    Body JSON: device_id, device_secret, teacher_id, quality, difficulty,
    would_take_again ("yes"/"no"), course, grade, tags, comment.
    Reviews stay pending until an admin approves them.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return _error('invalid_request', 400)
    device = authenticateDevice(data.get('device_id'), data.get('device_secret'))
    if device is None:
        return _error('invalid_device', 401)

    teacher = db.session.get(Teacher, data.get('teacher_id')) if isinstance(data.get('teacher_id'), int) else None
    if teacher is None:
        return _error('teacher_not_found', 404)

    since = datetime.utcnow() - timedelta(hours=1)
    recent = Review.query.filter(Review.device_id == device.id, Review.created_at >= since).count()
    if recent >= current_app.config['DEVICE_REVIEWS_PER_HOUR']:
        logging.info(f"Device {device.id} rate limited")
        return _error('rate_limited', 429)

    form = ReviewForm(formdata=_review_formdata(data), meta={'csrf': False})
    if not form.validate():
        return _error(first_form_error(form), 400)

    review = Review(teacher_id=teacher.id, device_id=device.id, status=STATUS_PENDING, **form.review_values())
    device.last_used_at = datetime.utcnow()
    db.session.add(review)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return _error('duplicate', 409)
    except SQLAlchemyError as e:
        db.session.rollback()
        logging.error(f"Database error: {str(e)}")
        return _error('database_error', 500)

    return jsonify(ok=True, review_id=review.id, status=review.status), 201
