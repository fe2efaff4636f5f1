from flask import Blueprint, render_template, request, url_for
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError
import logging

from ..extensions import db
from ..forms.student_forms import ReviewForm
from ..models.review import Review
from ..models.support_ticket import SupportTicket
from ..utils import first_form_error, redirect_with
from .decorators import owned, student_required

me_bp = Blueprint('me', __name__, url_prefix='/me')

OWN_REVIEW = owned(Review, 'review_id', 'review',
                   not_found="Review not found (or you don't own it).",
                   not_owner='You can only edit your own reviews.')
OWN_TICKET = owned(SupportTicket, 'ticket_id', 'ticket',
                   not_found='Ticket not found.',
                   not_owner='Ticket not found.')


@me_bp.route('/ratings')
@student_required()
def ratings():
    reviews = (
        Review.query
        .filter_by(user_id=current_user.id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )
    return render_template('me/ratings.html', reviews=reviews)


@me_bp.route('/ratings/<int:review_id>/edit', methods=['GET', 'POST'])
@student_required(owns=OWN_REVIEW)
def edit_rating(review_id, review):
    if request.method == 'GET':
        form = ReviewForm(formdata=None)
        form.fill_from(review)
        return render_template('me/rating_edit.html', review=review, form=form)

    form = ReviewForm()
    if not form.validate_on_submit():
        return redirect_with('me.edit_rating', review_id=review.id, error=first_form_error(form))

    for key, value in form.review_values().items():
        setattr(review, key, value)
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logging.error(f"Database error: {str(e)}")
        return redirect_with('me.edit_rating', review_id=review.id, error='Could not save your changes.')

    logging.info(f"Review {review.id} updated by its author")
    return redirect_with('me.ratings', message='Saved.')


@me_bp.route('/ratings/<int:review_id>/delete', methods=['POST'])
@student_required(owns=owned(Review, 'review_id', 'review',
                             not_found="Review not found (or you don't own it).",
                             not_owner='You can only delete your own reviews.'),
                  return_to=lambda review_id: url_for('me.ratings'))
def delete_rating(review_id, review):
    db.session.delete(review)
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logging.error(f"Database error: {str(e)}")
        return redirect_with('me.ratings', error='Could not delete the review.')

    logging.info(f"Review {review_id} deleted by its author")
    return redirect_with('me.ratings', message='Review deleted.')


@me_bp.route('/tickets')
@student_required()
def tickets():
    rows = (
        SupportTicket.query
        .filter_by(user_id=current_user.id)
        .order_by(SupportTicket.created_at.desc(), SupportTicket.id.desc())
        .all()
    )
    return render_template('me/tickets.html', tickets=rows)


@me_bp.route('/tickets/<int:ticket_id>')
@student_required(owns=OWN_TICKET, on_denied='me.tickets')
def ticket_detail(ticket_id, ticket):
    return render_template('me/ticket.html', ticket=ticket)
