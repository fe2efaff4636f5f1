# ratemyteacher/admin/views.py
import hmac

from flask import current_app, request, redirect, url_for, render_template, abort, make_response
from sqlalchemy.exc import SQLAlchemyError
import logging

from ..config import must_get_config
from ..extensions import db
from ..models.review import Review, REVIEW_STATUSES, STATUS_PUBLISHED, STATUS_PENDING
from ..models.support_ticket import SupportTicket, TICKET_STATUSES
from ..models.teacher import Teacher, parse_subjects
from ..utils import first_form_error, redirect_with, safe_next_path
from . import admin_bp
from .decorators import admin_required
from .forms import AdminLoginForm, AdminReviewForm, TeacherForm, TicketUpdateForm
from .session import clear_admin_session, set_admin_session


def _safe_eq(a, b):
    return hmac.compare_digest((a or '').encode('utf-8'), (b or '').encode('utf-8'))


def _commit_or_error(endpoint, **values):
    """Commit the session; on failure roll back and return an error redirect."""
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logging.error(f"Database error: {str(e)}")
        return redirect_with(endpoint, error='Database error, the change was not saved.', **values)
    return None


@admin_bp.route('/')
@admin_required
def admin_index():
    return redirect(url_for('admin.teachers'))


#                Session
@admin_bp.route('/login', methods=['GET', 'POST'])
def login():
    form = AdminLoginForm()
    if request.method == 'POST':
        next_url = safe_next_path(form.next.data)
        ok_user = _safe_eq(form.username.data.strip() if form.username.data else '',
                           must_get_config(current_app, 'ADMIN_USERNAME'))
        ok_pass = _safe_eq(form.password.data, must_get_config(current_app, 'ADMIN_PASSWORD'))
        if not form.validate_on_submit() or not (ok_user and ok_pass):
            logging.warning("Failed admin sign-in attempt")
            return redirect_with('admin.login', error='Invalid admin credentials.', next=next_url)

        logging.info(f"Admin {form.username.data} signed in")
        return set_admin_session(make_response(redirect(next_url)), form.username.data.strip())

    form.next.data = safe_next_path(request.args.get('next'))
    return render_template('admin/login.html', form=form)


@admin_bp.route('/logout', methods=['POST'])
@admin_required
def logout():
    response = make_response(redirect_with('admin.login', message='Logged out.'))
    return clear_admin_session(response)


#                Teachers
@admin_bp.route('/teachers', methods=['GET', 'POST'])
@admin_required
def teachers():
    form = TeacherForm()
    if request.method == 'POST':
        if not form.validate_on_submit():
            return redirect_with('admin.teachers', error=first_form_error(form))
        teacher = Teacher(full_name=form.full_name.data.strip())
        teacher.set_subjects(parse_subjects(form.subjects.data))
        db.session.add(teacher)
        failed = _commit_or_error('admin.teachers')
        if failed:
            return failed
        logging.info(f"Teacher {teacher.id} created")
        return redirect_with('admin.teachers', message='Teacher created.')

    rows = Teacher.query.order_by(Teacher.full_name.asc()).all()
    return render_template('admin/teachers_list.html', teachers=rows, form=form)


@admin_bp.route('/teachers/<int:teacher_id>/edit', methods=['GET', 'POST'])
@admin_required
def teacher_form(teacher_id):
    teacher = Teacher.query.get_or_404(teacher_id)
    form = TeacherForm()
    if request.method == 'POST':
        if not form.validate_on_submit():
            return redirect_with('admin.teacher_form', teacher_id=teacher.id, error=first_form_error(form))
        teacher.full_name = form.full_name.data.strip()
        teacher.set_subjects(parse_subjects(form.subjects.data))
        failed = _commit_or_error('admin.teacher_form', teacher_id=teacher.id)
        if failed:
            return failed
        return redirect_with('admin.teacher_form', teacher_id=teacher.id, message='Saved.')

    form.full_name.data = teacher.full_name
    form.subjects.data = ', '.join(teacher.subjects or [])
    return render_template('admin/teacher_form.html', teacher=teacher, form=form)


@admin_bp.route('/teachers/<int:teacher_id>/delete', methods=['POST'])
@admin_required
def teacher_delete(teacher_id):
    teacher = Teacher.query.get_or_404(teacher_id)
    if teacher.reviews.count():
        return redirect_with('admin.teachers', error='This teacher still has reviews; delete them first.')
    db.session.delete(teacher)
    failed = _commit_or_error('admin.teachers')
    if failed:
        return failed
    logging.info(f"Teacher {teacher_id} deleted")
    return redirect_with('admin.teachers', message='Teacher deleted.')


#                Reviews
@admin_bp.route('/reviews')
@admin_required
def reviews_list():
    page = request.args.get('page', 1, type=int)
    status = request.args.get('status', '')
    query = Review.query
    if status in REVIEW_STATUSES:
        query = query.filter_by(status=status)
    reviews = query.order_by(Review.created_at.desc(), Review.id.desc()).paginate(
        page=page, per_page=current_app.config['ADMIN_PER_PAGE'], error_out=False)
    return render_template('admin/reviews_list.html', reviews=reviews, status=status)


@admin_bp.route('/reviews/<int:review_id>/edit', methods=['GET', 'POST'])
@admin_required
def review_form(review_id):
    review = Review.query.get_or_404(review_id)
    if request.method == 'POST':
        form = AdminReviewForm()
        if not form.validate_on_submit():
            return redirect_with('admin.review_form', review_id=review.id, error=first_form_error(form))
        for key, value in form.review_values().items():
            setattr(review, key, value)
        failed = _commit_or_error('admin.review_form', review_id=review.id)
        if failed:
            return failed
        return redirect_with('admin.review_form', review_id=review.id, message='Saved.')

    form = AdminReviewForm(formdata=None)
    form.fill_from(review)
    return render_template('admin/review_form.html', review=review, form=form)


@admin_bp.route('/reviews/<int:review_id>/approve', methods=['POST'])
@admin_required
def review_approve(review_id):
    review = Review.query.get_or_404(review_id)
    if review.status != STATUS_PENDING:
        return redirect_with('admin.reviews_list', error='Review is not pending.')
    review.status = STATUS_PUBLISHED
    failed = _commit_or_error('admin.reviews_list')
    if failed:
        return failed
    logging.info(f"Review {review.id} approved")
    return redirect_with('admin.reviews_list', message='Review approved.')


@admin_bp.route('/reviews/<int:review_id>/delete', methods=['POST'])
@admin_required
def review_delete(review_id):
    review = Review.query.get_or_404(review_id)
    db.session.delete(review)
    failed = _commit_or_error('admin.reviews_list')
    if failed:
        return failed
    logging.info(f"Review {review_id} deleted by admin")
    return redirect_with('admin.reviews_list', message='Review deleted.')


#                Tickets
@admin_bp.route('/tickets')
@admin_required
def tickets_list():
    status = request.args.get('status', '')
    query = SupportTicket.query
    if status in TICKET_STATUSES:
        query = query.filter_by(status=status)
    rows = query.order_by(SupportTicket.created_at.desc(), SupportTicket.id.desc()).all()
    return render_template('admin/tickets_list.html', tickets=rows, status=status, statuses=TICKET_STATUSES)


@admin_bp.route('/tickets/<int:ticket_id>', methods=['GET', 'POST'])
@admin_required
def ticket_detail(ticket_id):
    ticket = db.session.get(SupportTicket, ticket_id)
    if ticket is None:
        abort(404)

    if request.method == 'POST':
        form = TicketUpdateForm()
        if not form.validate_on_submit():
            return redirect_with('admin.ticket_detail', ticket_id=ticket.id, error=first_form_error(form))
        ticket.status = form.status.data
        ticket.admin_note = (form.admin_note.data or '').strip() or None
        failed = _commit_or_error('admin.ticket_detail', ticket_id=ticket.id)
        if failed:
            return failed
        logging.info(f"Ticket {ticket.id} set to {ticket.status}")
        return redirect_with('admin.ticket_detail', ticket_id=ticket.id, message='Updated.')

    form = TicketUpdateForm(formdata=None, status=ticket.status, admin_note=ticket.admin_note or '')
    return render_template('admin/ticket.html', ticket=ticket, form=form)
