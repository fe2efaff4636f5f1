from flask import Blueprint, render_template, redirect, jsonify, request, url_for, current_app, abort
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError
import logging

from ..extensions import db
from ..forms.student_forms import ReviewForm, TicketForm
from ..models.review import Review, STATUS_PUBLISHED
from ..models.review_vote import toggle_vote
from ..models.support_ticket import SupportTicket
from ..models.teacher import Teacher
from ..services import stats
from ..utils import first_form_error, redirect_with
from .decorators import student_required

main_bp = Blueprint('main', __name__)

STATIC_PAGES = {
    'privacy-policy': 'Privacy Policy',
    'terms-and-conditions': 'Terms & Conditions',
    'site-guidelines': 'Site Guidelines',
}


@main_bp.route('/')
def index():
    return render_template('front/index.html')


@main_bp.route('/privacy-policy', defaults={'slug': 'privacy-policy'})
@main_bp.route('/terms-and-conditions', defaults={'slug': 'terms-and-conditions'})
@main_bp.route('/site-guidelines', defaults={'slug': 'site-guidelines'})
def static_page(slug):
    return render_template(f'front/{slug}.html', title=STATIC_PAGES[slug])


@main_bp.route('/teachers')
def teachers():
    q = request.args.get('q', '').strip()
    subject = request.args.get('subject', '').strip()
    page = max(1, request.args.get('page', default=1, type=int) or 1)
    per_page = current_app.config['TEACHERS_PER_PAGE']

    rows, total = stats.list_teachers(q=q, subject=subject, page=page, per_page=per_page)
    pages = max(1, -(-total // per_page))
    return render_template(
        'front/teachers.html',
        teachers=rows,
        total=total,
        page=page,
        pages=pages,
        q=q,
        subject=subject,
        subjects=stats.subject_choices(),
    )


@main_bp.route('/teachers/<int:teacher_id>')
def teacher(teacher_id):
    summary = stats.teacher_summary(teacher_id)
    if summary is None:
        abort(404)

    selected_course = request.args.get('course', '').strip()
    query = (
        Review.query
        .filter_by(teacher_id=teacher_id, status=STATUS_PUBLISHED)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    if selected_course:
        query = query.filter(Review.course == selected_course)
    reviews = query.limit(current_app.config['TEACHER_REVIEWS_LIMIT']).all()

    user_id = current_user.id if current_user.is_authenticated else None
    return render_template(
        'front/teacher.html',
        teacher=summary,
        distribution=stats.quality_distribution(teacher_id),
        top_tags=stats.top_tags(teacher_id),
        course_options=stats.course_options(teacher_id),
        selected_course=selected_course,
        reviews=reviews,
        votes=stats.vote_counts([r.id for r in reviews], user_id),
        form=ReviewForm(formdata=None),
    )


@main_bp.route('/teachers/<int:teacher_id>/rate')
@student_required()
def rate(teacher_id):
    teacher = Teacher.query.get_or_404(teacher_id)
    return render_template('front/rate.html', teacher=teacher, form=ReviewForm(formdata=None))


@main_bp.route('/teachers/<int:teacher_id>/reviews', methods=['POST'])
@student_required(return_to=lambda teacher_id: url_for('main.rate', teacher_id=teacher_id))
def submit_review(teacher_id):
    teacher = Teacher.query.get_or_404(teacher_id)
    form = ReviewForm()
    if not form.validate_on_submit():
        return redirect_with('main.rate', teacher_id=teacher.id, error=first_form_error(form))

    review = Review(teacher_id=teacher.id, user_id=current_user.id, status=STATUS_PUBLISHED,
                    **form.review_values())
    db.session.add(review)
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logging.error(f"Database error: {str(e)}")
        return redirect_with('main.rate', teacher_id=teacher.id, error='Could not save your rating. Please try again.')

    logging.info(f"Review {review.id} posted for teacher {teacher.id} by user {current_user.id}")
    return redirect_with('main.teacher', teacher_id=teacher.id, message='Thanks! Your rating was posted.',
                         _anchor='ratings')


def _vote_return_path(review_id):
    review = db.session.get(Review, review_id)
    if review is None:
        return url_for('main.teachers')
    return url_for('main.teacher', teacher_id=review.teacher_id, _anchor='ratings')


@main_bp.route('/reviews/<int:review_id>/vote', methods=['POST'])
@student_required(return_to=_vote_return_path)
def vote_review(review_id: int):
    review = Review.query.get_or_404(review_id)
    wants_json = request.is_json or request.headers.get('X-Requested-With') == 'XMLHttpRequest'
    payload = request.get_json(silent=True)
    value = payload.get('value') if isinstance(payload, dict) else request.form.get('value')
    try:
        value = int(value)
        result = toggle_vote(review.id, current_user.id, value)
        db.session.commit()
    except (TypeError, ValueError):
        if wants_json:
            return jsonify(ok=False, message='Invalid vote value.'), 400
        return redirect_with('main.teacher', teacher_id=review.teacher_id, error='Invalid vote value.',
                             _anchor='ratings')
    except SQLAlchemyError as e:
        db.session.rollback()
        logging.error(f"Database error: {str(e)}")
        if wants_json:
            return jsonify(ok=False, message='Could not save your vote.'), 500
        return redirect_with('main.teacher', teacher_id=review.teacher_id, error='Could not save your vote.',
                             _anchor='ratings')

    counts = stats.vote_counts([review.id], current_user.id)[review.id]
    if wants_json:
        return jsonify(ok=True, result=result, up=counts['up'], down=counts['down'], my_vote=counts['mine'])
    return redirect(url_for('main.teacher', teacher_id=review.teacher_id, _anchor='ratings'))


@main_bp.route('/contact', methods=['GET'])
def contact():
    return render_template(
        'front/contact.html',
        form=TicketForm(formdata=None),
        success=request.args.get('success') == '1',
        failed=request.args.get('error') == '1',
        ticket_id=request.args.get('ticket', '').strip(),
    )


@main_bp.route('/contact', methods=['POST'])
@student_required(return_to=lambda: url_for('main.contact'))
def contact_submit():
    form = TicketForm()
    if not form.validate_on_submit():
        logging.debug(f"Ticket rejected: {form.errors}")
        return redirect(url_for('main.contact', error=1))

    other = form.category_other.data.strip() if form.category.data == 'Other' else None
    ticket = SupportTicket(
        user_id=current_user.id,
        email=current_user.email or '',
        category=form.category.data,
        category_other=other,
        title=form.title.data.strip(),
        description=form.description.data.strip(),
        page_url=(request.referrer or '')[:1024] or None,
        user_agent=(request.user_agent.string or '')[:512] or None,
        status='open',
    )
    db.session.add(ticket)
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logging.error(f"Database error: {str(e)}")
        return redirect(url_for('main.contact', error=1))

    logging.info(f"Ticket {ticket.id} opened by user {current_user.id}")
    return redirect(url_for('main.contact', success=1, ticket=ticket.id))
