from urllib.parse import parse_qs, urlparse

from ratemyteacher.extensions import db
from ratemyteacher.models.review import Review
from ratemyteacher.models.support_ticket import SupportTicket
from ratemyteacher.models.teacher import Teacher, parse_subjects


def _query(response):
    return parse_qs(urlparse(response.headers['Location']).query)


def test_parse_subjects():
    assert parse_subjects(' Math, Physics ,, Math , Chemistry ') == ['Math', 'Physics', 'Chemistry']
    assert parse_subjects('') == []
    assert len(parse_subjects(', '.join(f'S{i}' for i in range(30)))) == 20


def test_create_teacher(admin_client):
    response = admin_client.post('/admin/teachers', data={'full_name': ' Alice Zhang ', 'subjects': 'Math, Physics, Math'})

    assert _query(response)['message'] == ['Teacher created.']
    teacher = Teacher.query.one()
    assert teacher.full_name == 'Alice Zhang'
    assert teacher.subjects == ['Math', 'Physics']
    assert teacher.subject == 'Math'


def test_create_teacher_requires_name(admin_client):
    response = admin_client.post('/admin/teachers', data={'full_name': '', 'subjects': 'Math'})
    assert _query(response)['error'] == ['Name is required.']
    assert Teacher.query.count() == 0


def test_edit_teacher(admin_client, teacher):
    admin_client.post(f'/admin/teachers/{teacher.id}/edit', data={'full_name': 'Jane Doe', 'subjects': 'Chemistry'})
    db.session.refresh(teacher)
    assert teacher.full_name == 'Jane Doe'
    assert teacher.subject == 'Chemistry'


def test_delete_teacher_with_reviews_refused(admin_client, teacher, make_review):
    make_review(teacher)
    response = admin_client.post(f'/admin/teachers/{teacher.id}/delete')

    assert _query(response)['error'] == ['This teacher still has reviews; delete them first.']
    assert db.session.get(Teacher, teacher.id) is not None


def test_delete_teacher(admin_client, teacher):
    teacher_id = teacher.id
    response = admin_client.post(f'/admin/teachers/{teacher_id}/delete')
    assert _query(response)['message'] == ['Teacher deleted.']
    db.session.expire_all()
    assert db.session.get(Teacher, teacher_id) is None


def test_approve_pending_review(admin_client, teacher, make_review):
    review = make_review(teacher, status='pending')
    response = admin_client.post(f'/admin/reviews/{review.id}/approve')

    assert _query(response)['message'] == ['Review approved.']
    db.session.refresh(review)
    assert review.status == 'published'

    again = admin_client.post(f'/admin/reviews/{review.id}/approve')
    assert _query(again)['error'] == ['Review is not pending.']


def test_edit_review_allows_empty_course(admin_client, teacher, make_review):
    review = make_review(teacher)
    admin_client.post(f'/admin/reviews/{review.id}/edit', data={
        'quality': '1', 'difficulty': '5', 'would_take_again': 'no', 'course': '', 'grade': '',
        'tags': 'boring', 'comment': '',
    })

    db.session.refresh(review)
    assert (review.quality, review.difficulty, review.would_take_again) == (1, 5, False)
    assert review.course is None
    assert review.tags == ['BORING']
    assert review.comment is None


def test_delete_review(admin_client, teacher, make_review):
    review_id = make_review(teacher).id
    admin_client.post(f'/admin/reviews/{review_id}/delete')
    db.session.expire_all()
    assert db.session.get(Review, review_id) is None


def test_reviews_list_filters_status(admin_client, teacher, make_review):
    make_review(teacher, comment='published one')
    make_review(teacher, comment='waiting one', status='pending', course='OTHER')

    response = admin_client.get('/admin/reviews?status=pending')
    assert b'waiting one' in response.data
    assert b'published one' not in response.data


def test_update_ticket(admin_client, make_user):
    user = make_user()
    ticket = SupportTicket(user_id=user.id, email=user.email, category='Bug Report',
                           title='Broken', description='Nothing works here.')
    db.session.add(ticket)
    db.session.commit()

    response = admin_client.post(f'/admin/tickets/{ticket.id}', data={'status': 'resolved', 'admin_note': ' Fixed. '})
    assert _query(response)['message'] == ['Updated.']
    db.session.refresh(ticket)
    assert ticket.status == 'resolved'
    assert ticket.admin_note == 'Fixed.'

    bad = admin_client.post(f'/admin/tickets/{ticket.id}', data={'status': 'archived'})
    assert 'error' in _query(bad)
    db.session.refresh(ticket)
    assert ticket.status == 'resolved'


def test_tickets_list(admin_client, make_user):
    user = make_user()
    db.session.add(SupportTicket(user_id=user.id, email=user.email, category='Other', category_other='Media',
                                 title='Press question', description='Can we interview you?'))
    db.session.commit()
    response = admin_client.get('/admin/tickets?status=open')
    assert b'Press question' in response.data
