from urllib.parse import parse_qs, urlparse

from ratemyteacher.extensions import db
from ratemyteacher.models.review import Review
from conftest import review_form


def _location(response):
    return urlparse(response.headers['Location'])


def test_anonymous_submit_redirects_to_login_with_rate_page(client, teacher):
    response = client.post(f'/teachers/{teacher.id}/reviews', data=review_form())

    assert response.status_code == 302
    location = _location(response)
    assert location.path == '/login'
    assert parse_qs(location.query)['next'] == [f'/teachers/{teacher.id}/rate']
    assert Review.query.count() == 0


def test_anonymous_rate_page_keeps_query(client, teacher):
    response = client.get(f'/teachers/{teacher.id}/rate?from=list')
    assert parse_qs(_location(response).query)['next'] == [f'/teachers/{teacher.id}/rate?from=list']


def test_submit_review(client, student, teacher):
    response = client.post(f'/teachers/{teacher.id}/reviews', data=review_form())

    assert response.status_code == 302
    location = _location(response)
    assert location.path == f'/teachers/{teacher.id}'
    assert location.fragment == 'ratings'

    review = Review.query.one()
    assert review.user_id == student.id
    assert review.course == 'AP CALC'
    assert review.tags == ['CARING', 'TOUGH GRADER']
    assert review.comment == 'Great teacher.'
    assert review.would_take_again is True
    assert review.status == 'published'


def test_submit_review_validation(client, student, teacher):
    response = client.post(f'/teachers/{teacher.id}/reviews', data=review_form(quality='9'))

    location = _location(response)
    assert location.path == f'/teachers/{teacher.id}/rate'
    assert parse_qs(location.query)['error'] == ['Rating must be between 1 and 5.']
    assert Review.query.count() == 0


def test_submit_review_requires_course(client, student, teacher):
    response = client.post(f'/teachers/{teacher.id}/reviews', data=review_form(course=''))
    assert parse_qs(_location(response).query)['error'] == ['Course code is required.']


def test_submit_review_too_many_tags(client, student, teacher):
    tags = ', '.join(f'tag{i}' for i in range(11))
    response = client.post(f'/teachers/{teacher.id}/reviews', data=review_form(tags=tags))
    assert parse_qs(_location(response).query)['error'] == ['At most 10 tags.']


def test_submit_review_unknown_teacher(client, student):
    assert client.post('/teachers/999/reviews', data=review_form()).status_code == 404


def test_owner_can_edit(client, student, teacher, make_review):
    review = make_review(teacher, student)
    response = client.post(f'/me/ratings/{review.id}/edit', data=review_form(quality='2', course='ib physics'))

    assert _location(response).path == '/me/ratings'
    db.session.refresh(review)
    assert review.quality == 2
    assert review.course == 'IB PHYSICS'


def test_non_owner_cannot_edit(client, make_user, login, teacher, make_review):
    owner = make_user('owner@basischina.com')
    review = make_review(teacher, owner, quality=5)
    make_user('other@basischina.com')
    login('other@basischina.com')

    response = client.post(f'/me/ratings/{review.id}/edit', data=review_form(quality='1'))

    location = _location(response)
    assert location.path == '/me/ratings'
    assert parse_qs(location.query)['error'] == ['You can only edit your own reviews.']
    db.session.refresh(review)
    assert review.quality == 5


def test_non_owner_cannot_delete(client, make_user, login, teacher, make_review):
    owner = make_user('owner@basischina.com')
    review = make_review(teacher, owner)
    make_user('other@basischina.com')
    login('other@basischina.com')

    response = client.post(f'/me/ratings/{review.id}/delete')

    assert parse_qs(_location(response).query)['error'] == ['You can only delete your own reviews.']
    assert db.session.get(Review, review.id) is not None


def test_owner_can_delete(client, student, teacher, make_review):
    review = make_review(teacher, student)
    review_id = review.id
    response = client.post(f'/me/ratings/{review_id}/delete')

    assert parse_qs(_location(response).query)['message'] == ['Review deleted.']
    db.session.expire_all()
    assert db.session.get(Review, review_id) is None


def test_missing_review(client, student):
    response = client.post('/me/ratings/404/delete')
    assert parse_qs(_location(response).query)['error'] == ["Review not found (or you don't own it)."]


def test_my_ratings_lists_only_mine(client, make_user, student, teacher, make_review):
    other = make_user('other@basischina.com')
    make_review(teacher, student, comment='mine')
    make_review(teacher, other, comment='theirs', course='OTHER')

    response = client.get('/me/ratings')
    assert response.status_code == 200
    assert b'mine' in response.data
    assert b'theirs' not in response.data


def test_foreign_domain_session_is_signed_out(app, client, student):
    app.config['ALLOWED_EMAIL_DOMAIN'] = '@other-school.org'
    response = client.get('/me/ratings')

    assert _location(response).path == '/login'
    with client.session_transaction() as session:
        assert '_user_id' not in session


def test_anonymous_delete_returns_to_my_ratings(client, make_user, teacher, make_review):
    review = make_review(teacher, make_user())
    response = client.post(f'/me/ratings/{review.id}/delete')

    location = _location(response)
    assert location.path == '/login'
    assert parse_qs(location.query)['next'] == ['/me/ratings']
    assert db.session.get(Review, review.id) is not None


def test_repeated_tags_count_once(client, student, teacher):
    response = client.post(f'/teachers/{teacher.id}/reviews', data=review_form(tags=', '.join(['a'] * 11)))

    assert _location(response).path == f'/teachers/{teacher.id}'
    assert Review.query.one().tags == ['A']
