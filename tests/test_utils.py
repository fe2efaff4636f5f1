from datetime import datetime

import pytest

from ratemyteacher.utils import (email_to_hey, fmt1, fmt_pct, format_review_date, is_allowed_email, ordinal,
                                 safe_next_path, sanitize_redirect_to)


@pytest.mark.parametrize('value', [
    None, '', 'teachers', '//evil.com', 'http://evil.com', '/x?u=https://evil.com', '/a\\b', '/a\nb',
])
def test_sanitize_redirect_to_rejects(value):
    assert sanitize_redirect_to(value) == '/teachers'


def test_sanitize_redirect_to_keeps_relative_paths():
    assert sanitize_redirect_to(' /teachers/3/rate?x=1 ') == '/teachers/3/rate?x=1'
    assert sanitize_redirect_to('nope', fallback='/') == '/'


def test_safe_next_path():
    assert safe_next_path('/admin/reviews?page=2') == '/admin/reviews?page=2'
    assert safe_next_path('/teachers') == '/admin/teachers'
    assert safe_next_path('//admin') == '/admin/teachers'
    assert safe_next_path(None) == '/admin/teachers'


def test_is_allowed_email(app):
    assert is_allowed_email('A.B@BasisChina.com')
    assert not is_allowed_email('a.b@basischina.com.evil.org')
    assert not is_allowed_email('')
    assert not is_allowed_email(None)


def test_email_to_hey():
    assert email_to_hey(None) == 'GUEST'
    assert email_to_hey('jane.doe@basischina.com') == 'JANE DOE'
    assert email_to_hey('@basischina.com') == 'USER'


def test_review_date_formatting():
    assert [ordinal(n) for n in (1, 2, 3, 4, 11, 12, 13, 21, 22, 101, 111)] == [
        '1st', '2nd', '3rd', '4th', '11th', '12th', '13th', '21st', '22nd', '101st', '111th']
    assert format_review_date(datetime(2024, 3, 2)) == 'Mar 2nd, 2024'
    assert format_review_date(None) == ''


def test_number_formatting():
    assert fmt1(None) == '—'
    assert fmt1(3.25) == '3.2'
    assert fmt1(4) == '4.0'
    assert fmt_pct(66.5) == '67%'
    assert fmt_pct(None) == '—'
