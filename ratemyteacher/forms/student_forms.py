from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField
from wtforms.fields.choices import SelectField
from wtforms.fields.numeric import IntegerField
from wtforms.fields.simple import HiddenField, BooleanField, PasswordField
from wtforms.validators import DataRequired, EqualTo, Length, NumberRange, Optional, ValidationError

from ..models.review import GRADE_OPTIONS, MAX_TAGS, parse_tags, unique_tags
from ..models.user import MAX_PASSWORD_BYTES
from ..models.support_ticket import TICKET_CATEGORIES


class SignInForm(FlaskForm):
    email = StringField('Email', validators=[DataRequired('Email is required.')])
    password = PasswordField('Password', validators=[DataRequired('Password is required.')])
    next = HiddenField()


class SignUpForm(FlaskForm):
    email = StringField('Email', validators=[DataRequired('Email is required.')])
    password = PasswordField('Password', validators=[
        DataRequired('Password is required.'),
        Length(min=8, message='Password must be at least 8 characters.'),
    ])
    confirm_password = PasswordField('Confirm password', validators=[
        EqualTo('password', message='Passwords do not match.'),
    ])
    next = HiddenField()

    def validate_password(self, field):
        if len((field.data or '').encode('utf-8')) > MAX_PASSWORD_BYTES:
            raise ValidationError(f'Password must be at most {MAX_PASSWORD_BYTES} bytes.')


class ReviewForm(FlaskForm):
    quality = IntegerField('Quality', validators=[
        DataRequired('Rating is required.'),
        NumberRange(min=1, max=5, message='Rating must be between 1 and 5.'),
    ])
    difficulty = IntegerField('Difficulty', validators=[
        DataRequired('Difficulty is required.'),
        NumberRange(min=1, max=5, message='Difficulty must be between 1 and 5.'),
    ])
    would_take_again = SelectField('Would take again', choices=[('yes', 'Yes'), ('no', 'No')],
                                   validators=[DataRequired('Please answer "would take again".')])
    course = StringField('Course', validators=[
        DataRequired('Course code is required.'),
        Length(max=40, message='Course code is too long.'),
    ])
    grade = SelectField('Grade', choices=[(g, g or 'Select grade') for g in GRADE_OPTIONS],
                        default='', validators=[Optional()])
    is_online = BooleanField('Online')
    tags = StringField('Tags', validators=[Optional(), Length(max=400)])
    comment = TextAreaField('Comment', validators=[
        Optional(), Length(max=2000, message='Comment is too long (max 2000 characters).'),
    ])

    def validate_tags(self, field):
        if len(unique_tags(field.data)) > MAX_TAGS:
            raise ValidationError(f'At most {MAX_TAGS} tags.')

    def review_values(self):
        return {
            'quality': self.quality.data,
            'difficulty': self.difficulty.data,
            'would_take_again': self.would_take_again.data == 'yes',
            'course': (self.course.data or '').strip().upper(),
            'grade': self.grade.data or None,
            'is_online': bool(self.is_online.data),
            'tags': parse_tags(self.tags.data),
            'comment': (self.comment.data or '').strip() or None,
        }

    def fill_from(self, review):
        self.quality.data = review.quality
        self.difficulty.data = review.difficulty
        self.would_take_again.data = 'yes' if review.would_take_again else 'no'
        self.course.data = review.course
        self.grade.data = review.grade or ''
        self.is_online.data = review.is_online
        self.tags.data = ', '.join(review.tags or [])
        self.comment.data = review.comment


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class TicketForm(FlaskForm):
    category = SelectField('Category', choices=[(c, c) for c in TICKET_CATEGORIES], default='Troubleshooting')
    category_other = StringField('Other', filters=[_strip], validators=[Length(max=60)])
    title = StringField('Title', filters=[_strip], validators=[DataRequired(), Length(min=3, max=120)])
    description = TextAreaField('Description', filters=[_strip], validators=[DataRequired(), Length(min=10, max=4000)])

    def validate_category_other(self, field):
        if self.category.data == 'Other' and not (field.data or '').strip():
            raise ValidationError('Please describe the category.')
