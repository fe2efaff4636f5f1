from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField
from wtforms.fields.choices import SelectField
from wtforms.fields.simple import HiddenField, PasswordField
from wtforms.validators import DataRequired, Length

from ..forms.student_forms import ReviewForm
from ..models.support_ticket import TICKET_STATUSES


class AdminLoginForm(FlaskForm):
    username = StringField('Username')
    password = PasswordField('Password')
    next = HiddenField()


class TeacherForm(FlaskForm):
    full_name = StringField('Full name', validators=[DataRequired('Name is required.'), Length(max=255)])
    subjects = StringField('Subjects (comma separated)', validators=[Length(max=1000)])


class AdminReviewForm(ReviewForm):
    """Same fields as the student form; the course may be left empty here."""
    course = StringField('Course', validators=[Length(max=40, message='Course code is too long.')])

    def review_values(self):
        values = super().review_values()
        values['course'] = values['course'] or None
        return values


class TicketUpdateForm(FlaskForm):
    status = SelectField('Status', choices=list(TICKET_STATUSES.items()),
                         validators=[DataRequired('Status is required.')])
    admin_note = TextAreaField('Response to the user', validators=[Length(max=4000)])
