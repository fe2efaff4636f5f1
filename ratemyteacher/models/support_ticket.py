from ..extensions import db
from .base import BaseModel, utcnow

TICKET_CATEGORIES = (
    "Troubleshooting",
    "Business Partnership",
    "Technical Partnership",
    "Account & Login",
    "Content Report",
    "Bug Report",
    "Feature Request",
    "Data Correction",
    "Other",
)

TICKET_STATUSES = {
    'open': 'Open',
    'in_progress': 'In Progress',
    'resolved': 'Resolved',
    'closed': 'Closed',
}


class SupportTicket(BaseModel):
    __tablename__ = 'support_tickets'

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    email = db.Column(db.String(255), nullable=False, default='')
    category = db.Column(db.String(40), nullable=False)
    category_other = db.Column(db.String(60), nullable=True)
    title = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=False)
    page_url = db.Column(db.String(1024), nullable=True)
    user_agent = db.Column(db.String(512), nullable=True)
    status = db.Column(db.String(20), nullable=False, default='open', index=True)
    admin_note = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    @property
    def category_label(self):
        if self.category == 'Other' and self.category_other:
            return f'Other: {self.category_other}'
        return self.category

    @property
    def status_label(self):
        return status_label(self.status)


def status_label(status):
    return TICKET_STATUSES.get(status, status or '—')
