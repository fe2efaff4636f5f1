from .teacher import Teacher
from .user import User
from .device import Device
from .review import Review
from .review_vote import ReviewVote
from .support_ticket import SupportTicket
