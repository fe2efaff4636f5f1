from flask import Blueprint

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')


from .decorators import admin_required
from .views import *
