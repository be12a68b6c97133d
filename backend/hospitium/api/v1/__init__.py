from flask import Blueprint

# Create the versioned blueprint
v1_bp = Blueprint("v1", __name__)

# Import route modules so they register with v1_bp
from . import health
from . import auth
from . import manuscripts
from . import changes
from . import versions
from . import collaborators
from . import invitations
from . import notifications
from . import orcid
from . import logs
