from .user import User
from .manuscript import Manuscript
from .collaborator import ManuscriptCollaborator
from .invitation import ManuscriptInvitation
from .notification import Notification
from .tracked_change import TrackedChange
from .manuscript_version import ManuscriptVersion

__all__ = [
    "User",
    "Manuscript",
    "ManuscriptCollaborator",
    "ManuscriptInvitation",
    "Notification",
    "TrackedChange",
    "ManuscriptVersion",
]
