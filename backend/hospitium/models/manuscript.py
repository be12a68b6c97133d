from hospitium.extensions import db
from .base import BaseModel

MANUSCRIPT_STATUSES = {"DRAFT", "IN_REVIEW", "PUBLISHED", "ARCHIVED"}

class Manuscript(BaseModel):
    __tablename__ = "manuscripts"

    title = db.Column(db.String(500), nullable=False)
    type = db.Column(db.String(50), nullable=True, index=True)  # article, proposal, review ...
    field = db.Column(db.String(200), nullable=True)
    description = db.Column(db.Text, nullable=True)
    content = db.Column(db.Text, nullable=False, default="")
    word_count = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default="DRAFT", index=True)

    created_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    last_saved = db.Column(db.DateTime(timezone=True), nullable=True)

    creator = db.relationship("User", foreign_keys=[created_by])

    # Deleting a manuscript removes everything hanging off it
    collaborators = db.relationship(
        "ManuscriptCollaborator",
        back_populates="manuscript",
        order_by="ManuscriptCollaborator.joined_at",
        cascade="all, delete-orphan"
    )
    invitations = db.relationship(
        "ManuscriptInvitation",
        back_populates="manuscript",
        cascade="all, delete-orphan"
    )
    tracked_changes = db.relationship(
        "TrackedChange",
        back_populates="manuscript",
        cascade="all, delete-orphan"
    )
    versions = db.relationship(
        "ManuscriptVersion",
        back_populates="manuscript",
        cascade="all, delete-orphan"
    )
    notifications = db.relationship(
        "Notification",
        back_populates="manuscript",
        cascade="all, delete-orphan"
    )
