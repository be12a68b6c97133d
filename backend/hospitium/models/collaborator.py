from hospitium.extensions import db
from .base import BaseModel, utc_now

COLLABORATOR_ROLES = {"OWNER", "ADMIN", "EDITOR", "CONTRIBUTOR", "REVIEWER", "VIEWER"}

# Permission flags granted when a role is assigned without explicit flags
ROLE_DEFAULT_PERMISSIONS = {
    "OWNER": {"can_edit": True, "can_invite": True, "can_delete": True},
    "ADMIN": {"can_edit": True, "can_invite": True, "can_delete": False},
    "EDITOR": {"can_edit": True, "can_invite": False, "can_delete": False},
    "CONTRIBUTOR": {"can_edit": True, "can_invite": False, "can_delete": False},
    "REVIEWER": {"can_edit": False, "can_invite": False, "can_delete": False},
    "VIEWER": {"can_edit": False, "can_invite": False, "can_delete": False},
}

class ManuscriptCollaborator(BaseModel):
    __tablename__ = "manuscript_collaborators"

    manuscript_id = db.Column(db.String(36), db.ForeignKey("manuscripts.id"), nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)

    role = db.Column(db.String(20), nullable=False, default="CONTRIBUTOR")
    can_edit = db.Column(db.Boolean, nullable=False, default=False)
    can_invite = db.Column(db.Boolean, nullable=False, default=False)
    can_delete = db.Column(db.Boolean, nullable=False, default=False)

    invited_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)
    joined_at = db.Column(db.DateTime(timezone=True), default=utc_now)

    manuscript = db.relationship("Manuscript", back_populates="collaborators")
    user = db.relationship("User", foreign_keys=[user_id])
    inviter = db.relationship("User", foreign_keys=[invited_by])

    __table_args__ = (
        db.UniqueConstraint("manuscript_id", "user_id", name="uq_manuscript_collaborator"),
    )

    def apply_role(self, role):
        self.role = role
        for flag, value in ROLE_DEFAULT_PERMISSIONS[role].items():
            setattr(self, flag, value)
