from hospitium.extensions import db
from .base import BaseModel

INVITATION_STATUSES = {"PENDING", "ACCEPTED", "DECLINED", "EXPIRED"}

class ManuscriptInvitation(BaseModel):
    __tablename__ = "manuscript_invitations"

    manuscript_id = db.Column(db.String(36), db.ForeignKey("manuscripts.id"), nullable=False, index=True)
    invited_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)
    invited_user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True, index=True)

    orcid_id = db.Column(db.String(19), nullable=True, index=True)
    email = db.Column(db.String(120), nullable=True, index=True)
    given_name = db.Column(db.String(120), nullable=True)
    family_name = db.Column(db.String(120), nullable=True)
    affiliation = db.Column(db.String(255), nullable=True)

    role = db.Column(db.String(20), nullable=False, default="CONTRIBUTOR")
    message = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(20), nullable=False, default="PENDING", index=True)

    expires_at = db.Column(db.DateTime(timezone=True), nullable=False)
    responded_at = db.Column(db.DateTime(timezone=True), nullable=True)

    manuscript = db.relationship("Manuscript", back_populates="invitations")
    inviter = db.relationship("User", foreign_keys=[invited_by])
    invited_user = db.relationship("User", foreign_keys=[invited_user_id])

    @property
    def invitee_name(self):
        return f"{self.given_name or ''} {self.family_name or ''}".strip() or self.email or self.orcid_id
