from hospitium.extensions import db
from .base import BaseModel

NOTIFICATION_TYPES = {"COLLABORATION_INVITATION", "MANUSCRIPT_UPDATE", "SYSTEM"}

class Notification(BaseModel):
    __tablename__ = "notifications"

    __table_args__ = (
        db.Index("ix_notification_cursor", "user_id", "created_at", "id"),
    )

    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    manuscript_id = db.Column(db.String(36), db.ForeignKey("manuscripts.id"), nullable=True, index=True)

    type = db.Column(db.String(50), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text, nullable=False)
    data = db.Column(db.JSON, nullable=False, default=dict)

    is_read = db.Column(db.Boolean, nullable=False, default=False, index=True)
    read_at = db.Column(db.DateTime(timezone=True), nullable=True)

    manuscript = db.relationship("Manuscript", back_populates="notifications")
