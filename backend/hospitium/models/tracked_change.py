from hospitium.extensions import db
from .base import BaseModel

class TrackedChange(BaseModel):
    __tablename__ = "tracked_changes"

    manuscript_id = db.Column(db.String(36), db.ForeignKey("manuscripts.id"), nullable=False, index=True)
    change_id = db.Column(db.String(100), nullable=False, index=True)  # client-generated correlation key

    type = db.Column(db.String(50), nullable=False)  # insertion | deletion | format
    operation = db.Column(db.String(50), nullable=False)
    content = db.Column(db.Text, nullable=True)
    old_content = db.Column(db.Text, nullable=True)

    # Offsets refer to the content as it was when the change was proposed
    start_offset = db.Column(db.Integer, nullable=False)
    end_offset = db.Column(db.Integer, nullable=False)
    node_type = db.Column(db.String(50), nullable=True)

    author_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)
    status = db.Column(db.String(20), nullable=False, default="PENDING", index=True)

    # Set for both outcomes: holds whoever resolved the change
    accepted_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)
    accepted_at = db.Column(db.DateTime(timezone=True), nullable=True)
    rejected_at = db.Column(db.DateTime(timezone=True), nullable=True)

    manuscript = db.relationship("Manuscript", back_populates="tracked_changes")
    author = db.relationship("User", foreign_keys=[author_id])
    accepted_by_user = db.relationship("User", foreign_keys=[accepted_by])
