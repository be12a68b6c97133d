from hospitium.extensions import db
from .base import BaseModel

VERSION_TYPES = {"MANUAL", "AUTO"}

class ManuscriptVersion(BaseModel):
    __tablename__ = "manuscript_versions"

    manuscript_id = db.Column(
        db.String(36),
        db.ForeignKey("manuscripts.id"),
        nullable=False
    )

    version_number = db.Column(db.Integer, nullable=False)
    title = db.Column(db.String(500), nullable=False)
    content = db.Column(db.Text, nullable=False, default="")
    changes = db.Column(db.Text, nullable=True)  # JSON-encoded diff payload

    created_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)
    version_type = db.Column(db.String(10), nullable=False, default="MANUAL")
    description = db.Column(db.Text, nullable=True)
    word_count = db.Column(db.Integer, nullable=False, default=0)

    manuscript = db.relationship("Manuscript", back_populates="versions")
    creator = db.relationship("User", foreign_keys=[created_by])

    __table_args__ = (
        db.UniqueConstraint("manuscript_id", "version_number", name="uq_manuscript_version"),
        db.Index("idx_manuscript_version_manuscript", "manuscript_id"),
    )
