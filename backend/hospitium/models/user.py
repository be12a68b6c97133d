from werkzeug.security import generate_password_hash, check_password_hash
from hospitium.extensions import db
from .base import BaseModel

class User(BaseModel):
    __tablename__ = 'users'

    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)

    given_name = db.Column(db.String(120), nullable=True)
    family_name = db.Column(db.String(120), nullable=True)
    orcid_id = db.Column(db.String(19), unique=True, nullable=True, index=True)
    primary_institution = db.Column(db.String(255), nullable=True)

    role = db.Column(db.String(50), nullable=False, default='researcher')  # researcher | admin
    is_active = db.Column(db.Boolean, default=True)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def full_name(self):
        return f"{self.given_name or ''} {self.family_name or ''}".strip()
