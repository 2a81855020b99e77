from sqlalchemy.orm import validates

from common.database import db, BaseModel, utcnow


class WaitlistEntry(BaseModel):
    __tablename__ = 'waitlist_entries'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    joined_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    @validates('email')
    def validate_email(self, key, value):
        return value.strip().lower() if value else value

    def serialize(self):
        return {
            'id': self.id,
            'email': self.email,
            'joinedAt': self._isoformat(self.joined_at),
            'createdAt': self._isoformat(self.created_at),
            'updatedAt': self._isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<WaitlistEntry {self.email}>"
