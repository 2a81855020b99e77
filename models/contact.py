from sqlalchemy.orm import validates

from common.database import db, BaseModel
from models.enums import ContactStatus, ContactSource


class Contact(BaseModel):
    __tablename__ = 'contacts'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(50), nullable=True)
    subject = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    # Storing as VARCHAR, validated by Python Enum
    status = db.Column(db.String(20), nullable=False, default=ContactStatus.NEW.value)
    source = db.Column(db.String(20), nullable=False, default=ContactSource.CONTACT_FORM.value)
    slack_message_id = db.Column(db.String(64), nullable=True)
    ip_address = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(512), nullable=True)

    __table_args__ = (
        db.Index('idx_contacts_email_created', 'email', 'created_at'),
        db.Index('idx_contacts_status_created', 'status', 'created_at'),
    )

    @validates('email')
    def validate_email(self, key, value):
        return value.strip().lower() if value else value

    @validates('status')
    def validate_status(self, key, value):
        if isinstance(value, ContactStatus):
            return value.value
        if not ContactStatus.is_valid(value):
            raise ValueError(f"Invalid contact status: {value}")
        return value

    @validates('source')
    def validate_source(self, key, value):
        if isinstance(value, ContactSource):
            return value.value
        return ContactSource(value).value

    def serialize(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'subject': self.subject,
            'message': self.message,
            'status': self.status,
            'source': self.source,
            'slackMessageId': self.slack_message_id,
            'ipAddress': self.ip_address,
            'userAgent': self.user_agent,
            'createdAt': self._isoformat(self.created_at),
            'updatedAt': self._isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<Contact {self.id} {self.email} [{self.status}]>"
