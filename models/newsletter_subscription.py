import secrets

from sqlalchemy.orm import validates

from common.database import db, BaseModel


def generate_token():
    return secrets.token_urlsafe(32)


class NewsletterSubscription(BaseModel):
    __tablename__ = 'newsletter_subscriptions'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    name = db.Column(db.String(100), nullable=True)
    subscribed = db.Column(db.Boolean, nullable=False, default=True)
    verified = db.Column(db.Boolean, nullable=False, default=False)
    verified_at = db.Column(db.DateTime, nullable=True)

    # Reserved for double opt-in and one-click unsubscribe links
    verification_token = db.Column(db.String(64), nullable=True)
    unsubscribe_token = db.Column(db.String(64), nullable=True, default=generate_token)

    tags = db.Column(db.JSON, nullable=False, default=list)
    # "metadata" is reserved on declarative models
    extra_metadata = db.Column('metadata', db.JSON, nullable=True)

    __table_args__ = (
        db.Index('idx_newsletter_subscribed_verified', 'subscribed', 'verified'),
    )

    @validates('email')
    def validate_email(self, key, value):
        return value.strip().lower() if value else value

    def serialize(self):
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'subscribed': self.subscribed,
            'verified': self.verified,
            'verifiedAt': self._isoformat(self.verified_at),
            'tags': self.tags or [],
            'metadata': self.extra_metadata,
            'createdAt': self._isoformat(self.created_at),
            'updatedAt': self._isoformat(self.updated_at),
        }

    def serialize_summary(self):
        """Projection used by the subscriber listing."""
        return {
            'email': self.email,
            'name': self.name,
            'createdAt': self._isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<NewsletterSubscription {self.email} subscribed={self.subscribed}>"
