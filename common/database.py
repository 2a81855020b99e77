from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

# Initialize the database instance
db = SQLAlchemy()


def utcnow():
    return datetime.now(timezone.utc)


# Base model with common fields for all tables
class BaseModel(db.Model):
    """Base model with common fields for all tables."""
    __abstract__ = True

    # No default ID field - each model will define its own primary key

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @staticmethod
    def _isoformat(value):
        return value.isoformat() if value else None
