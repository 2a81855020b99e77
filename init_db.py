"""
Database initialization script.
Run this script to create the submission tables.
"""

from app import create_app
from common.database import db
from models.contact import Contact
from models.newsletter_subscription import NewsletterSubscription
from models.waitlist_entry import WaitlistEntry


def init_db():
    app = create_app()
    with app.app_context():
        db.create_all()
        for model in (Contact, NewsletterSubscription, WaitlistEntry):
            app.logger.info(f"Table ready: {model.__tablename__}")


if __name__ == "__main__":
    init_db()
