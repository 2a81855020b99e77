"""
Persistence for the three submission kinds.

Each store wraps one model and exposes the same small family of operations:
create, find by id / natural key, paginated listing, update by id and delete
by id. Stores report uniqueness conflicts as ``DuplicateKeyError`` and leave
the reaction to the caller.
"""
import logging
import math
from collections import namedtuple

from sqlalchemy.exc import IntegrityError

from common.database import db
from common.errors import DuplicateKeyError
from models.contact import Contact
from models.newsletter_subscription import NewsletterSubscription
from models.waitlist_entry import WaitlistEntry

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Keeps (page - 1) * limit inside a 64-bit OFFSET
MAX_PAGE = 1000000

Page = namedtuple('Page', ['items', 'total', 'page', 'pages'])


def normalize_paging(page=None, limit=None):
    page = min(page, MAX_PAGE) if page and page >= 1 else DEFAULT_PAGE
    limit = min(limit, MAX_LIMIT) if limit and limit >= 1 else DEFAULT_LIMIT
    return page, limit


class SubmissionStore:
    model = None
    unique_key = None

    def create(self, **fields):
        record = self.model(**fields)
        db.session.add(record)
        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            if self.unique_key:
                value = fields.get(self.unique_key)
                logger.warning(f"Duplicate {self.model.__tablename__} insert for {value}: {e.orig}")
                raise DuplicateKeyError(self.model.__tablename__, self.unique_key, value)
            raise
        return record

    def find_by_id(self, record_id):
        return db.session.get(self.model, record_id)

    def _apply_filters(self, query, filters):
        return query.filter_by(**filters)

    def find_many(self, filters=None, page=None, limit=None):
        page, limit = normalize_paging(page, limit)
        query = self._apply_filters(self.model.query, filters or {})

        total = query.order_by(None).count()
        items = (
            query.order_by(self.model.created_at.desc(), self.model.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return Page(items=items, total=total, page=page, pages=math.ceil(total / limit))

    def update_by_id(self, record_id, **fields):
        record = self.find_by_id(record_id)
        if record is None:
            return None
        return self.update(record, **fields)

    def update(self, record, **fields):
        for key, value in fields.items():
            setattr(record, key, value)
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return record

    def delete_by_id(self, record_id):
        record = self.find_by_id(record_id)
        if record is None:
            return None
        db.session.delete(record)
        db.session.commit()
        return record

    def count(self, **filters):
        return self.model.query.filter_by(**filters).count()


class EmailKeyedStore(SubmissionStore):
    unique_key = 'email'

    def find_by_email(self, email):
        if not email:
            return None
        return self.model.query.filter_by(email=email.strip().lower()).first()


class ContactStore(SubmissionStore):
    model = Contact

    def _apply_filters(self, query, filters):
        status = filters.get('status')
        if status:
            query = query.filter(Contact.status == status)
        return query


class NewsletterStore(EmailKeyedStore):
    model = NewsletterSubscription

    def _apply_filters(self, query, filters):
        subscribed = filters.get('subscribed', True)
        return query.filter(NewsletterSubscription.subscribed == subscribed)

    def unsubscribe(self, email):
        subscriber = self.find_by_email(email)
        if subscriber is None:
            return None
        return self.update(subscriber, subscribed=False)


class WaitlistStore(EmailKeyedStore):
    model = WaitlistEntry
