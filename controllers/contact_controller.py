import logging

from common.errors import NotFound, ValidationFailure
from schemas.submission_schemas import validate_status_update
from services.submission_store import ContactStore

logger = logging.getLogger(__name__)

contacts = ContactStore()


class ContactController:

    @staticmethod
    def list_contacts(status=None, page=None, limit=None):
        return contacts.find_many({'status': status}, page=page, limit=limit)

    @staticmethod
    def get_contact(contact_id):
        contact = contacts.find_by_id(contact_id)
        if contact is None:
            raise NotFound("Contact not found")
        return contact

    @staticmethod
    def update_status(contact_id, raw):
        result = validate_status_update(raw)
        if not result.is_valid:
            raise ValidationFailure(result.errors, message="Invalid status")

        contact = contacts.update_by_id(contact_id, status=result.data['status'])
        if contact is None:
            raise NotFound("Contact not found")
        logger.info(f"Contact {contact_id} status changed to {contact.status}")
        return contact

    @staticmethod
    def delete_contact(contact_id):
        contact = contacts.delete_by_id(contact_id)
        if contact is None:
            raise NotFound("Contact not found")
        logger.info(f"Contact deleted: {contact_id}")
        return contact
