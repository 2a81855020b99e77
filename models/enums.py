from enum import Enum


class ContactStatus(Enum):
    NEW = 'new'
    READ = 'read'
    IN_PROGRESS = 'in-progress'
    RESOLVED = 'resolved'

    @classmethod
    def values(cls):
        return [status.value for status in cls]

    @classmethod
    def is_valid(cls, value):
        return value in cls.values()


class ContactSource(Enum):
    CONTACT_FORM = 'contact-form'
    NEWSLETTER = 'newsletter'
    API = 'api'


class EmailTemplate(Enum):
    CONTACT_CONFIRMATION = 'contact-confirmation'
    ADMIN_NOTIFICATION = 'admin-notification'
    NEWSLETTER_WELCOME = 'newsletter-welcome'


class EmailProvider(Enum):
    GMAIL = 'gmail'
    SENDGRID = 'sendgrid'
    SMTP = 'smtp'
