import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid

from flask import render_template_string

from common.errors import TransportFailure
from common.formatting import format_timestamp
from models.enums import EmailProvider, EmailTemplate

logger = logging.getLogger(__name__)


# Record fields are embedded verbatim; validation is the only filter applied to them.
CONTACT_CONFIRMATION_TEMPLATE = """
{% autoescape false %}
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>Thank you for reaching out!</h2>
    <p>Hi {{ contact.name }},</p>
    <p>We received your message and will get back to you as soon as possible.</p>
    <div style="background-color: #f5f5f5; padding: 20px; border-radius: 5px; margin: 20px 0;">
        <h3>Your Submission:</h3>
        <p><strong>Subject:</strong> {{ contact.subject }}</p>
        <p><strong>Message:</strong> {{ contact.message }}</p>
    </div>
    <p>Best regards,<br>The Team</p>
</div>
{% endautoescape %}
"""

ADMIN_NOTIFICATION_TEMPLATE = """
{% autoescape false %}
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>New Contact Submission</h2>
    <div style="background-color: #f5f5f5; padding: 20px; border-radius: 5px;">
        <p><strong>Name:</strong> {{ contact.name }}</p>
        <p><strong>Email:</strong> {{ contact.email }}</p>
        <p><strong>Phone:</strong> {{ contact.phone or 'N/A' }}</p>
        <p><strong>Subject:</strong> {{ contact.subject }}</p>
        <p><strong>Message:</strong> {{ contact.message }}</p>
        <p><strong>Submitted:</strong> {{ submitted_at }}</p>
    </div>
</div>
{% endautoescape %}
"""

NEWSLETTER_WELCOME_TEMPLATE = """
{% autoescape false %}
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>Welcome!</h2>
    <p>Hi {{ subscriber.name or 'there' }},</p>
    <p>Thank you for subscribing to our newsletter. You'll be the first to know about our latest updates and offers.</p>
    <p>Best regards,<br>The Team</p>
</div>
{% endautoescape %}
"""


class SMTPTransport:
    """Thin wrapper around smtplib for one configured SMTP endpoint."""

    def __init__(self, host, port, username=None, password=None,
                 use_ssl=False, use_tls=False, timeout=10):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_ssl = use_ssl
        self.use_tls = use_tls
        self.timeout = timeout

    def _connect(self):
        if self.use_ssl:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout,
                                    context=ssl.create_default_context())
        return smtplib.SMTP(self.host, self.port, timeout=self.timeout)

    def _authenticate(self, server):
        if self.use_tls and not self.use_ssl:
            server.starttls(context=ssl.create_default_context())
        if self.username and self.password:
            server.login(self.username, self.password)

    def send(self, message):
        with self._connect() as server:
            self._authenticate(server)
            server.send_message(message)

    def verify(self):
        with self._connect() as server:
            self._authenticate(server)
            server.noop()

    def __repr__(self):
        return f"<SMTPTransport {self.host}:{self.port}>"


def build_transport(config):
    """
    Build the SMTP transport selected by ``EMAIL_PROVIDER``.

    Returns None when the provider is unknown or its credentials are missing.
    """
    provider = (config.get('EMAIL_PROVIDER') or '').lower()
    timeout = config.get('SMTP_TIMEOUT', 10)

    if provider == EmailProvider.GMAIL.value:
        if not (config.get('GMAIL_USER') and config.get('GMAIL_PASS')):
            logger.warning("Gmail provider selected but GMAIL_USER/GMAIL_PASS are not set")
            return None
        return SMTPTransport('smtp.gmail.com', 465, config['GMAIL_USER'], config['GMAIL_PASS'],
                             use_ssl=True, timeout=timeout)

    if provider == EmailProvider.SENDGRID.value:
        if not config.get('SENDGRID_API_KEY'):
            logger.warning("SendGrid provider selected but SENDGRID_API_KEY is not set")
            return None
        return SMTPTransport('smtp.sendgrid.net', 587, 'apikey', config['SENDGRID_API_KEY'],
                             use_tls=True, timeout=timeout)

    if provider == EmailProvider.SMTP.value:
        if not config.get('SMTP_HOST'):
            logger.warning("SMTP provider selected but SMTP_HOST is not set")
            return None
        secure = bool(config.get('SMTP_SECURE'))
        return SMTPTransport(config['SMTP_HOST'], int(config.get('SMTP_PORT') or 587),
                             config.get('SMTP_USER'), config.get('SMTP_PASS'),
                             use_ssl=secure, use_tls=not secure, timeout=timeout)

    logger.warning("No email provider configured, emails will not be sent")
    return None


class EmailService:
    """Outbound transactional email for submissions."""

    def __init__(self, transport=None, sender='noreply@example.com', admin_email='admin@example.com'):
        self.transport = transport
        self.sender = sender
        self.admin_email = admin_email

    @classmethod
    def from_config(cls, config):
        return cls(
            transport=build_transport(config),
            sender=config.get('EMAIL_FROM') or 'noreply@example.com',
            admin_email=config.get('ADMIN_EMAIL') or 'admin@example.com',
        )

    def send_contact_confirmation(self, contact):
        return self.send_template(EmailTemplate.CONTACT_CONFIRMATION, contact)

    def send_admin_notification(self, contact):
        return self.send_template(EmailTemplate.ADMIN_NOTIFICATION, contact)

    def send_newsletter_welcome(self, subscriber):
        return self.send_template(EmailTemplate.NEWSLETTER_WELCOME, subscriber)

    def render(self, kind, record):
        """Return ``(to, subject, html)`` for a template kind and its source record."""
        kind = EmailTemplate(kind)
        if kind is EmailTemplate.CONTACT_CONFIRMATION:
            html = render_template_string(CONTACT_CONFIRMATION_TEMPLATE, contact=record)
            return record.email, "We received your message", html
        if kind is EmailTemplate.ADMIN_NOTIFICATION:
            html = render_template_string(ADMIN_NOTIFICATION_TEMPLATE, contact=record,
                                          submitted_at=format_timestamp(record.created_at))
            return self.admin_email, f"New Contact: {record.subject}", html
        html = render_template_string(NEWSLETTER_WELCOME_TEMPLATE, subscriber=record)
        return record.email, "Welcome to our newsletter!", html

    def send_template(self, kind, record):
        to_email, subject, html = self.render(kind, record)
        return self.send_email(to_email, subject, html)

    def send_email(self, to_email, subject, html_content):
        """
        Send an HTML email.

        Returns:
            str: the Message-ID of the sent message, or None when no transport is configured

        Raises:
            TransportFailure: the transport rejected or failed to deliver the message
        """
        if not self.transport:
            logger.warning("Email transporter not configured")
            return None

        message = MIMEMultipart('alternative')
        message['Subject'] = subject
        message['From'] = self.sender
        message['To'] = to_email
        message_id = make_msgid(domain=self.sender.rsplit('@', 1)[-1])
        message['Message-ID'] = message_id
        message.attach(MIMEText(html_content, 'html', 'utf-8'))

        try:
            self.transport.send(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email: {str(e)}")
            raise TransportFailure('email', f"Email sending failed: {str(e)}")

        logger.info(f"Email sent successfully: {message_id}")
        return message_id

    def verify_connection(self):
        if not self.transport:
            return False
        try:
            self.transport.verify()
            logger.info("Email service verified")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Email verification failed: {str(e)}")
            return False
