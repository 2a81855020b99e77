from collections import namedtuple
from collections.abc import Mapping

from marshmallow import (
    EXCLUDE, Schema, ValidationError, fields, post_load, pre_load, validate, validates_schema,
)

from models.enums import ContactStatus

EMAIL_PATTERN = r'^[^\s@]+@[^\s@]+\.[^\s@]+$'
PHONE_PATTERN = r'^[+]?[0-9\s\-()]+$'

INVALID_INPUT_FIELD = 'body'


def _messages(required, invalid=None):
    """Error messages for a string field; a missing or null value reads as 'required'."""
    return {
        'required': required,
        'null': required,
        'invalid': invalid or required,
    }


class SubmissionSchema(Schema):
    """Base schema: trims string input and ignores unknown fields."""

    # Order in which violations are reported
    field_order = ()
    strip_input = True

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def strip_strings(self, data, **kwargs):
        if not self.strip_input or not isinstance(data, Mapping):
            return data
        return {
            key: value.strip() if isinstance(value, str) else value
            for key, value in data.items()
        }

    @post_load
    def normalize_email(self, data, **kwargs):
        if data.get('email'):
            data['email'] = data['email'].lower()
        return data


class ContactSchema(SubmissionSchema):
    field_order = ('name', 'email', 'phone', 'subject', 'message')

    name = fields.Str(
        required=True,
        error_messages=_messages('Name is required'),
        validate=[
            validate.Length(min=1, error='Name is required'),
            validate.Length(min=2, max=100, error='Name must be 2-100 characters'),
        ],
    )
    email = fields.Str(
        required=True,
        error_messages=_messages('Valid email is required'),
        validate=validate.Regexp(EMAIL_PATTERN, error='Valid email is required'),
    )
    phone = fields.Str(
        allow_none=True,
        error_messages={'invalid': 'Invalid phone format'},
        validate=validate.Regexp(PHONE_PATTERN, error='Invalid phone format'),
    )
    subject = fields.Str(
        required=True,
        error_messages=_messages('Subject is required'),
        validate=[
            validate.Length(min=1, error='Subject is required'),
            validate.Length(min=3, max=200, error='Subject must be 3-200 characters'),
        ],
    )
    message = fields.Str(
        required=True,
        error_messages=_messages('Message is required'),
        validate=[
            validate.Length(min=1, error='Message is required'),
            validate.Length(min=10, max=5000, error='Message must be 10-5000 characters'),
        ],
    )


class NewsletterSchema(SubmissionSchema):
    field_order = ('email', 'name')

    email = fields.Str(
        required=True,
        error_messages=_messages('Valid email is required'),
        validate=validate.Regexp(EMAIL_PATTERN, error='Valid email is required'),
    )
    name = fields.Str(
        allow_none=True,
        error_messages={'invalid': 'Name must be less than 100 characters'},
        validate=validate.Length(max=100, error='Name must be less than 100 characters'),
    )


class WaitlistSchema(SubmissionSchema):
    field_order = ('email',)

    # Presence only; the unique index on the lowercased column is the remaining guard
    email = fields.Str(
        required=True,
        error_messages=_messages('Email is required'),
        validate=validate.Length(min=1, error='Email is required'),
    )


class ContactStatusUpdateSchema(SubmissionSchema):
    field_order = ('status',)
    # Status values are matched exactly as sent
    strip_input = False

    status = fields.Str(
        required=True,
        error_messages=_messages('Invalid status'),
        validate=validate.OneOf(ContactStatus.values(), error='Invalid status'),
    )


class SlackMessageSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    text = fields.Str(allow_none=True)
    blocks = fields.List(fields.Dict(), allow_none=True)

    @validates_schema
    def require_text_or_blocks(self, data, **kwargs):
        if not data.get('text') and not data.get('blocks'):
            raise ValidationError('Text or blocks required')


class ValidationResult(namedtuple('ValidationResult', ['data', 'errors'])):
    """Either normalized ``data`` or a non-empty ``errors`` list, never both."""
    __slots__ = ()

    @property
    def is_valid(self):
        return not self.errors


def _collect_violations(messages, field_order):
    """Flatten marshmallow's error dict into an ordered list of violations."""
    ordered = list(field_order) + [key for key in messages if key not in field_order]
    violations = []
    for key in ordered:
        field_messages = messages.get(key)
        if not field_messages:
            continue
        if isinstance(field_messages, dict):
            field_messages = [msg for msgs in field_messages.values() for msg in msgs]
        field = INVALID_INPUT_FIELD if key == '_schema' else key
        for message in field_messages:
            violations.append({'field': field, 'message': message})
    return violations


def load_submission(schema, raw):
    """Run ``schema`` over ``raw``; never raises for bad input."""
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        return ValidationResult(None, [{'field': INVALID_INPUT_FIELD, 'message': 'Invalid input type.'}])
    try:
        return ValidationResult(schema.load(raw), [])
    except ValidationError as err:
        messages = err.messages if isinstance(err.messages, dict) else {'_schema': err.messages}
        return ValidationResult(None, _collect_violations(messages, schema.field_order))


def validate_contact(raw):
    return load_submission(ContactSchema(), raw)


def validate_newsletter(raw):
    return load_submission(NewsletterSchema(), raw)


def validate_waitlist(raw):
    return load_submission(WaitlistSchema(), raw)


def validate_status_update(raw):
    return load_submission(ContactStatusUpdateSchema(), raw)
