"""Tests for the submission validators."""

from schemas.submission_schemas import (
    validate_contact, validate_newsletter, validate_status_update, validate_waitlist,
)


def fields_of(result):
    return [error['field'] for error in result.errors]


def messages_of(result):
    return [error['message'] for error in result.errors]


class TestContactValidation:

    def test_valid_contact_is_trimmed_and_lowercased(self, contact_payload):
        contact_payload.update({'name': '  John Doe  ', 'email': '  John@Example.COM '})

        result = validate_contact(contact_payload)

        assert result.is_valid
        assert result.data['name'] == 'John Doe'
        assert result.data['email'] == 'john@example.com'

    def test_phone_is_optional(self, contact_payload):
        del contact_payload['phone']

        result = validate_contact(contact_payload)

        assert result.is_valid
        assert 'phone' not in result.data

    def test_null_phone_is_treated_as_absent(self, contact_payload):
        contact_payload['phone'] = None

        assert validate_contact(contact_payload).is_valid

    def test_invalid_phone_is_reported(self, contact_payload):
        contact_payload['phone'] = 'call me maybe'

        result = validate_contact(contact_payload)

        assert result.data is None
        assert result.errors == [{'field': 'phone', 'message': 'Invalid phone format'}]

    def test_malformed_email(self, contact_payload):
        contact_payload['email'] = 'invalid-email'

        result = validate_contact(contact_payload)

        assert result.errors == [{'field': 'email', 'message': 'Valid email is required'}]

    def test_email_without_tld_dot_is_rejected(self, contact_payload):
        contact_payload['email'] = 'john@localhost'

        assert not validate_contact(contact_payload).is_valid

    def test_short_message_after_trimming(self, contact_payload):
        contact_payload['message'] = '   Too short   '

        result = validate_contact(contact_payload)

        assert messages_of(result) == ['Message must be 10-5000 characters']

    def test_missing_fields_reported_in_declaration_order(self):
        result = validate_contact({'message': 'This is long enough to pass'})

        assert fields_of(result) == ['name', 'email', 'subject']
        assert messages_of(result) == ['Name is required', 'Valid email is required', 'Subject is required']

    def test_blank_name_reports_required_and_length(self, contact_payload):
        contact_payload['name'] = '   '

        result = validate_contact(contact_payload)

        assert result.errors == [
            {'field': 'name', 'message': 'Name is required'},
            {'field': 'name', 'message': 'Name must be 2-100 characters'},
        ]

    def test_length_bounds(self, contact_payload):
        contact_payload.update({'name': 'x' * 101, 'subject': 'ab', 'message': 'y' * 5001})

        result = validate_contact(contact_payload)

        assert fields_of(result) == ['name', 'subject', 'message']

    def test_unknown_fields_are_ignored(self, contact_payload):
        contact_payload['status'] = 'resolved'

        result = validate_contact(contact_payload)

        assert result.is_valid
        assert 'status' not in result.data

    def test_non_mapping_input_is_a_violation(self):
        result = validate_contact(['not', 'a', 'form'])

        assert result.data is None
        assert result.errors == [{'field': 'body', 'message': 'Invalid input type.'}]

    def test_missing_body_reports_all_required_fields(self):
        result = validate_contact(None)

        assert fields_of(result) == ['name', 'email', 'subject', 'message']


class TestNewsletterValidation:

    def test_email_only(self):
        result = validate_newsletter({'email': 'Sub@Example.com'})

        assert result.is_valid
        assert result.data == {'email': 'sub@example.com'}

    def test_name_too_long(self):
        result = validate_newsletter({'email': 'sub@example.com', 'name': 'n' * 101})

        assert result.errors == [{'field': 'name', 'message': 'Name must be less than 100 characters'}]

    def test_email_required(self):
        result = validate_newsletter({'name': 'Subscriber'})

        assert fields_of(result) == ['email']


class TestWaitlistValidation:

    def test_presence_only(self):
        result = validate_waitlist({'email': '  Not-An-Email '})

        assert result.is_valid
        assert result.data['email'] == 'not-an-email'

    def test_missing_email(self):
        result = validate_waitlist({})

        assert result.errors == [{'field': 'email', 'message': 'Email is required'}]

    def test_empty_email(self):
        assert messages_of(validate_waitlist({'email': '  '})) == ['Email is required']


class TestStatusUpdateValidation:

    def test_known_status(self):
        assert validate_status_update({'status': 'in-progress'}).data == {'status': 'in-progress'}

    def test_unknown_status(self):
        assert messages_of(validate_status_update({'status': 'archived'})) == ['Invalid status']

    def test_status_is_not_trimmed(self):
        assert messages_of(validate_status_update({'status': ' read '})) == ['Invalid status']

    def test_missing_status(self):
        assert messages_of(validate_status_update({})) == ['Invalid status']
