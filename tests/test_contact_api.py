"""HTTP tests for /api/contact."""

from models.contact import Contact
from services.submission_store import ContactStore


def create_contacts(count):
    store = ContactStore()
    return [
        store.create(name=f'User {i}', email=f'user{i}@example.com', subject=f'Subject {i}',
                     message=f'This is test message number {i} with sufficient length')
        for i in range(count)
    ]


class TestSubmitContact:

    def test_valid_submission_returns_201(self, client, fake_email, fake_slack, contact_payload):
        response = client.post('/api/contact', json=contact_payload,
                               headers={'User-Agent': 'pytest-agent'})

        assert response.status_code == 201
        body = response.get_json()
        assert body['success'] is True
        assert body['message'] == 'Contact submitted successfully'
        assert body['data']['email'] == 'john@example.com'

        stored = client.get(f"/api/contact/{body['data']['id']}").get_json()['data']
        assert stored['status'] == 'new'
        assert stored['userAgent'] == 'pytest-agent'
        assert stored['phone'] == '+1234567890'

    def test_invalid_email_is_rejected(self, client, fake_email, fake_slack, contact_payload):
        contact_payload['email'] = 'invalid-email'

        response = client.post('/api/contact', json=contact_payload)

        assert response.status_code == 400
        body = response.get_json()
        assert body['success'] is False
        assert body['error'] == 'Validation failed'
        assert body['errors'] == [{'field': 'email', 'message': 'Valid email is required'}]
        assert Contact.query.count() == 0

    def test_short_message_is_rejected(self, client, fake_email, fake_slack, contact_payload):
        contact_payload['message'] = 'Too short'

        response = client.post('/api/contact', json=contact_payload)

        assert response.status_code == 400
        assert response.get_json()['errors'][0]['field'] == 'message'
        assert fake_email.sent == []

    def test_missing_body(self, client, fake_email, fake_slack):
        response = client.post('/api/contact', data='not json', content_type='text/plain')

        assert response.status_code == 400
        assert len(response.get_json()['errors']) == 4

    def test_notification_outage_does_not_fail_submission(self, client, fake_email, fake_slack,
                                                          contact_payload):
        fake_email.fail = True
        fake_slack.fail = True

        response = client.post('/api/contact', json=contact_payload)

        assert response.status_code == 201
        assert Contact.query.count() == 1

    def test_without_configured_channels(self, client, contact_payload):
        response = client.post('/api/contact', json=contact_payload)

        assert response.status_code == 201


class TestListContacts:

    def test_pagination(self, client):
        create_contacts(15)

        body = client.get('/api/contact?page=1&limit=10').get_json()

        assert len(body['data']) == 10
        assert body['pagination'] == {'total': 15, 'page': 1, 'pages': 2}
        assert set(body['data'][0]) >= {'id', 'name', 'email', 'status', 'createdAt'}

    def test_second_page(self, client):
        create_contacts(15)

        body = client.get('/api/contact?page=2&limit=10').get_json()

        assert len(body['data']) == 5
        assert body['pagination']['page'] == 2

    def test_huge_page_number_is_not_a_server_error(self, client):
        create_contacts(1)

        response = client.get('/api/contact?page=99999999999999999999&limit=10')

        assert response.status_code == 200
        body = response.get_json()
        assert body['data'] == []
        assert body['pagination']['total'] == 1

    def test_limit_is_capped(self, client):
        create_contacts(3)

        body = client.get('/api/contact?limit=99999999999999999999').get_json()

        assert len(body['data']) == 3
        assert body['pagination']['pages'] == 1

    def test_status_filter(self, client):
        contacts = create_contacts(3)
        ContactStore().update_by_id(contacts[0].id, status='resolved')

        body = client.get('/api/contact?status=resolved').get_json()

        assert [c['id'] for c in body['data']] == [contacts[0].id]

    def test_empty_listing(self, client):
        body = client.get('/api/contact').get_json()

        assert body['data'] == []
        assert body['pagination'] == {'total': 0, 'page': 1, 'pages': 0}


class TestManageContact:

    def test_get_missing_contact(self, client):
        response = client.get('/api/contact/999')

        assert response.status_code == 404
        assert response.get_json() == {'success': False, 'error': 'Contact not found'}

    def test_update_status(self, client):
        contact = create_contacts(1)[0]

        response = client.patch(f'/api/contact/{contact.id}/status', json={'status': 'in-progress'})

        assert response.status_code == 200
        assert response.get_json()['data']['status'] == 'in-progress'

    def test_invalid_status_leaves_record_unchanged(self, client):
        contact = create_contacts(1)[0]

        response = client.patch(f'/api/contact/{contact.id}/status', json={'status': 'archived'})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Invalid status'
        assert ContactStore().find_by_id(contact.id).status == 'new'

    def test_update_missing_contact(self, client):
        response = client.patch('/api/contact/999/status', json={'status': 'read'})

        assert response.status_code == 404

    def test_delete(self, client):
        contact = create_contacts(1)[0]

        response = client.delete(f'/api/contact/{contact.id}')

        assert response.status_code == 200
        assert response.get_json()['message'] == 'Contact deleted successfully'
        assert client.get(f'/api/contact/{contact.id}').status_code == 404
        assert client.delete(f'/api/contact/{contact.id}').status_code == 404
