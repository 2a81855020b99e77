# routes/contact_routes.py
from flask import Blueprint, request, current_app

from common.decorators import rate_limit
from common.response import success_response, paginated_response
from controllers.contact_controller import ContactController
from controllers.intake_controller import get_intake_pipeline

contact_bp = Blueprint('contact_bp', __name__)


@contact_bp.route('', methods=['POST'])
@rate_limit('CONTACT_RATE_LIMIT_MAX', 'CONTACT_RATE_LIMIT_WINDOW_SECONDS', key_prefix='rl:contact',
            message="Too many contact submissions from this IP")
def create_contact():
    """
    Submit a new contact form.
    ---
    tags:
      - Contact
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name, email, subject, message]
          properties:
            name:
              type: string
              minLength: 2
              maxLength: 100
            email:
              type: string
            phone:
              type: string
            subject:
              type: string
              minLength: 3
              maxLength: 200
            message:
              type: string
              minLength: 10
              maxLength: 5000
    responses:
      201:
        description: Contact stored; notifications attempted.
      400:
        description: Validation failed.
      429:
        description: Too many contact submissions from this IP.
    """
    result = get_intake_pipeline().submit_contact(
        request.get_json(silent=True),
        ip_address=request.remote_addr,
        user_agent=request.headers.get('User-Agent'),
    )
    contact = result.record
    return success_response(
        message=result.message,
        data={'id': contact.id, 'email': contact.email},
        status_code=201,
    )


@contact_bp.route('', methods=['GET'])
def list_contacts():
    """
    List contacts, newest first.
    ---
    tags:
      - Contact
    parameters:
      - name: status
        in: query
        type: string
        enum: ['new', 'read', 'in-progress', 'resolved']
      - name: page
        in: query
        type: integer
        default: 1
      - name: limit
        in: query
        type: integer
        default: 10
    responses:
      200:
        description: A page of contacts with pagination totals.
    """
    page = ContactController.list_contacts(
        status=request.args.get('status'),
        page=request.args.get('page', 1, type=int),
        limit=request.args.get('limit', 10, type=int),
    )
    return paginated_response(page, lambda contact: contact.serialize())


@contact_bp.route('/<int:contact_id>', methods=['GET'])
def get_contact(contact_id):
    """Get a single contact."""
    contact = ContactController.get_contact(contact_id)
    return success_response(data=contact.serialize())


@contact_bp.route('/<int:contact_id>/status', methods=['PATCH'])
def update_contact_status(contact_id):
    """
    Update the status of a contact.
    ---
    tags:
      - Contact
    parameters:
      - name: contact_id
        in: path
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            status:
              type: string
              enum: ['new', 'read', 'in-progress', 'resolved']
    responses:
      200:
        description: Updated contact.
      400:
        description: Invalid status.
      404:
        description: Contact not found.
    """
    contact = ContactController.update_status(contact_id, request.get_json(silent=True))
    return success_response(data=contact.serialize())


@contact_bp.route('/<int:contact_id>', methods=['DELETE'])
def delete_contact(contact_id):
    ContactController.delete_contact(contact_id)
    current_app.logger.info(f"Contact {contact_id} removed by API request")
    return success_response(message="Contact deleted successfully")
