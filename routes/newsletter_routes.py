# routes/newsletter_routes.py
from flask import Blueprint, request

from common.response import success_response, paginated_response
from controllers.intake_controller import get_intake_pipeline
from controllers.newsletter_controller import NewsletterController, parse_bool

newsletter_bp = Blueprint('newsletter_bp', __name__)


@newsletter_bp.route('', methods=['POST'])
def subscribe():
    """
    Subscribe an email address to the newsletter.
    A previously unsubscribed address is re-activated instead of duplicated.
    ---
    tags:
      - Newsletter
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [email]
          properties:
            email:
              type: string
            name:
              type: string
              maxLength: 100
    responses:
      201:
        description: Subscribed (new or re-subscribed).
      400:
        description: Validation failed, or the address is already subscribed.
    """
    result = get_intake_pipeline().submit_newsletter(request.get_json(silent=True))
    return success_response(
        message=result.message,
        data={'email': result.record.email},
        status_code=201,
    )


@newsletter_bp.route('', methods=['GET'])
def list_subscribers():
    """
    List newsletter subscribers.
    ---
    tags:
      - Newsletter
    parameters:
      - name: subscribed
        in: query
        type: boolean
        default: true
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
        description: A page of subscribers (email, name, createdAt).
    """
    page = NewsletterController.list_subscribers(
        subscribed=parse_bool(request.args.get('subscribed'), default=True),
        page=request.args.get('page', 1, type=int),
        limit=request.args.get('limit', 10, type=int),
    )
    return paginated_response(page, lambda subscriber: subscriber.serialize_summary())


@newsletter_bp.route('/<email>', methods=['DELETE'])
def unsubscribe(email):
    """Unsubscribe an email address. The subscription row is kept."""
    NewsletterController.unsubscribe(email)
    return success_response(message="Successfully unsubscribed")
