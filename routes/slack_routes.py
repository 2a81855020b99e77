# routes/slack_routes.py
import json

from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from common.response import error_response
from schemas.submission_schemas import SlackMessageSchema

slack_bp = Blueprint('slack_bp', __name__)


def get_slack_service():
    return current_app.extensions['slack_service']


@slack_bp.route('/events', methods=['POST'])
def slack_events():
    """
    Slack Events API callback.
    Answers ``url_verification`` challenges and acknowledges every other event.
    ---
    tags:
      - Slack
    responses:
      200:
        description: "{challenge} for url_verification, {ok: true} otherwise."
      400:
        description: Signing secret not configured.
      401:
        description: Request signature rejected.
    """
    slack_service = get_slack_service()
    if not slack_service.signing_secret:
        current_app.logger.warning("Slack signing secret not configured")
        return jsonify({'error': 'Not configured'}), 400

    raw_body = request.get_data()
    if current_app.config.get('SLACK_VERIFY_SIGNATURE'):
        verified = slack_service.verify_signature(
            request.headers.get('X-Slack-Request-Timestamp'),
            raw_body,
            request.headers.get('X-Slack-Signature'),
        )
        if not verified:
            current_app.logger.warning("Rejected Slack event with invalid signature")
            return jsonify({'error': 'Invalid signature'}), 401

    try:
        event = json.loads(raw_body or b'{}')
        if not isinstance(event, dict):
            raise ValueError("Event payload must be a JSON object")
        return jsonify(slack_service.handle_slack_event(event))
    except Exception as e:
        current_app.logger.error(f"Slack event handler error: {str(e)}")
        return jsonify({'error': str(e)}), 500


@slack_bp.route('/message', methods=['POST'])
def send_slack_message():
    """
    Send an ad hoc message through the Slack webhook.
    ---
    tags:
      - Slack
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            text:
              type: string
            blocks:
              type: array
              items:
                type: object
    responses:
      200:
        description: Webhook response body.
      400:
        description: Text or blocks required.
    """
    try:
        data = SlackMessageSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        current_app.logger.warning(f"Slack message validation failed: {err.messages}")
        return error_response("Text or blocks required", 400)

    message = {'text': data.get('text')}
    if data.get('blocks'):
        message['blocks'] = data['blocks']

    result = get_slack_service().send_webhook_message(message)
    return jsonify({'success': True, 'data': result}), 200
