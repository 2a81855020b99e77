# routes/waitlist_routes.py
from flask import Blueprint, request, jsonify, current_app

from common.errors import ValidationFailure
from controllers.intake_controller import get_intake_pipeline

waitlist_bp = Blueprint('waitlist_bp', __name__)


@waitlist_bp.route('', methods=['POST'])
def join_waitlist():
    """
    Join the waitlist. Repeat joins succeed without creating a second entry.
    Responses use a bare ``{message, email}`` body rather than the API envelope.
    ---
    tags:
      - Waitlist
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
    responses:
      201:
        description: Joined the waitlist.
      200:
        description: Already on the waitlist.
      400:
        description: Email is required.
    """
    try:
        result = get_intake_pipeline().join_waitlist(request.get_json(silent=True))
    except ValidationFailure as e:
        return jsonify({'message': e.errors[0]['message']}), 400
    except Exception as e:
        current_app.logger.error(f"Waitlist signup failed: {str(e)}")
        return jsonify({'message': 'Something went wrong'}), 500

    if result.record is None:
        return jsonify({'message': result.message}), 200

    return jsonify({
        'message': result.message,
        'email': result.record.email,
    }), 201 if result.created else 200
