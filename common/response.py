from flask import jsonify


def success_response(message=None, data=None, status_code=200, pagination=None):
    response = {"success": True}
    if message is not None:
        response["message"] = message
    if data is not None:
        response["data"] = data
    if pagination is not None:
        response["pagination"] = pagination
    return jsonify(response), status_code


def error_response(message, status_code=400, **extra):
    response = {"success": False, "error": message}
    response.update(extra)
    return jsonify(response), status_code


def paginated_response(page, serializer):
    """Render a store Page as the listing envelope."""
    return success_response(
        data=[serializer(item) for item in page.items],
        pagination={
            "total": page.total,
            "page": page.page,
            "pages": page.pages,
        },
    )
