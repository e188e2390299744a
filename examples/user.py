from fnevent import Request, Response, bad_request


def handler(request: Request) -> Response:
    """
    Echo the `id` query parameter back as the response body.

    Returns 400 with a structured error when `id` is missing.
    """
    user_id = request.query.get("id")
    if user_id is None:
        return bad_request("Invalid query string")
    return Response(200, {"Content-Type": "application/json"}, user_id)
