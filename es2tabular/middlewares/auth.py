from functools import wraps

from flask import current_app, g, jsonify, request


def require_user(f):
    """
    Resolves the caller from the configured user header (set by the
    authenticating proxy) and checks the email domain against the allow list.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        storage = current_app.config["STORAGE"]
        email = (request.headers.get(storage.user_header) or "").strip()

        if not email:
            return jsonify({
                'status': 'unauthorized',
                'message': f'Missing required header: {storage.user_header}'
            }), 401

        if not storage.is_allowed(email):
            return jsonify({
                'status': 'forbidden',
                'message': f"Domain not allowed for user '{email}'"
            }), 403

        g.user = email
        return f(*args, **kwargs)

    return wrapper
