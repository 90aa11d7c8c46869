# routes/helpers.py
import functools
import logging

from flask import jsonify, request

from personalization.errors import NotFound, ValidationError

logger = logging.getLogger(__name__)


def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def float_arg(name, required=False):
    raw = request.args.get(name)
    if raw is None or raw == '':
        if required:
            raise ValidationError(f"Query parameter '{name}' is required")
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValidationError(f"Query parameter '{name}' must be a number")


def int_arg(name):
    raw = request.args.get(name)
    if raw is None or raw == '':
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"Query parameter '{name}' must be an integer")


def bad_request(message, e=None):
    if e is not None:
        message = f"{message}: {e}"
    return jsonify({'error': message}), 400


def not_found(e):
    return jsonify({'error': str(e)}), 404


def server_error(message):
    """Log the active exception and answer with a fixed message."""
    logger.exception(message)
    return jsonify({'error': message}), 500


def handle_errors(message, invalid_message=None):
    """
    Wrap a view: ValidationError -> 400, NotFound -> 404, anything else -> 500
    with ``message``.
    """
    def decorator(view):
        @functools.wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return bad_request(invalid_message or "Invalid request", e)
            except NotFound as e:
                return not_found(e)
            except Exception:
                return server_error(message)
        return wrapper
    return decorator
