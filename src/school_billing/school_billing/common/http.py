from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request

from ..core.exceptions import DomainError, PersistenceError

logger = logging.getLogger(__name__)


def payload() -> dict:
    """JSON body, falling back to form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def json_errors(view):
    """Map domain failures to one JSON error per request."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except PersistenceError as e:
            logger.error("%s failed in storage: %s", request.path, e)
            return jsonify({"error": str(e), "written": e.written}), 503
        except DomainError as e:
            return jsonify({"error": str(e)}), 400

    return wrapper
