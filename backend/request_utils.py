"""
Small request parsing helpers shared by the blueprints.
"""

from typing import Any, Dict

from flask import request

from backend.errors import ValidationError


def read_json() -> Dict[str, Any]:
    """
    Return the JSON object body of the current request.

    Raises:
        ValidationError: If the body is not a JSON object.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("invalid request body")
    return data
