from typing import Any, Dict, Optional
from flask import request
from hospitium.domain.exceptions import ValidationError


def json_body() -> Dict[str, Any]:
    """The request's JSON object; a missing body reads as ``{}``."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Invalid request body")
    return data


def string_field(data: Dict[str, Any], field: str, *, required: bool = False) -> Optional[str]:
    """
    ``data[field]`` when it is a string, ``None`` when absent.

    Any other JSON type is a 400 rather than reaching the database.
    """
    value = data.get(field)
    if value is None:
        if required:
            raise ValidationError(f"{field} is required")
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value
