"""Field-level validation of inbound customer payloads.

Violations are reported as a mapping of wire field name to reason, e.g.
``{"primaryEmail": "value is not a valid email address: ..."}``.
"""
from typing import Any, Dict, Iterable

from pydantic import ValidationError

from .errors import ValidationFailure
from .models import CustomerIn

# Leading loc entries FastAPI adds for the request part
_LOCATION_PREFIXES = ("body", "path", "query", "header")
_VALUE_ERROR_PREFIX = "Value error, "


def field_errors(errors: Iterable[Dict[str, Any]]) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        field = ".".join(loc) or "body"
        message = error.get("msg", "is invalid")
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX):]
        # first reason per field wins
        result.setdefault(field, message)
    return result


def validate_customer(data: Any) -> Dict[str, str]:
    """Return the field violations of ``data``; empty when it is a valid customer."""
    try:
        CustomerIn.model_validate(data)
    except ValidationError as exc:
        return field_errors(exc.errors())
    return {}


def parse_customer(data: Any) -> CustomerIn:
    errors = validate_customer(data)
    if errors:
        raise ValidationFailure(errors)
    return CustomerIn.model_validate(data)
