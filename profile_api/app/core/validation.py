"""
Declarative required-field checks for request bodies.

Each endpoint declares a mapping ``field -> message``.  A field fails
its rule when it is missing, ``None`` or a blank string.  All rules are
evaluated so the caller receives every violated field at once.
"""

from typing import Any, Dict, List, Mapping

from .errors import FieldError, RequestValidationFailed


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def check_required(data: Mapping[str, Any], rules: Dict[str, str]) -> List[FieldError]:
    """Return one ``FieldError`` per rule whose field is empty in ``data``."""
    return [
        FieldError(field=field, message=message)
        for field, message in rules.items()
        if is_empty(data.get(field))
    ]


def require_fields(data: Mapping[str, Any], rules: Dict[str, str]) -> None:
    """Raise ``RequestValidationFailed`` if any rule is violated."""
    errors = check_required(data, rules)
    if errors:
        raise RequestValidationFailed(errors)
