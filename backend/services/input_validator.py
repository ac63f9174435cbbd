"""Validation of tool inputs against declared FieldSpecs."""

from typing import Any, Dict, Iterable, Tuple

from pydantic import EmailStr, TypeAdapter, ValidationError

from application.models import FieldSpec, FieldType

_number = TypeAdapter(float)
_integer = TypeAdapter(int)
_email = TypeAdapter(EmailStr)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _format_bound(bound: float) -> str:
    return str(int(bound)) if float(bound).is_integer() else str(bound)


def _coerce(spec: FieldSpec, value: Any) -> Any:
    """Convert a raw value to the field's type.

    Raises:
        ValueError: With the user-facing message when conversion fails.
    """
    if spec.type is FieldType.NUMBER:
        if isinstance(value, bool):
            raise ValueError("Must be a number")
        try:
            return _number.validate_python(value)
        except ValidationError:
            raise ValueError("Must be a number") from None

    if spec.type is FieldType.INTEGER:
        if isinstance(value, bool):
            raise ValueError("Must be a whole number")
        try:
            return _integer.validate_python(value.strip() if isinstance(value, str) else value)
        except ValidationError:
            raise ValueError("Must be a whole number") from None

    if spec.type is FieldType.EMAIL:
        try:
            return str(_email.validate_python(str(value).strip()))
        except ValidationError:
            raise ValueError("Must be a valid email") from None

    if spec.type is FieldType.SELECT:
        if spec.options is not None and str(value) not in spec.options:
            raise ValueError("Must be one of: " + ", ".join(spec.options))
        return str(value)

    return str(value).strip()


def validate_inputs(
    fields: Iterable[FieldSpec], inputs: Dict[str, Any]
) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """Check inputs against field declarations.

    Undeclared inputs are dropped. Optional fields left blank are omitted from
    the cleaned values.

    Returns:
        Tuple of (cleaned values keyed by field name, errors keyed by field
        name). The errors dict is empty when all inputs are valid.
    """
    values: Dict[str, Any] = {}
    errors: Dict[str, str] = {}

    for spec in fields:
        raw = inputs.get(spec.name)
        if _is_blank(raw):
            if spec.required:
                errors[spec.name] = f"{spec.label or spec.name} is required"
            continue

        try:
            value = _coerce(spec, raw)
        except ValueError as e:
            errors[spec.name] = str(e)
            continue

        if spec.type in (FieldType.NUMBER, FieldType.INTEGER):
            if spec.min is not None and value < spec.min:
                errors[spec.name] = f"Must be at least {_format_bound(spec.min)}"
                continue
            if spec.max is not None and value > spec.max:
                errors[spec.name] = f"Must be no more than {_format_bound(spec.max)}"
                continue

        values[spec.name] = value

    return values, errors
