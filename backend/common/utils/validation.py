"""Run DRF serializers inside the service layer."""

from services.exceptions import InvalidInputError


def first_error_message(errors) -> str:
    """Flatten the first serializer error into 'field: message'."""
    if isinstance(errors, dict):
        for field_name, messages in errors.items():
            text = first_error_message(messages)
            if field_name == "non_field_errors":
                return text
            return f"{field_name}: {text}"
    if isinstance(errors, (list, tuple)) and errors:
        return first_error_message(errors[0])
    return str(errors)


def validate_or_raise(serializer):
    """Return validated data or raise InvalidInputError carrying the serializer errors."""
    if not serializer.is_valid():
        raise InvalidInputError(first_error_message(serializer.errors), errors=serializer.errors)
    return serializer.validated_data
