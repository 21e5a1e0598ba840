from ..errors import ValidationError


def ensure_positive_int(value: int, field: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer") from None
    if number < 0:
        raise ValidationError(f"{field} must be >= 0")
    return number
