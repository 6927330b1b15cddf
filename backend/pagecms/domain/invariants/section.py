from collections import Counter
from .exceptions import ValidationError


def is_display_order(value):
    """Non-negative whole number; JSON documents may spell 1 as 1.0."""
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return value.is_integer() and value >= 0
    return isinstance(value, int) and value >= 0


def coerce_display_order(value):
    return None if value is None else int(value)


def section_field_problems(data, base_path=""):
    """Type problems in the scalar fields of a section payload."""
    problems = []

    for field in ("title", "subtitle"):
        if data.get(field) is not None and not isinstance(data[field], str):
            problems.append({
                "path": f"{base_path}/{field}",
                "message": f"{field} must be a string or null",
                "code": "InvalidField",
            })

    display_order = data.get("display_order")
    if display_order is not None and not is_display_order(display_order):
        problems.append({
            "path": f"{base_path}/display_order",
            "message": "display_order must be a non-negative integer",
            "code": "InvalidField",
        })

    is_active = data.get("is_active")
    if is_active is not None and not isinstance(is_active, bool):
        problems.append({
            "path": f"{base_path}/is_active",
            "message": "is_active must be a boolean",
            "code": "InvalidField",
        })

    return problems


def assert_section_fields(data):
    if not isinstance(data, dict):
        raise ValidationError("Section payload must be an object")

    problems = section_field_problems(data)
    if problems:
        raise ValidationError(problems[0]["message"], errors=problems)


def assert_unique_orders(pairs):
    for pair in pairs:
        if not isinstance(pair, dict) or not pair.get("id"):
            raise ValidationError(f"Reorder entry must have an id: {pair}")
        if not is_display_order(pair.get("display_order")):
            raise ValidationError(
                f"Reorder entry {pair['id']} needs a non-negative integer display_order"
            )

    duplicate_ids = [key for key, seen in Counter(p["id"] for p in pairs).items() if seen > 1]
    if duplicate_ids:
        raise ValidationError(f"Section ids repeated in reorder: {duplicate_ids}")

    orders = [int(pair["display_order"]) for pair in pairs]
    duplicates = sorted(order for order, seen in Counter(orders).items() if seen > 1)
    if duplicates:
        raise ValidationError(
            f"Duplicate display_order values in reorder: {duplicates}"
        )
