from typing import Any, Dict, List, NamedTuple, Optional, Tuple

# JSON type name -> accepted Python types
JSON_TYPES: Dict[str, Tuple[type, ...]] = {
    "string": (str,),
    "number": (int, float),
    "integer": (int,),
    "boolean": (bool,),
    "array": (list,),
    "object": (dict,),
}


class ContentSchema(NamedTuple):
    properties: Dict[str, Optional[str]]  # field -> expected type, None when untyped
    required: List[str]
    item_properties: Dict[str, Optional[str]]

    @property
    def declares_fields(self) -> bool:
        return bool(self.properties)


def json_type_of(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def matches_type(value: Any, expected: Optional[str]) -> bool:
    if expected in (None, "any"):
        return True

    accepted = JSON_TYPES.get(expected)
    if accepted is None:
        # Unknown type names in a schema never reject content
        return True

    # bool is an int subclass in Python, never a JSON number
    if isinstance(value, bool) and expected != "boolean":
        return False

    if expected == "integer" and isinstance(value, float):
        return value.is_integer()

    return isinstance(value, accepted)


def _field_type(spec: Any) -> Optional[str]:
    if isinstance(spec, str):
        return spec
    if isinstance(spec, dict):
        type_name = spec.get("type")
        return type_name if isinstance(type_name, str) else None
    return None


def normalize_schema(schema: Any) -> ContentSchema:
    """
    Reduces the accepted schema spellings to one shape.

    Accepted keys:
    - properties: {field: "type" | {"type": "type"}}
    - required: [field, ...]
    - fields: [field, ...] (untyped) or a mapping like `properties`,
      where an entry may carry "required": true
    - items_schema: {key: "type"}; implies an `items` array field
    """
    properties: Dict[str, Optional[str]] = {}
    required: List[str] = []
    item_properties: Dict[str, Optional[str]] = {}

    if not isinstance(schema, dict):
        return ContentSchema(properties, required, item_properties)

    fields = schema.get("fields")
    if isinstance(fields, list):
        for name in fields:
            if isinstance(name, str):
                properties.setdefault(name, None)
    elif isinstance(fields, dict):
        for name, spec in fields.items():
            properties[name] = _field_type(spec)
            if isinstance(spec, dict) and spec.get("required") is True:
                required.append(name)

    declared = schema.get("properties")
    if isinstance(declared, dict):
        for name, spec in declared.items():
            properties[name] = _field_type(spec)

    items_schema = schema.get("items_schema")
    if isinstance(items_schema, dict):
        for key, spec in items_schema.items():
            item_properties[key] = _field_type(spec)
        properties["items"] = "array"
    elif "items" in properties and properties["items"] is None:
        properties["items"] = "array"

    for name in schema.get("required") or []:
        if isinstance(name, str) and name not in required:
            required.append(name)
            properties.setdefault(name, None)

    return ContentSchema(properties, required, item_properties)


def _issue(path: str, message: str, code: str) -> Dict[str, str]:
    return {"path": path, "message": message, "code": code}


def check_content(
    content: Any,
    schema: Any,
    *,
    base_path: str = "/content",
) -> Tuple[List[Dict[str, str]], List[Dict[str, str]]]:
    """
    Checks a section content object against its type's schema.

    Returns (errors, warnings). Missing required fields and declared fields of
    the wrong JSON type are errors; fields the schema does not declare are
    warnings, since schemas only ever grow.
    """
    errors: List[Dict[str, str]] = []
    warnings: List[Dict[str, str]] = []

    if content is None:
        content = {}

    if not isinstance(content, dict):
        errors.append(_issue(
            base_path,
            f"Content must be an object, got {json_type_of(content)}",
            "SchemaViolation",
        ))
        return errors, warnings

    parsed = normalize_schema(schema)

    for name in parsed.required:
        if name not in content:
            errors.append(_issue(
                f"{base_path}/{name}",
                f"Missing required field: {name}",
                "SchemaViolation",
            ))
        elif content[name] is None:
            errors.append(_issue(
                f"{base_path}/{name}",
                f"Required field '{name}' must not be null",
                "SchemaViolation",
            ))

    for name, value in content.items():
        if name not in parsed.properties:
            if parsed.declares_fields:
                warnings.append(_issue(
                    f"{base_path}/{name}",
                    f"Unknown field '{name}' is not part of the section schema",
                    "UnknownField",
                ))
            continue

        expected = parsed.properties[name]
        # Optional fields may be explicitly null
        if value is None and name not in parsed.required:
            continue
        if value is not None and not matches_type(value, expected):
            errors.append(_issue(
                f"{base_path}/{name}",
                f"Field '{name}' must be of type {expected}, got {json_type_of(value)}",
                "SchemaViolation",
            ))

    items = content.get("items")
    if parsed.item_properties and isinstance(items, list):
        for index, item in enumerate(items):
            item_path = f"{base_path}/items/{index}"
            if not isinstance(item, dict):
                errors.append(_issue(
                    item_path,
                    f"Item {index} must be an object, got {json_type_of(item)}",
                    "SchemaViolation",
                ))
                continue
            for key, expected in parsed.item_properties.items():
                if key in item and item[key] is not None and not matches_type(item[key], expected):
                    errors.append(_issue(
                        f"{item_path}/{key}",
                        f"Field '{key}' of item {index} must be of type {expected}, "
                        f"got {json_type_of(item[key])}",
                        "SchemaViolation",
                    ))

    return errors, warnings


def _example_text(name: str) -> str:
    lowered = name.lower()
    if "image" in lowered or lowered in ("photo", "avatar", "logo", "poster"):
        return "https://example.com/image.jpg"
    if "url" in lowered or "link" in lowered:
        return "https://example.com"
    if "email" in lowered:
        return "hello@example.com"
    return name.replace("_", " ").capitalize()


def _example_value(name: str, expected: Optional[str]) -> Any:
    if expected in ("number", "integer"):
        return 5 if "rating" in name else 1
    if expected == "boolean":
        return False
    if expected == "array":
        return []
    if expected == "object":
        return {}
    return _example_text(name)


def example_content(schema: Any) -> Dict[str, Any]:
    """
    Sample content object for a section type, shown beside the JSON editor.

    Every declared field gets a placeholder of its type; an `items_schema`
    yields one sample item. The result passes `check_content` for `schema`.
    """
    parsed = normalize_schema(schema)
    example: Dict[str, Any] = {}

    for name, expected in parsed.properties.items():
        if name == "items" and parsed.item_properties:
            example[name] = [{
                key: _example_value(key, item_type)
                for key, item_type in parsed.item_properties.items()
            }]
            continue
        example[name] = _example_value(name, expected)

    return example
