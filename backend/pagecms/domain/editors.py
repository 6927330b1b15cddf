"""
Per-type section editors.

An editor owns the shape of one section type's `content` blob. It is asked to
`normalize` content before it is stored and to `check` it for structural
problems a schema cannot express. Editors are registered by section type slug
when this module is imported; unknown slugs fall back to the default editor.
"""
import copy
import re
from typing import Any, Dict, List, Tuple, Type

Problem = Tuple[str, str]  # (path relative to content, message)

OPTION_FIELD_TYPES = {"select", "radio", "checkbox-group"}

_EDITORS: Dict[str, "SectionEditor"] = {}


class SectionEditor:
    section_type: str = ""

    def normalize(self, content: Any) -> Dict[str, Any]:
        if not isinstance(content, dict):
            return {}
        return copy.deepcopy(content)

    def check(self, content: Dict[str, Any]) -> List[Problem]:
        return []


def register_editor(cls: Type[SectionEditor]) -> Type[SectionEditor]:
    if not cls.section_type:
        raise ValueError(f"{cls.__name__} must declare a section_type")
    _EDITORS[cls.section_type] = cls()
    return cls


def get_editor(section_type: str) -> SectionEditor:
    return _EDITORS.get(section_type, _DEFAULT_EDITOR)


def registered_types() -> List[str]:
    return sorted(_EDITORS)


def derive_field_name(label: str) -> str:
    """
    Form field name from its label: lowercased, whitespace runs become "_",
    anything outside [a-z0-9_] is dropped. Idempotent.

    >>> derive_field_name("Full Name!")
    'full_name'
    """
    name = re.sub(r"\s+", "_", label.lower())
    return re.sub(r"[^a-z0-9_]", "", name)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@register_editor
class FormSectionEditor(SectionEditor):
    """Dynamic form: `content.fields` is itself a small field schema."""

    section_type = "form"

    def normalize(self, content: Any) -> Dict[str, Any]:
        content = super().normalize(content)
        fields = content.get("fields")
        if not isinstance(fields, list):
            return content

        for field in fields:
            if not isinstance(field, dict):
                continue
            label = field.get("label")
            if not field.get("name") and isinstance(label, str) and label.strip():
                field["name"] = derive_field_name(label)
        return content

    def check(self, content: Dict[str, Any]) -> List[Problem]:
        problems: List[Problem] = []
        fields = content.get("fields", [])

        if not isinstance(fields, list):
            return [("/fields", "Form fields must be a list")]

        for index, field in enumerate(fields):
            path = f"/fields/{index}"
            if not isinstance(field, dict):
                problems.append((path, f"Form field {index} must be an object"))
                continue

            label = field.get("label")
            if not isinstance(label, str) or not label.strip():
                problems.append((f"{path}/label", f"Form field {index} needs a non-empty label"))

            field_type = field.get("field_type", "text")
            if field_type in OPTION_FIELD_TYPES:
                options = field.get("options")
                if not isinstance(options, list) or not options:
                    problems.append((
                        f"{path}/options",
                        f"Form field {index} of type {field_type} needs at least one option",
                    ))

            validation = field.get("validation")
            if validation is None:
                continue
            if not isinstance(validation, dict):
                problems.append((f"{path}/validation", f"Form field {index} validation must be an object"))
                continue

            low, high = validation.get("min"), validation.get("max")
            for key, value in (("min", low), ("max", high)):
                if value is not None and not _is_number(value):
                    problems.append((f"{path}/validation/{key}", f"Form field {index} validation {key} must be a number"))
            if _is_number(low) and _is_number(high) and low > high:
                problems.append((f"{path}/validation", f"Form field {index} validation min is greater than max"))

        return problems


_DEFAULT_EDITOR = SectionEditor()
