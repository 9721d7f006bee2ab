"""Form state for the admin editors.

A form holds plain field values plus, for JSON-typed fields, a two-state
buffer: the raw text the user typed and the last value that parsed.
"""

import copy
import json
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel
from pydantic_core import PydanticUndefined

from gallery_cms.entities import PageCreate, PaintingCreate, SettingCreate, base_type, is_nullable
from gallery_cms.exceptions import ValidationRejected


@dataclass
class JsonField:
    """Raw text buffer plus the last successfully parsed JSON object"""

    text: str
    value: dict[str, Any]
    error: str | None = None

    @classmethod
    def from_value(cls, value: dict[str, Any] | None) -> "JsonField":
        value = copy.deepcopy(value) if value else {}
        return cls(text=json.dumps(value, indent=2, ensure_ascii=False), value=value)

    @property
    def is_valid(self) -> bool:
        return self.error is None

    def edit(self, text: str) -> bool:
        """Take new text; the value only changes when the text parses to an object."""
        self.text = text
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            self.error = f"Invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})"
            return False
        if not isinstance(parsed, dict):
            self.error = "Content must be a JSON object"
            return False
        self.value = parsed
        self.error = None
        return True


@dataclass
class FormState:
    values: dict[str, Any]
    json_fields: dict[str, JsonField] = field(default_factory=dict)
    # Form values as hydrated from the record being edited; None when creating
    baseline: dict[str, Any] | None = None

    def set(self, name: str, value: Any) -> None:
        if name in self.json_fields:
            raise ValueError(f"{name} is a JSON field; use edit_json()")
        if name not in self.values:
            raise ValueError(f"Unknown form field: {name!r}")
        self.values[name] = value

    def edit_json(self, name: str, text: str) -> bool:
        if name not in self.json_fields:
            raise ValueError(f"{name} is not a JSON field")
        return self.json_fields[name].edit(text)

    def snapshot(self) -> dict[str, Any]:
        """All field values, JSON fields contributing their last valid value"""
        data = dict(self.values)
        for name, buffer in self.json_fields.items():
            data[name] = copy.deepcopy(buffer.value)
        return data

    @property
    def invalid_json_fields(self) -> list[str]:
        return [name for name, buffer in self.json_fields.items() if not buffer.is_valid]


def _blank_for(annotation: Any) -> Any:
    return {dict: {}, bool: False, int: 0}.get(base_type(annotation), "")


class EntityForm:
    """Describes how one entity's insert shape maps onto form fields."""

    def __init__(
        self,
        create_class: type[BaseModel],
        required: tuple[str, ...] = (),
        json_fields: tuple[str, ...] = (),
        image_field: str | None = None,
    ):
        self.create_class = create_class
        self.required = required
        self.json_field_names = json_fields
        self.image_field = image_field
        self._fields = create_class.model_fields

        unknown = set(required) | set(json_fields) | ({image_field} - {None})
        unknown -= set(self._fields)
        if unknown:
            raise ValueError(f"Fields not on {create_class.__name__}: {sorted(unknown)}")

    def _nullable(self, name: str) -> bool:
        return is_nullable(self._fields[name].annotation)

    def _blank(self, name: str) -> Any:
        return _blank_for(self._fields[name].annotation)

    def _default(self, name: str) -> Any:
        default = self._fields[name].get_default(call_default_factory=True)
        if default is PydanticUndefined or default is None:
            return self._blank(name)
        return copy.deepcopy(default)

    def _build(self, values: dict[str, Any], baseline: dict[str, Any] | None) -> FormState:
        plain = {k: v for k, v in values.items() if k not in self.json_field_names}
        json_fields = {k: JsonField.from_value(values[k]) for k in self.json_field_names}
        return FormState(values=plain, json_fields=json_fields, baseline=baseline)

    def blank(self) -> FormState:
        """A form reset to defaults for creating a record"""
        return self._build({name: self._default(name) for name in self._fields}, None)

    def hydrate(self, record: BaseModel) -> FormState:
        """A form filled from ``record``; absent values become blanks, never None"""
        values: dict[str, Any] = {}
        for name in self._fields:
            value = getattr(record, name, None)
            values[name] = self._blank(name) if value is None else copy.deepcopy(value)
        return self._build(values, baseline=copy.deepcopy(values))

    def _normalize(self, name: str, value: Any) -> Any:
        # A blank optional field means "absent", not an empty value
        if self._nullable(name) and value in ("", {}):
            return None
        return value

    def validate(self, state: FormState) -> None:
        data = state.snapshot()
        missing = [
            name for name in self.required
            if isinstance(data.get(name), str) and not data[name].strip()
        ]
        if missing:
            raise ValidationRejected(f"Required fields are empty: {', '.join(missing)}")

    def create_payload(self, state: FormState) -> dict[str, Any]:
        self.validate(state)
        return {name: self._normalize(name, value) for name, value in state.snapshot().items()}

    def update_payload(self, state: FormState) -> dict[str, Any]:
        """Only the fields that differ from what was hydrated"""
        self.validate(state)
        baseline = state.baseline or {}
        return {
            name: self._normalize(name, value)
            for name, value in state.snapshot().items()
            if name not in baseline or baseline[name] != value
        }


PAINTING_FORM = EntityForm(
    PaintingCreate,
    required=("title", "year", "medium", "dimensions", "collection", "theme", "description"),
    image_field="image_url",
)

PAGE_FORM = EntityForm(
    PageCreate,
    required=("slug", "title_en"),
    json_fields=("content_en", "content_ar"),
)

SETTING_FORM = EntityForm(SettingCreate, required=("name", "value_en"))
