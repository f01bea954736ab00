"""Field schema shared by every staged editor.

A workflow describes what it edits with :class:`FieldSpec` objects and how the
user moves between screens with :class:`StepSpec` objects.  The engine and the
renderer only ever look at these descriptions, never at workflow code.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Sequence, Union

from tandem_bot.errors import SessionCorruptedError, UnknownFieldError, UnknownStepError

if TYPE_CHECKING:
    from tandem_bot.editing.session import EditSession


FieldValue = Union[str, list[str]]

MENU_STEP = "menu"


class FieldKind(str, Enum):
    SINGLE = "single"
    MULTI = "multi"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    name: str
    kind: FieldKind
    choices: tuple[str, ...]
    label_key: str
    option_prefix: str = ""
    icon: str = ""
    empty_key: str = "none_selected"
    # value -> fields emptied when that value is selected
    resets: Mapping[str, tuple[str, ...]] = dataclasses.field(default_factory=dict)

    @property
    def multi(self) -> bool:
        return self.kind is FieldKind.MULTI

    def option_key(self, value: str) -> str:
        return f"{self.option_prefix}{value}"

    def empty_value(self) -> FieldValue:
        return [] if self.multi else ""

    def copy_value(self, value: FieldValue) -> FieldValue:
        return list(value) if self.multi else value

    def coerce(self, raw: Any) -> FieldValue:
        """Check the decoded JSON shape of a stored value."""
        if self.multi:
            if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
                raise SessionCorruptedError(f"Field {self.name!r} must be a list of strings")
            return list(raw)
        if not isinstance(raw, str):
            raise SessionCorruptedError(f"Field {self.name!r} must be a string")
        return raw


@dataclass(frozen=True, slots=True)
class StepLink:
    step: str
    label_key: str
    focus: Optional[str] = None
    icon: str = ""


@dataclass(frozen=True, slots=True)
class StepSpec:
    name: str
    title_key: str
    field: Optional[str] = None
    columns: int = 1
    back_step: str = MENU_STEP
    # translation key prefix for the focused sub-item shown in the title
    focus_prefix: str = ""
    # selected value -> step shown next (single-select only)
    branches: Mapping[str, str] = dataclasses.field(default_factory=dict)
    options: Optional[Callable[["EditSession"], Sequence[str]]] = None
    links: Optional[Callable[["EditSession"], Sequence[StepLink]]] = None


@dataclass(frozen=True, slots=True)
class Rule:
    """Commit-time check; ``check`` returns ``True`` when values are valid."""

    error_key: str
    check: Callable[[Mapping[str, FieldValue]], bool]
    # format arguments for the translated message
    params: Mapping[str, Any] = dataclasses.field(default_factory=dict)


def static_links(*links: StepLink) -> Callable[["EditSession"], Sequence[StepLink]]:
    frozen = tuple(links)

    def _links(_session: "EditSession") -> Sequence[StepLink]:
        return frozen

    return _links


@dataclass(frozen=True)
class EditSchema:
    workflow: str
    tag: str
    title_key: str
    fields: tuple[FieldSpec, ...]
    steps: tuple[StepSpec, ...]
    summary_fields: tuple[str, ...] = ()

    def field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise UnknownFieldError(f"{self.workflow} has no field {name!r}")

    def step(self, name: str) -> StepSpec:
        for spec in self.steps:
            if spec.name == name:
                return spec
        raise UnknownStepError(f"{self.workflow} has no step {name!r}")

    def has_step(self, name: str) -> bool:
        return any(spec.name == name for spec in self.steps)

    def empty_values(self) -> dict[str, FieldValue]:
        return {spec.name: spec.empty_value() for spec in self.fields}

    def copy_values(self, values: Mapping[str, FieldValue]) -> dict[str, FieldValue]:
        return {spec.name: spec.copy_value(values[spec.name]) for spec in self.fields}

    def coerce_values(self, raw: Any) -> dict[str, FieldValue]:
        if not isinstance(raw, dict):
            raise SessionCorruptedError(f"{self.workflow} values must be an object")
        missing = [spec.name for spec in self.fields if spec.name not in raw]
        if missing:
            raise SessionCorruptedError(f"{self.workflow} values miss {', '.join(missing)}")
        return {spec.name: spec.coerce(raw[spec.name]) for spec in self.fields}

    def coerce_field_value(self, name: str, raw: Any) -> FieldValue:
        try:
            spec = self.field(name)
        except UnknownFieldError as exc:
            raise SessionCorruptedError(str(exc)) from exc
        return spec.coerce(raw)


__all__ = [
    "EditSchema",
    "FieldKind",
    "FieldSpec",
    "FieldValue",
    "MENU_STEP",
    "Rule",
    "StepLink",
    "StepSpec",
    "static_links",
]
