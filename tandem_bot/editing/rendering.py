"""Turn an edit session into screen text and button rows.

Nothing here talks to Telegram: the keyboard module converts the returned
:class:`StepView` into inline markup.  Keeping the renderer pure makes the
screens easy to assert on in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from tandem_bot.editing.schema import MENU_STEP, EditSchema, FieldSpec, FieldValue, StepSpec
from tandem_bot.editing.session import EditSession

CALLBACK_DATA_LIMIT = 64

CHECKED = "☑"
UNCHECKED = "☐"
CHOSEN = "🔘"
NOT_CHOSEN = "⚪"
WARNING = "⚠️"


@dataclass(frozen=True, slots=True)
class Button:
    text: str
    data: str


@dataclass(slots=True)
class StepView:
    text: str
    rows: list[list[Button]] = field(default_factory=list)

    def buttons(self) -> list[Button]:
        return [button for row in self.rows for button in row]


class Labels:
    """Translated strings for one interface language."""

    def __init__(self, translate: Callable[..., str]) -> None:
        self._translate = translate

    def __call__(self, key: str, **kwargs: Any) -> str:
        return self._translate(key, **kwargs)

    def option(self, spec: FieldSpec, value: str) -> str:
        return self(spec.option_key(value))


def callback_data(tag: str, action: str, *args: str) -> str:
    data = ":".join((tag, action, *args))
    if len(data.encode("utf-8")) > CALLBACK_DATA_LIMIT:
        raise ValueError(f"Callback data is longer than {CALLBACK_DATA_LIMIT} bytes: {data!r}")
    return data


def parse_callback_data(data: str) -> tuple[str, str, list[str]]:
    tag, _, rest = data.partition(":")
    action, _, args = rest.partition(":")
    return tag, action, args.split(":") if args else []


def summary_line(spec: FieldSpec, value: FieldValue, labels: Labels) -> str:
    values = value if isinstance(value, list) else ([value] if value else [])
    if not values:
        return labels(spec.empty_key)
    return ", ".join(labels.option(spec, item) for item in values)


def _chunk(buttons: Sequence[Button], columns: int) -> list[list[Button]]:
    width = max(columns, 1)
    return [list(buttons[index : index + width]) for index in range(0, len(buttons), width)]


def _field_title(spec: FieldSpec, labels: Labels) -> str:
    title = labels(spec.label_key)
    return f"{spec.icon} {title}" if spec.icon else title


def navigation_row(schema: EditSchema, session: EditSession, step: StepSpec, labels: Labels) -> list[list[Button]]:
    rows: list[list[Button]] = []
    if step.name != MENU_STEP:
        target = step.back_step
        label_key = "back_to_menu" if target == MENU_STEP else "back"
        data = (
            callback_data(schema.tag, "menu")
            if target == MENU_STEP
            else callback_data(schema.tag, "open", target)
        )
        rows.append([Button(labels(label_key), data)])
    if session.has_changes:
        rows.append([Button(labels("undo_last_change"), callback_data(schema.tag, "undo"))])
    rows.append(
        [
            Button(labels("save_changes"), callback_data(schema.tag, "save")),
            Button(labels("cancel_edit"), callback_data(schema.tag, "cancel")),
        ]
    )
    return rows


def _render_links(session: EditSession, schema: EditSchema, step: StepSpec, labels: Labels) -> StepView:
    if step.name == MENU_STEP:
        lines = [labels(schema.title_key), "", labels("current_settings")]
        for name in schema.summary_fields:
            spec = schema.field(name)
            lines.append(f"{_field_title(spec, labels)}: {summary_line(spec, session.current[name], labels)}")
    else:
        lines = [labels(step.title_key)]

    link_buttons: list[Button] = []
    for link in step.links(session) if step.links else ():
        text = labels(link.label_key)
        if link.icon:
            text = f"{link.icon} {text}"
        args = (link.step, link.focus) if link.focus else (link.step,)
        link_buttons.append(Button(text, callback_data(schema.tag, "open", *args)))

    rows = _chunk(link_buttons, step.columns)
    rows.extend(navigation_row(schema, session, step, labels))
    return StepView(text="\n".join(lines), rows=rows)


def _render_field_step(session: EditSession, schema: EditSchema, step: StepSpec, labels: Labels) -> StepView:
    if step.field is None:
        raise ValueError(f"Step {step.name!r} edits no field")
    spec = schema.field(step.field)
    value = session.current[spec.name]
    options = list(step.options(session)) if step.options else list(spec.choices)

    lines = [labels(step.title_key)]
    if step.focus_prefix and session.focus:
        lines[0] = f"{lines[0]}: {labels(step.focus_prefix + session.focus)}"
    lines.extend(["", f"{labels('selected')}: {summary_line(spec, value, labels)}"])

    option_buttons: list[Button] = []
    for option in options:
        if spec.multi:
            marker = CHECKED if option in value else UNCHECKED
            data = callback_data(schema.tag, "toggle", spec.name, option)
        else:
            marker = CHOSEN if option == value else NOT_CHOSEN
            data = callback_data(schema.tag, "select", spec.name, option)
        option_buttons.append(Button(f"{marker} {labels.option(spec, option)}", data))

    if not option_buttons:
        lines.extend(["", labels("nothing_to_choose")])

    rows = _chunk(option_buttons, step.columns)
    rows.extend(navigation_row(schema, session, step, labels))
    return StepView(text="\n".join(lines), rows=rows)


def render_step(
    session: EditSession,
    schema: EditSchema,
    labels: Labels,
    step: Optional[str] = None,
    *,
    notice: Optional[str] = None,
) -> StepView:
    spec = schema.step(step or session.current_step)
    if spec.field is None:
        view = _render_links(session, schema, spec, labels)
    else:
        view = _render_field_step(session, schema, spec, labels)
    if notice:
        view.text = f"{WARNING} {notice}\n\n{view.text}"
    return view


def render_changes(session: EditSession, schema: EditSchema, labels: Labels) -> str:
    if not session.changes:
        return labels("no_changes_made")
    lines = []
    for change in session.changes:
        spec = schema.field(change.field)
        lines.append(
            f"• {labels(spec.label_key)}: "
            f"{summary_line(spec, change.old_value, labels)} → {summary_line(spec, change.new_value, labels)}"
        )
    return "\n".join(lines)


__all__ = [
    "Button",
    "CALLBACK_DATA_LIMIT",
    "Labels",
    "StepView",
    "callback_data",
    "navigation_row",
    "parse_callback_data",
    "render_changes",
    "render_step",
    "summary_line",
]
