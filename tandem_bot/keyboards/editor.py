from __future__ import annotations

from typing import Callable

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from tandem_bot.editing.rendering import StepView


def step_keyboard(view: StepView) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [[InlineKeyboardButton(button.text, callback_data=button.data) for button in row] for row in view.rows]
    )


def back_to_profile_keyboard(t: Callable[..., str]) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([[InlineKeyboardButton(t("back_to_profile"), callback_data="profile:show")]])


__all__ = ["back_to_profile_keyboard", "step_keyboard"]
