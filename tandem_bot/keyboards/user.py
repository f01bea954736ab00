from __future__ import annotations

from typing import Callable

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from tandem_bot import messages


def interface_language_keyboard() -> InlineKeyboardMarkup:
    buttons = [
        [InlineKeyboardButton(messages.INTERFACE_LANGUAGE_LABELS[lang], callback_data=f"ui_lang:{lang}")]
        for lang in messages.INTERFACE_LANGUAGES
    ]
    return InlineKeyboardMarkup(buttons)


def profile_keyboard(t: Callable[..., str]) -> InlineKeyboardMarkup:
    buttons = [
        [InlineKeyboardButton(t("profile_edit_languages"), callback_data="profile:edit:languages")],
        [InlineKeyboardButton(t("profile_edit_interests"), callback_data="profile:edit:interests")],
        [InlineKeyboardButton(t("profile_edit_availability"), callback_data="profile:edit:availability")],
        [InlineKeyboardButton(t("profile_feedback"), callback_data="profile:feedback")],
        [InlineKeyboardButton(t("profile_interface_language"), callback_data="profile:ui_lang")],
    ]
    return InlineKeyboardMarkup(buttons)


__all__ = ["interface_language_keyboard", "profile_keyboard"]
