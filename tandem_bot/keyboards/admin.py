from __future__ import annotations

from typing import Callable

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from tandem_bot.database import FeedbackCounts
from tandem_bot.services.feedback import FeedbackPage

Translate = Callable[..., str]


def feedback_stats_keyboard(t: Translate, counts: FeedbackCounts) -> InlineKeyboardMarkup:
    buttons = [
        [InlineKeyboardButton(t("feedback_list_active", count=counts.active), callback_data="fb:list:active:0")],
        [InlineKeyboardButton(t("feedback_list_archive", count=counts.archived), callback_data="fb:list:archive:0")],
        [InlineKeyboardButton(t("feedback_list_all", count=counts.total), callback_data="fb:list:all:0")],
    ]
    return InlineKeyboardMarkup(buttons)


def feedback_item_keyboard(t: Translate, page: FeedbackPage) -> InlineKeyboardMarkup:
    kind, index, feedback_id = page.list_kind, page.index, page.item.feedback_id
    navigation = []
    if page.has_previous:
        navigation.append(InlineKeyboardButton(t("feedback_prev"), callback_data=f"fb:list:{kind}:{index - 1}"))
    if page.has_next:
        navigation.append(InlineKeyboardButton(t("feedback_next"), callback_data=f"fb:list:{kind}:{index + 1}"))

    if page.item.is_processed:
        toggle = InlineKeyboardButton(
            t("feedback_mark_unprocessed"), callback_data=f"fb:undone:{kind}:{index}:{feedback_id}"
        )
    else:
        toggle = InlineKeyboardButton(
            t("feedback_mark_processed"), callback_data=f"fb:done:{kind}:{index}:{feedback_id}"
        )

    buttons = [
        [toggle, InlineKeyboardButton(t("feedback_delete"), callback_data=f"fb:del:{kind}:{index}:{feedback_id}")],
    ]
    if navigation:
        buttons.insert(0, navigation)
    if kind == "archive":
        buttons.append([InlineKeyboardButton(t("feedback_delete_all_archived"), callback_data="fb:purge")])
    buttons.append([InlineKeyboardButton(t("feedback_back_to_stats"), callback_data="fb:stats")])
    return InlineKeyboardMarkup(buttons)


def purge_confirmation_keyboard(t: Translate) -> InlineKeyboardMarkup:
    buttons = [
        [
            InlineKeyboardButton(t("feedback_confirm_yes"), callback_data="fb:purge_yes"),
            InlineKeyboardButton(t("feedback_confirm_no"), callback_data="fb:list:archive:0"),
        ]
    ]
    return InlineKeyboardMarkup(buttons)


def stats_only_keyboard(t: Translate) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([[InlineKeyboardButton(t("feedback_back_to_stats"), callback_data="fb:stats")]])


__all__ = [
    "feedback_item_keyboard",
    "feedback_stats_keyboard",
    "purge_confirmation_keyboard",
    "stats_only_keyboard",
]
