"""Entrypoint for the Tandem language-exchange Telegram bot.

The bot walks a user through profile setup (interface language, languages,
interests, availability) and lets them edit every section later.  All three
profile editors run on :class:`tandem_bot.editing.engine.StagedEditor`; this
module only routes Telegram updates to the editors and to the feedback
service and turns their results into messages.

As in the earlier versions of the project we attempt to instantiate
``AIORateLimiter`` inside :meth:`TandemTelegramBot._build_rate_limiter`.  When
the optional extra is missing its constructor raises :class:`RuntimeError`;
we log a warning and start without a rate limiter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from telegram import InlineKeyboardMarkup, Update
from telegram.error import BadRequest, TelegramError
from telegram.ext import (
    AIORateLimiter,
    Application,
    ApplicationBuilder,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from tandem_bot import messages
from tandem_bot.config import BotConfig
from tandem_bot.database import Database, UserRecord
from tandem_bot.editing.engine import StagedEditor
from tandem_bot.editing.rendering import Labels, StepView, parse_callback_data, render_changes, render_step
from tandem_bot.editing.schema import MENU_STEP
from tandem_bot.editing.session import EditSession
from tandem_bot.editing.store import (
    SESSION_TTL_SECONDS,
    MemorySessionStore,
    RedisSessionStore,
    SessionStore,
)
from tandem_bot.errors import (
    EditError,
    FeedbackValidationError,
    LimitReachedError,
    PersistenceError,
    SessionNotFoundError,
    ValidationFailedError,
)
from tandem_bot.keyboards.admin import (
    feedback_item_keyboard,
    feedback_stats_keyboard,
    purge_confirmation_keyboard,
    stats_only_keyboard,
)
from tandem_bot.keyboards.editor import back_to_profile_keyboard, step_keyboard
from tandem_bot.keyboards.user import interface_language_keyboard, profile_keyboard
from tandem_bot.services.feedback import FEEDBACK_LISTS, FeedbackService, PendingFeedback
from tandem_bot.services.localization import Localizer
from tandem_bot.utils.formatting import (
    feedback_author,
    format_feedback_page,
    format_feedback_stats,
    format_profile,
)
from tandem_bot.workflows.availability import AvailabilityWorkflow
from tandem_bot.workflows.interests import InterestsWorkflow
from tandem_bot.workflows.languages import LanguagesWorkflow

LOGGER = logging.getLogger(__name__)

Translate = Callable[..., str]

# onboarding state -> (editor shown in that state, state after a successful save)
ONBOARDING_FLOW: dict[str, tuple[str, Optional[str]]] = {
    "waiting_languages": ("languages", "waiting_interests"),
    "waiting_interests": ("interests", "waiting_time"),
    "waiting_time": ("availability", None),
}

ONBOARDING_PROMPTS = {
    "languages": "onboarding_languages",
    "interests": "onboarding_interests",
    "availability": "onboarding_availability",
}

PENDING_FEEDBACK_KEY = "pending_feedback"


@dataclass
class TandemTelegramBot:
    """Light-weight wrapper around the PTB application builder."""

    token: str
    admin_ids: Sequence[int] = ()
    database: Optional[Database] = None
    store: Optional[SessionStore] = None
    localizer: Optional[Localizer] = None
    session_ttl: int = SESSION_TTL_SECONDS
    editors: dict[str, StagedEditor] = field(init=False, default_factory=dict)

    @classmethod
    def from_config(cls, config: BotConfig) -> "TandemTelegramBot":
        if config.redis_url:
            store: SessionStore = RedisSessionStore.from_url(config.redis_url)
        else:
            LOGGER.info("REDIS_URL is not set, keeping edit sessions in memory")
            store = MemorySessionStore()
        return cls(
            token=config.token,
            admin_ids=tuple(config.admin_ids),
            database=Database(config.database_path),
            store=store,
            localizer=Localizer(
                default_language=config.default_language, locales_dir=config.locales_dir
            ),
            session_ttl=config.session_ttl,
        )

    def __post_init__(self) -> None:
        if self.database is None:
            self.database = Database(Path("data/tandem.sqlite"))
        if self.store is None:
            self.store = MemorySessionStore()
        if self.localizer is None:
            self.localizer = Localizer()
        self.admin_ids = frozenset(int(admin_id) for admin_id in self.admin_ids)
        for workflow in (
            LanguagesWorkflow(self.database),
            InterestsWorkflow(self.database),
            AvailabilityWorkflow(self.database),
        ):
            self.editors[workflow.name] = StagedEditor(workflow, self.store, ttl=self.session_ttl)
        self._editors_by_tag = {editor.schema.tag: editor for editor in self.editors.values()}
        self.feedback = FeedbackService(self.database)

    # ------------------------------------------------------------------
    # Application wiring

    def build_application(self) -> Application:
        """Construct the PTB application."""

        builder = ApplicationBuilder().token(self.token)

        limiter = self._build_rate_limiter()
        if limiter is not None:
            builder = builder.rate_limiter(limiter)

        builder = builder.post_init(self._post_init).post_shutdown(self._post_shutdown)
        application = builder.build()
        self._register_handlers(application)
        return application

    def _build_rate_limiter(self) -> Optional[AIORateLimiter]:
        """Return an ``AIORateLimiter`` instance when possible."""

        try:
            return AIORateLimiter()
        except RuntimeError as exc:  # pragma: no cover - depends on installation
            LOGGER.warning(
                "Failed to initialise the AIORateLimiter: %s. Running without a rate limiter.",
                exc,
            )
            return None

    def _register_handlers(self, application: Application) -> None:
        """Attach all command, callback and message handlers to ``application``."""

        application.add_handler(CommandHandler("start", self._start))
        application.add_handler(CommandHandler("profile", self._profile_command))
        application.add_handler(CommandHandler("feedback", self._feedback_command))
        application.add_handler(CommandHandler("skip", self._skip_command))
        application.add_handler(CommandHandler("cancel", self._cancel_command))
        application.add_handler(CommandHandler("feedbacks", self._feedbacks_command))
        application.add_handler(CallbackQueryHandler(self._on_editor_callback, pattern=r"^(lang|intr|avail):"))
        application.add_handler(CallbackQueryHandler(self._on_profile_callback, pattern=r"^profile:"))
        application.add_handler(CallbackQueryHandler(self._on_interface_language, pattern=r"^ui_lang:"))
        application.add_handler(CallbackQueryHandler(self._on_feedback_admin_callback, pattern=r"^fb:"))
        application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, self._handle_message))
        application.add_error_handler(self._on_error)

    async def _post_init(self, _: Application) -> None:
        await self.store.ping()

    async def _post_shutdown(self, _: Application) -> None:
        await self.store.close()

    # ------------------------------------------------------------------
    # Helpers

    def _ensure_user(self, update: Update) -> UserRecord:
        telegram_user = update.effective_user
        if telegram_user is None:
            raise RuntimeError("Update carries no user")
        user_id = self.database.upsert_user(
            telegram_id=telegram_user.id,
            username=telegram_user.username,
            first_name=telegram_user.first_name,
        )
        user = self.database.get_user(user_id)
        if user is None:
            raise LookupError(f"User {user_id} vanished right after upsert")
        return user

    def _translator(self, user: Optional[UserRecord]) -> Translate:
        lang = self.localizer.resolve_language(user.interface_language if user else None)
        return partial(self.localizer.get, lang)

    def is_admin(self, update: Update) -> bool:
        user = update.effective_user
        return user is not None and user.id in self.admin_ids

    async def _safe_edit(
        self, query: Any, text: str, reply_markup: Optional[InlineKeyboardMarkup] = None
    ) -> None:
        try:
            await query.edit_message_text(text, reply_markup=reply_markup)
        except BadRequest as exc:
            if "message is not modified" in str(exc).lower():
                return
            raise

    async def _reply(
        self, update: Update, text: str, reply_markup: Optional[InlineKeyboardMarkup] = None
    ) -> None:
        message = update.effective_message
        if message is None:
            return
        await message.reply_text(text, reply_markup=reply_markup)

    def _profile_view(self, user: UserRecord) -> tuple[str, InlineKeyboardMarkup]:
        t = self._translator(user)
        text = format_profile(
            t,
            user,
            self.database.get_time_availability(user.user_id),
            self.database.get_preferences(user.user_id),
            self.database.get_user_interests(user.user_id),
        )
        return text, profile_keyboard(t)

    def _pending_onboarding_editor(self, user: UserRecord) -> Optional[str]:
        flow = ONBOARDING_FLOW.get(user.state)
        return flow[0] if flow is not None else None

    async def _open_editor(self, user: UserRecord, workflow: str) -> StepView:
        editor = self.editors[workflow]
        session = await editor.start(user.user_id)
        view = render_step(session, editor.schema, Labels(self._translator(user)))
        if user.state in ONBOARDING_FLOW:
            prompt = self._translator(user)(ONBOARDING_PROMPTS[workflow])
            view.text = f"{prompt}\n\n{view.text}"
        return view

    # ------------------------------------------------------------------
    # Commands

    async def _start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Register the user and continue wherever their profile setup stopped."""

        user = self._ensure_user(update)
        if user.status == "new":
            await self._reply(update, messages.LANGUAGE_PICKER_PROMPT, interface_language_keyboard())
            return

        flow = ONBOARDING_FLOW.get(user.state)
        if flow is not None:
            view = await self._open_editor(user, flow[0])
            await self._reply(update, view.text, step_keyboard(view))
            return

        text, keyboard = self._profile_view(user)
        await self._reply(update, text, keyboard)

    async def _profile_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        telegram_user = update.effective_user
        user = self.database.get_user_by_telegram_id(telegram_user.id) if telegram_user else None
        if user is None or user.status == "new":
            await self._reply(update, self._translator(user)("profile_start_first"))
            return
        pending = self._pending_onboarding_editor(user)
        if pending is not None:
            view = await self._open_editor(user, pending)
            await self._reply(update, view.text, step_keyboard(view))
            return
        text, keyboard = self._profile_view(user)
        await self._reply(update, text, keyboard)

    async def _feedback_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        user = self._ensure_user(update)
        context.user_data[PENDING_FEEDBACK_KEY] = PendingFeedback(user_id=user.user_id)
        await self._reply(update, self._translator(user)("feedback_prompt"))

    async def _skip_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        user = self._ensure_user(update)
        t = self._translator(user)
        pending = context.user_data.get(PENDING_FEEDBACK_KEY)
        if not isinstance(pending, PendingFeedback) or pending.text is None:
            await self._reply(update, t("skip_not_available"))
            return
        await self._submit_feedback(update, context, user, pending, contact_info=None)

    async def _cancel_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        user = self._ensure_user(update)
        t = self._translator(user)
        if context.user_data.pop(PENDING_FEEDBACK_KEY, None) is None:
            await self._reply(update, t("nothing_to_cancel"))
            return
        await self._reply(update, t("feedback_cancelled"))

    # ------------------------------------------------------------------
    # Onboarding and profile callbacks

    async def _on_interface_language(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        query = update.callback_query
        lang = query.data.split(":", 1)[1]
        if lang not in messages.INTERFACE_LANGUAGES:
            await query.answer()
            return

        user = self._ensure_user(update)
        self.database.set_interface_language(user.user_id, lang)
        if user.status == "new":
            self.database.set_user_status(user.user_id, "filling_profile")
            self.database.update_user_state(user.user_id, "waiting_languages")
            LOGGER.info("User %s started onboarding (%s)", user.user_id, lang)
        user = self.database.get_user(user.user_id)
        t = self._translator(user)
        await query.answer(t("interface_language_set"))

        flow = ONBOARDING_FLOW.get(user.state)
        if flow is not None:
            view = await self._open_editor(user, flow[0])
            await self._safe_edit(query, view.text, step_keyboard(view))
            return
        text, keyboard = self._profile_view(user)
        await self._safe_edit(query, text, keyboard)

    async def _on_profile_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        query = update.callback_query
        _, action, args = parse_callback_data(query.data)
        user = self._ensure_user(update)
        t = self._translator(user)

        pending = self._pending_onboarding_editor(user)
        if pending is not None and action not in ("feedback", "ui_lang"):
            await query.answer()
            view = await self._open_editor(user, pending)
            await self._safe_edit(query, view.text, step_keyboard(view))
        elif action == "edit" and args and args[0] in self.editors:
            await query.answer()
            view = await self._open_editor(user, args[0])
            await self._safe_edit(query, view.text, step_keyboard(view))
        elif action == "feedback":
            await query.answer()
            context.user_data[PENDING_FEEDBACK_KEY] = PendingFeedback(user_id=user.user_id)
            await self._safe_edit(query, t("feedback_prompt"))
        elif action == "ui_lang":
            await query.answer()
            await self._safe_edit(query, messages.LANGUAGE_PICKER_PROMPT, interface_language_keyboard())
        else:
            await query.answer()
            text, keyboard = self._profile_view(user)
            await self._safe_edit(query, text, keyboard)

    # ------------------------------------------------------------------
    # Profile editors

    async def _on_editor_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        query = update.callback_query
        tag, action, args = parse_callback_data(query.data)
        editor = self._editors_by_tag[tag]
        user = self._ensure_user(update)
        pending = self._pending_onboarding_editor(user)
        if pending is not None and pending != editor.schema.workflow:
            await query.answer()
            await editor.abort(user.user_id)
            view = await self._open_editor(user, pending)
            await self._safe_edit(query, view.text, step_keyboard(view))
            return
        t = self._translator(user)
        labels = Labels(t)

        try:
            if action == "save":
                await self._commit_editor(query, editor, user)
                return
            if action == "cancel":
                await self._abort_editor(query, editor, user)
                return
            session = await self._apply_editor_action(editor, user.user_id, action, args)
        except SessionNotFoundError:
            await query.answer()
            await self._safe_edit(query, t("session_expired"), back_to_profile_keyboard(t))
            return
        except LimitReachedError as exc:
            await query.answer(t(exc.key, limit=exc.limit), show_alert=True)
            return
        except EditError as exc:
            await query.answer(t(exc.key), show_alert=True)
            return

        await query.answer()
        view = render_step(session, editor.schema, labels)
        await self._safe_edit(query, view.text, step_keyboard(view))

    async def _apply_editor_action(
        self, editor: StagedEditor, user_id: int, action: str, args: list[str]
    ) -> EditSession:
        if action == "open" and args:
            focus = args[1] if len(args) > 1 else None
            return await editor.open_step(user_id, args[0], focus)
        if action == "menu":
            return await editor.open_step(user_id, MENU_STEP)
        if action == "toggle" and len(args) == 2:
            return await editor.toggle(user_id, args[0], args[1])
        if action == "select" and len(args) == 2:
            return await editor.select(user_id, args[0], args[1])
        if action == "undo":
            return await editor.undo(user_id)
        raise EditError(f"Unsupported editor action: {action}")

    async def _commit_editor(self, query: Any, editor: StagedEditor, user: UserRecord) -> None:
        t = self._translator(user)
        labels = Labels(t)
        try:
            session = await editor.commit(user.user_id)
        except ValidationFailedError as exc:
            await query.answer()
            session = await editor.load(user.user_id)
            view = render_step(session, editor.schema, labels, MENU_STEP, notice=t(exc.key, **exc.params))
            await self._safe_edit(query, view.text, step_keyboard(view))
            return
        except PersistenceError:
            await query.answer(t("error_generic"), show_alert=True)
            return

        await query.answer()
        summary = f"{t('changes_saved')}\n\n{render_changes(session, editor.schema, labels)}"

        flow = ONBOARDING_FLOW.get(user.state)
        if flow is not None and flow[0] == editor.schema.workflow:
            next_state = flow[1]
            if next_state is not None:
                self.database.update_user_state(user.user_id, next_state)
                user = self.database.get_user(user.user_id)
                next_view = await self._open_editor(user, ONBOARDING_FLOW[next_state][0])
                await self._safe_edit(query, f"{summary}\n\n{next_view.text}", step_keyboard(next_view))
                return
            user = self.database.get_user(user.user_id)
            text, keyboard = self._profile_view(user)
            await self._safe_edit(query, f"{t('onboarding_complete')}\n\n{text}", keyboard)
            return

        await self._safe_edit(query, summary, back_to_profile_keyboard(t))

    async def _abort_editor(self, query: Any, editor: StagedEditor, user: UserRecord) -> None:
        t = self._translator(user)
        await editor.abort(user.user_id)
        await query.answer()
        await self._safe_edit(
            query, f"{t('edit_cancelled')}\n{t('changes_not_saved')}", back_to_profile_keyboard(t)
        )

    # ------------------------------------------------------------------
    # Feedback

    async def _handle_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.message
        if message is None or message.text is None:
            return
        pending = context.user_data.get(PENDING_FEEDBACK_KEY)
        if not isinstance(pending, PendingFeedback):
            return

        user = self._ensure_user(update)
        t = self._translator(user)
        try:
            if pending.text is None:
                pending.text = self.feedback.validate_text(message.text)
                if not user.username:
                    await self._reply(update, t("feedback_contact_prompt"))
                    return
                await self._submit_feedback(update, context, user, pending, contact_info=None)
                return
            contact = self.feedback.validate_contact(message.text)
        except FeedbackValidationError as exc:
            await self._reply(update, t(exc.key))
            return
        await self._submit_feedback(update, context, user, pending, contact_info=contact)

    async def _submit_feedback(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE,
        user: UserRecord,
        pending: PendingFeedback,
        *,
        contact_info: Optional[str],
    ) -> None:
        if pending.text is None:
            raise ValueError("Pending feedback has no text yet")
        feedback = self.feedback.submit(user.user_id, pending.text, contact_info)
        context.user_data.pop(PENDING_FEEDBACK_KEY, None)
        await self._reply(update, self._translator(user)("feedback_thanks"))
        await self._notify_admins(context, feedback_author(feedback), feedback.feedback_id, feedback.feedback_text)

    async def _notify_admins(
        self, context: ContextTypes.DEFAULT_TYPE, author: str, feedback_id: int, text: str
    ) -> None:
        for admin_id in self.admin_ids:
            admin = self.database.get_user_by_telegram_id(admin_id)
            notification = self._translator(admin)(
                "feedback_admin_notification", feedback_id=feedback_id, author=author, text=text
            )
            try:
                await context.bot.send_message(chat_id=admin_id, text=notification)
            except TelegramError as exc:
                LOGGER.warning("Failed to notify admin %s about feedback %s: %s", admin_id, feedback_id, exc)

    # ------------------------------------------------------------------
    # Admin feedback panel

    async def _feedbacks_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        user = self._ensure_user(update)
        t = self._translator(user)
        if not self.is_admin(update):
            await self._reply(update, t("admin_only"))
            return
        counts = self.feedback.stats()
        await self._reply(update, format_feedback_stats(t, counts), feedback_stats_keyboard(t, counts))

    async def _show_feedback_page(self, query: Any, t: Translate, list_kind: str, index: int) -> None:
        page = self.feedback.page(list_kind, index)
        if page is None:
            await self._safe_edit(query, t("feedback_list_empty"), stats_only_keyboard(t))
            return
        await self._safe_edit(query, format_feedback_page(t, page), feedback_item_keyboard(t, page))

    async def _on_feedback_admin_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        query = update.callback_query
        user = self._ensure_user(update)
        t = self._translator(user)
        if not self.is_admin(update):
            await query.answer(t("admin_only"), show_alert=True)
            return

        _, action, args = parse_callback_data(query.data)
        if action == "stats":
            await query.answer()
            counts = self.feedback.stats()
            await self._safe_edit(query, format_feedback_stats(t, counts), feedback_stats_keyboard(t, counts))
            return
        if action == "purge":
            await query.answer()
            archived = self.feedback.stats().archived
            await self._safe_edit(
                query, t("feedback_confirm_delete_all", count=archived), purge_confirmation_keyboard(t)
            )
            return
        if action == "purge_yes":
            removed = self.feedback.purge_archive()
            await query.answer(t("feedback_archive_purged", count=removed))
            counts = self.feedback.stats()
            await self._safe_edit(query, format_feedback_stats(t, counts), feedback_stats_keyboard(t, counts))
            return

        if len(args) < 2 or args[0] not in FEEDBACK_LISTS or not args[1].lstrip("-").isdigit():
            await query.answer()
            return
        list_kind, index = args[0], int(args[1])

        if action == "list":
            await query.answer()
            await self._show_feedback_page(query, t, list_kind, index)
            return

        if len(args) < 3 or not args[2].isdigit():
            await query.answer()
            return
        feedback_id = int(args[2])
        if action == "done":
            changed = self.feedback.set_processed(feedback_id, True)
            notice = "feedback_marked_processed"
        elif action == "undone":
            changed = self.feedback.set_processed(feedback_id, False)
            notice = "feedback_marked_active"
        elif action == "del":
            changed = self.feedback.delete(feedback_id)
            notice = "feedback_deleted"
        else:
            await query.answer()
            return
        await query.answer(t(notice if changed else "feedback_not_found"))
        await self._show_feedback_page(query, t, list_kind, index)

    # ------------------------------------------------------------------
    # Errors

    async def _on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        LOGGER.error("Unhandled error while processing an update", exc_info=context.error)
        if not isinstance(update, Update) or update.effective_chat is None:
            return
        user = None
        if update.effective_user is not None:
            user = self.database.get_user_by_telegram_id(update.effective_user.id)
        try:
            await context.bot.send_message(
                chat_id=update.effective_chat.id, text=self._translator(user)("error_generic")
            )
        except TelegramError as exc:
            LOGGER.warning("Failed to report the error to chat %s: %s", update.effective_chat.id, exc)


def main() -> None:  # pragma: no cover - thin wrapper
    """Entry point used by the ``tandem-bot`` console script."""

    logging.basicConfig(level=logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("telegram.ext").setLevel(logging.WARNING)

    try:
        config = BotConfig.load()
    except RuntimeError as exc:
        LOGGER.error("%s", exc)
        raise SystemExit(1) from exc

    bot = TandemTelegramBot.from_config(config)
    application = bot.build_application()
    application.run_polling()


if __name__ == "__main__":  # pragma: no cover - module executable guard
    main()
