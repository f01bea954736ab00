from __future__ import annotations

INTERFACE_LANGUAGES = ("en", "ru")

LANGUAGE_PICKER_PROMPT = (
    "\U0001F44B Welcome to Tandem! Choose the interface language.\n"
    "\U0001F44B Добро пожаловать в Tandem! Выберите язык интерфейса."
)

INTERFACE_LANGUAGE_LABELS = {
    "en": "\U0001F1EC\U0001F1E7 English",
    "ru": "\U0001F1F7\U0001F1FA Русский",
}

_EN = {
    # Generic editor chrome
    "current_settings": "Current settings:",
    "selected": "Selected",
    "none_selected": "not selected",
    "no_days_selected": "Select at least one day",
    "nothing_to_choose": "Nothing to choose here yet.",
    "back": "⬅️ Back",
    "back_to_menu": "⬅️ Back to menu",
    "back_to_profile": "👤 Back to profile",
    "undo_last_change": "↩️ Undo last change",
    "save_changes": "💾 Save",
    "cancel_edit": "❌ Cancel",
    "changes_saved": "✅ Changes saved!",
    "changes_made": "Changes:",
    "no_changes_made": "No changes were made.",
    "edit_cancelled": "❌ Editing cancelled.",
    "changes_not_saved": "Your changes were not saved.",
    "session_expired": "⌛ This editing session has expired. Open the editor again from your profile.",
    "no_changes_to_undo": "There is nothing to undo.",
    "error_generic": "⚠️ Something went wrong. Please try again later.",
    "error_invalid_choice": "This option is not available.",
    # Validation
    "invalid_day_type": "Choose which days you are available.",
    "no_time_slot_selected": "Select at least one time slot.",
    "no_communication_style_selected": "Select at least one way to communicate.",
    "invalid_activity_type": "Choose an activity type.",
    "invalid_frequency": "Choose how often you want to talk.",
    "primary_not_selected": "Primary interests must be among your selected interests.",
    "primary_limit_reached": "You can mark at most {limit} primary interests.",
    "languages_required": "Choose both your native language and the language you are learning.",
    "languages_must_differ": "Your native and target languages must be different.",
    "invalid_level": "Choose your level in the target language.",
    # Availability editor
    "availability_edit_title": "⏰ Availability and preferences",
    "field_day_type": "Days",
    "field_specific_days": "Specific days",
    "field_time_slots": "Time",
    "field_activity_type": "Activity",
    "field_communication_styles": "Communication",
    "field_frequency": "Frequency",
    "edit_days_button": "Days",
    "select_specific_days_button": "Pick days",
    "edit_time_button": "Time",
    "edit_activity_button": "Activity",
    "edit_communication_button": "Communication",
    "edit_frequency_button": "Frequency",
    "select_day_type": "📅 When are you usually available?",
    "select_specific_days": "🗓 Pick the days that suit you:",
    "select_time_slots": "⏰ Which time of day suits you?",
    "select_activity_type": "🎭 What would you like to do together?",
    "select_communication_styles": "💬 How do you prefer to communicate?",
    "select_frequency": "🔁 How often would you like to talk?",
    "day_type_weekdays": "Weekdays",
    "day_type_weekends": "Weekends",
    "day_type_any": "Any day",
    "day_type_specific": "Specific days",
    "day_monday": "Monday",
    "day_tuesday": "Tuesday",
    "day_wednesday": "Wednesday",
    "day_thursday": "Thursday",
    "day_friday": "Friday",
    "day_saturday": "Saturday",
    "day_sunday": "Sunday",
    "time_slot_morning": "Morning (6-12)",
    "time_slot_day": "Day (12-18)",
    "time_slot_evening": "Evening (18-23)",
    "time_slot_late": "Late night (23-6)",
    "activity_movies": "Movies and series",
    "activity_games": "Games",
    "activity_casual_chat": "Casual chat",
    "activity_creative": "Creative projects",
    "activity_active": "Active leisure",
    "activity_educational": "Learning together",
    "communication_text": "Text messages",
    "communication_voice_msg": "Voice messages",
    "communication_audio_call": "Audio calls",
    "communication_video_call": "Video calls",
    "communication_meet_person": "Meeting in person",
    "frequency_multiple_weekly": "Several times a week",
    "frequency_weekly": "Once a week",
    "frequency_multiple_monthly": "A few times a month",
    "frequency_flexible": "Flexible",
    # Interests editor
    "interests_edit_title": "🎯 Interests",
    "field_interests": "Interests",
    "field_primary_interests": "Primary",
    "edit_interests_button": "Choose interests",
    "edit_primary_interests_button": "Primary interests",
    "select_interest_category": "Pick a category:",
    "select_interests": "🎯 Interests",
    "select_primary_interests": "⭐ Mark up to 5 interests that matter most to you:",
    "category_entertainment": "🎬 Entertainment",
    "category_education": "📚 Education",
    "category_active": "🏃 Active lifestyle",
    "category_creative": "🎨 Creativity",
    "category_social": "🤝 Social",
    "interest_movies_tv": "Movies and TV",
    "interest_music": "Music",
    "interest_games": "Games",
    "interest_tv_shows": "TV shows",
    "interest_comedy": "Comedy",
    "interest_anime": "Anime",
    "interest_books": "Books",
    "interest_technology": "Technology",
    "interest_science": "Science",
    "interest_languages": "Languages",
    "interest_history": "History",
    "interest_philosophy": "Philosophy",
    "interest_sports": "Sports",
    "interest_travel": "Travel",
    "interest_fitness": "Fitness",
    "interest_outdoor": "Outdoors",
    "interest_dancing": "Dancing",
    "interest_cooking": "Cooking",
    "interest_art": "Art",
    "interest_photography": "Photography",
    "interest_writing": "Writing",
    "interest_design": "Design",
    "interest_volunteering": "Volunteering",
    "interest_politics": "Politics",
    "interest_psychology": "Psychology",
    # Languages editor
    "languages_edit_title": "🗣 Languages",
    "field_native_language": "Native language",
    "field_target_language": "Learning",
    "field_target_level": "Level",
    "edit_native_language_button": "Native language",
    "edit_target_language_button": "Target language",
    "edit_level_button": "Level",
    "select_native_language": "🏠 What is your native language?",
    "select_target_language": "📚 Which language are you learning?",
    "select_level": "📊 What is your level?",
    "language_en": "English",
    "language_ru": "Russian",
    "language_es": "Spanish",
    "language_zh": "Chinese",
    "level_beginner": "Beginner",
    "level_elementary": "Elementary",
    "level_intermediate": "Intermediate",
    "level_upper_intermediate": "Upper intermediate",
    "level_advanced": "Advanced",
    # Onboarding and profile
    "interface_language_set": "✅ Interface language saved.",
    "onboarding_languages": "Step 1 of 3: tell us about your languages.",
    "onboarding_interests": "Step 2 of 3: pick your interests.",
    "onboarding_availability": "Step 3 of 3: when and how do you like to talk?",
    "onboarding_complete": "🎉 Your profile is ready!",
    "profile_title": "👤 Your profile",
    "profile_languages": "🗣 {native} → {target} ({level})",
    "profile_interests": "🎯 Interests: {interests}",
    "profile_primary": "⭐ Primary: {primary}",
    "profile_availability": "⏰ {days}, {slots}",
    "profile_preferences": "💬 {activity}; {styles}; {frequency}",
    "profile_not_filled": "not filled yet",
    "profile_edit_languages": "🗣 Languages",
    "profile_edit_interests": "🎯 Interests",
    "profile_edit_availability": "⏰ Availability",
    "profile_feedback": "✉️ Leave feedback",
    "profile_interface_language": "🌐 Interface language",
    "profile_start_first": "Send /start to create your profile first.",
    # Feedback
    "feedback_prompt": "✉️ Tell us what you think about the bot (10 to 1000 characters). Send /cancel to stop.",
    "feedback_too_short": "Your feedback is too short. Please write at least 10 characters.",
    "feedback_too_long": "Your feedback is too long. Please keep it under 1000 characters.",
    "feedback_contact_prompt": "How can we contact you? Send a phone, e-mail or link, or /skip.",
    "feedback_contact_empty": "Please send your contact or /skip.",
    "feedback_contact_too_long": "Contact info must be at most 64 characters.",
    "feedback_thanks": "🙏 Thank you! Your feedback has been sent.",
    "feedback_cancelled": "Feedback cancelled.",
    "nothing_to_cancel": "There is nothing to cancel.",
    "skip_not_available": "There is nothing to skip right now.",
    "feedback_admin_notification": "📬 New feedback #{feedback_id} from {author}:\n\n{text}",
    # Admin panel
    "admin_only": "⛔ This command is available to administrators only.",
    "feedback_stats": "📊 Feedback\n\nTotal: {total}\nActive: {active}\nArchived: {archived}",
    "feedback_list_active": "📥 Active ({count})",
    "feedback_list_archive": "🗄 Archive ({count})",
    "feedback_list_all": "📋 All ({count})",
    "feedback_list_empty": "This list is empty.",
    "feedback_item_header": "#{feedback_id} ({position} of {total})",
    "feedback_author": "👤 {name} (id {telegram_id})",
    "feedback_username": "@{username}",
    "feedback_no_username": "no username",
    "feedback_date": "📅 {date}",
    "feedback_contact": "📞 {contact}",
    "feedback_status_processed": "🗄 Archived",
    "feedback_status_active": "📥 Active",
    "feedback_prev": "◀️",
    "feedback_next": "▶️",
    "feedback_mark_processed": "✅ Archive",
    "feedback_mark_unprocessed": "↩️ Restore",
    "feedback_delete": "🗑 Delete",
    "feedback_back_to_stats": "📊 Statistics",
    "feedback_delete_all_archived": "🧹 Delete all archived",
    "feedback_confirm_delete_all": "Delete {count} archived item(s)? This cannot be undone.",
    "feedback_confirm_yes": "Yes, delete",
    "feedback_confirm_no": "No",
    "feedback_marked_processed": "Moved to archive.",
    "feedback_marked_active": "Restored from archive.",
    "feedback_deleted": "Feedback deleted.",
    "feedback_archive_purged": "Deleted {count} archived item(s).",
    "feedback_not_found": "This feedback no longer exists.",
}

_RU = {
    "current_settings": "Текущие настройки:",
    "selected": "Выбрано",
    "none_selected": "не выбрано",
    "no_days_selected": "Выберите хотя бы один день",
    "nothing_to_choose": "Здесь пока нечего выбрать.",
    "back": "⬅️ Назад",
    "back_to_menu": "⬅️ В меню",
    "back_to_profile": "👤 К профилю",
    "undo_last_change": "↩️ Отменить последнее",
    "save_changes": "💾 Сохранить",
    "cancel_edit": "❌ Отмена",
    "changes_saved": "✅ Изменения сохранены!",
    "changes_made": "Изменения:",
    "no_changes_made": "Изменений нет.",
    "edit_cancelled": "❌ Редактирование отменено.",
    "changes_not_saved": "Изменения не сохранены.",
    "session_expired": "⌛ Сессия редактирования истекла. Откройте редактор снова из профиля.",
    "no_changes_to_undo": "Нечего отменять.",
    "error_generic": "⚠️ Что-то пошло не так. Попробуйте позже.",
    "error_invalid_choice": "Этот вариант недоступен.",
    "invalid_day_type": "Выберите, в какие дни вы свободны.",
    "no_time_slot_selected": "Выберите хотя бы одно время.",
    "no_communication_style_selected": "Выберите хотя бы один способ общения.",
    "invalid_activity_type": "Выберите тип активности.",
    "invalid_frequency": "Выберите, как часто хотите общаться.",
    "primary_not_selected": "Основные интересы должны быть среди выбранных.",
    "primary_limit_reached": "Можно отметить не больше {limit} основных интересов.",
    "languages_required": "Выберите родной язык и язык, который изучаете.",
    "languages_must_differ": "Родной и изучаемый языки должны различаться.",
    "invalid_level": "Выберите уровень владения языком.",
    "availability_edit_title": "⏰ Время и предпочтения",
    "field_day_type": "Дни",
    "field_specific_days": "Конкретные дни",
    "field_time_slots": "Время",
    "field_activity_type": "Активность",
    "field_communication_styles": "Общение",
    "field_frequency": "Частота",
    "edit_days_button": "Дни",
    "select_specific_days_button": "Выбрать дни",
    "edit_time_button": "Время",
    "edit_activity_button": "Активность",
    "edit_communication_button": "Общение",
    "edit_frequency_button": "Частота",
    "select_day_type": "📅 Когда вы обычно свободны?",
    "select_specific_days": "🗓 Выберите удобные дни:",
    "select_time_slots": "⏰ Какое время суток вам подходит?",
    "select_activity_type": "🎭 Чем хотите заниматься вместе?",
    "select_communication_styles": "💬 Как вам удобнее общаться?",
    "select_frequency": "🔁 Как часто хотите общаться?",
    "day_type_weekdays": "Будни",
    "day_type_weekends": "Выходные",
    "day_type_any": "Любой день",
    "day_type_specific": "Конкретные дни",
    "day_monday": "Понедельник",
    "day_tuesday": "Вторник",
    "day_wednesday": "Среда",
    "day_thursday": "Четверг",
    "day_friday": "Пятница",
    "day_saturday": "Суббота",
    "day_sunday": "Воскресенье",
    "time_slot_morning": "Утро (6-12)",
    "time_slot_day": "День (12-18)",
    "time_slot_evening": "Вечер (18-23)",
    "time_slot_late": "Ночь (23-6)",
    "activity_movies": "Фильмы и сериалы",
    "activity_games": "Игры",
    "activity_casual_chat": "Просто поболтать",
    "activity_creative": "Творческие проекты",
    "activity_active": "Активный отдых",
    "activity_educational": "Учиться вместе",
    "communication_text": "Текстовые сообщения",
    "communication_voice_msg": "Голосовые сообщения",
    "communication_audio_call": "Аудиозвонки",
    "communication_video_call": "Видеозвонки",
    "communication_meet_person": "Встречи вживую",
    "frequency_multiple_weekly": "Несколько раз в неделю",
    "frequency_weekly": "Раз в неделю",
    "frequency_multiple_monthly": "Несколько раз в месяц",
    "frequency_flexible": "Гибко",
    "interests_edit_title": "🎯 Интересы",
    "field_interests": "Интересы",
    "field_primary_interests": "Основные",
    "edit_interests_button": "Выбрать интересы",
    "edit_primary_interests_button": "Основные интересы",
    "select_interest_category": "Выберите категорию:",
    "select_interests": "🎯 Интересы",
    "select_primary_interests": "⭐ Отметьте до 5 самых важных интересов:",
    "category_entertainment": "🎬 Развлечения",
    "category_education": "📚 Образование",
    "category_active": "🏃 Активный образ жизни",
    "category_creative": "🎨 Творчество",
    "category_social": "🤝 Социальное",
    "interest_movies_tv": "Кино и ТВ",
    "interest_music": "Музыка",
    "interest_games": "Игры",
    "interest_tv_shows": "Сериалы",
    "interest_comedy": "Комедия",
    "interest_anime": "Аниме",
    "interest_books": "Книги",
    "interest_technology": "Технологии",
    "interest_science": "Наука",
    "interest_languages": "Языки",
    "interest_history": "История",
    "interest_philosophy": "Философия",
    "interest_sports": "Спорт",
    "interest_travel": "Путешествия",
    "interest_fitness": "Фитнес",
    "interest_outdoor": "Природа",
    "interest_dancing": "Танцы",
    "interest_cooking": "Кулинария",
    "interest_art": "Искусство",
    "interest_photography": "Фотография",
    "interest_writing": "Писательство",
    "interest_design": "Дизайн",
    "interest_volunteering": "Волонтёрство",
    "interest_politics": "Политика",
    "interest_psychology": "Психология",
    "languages_edit_title": "🗣 Языки",
    "field_native_language": "Родной язык",
    "field_target_language": "Изучаю",
    "field_target_level": "Уровень",
    "edit_native_language_button": "Родной язык",
    "edit_target_language_button": "Изучаемый язык",
    "edit_level_button": "Уровень",
    "select_native_language": "🏠 Какой у вас родной язык?",
    "select_target_language": "📚 Какой язык вы изучаете?",
    "select_level": "📊 Какой у вас уровень?",
    "language_en": "Английский",
    "language_ru": "Русский",
    "language_es": "Испанский",
    "language_zh": "Китайский",
    "level_beginner": "Начальный",
    "level_elementary": "Элементарный",
    "level_intermediate": "Средний",
    "level_upper_intermediate": "Выше среднего",
    "level_advanced": "Продвинутый",
    "interface_language_set": "✅ Язык интерфейса сохранён.",
    "onboarding_languages": "Шаг 1 из 3: расскажите о своих языках.",
    "onboarding_interests": "Шаг 2 из 3: выберите интересы.",
    "onboarding_availability": "Шаг 3 из 3: когда и как вам удобно общаться?",
    "onboarding_complete": "🎉 Профиль готов!",
    "profile_title": "👤 Ваш профиль",
    "profile_languages": "🗣 {native} → {target} ({level})",
    "profile_interests": "🎯 Интересы: {interests}",
    "profile_primary": "⭐ Основные: {primary}",
    "profile_availability": "⏰ {days}, {slots}",
    "profile_preferences": "💬 {activity}; {styles}; {frequency}",
    "profile_not_filled": "пока не заполнено",
    "profile_edit_languages": "🗣 Языки",
    "profile_edit_interests": "🎯 Интересы",
    "profile_edit_availability": "⏰ Время",
    "profile_feedback": "✉️ Оставить отзыв",
    "profile_interface_language": "🌐 Язык интерфейса",
    "profile_start_first": "Сначала отправьте /start, чтобы создать профиль.",
    "feedback_prompt": "✉️ Напишите, что вы думаете о боте (от 10 до 1000 символов). /cancel — отменить.",
    "feedback_too_short": "Отзыв слишком короткий. Напишите хотя бы 10 символов.",
    "feedback_too_long": "Отзыв слишком длинный. Уложитесь в 1000 символов.",
    "feedback_contact_prompt": "Как с вами связаться? Отправьте телефон, e-mail или ссылку либо /skip.",
    "feedback_contact_empty": "Отправьте контакт или /skip.",
    "feedback_contact_too_long": "Контакт должен быть не длиннее 64 символов.",
    "feedback_thanks": "🙏 Спасибо! Отзыв отправлен.",
    "feedback_cancelled": "Отзыв отменён.",
    "nothing_to_cancel": "Нечего отменять.",
    "skip_not_available": "Сейчас нечего пропускать.",
    "feedback_admin_notification": "📬 Новый отзыв #{feedback_id} от {author}:\n\n{text}",
    "admin_only": "⛔ Команда доступна только администраторам.",
    "feedback_stats": "📊 Отзывы\n\nВсего: {total}\nАктивные: {active}\nВ архиве: {archived}",
    "feedback_list_active": "📥 Активные ({count})",
    "feedback_list_archive": "🗄 Архив ({count})",
    "feedback_list_all": "📋 Все ({count})",
    "feedback_list_empty": "Список пуст.",
    "feedback_item_header": "#{feedback_id} ({position} из {total})",
    "feedback_author": "👤 {name} (id {telegram_id})",
    "feedback_username": "@{username}",
    "feedback_no_username": "без username",
    "feedback_date": "📅 {date}",
    "feedback_contact": "📞 {contact}",
    "feedback_status_processed": "🗄 В архиве",
    "feedback_status_active": "📥 Активный",
    "feedback_prev": "◀️",
    "feedback_next": "▶️",
    "feedback_mark_processed": "✅ В архив",
    "feedback_mark_unprocessed": "↩️ Вернуть",
    "feedback_delete": "🗑 Удалить",
    "feedback_back_to_stats": "📊 Статистика",
    "feedback_delete_all_archived": "🧹 Удалить весь архив",
    "feedback_confirm_delete_all": "Удалить {count} отзыв(ов) из архива? Это необратимо.",
    "feedback_confirm_yes": "Да, удалить",
    "feedback_confirm_no": "Нет",
    "feedback_marked_processed": "Перенесено в архив.",
    "feedback_marked_active": "Возвращено из архива.",
    "feedback_deleted": "Отзыв удалён.",
    "feedback_archive_purged": "Удалено из архива: {count}.",
    "feedback_not_found": "Этот отзыв уже удалён.",
}

TRANSLATIONS: dict[str, dict[str, str]] = {"en": _EN, "ru": _RU}


__all__ = [
    "INTERFACE_LANGUAGES",
    "INTERFACE_LANGUAGE_LABELS",
    "LANGUAGE_PICKER_PROMPT",
    "TRANSLATIONS",
]
