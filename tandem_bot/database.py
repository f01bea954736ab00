from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence

USER_STATES = ("new", "waiting_languages", "waiting_interests", "waiting_time", "active")
USER_STATUSES = ("new", "filling_profile", "active", "paused")

INTEREST_CATALOG: dict[str, tuple[str, ...]] = {
    "entertainment": ("movies_tv", "music", "games", "tv_shows", "comedy", "anime"),
    "education": ("books", "technology", "science", "languages", "history", "philosophy"),
    "active": ("sports", "travel", "fitness", "outdoor", "dancing"),
    "creative": ("cooking", "art", "photography", "writing", "design"),
    "social": ("volunteering", "politics", "psychology"),
}


@dataclass(slots=True)
class UserRecord:
    user_id: int
    telegram_id: int
    username: Optional[str]
    first_name: Optional[str]
    interface_language: str
    native_language: Optional[str]
    target_language: Optional[str]
    target_level: Optional[str]
    state: str
    status: str
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True)
class TimeAvailability:
    day_type: str
    specific_days: list[str] = field(default_factory=list)
    time_slots: list[str] = field(default_factory=list)


@dataclass(slots=True)
class FriendshipPreferences:
    activity_type: str
    communication_styles: list[str] = field(default_factory=list)
    communication_frequency: str = "weekly"


@dataclass(slots=True)
class Interest:
    interest_id: int
    key: str
    category_key: str
    display_order: int


@dataclass(slots=True)
class UserInterest:
    interest_id: int
    key: str
    category_key: str
    is_primary: bool


@dataclass(slots=True)
class Feedback:
    feedback_id: int
    user_id: int
    telegram_id: int
    username: Optional[str]
    first_name: Optional[str]
    feedback_text: str
    contact_info: Optional[str]
    is_processed: bool
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True)
class FeedbackCounts:
    total: int
    active: int
    archived: int


def _parse_timestamp(raw: str) -> datetime:
    return datetime.fromisoformat(raw)


def _json_list(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [str(item) for item in json.loads(raw)]


class Database:
    """SQLite storage for profiles, interests and feedback."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._initialise()

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _initialise(self) -> None:
        with self._connection() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    user_id INTEGER PRIMARY KEY,
                    telegram_id INTEGER UNIQUE NOT NULL,
                    username TEXT,
                    first_name TEXT,
                    interface_language TEXT NOT NULL DEFAULT 'en',
                    native_language TEXT,
                    target_language TEXT,
                    target_level TEXT,
                    state TEXT NOT NULL DEFAULT 'new',
                    status TEXT NOT NULL DEFAULT 'new',
                    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                );

                CREATE TABLE IF NOT EXISTS user_time_availability (
                    user_id INTEGER PRIMARY KEY REFERENCES users(user_id) ON DELETE CASCADE,
                    day_type TEXT NOT NULL,
                    specific_days TEXT NOT NULL DEFAULT '[]',
                    time_slots TEXT NOT NULL DEFAULT '[]',
                    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                );

                CREATE TABLE IF NOT EXISTS friendship_preferences (
                    user_id INTEGER PRIMARY KEY REFERENCES users(user_id) ON DELETE CASCADE,
                    activity_type TEXT NOT NULL,
                    communication_styles TEXT NOT NULL DEFAULT '[]',
                    communication_frequency TEXT NOT NULL,
                    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                );

                CREATE TABLE IF NOT EXISTS interest_categories (
                    key TEXT PRIMARY KEY,
                    display_order INTEGER NOT NULL DEFAULT 0
                );

                CREATE TABLE IF NOT EXISTS interests (
                    interest_id INTEGER PRIMARY KEY,
                    key TEXT UNIQUE NOT NULL,
                    category_key TEXT NOT NULL REFERENCES interest_categories(key),
                    display_order INTEGER NOT NULL DEFAULT 0
                );

                CREATE TABLE IF NOT EXISTS user_interests (
                    user_id INTEGER NOT NULL REFERENCES users(user_id) ON DELETE CASCADE,
                    interest_id INTEGER NOT NULL REFERENCES interests(interest_id) ON DELETE CASCADE,
                    is_primary INTEGER NOT NULL DEFAULT 0,
                    selection_order INTEGER NOT NULL DEFAULT 0,
                    UNIQUE (user_id, interest_id)
                );

                CREATE TABLE IF NOT EXISTS user_feedback (
                    feedback_id INTEGER PRIMARY KEY,
                    user_id INTEGER NOT NULL REFERENCES users(user_id) ON DELETE CASCADE,
                    feedback_text TEXT NOT NULL,
                    contact_info TEXT,
                    is_processed INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                );
                """
            )
            self._seed_catalog(conn)

    def _seed_catalog(self, conn: sqlite3.Connection) -> None:
        for category_order, (category, interests) in enumerate(INTEREST_CATALOG.items(), start=1):
            conn.execute(
                "INSERT OR IGNORE INTO interest_categories(key, display_order) VALUES(?, ?)",
                (category, category_order),
            )
            conn.executemany(
                "INSERT OR IGNORE INTO interests(key, category_key, display_order) VALUES(?, ?, ?)",
                [(key, category, order) for order, key in enumerate(interests, start=1)],
            )

    # User helpers ---------------------------------------------------------
    def upsert_user(
        self,
        telegram_id: int,
        username: Optional[str],
        first_name: Optional[str],
        interface_language: Optional[str] = None,
    ) -> int:
        with self._connection() as conn:
            cursor = conn.execute(
                """
                INSERT INTO users (telegram_id, username, first_name, interface_language)
                VALUES (?, ?, ?, COALESCE(?, 'en'))
                ON CONFLICT(telegram_id) DO UPDATE SET
                    username = excluded.username,
                    first_name = excluded.first_name,
                    updated_at = CURRENT_TIMESTAMP
                RETURNING user_id
                """,
                (telegram_id, username, first_name, interface_language),
            )
            row = cursor.fetchone()
            return int(row[0])

    def _user_from_row(self, row: sqlite3.Row) -> UserRecord:
        return UserRecord(
            user_id=int(row["user_id"]),
            telegram_id=int(row["telegram_id"]),
            username=row["username"],
            first_name=row["first_name"],
            interface_language=str(row["interface_language"]),
            native_language=row["native_language"],
            target_language=row["target_language"],
            target_level=row["target_level"],
            state=str(row["state"]),
            status=str(row["status"]),
            created_at=_parse_timestamp(row["created_at"]),
            updated_at=_parse_timestamp(row["updated_at"]),
        )

    def get_user(self, user_id: int) -> Optional[UserRecord]:
        with self._connection() as conn:
            row = conn.execute("SELECT * FROM users WHERE user_id = ?", (user_id,)).fetchone()
        return self._user_from_row(row) if row else None

    def get_user_by_telegram_id(self, telegram_id: int) -> Optional[UserRecord]:
        with self._connection() as conn:
            row = conn.execute("SELECT * FROM users WHERE telegram_id = ?", (telegram_id,)).fetchone()
        return self._user_from_row(row) if row else None

    def _update_user(self, user_id: int, column: str, value: Optional[str]) -> None:
        with self._connection() as conn:
            cursor = conn.execute(
                f"UPDATE users SET {column} = ?, updated_at = CURRENT_TIMESTAMP WHERE user_id = ?",
                (value, user_id),
            )
            if cursor.rowcount == 0:
                raise LookupError(f"Unknown user {user_id}")

    def set_interface_language(self, user_id: int, language: str) -> None:
        self._update_user(user_id, "interface_language", language)

    def update_user_state(self, user_id: int, state: str) -> None:
        if state not in USER_STATES:
            raise ValueError(f"Unknown user state: {state}")
        self._update_user(user_id, "state", state)

    def set_user_status(self, user_id: int, status: str) -> None:
        if status not in USER_STATUSES:
            raise ValueError(f"Unknown user status: {status}")
        self._update_user(user_id, "status", status)

    def update_languages(
        self,
        user_id: int,
        *,
        native_language: Optional[str],
        target_language: Optional[str],
        target_level: Optional[str],
    ) -> None:
        with self._connection() as conn:
            conn.execute(
                """
                UPDATE users SET
                    native_language = ?,
                    target_language = ?,
                    target_level = ?,
                    updated_at = CURRENT_TIMESTAMP
                WHERE user_id = ?
                """,
                (native_language, target_language, target_level, user_id),
            )

    # Availability helpers -------------------------------------------------
    def get_time_availability(self, user_id: int) -> Optional[TimeAvailability]:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT day_type, specific_days, time_slots FROM user_time_availability WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        if row is None:
            return None
        return TimeAvailability(
            day_type=str(row["day_type"]),
            specific_days=_json_list(row["specific_days"]),
            time_slots=_json_list(row["time_slots"]),
        )

    def save_time_availability(self, user_id: int, availability: TimeAvailability) -> None:
        with self._connection() as conn:
            conn.execute(
                """
                INSERT INTO user_time_availability (user_id, day_type, specific_days, time_slots)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    day_type = excluded.day_type,
                    specific_days = excluded.specific_days,
                    time_slots = excluded.time_slots,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (
                    user_id,
                    availability.day_type,
                    json.dumps(list(availability.specific_days)),
                    json.dumps(list(availability.time_slots)),
                ),
            )

    def get_preferences(self, user_id: int) -> Optional[FriendshipPreferences]:
        with self._connection() as conn:
            row = conn.execute(
                """
                SELECT activity_type, communication_styles, communication_frequency
                FROM friendship_preferences WHERE user_id = ?
                """,
                (user_id,),
            ).fetchone()
        if row is None:
            return None
        return FriendshipPreferences(
            activity_type=str(row["activity_type"]),
            communication_styles=_json_list(row["communication_styles"]),
            communication_frequency=str(row["communication_frequency"]),
        )

    def save_preferences(self, user_id: int, preferences: FriendshipPreferences) -> None:
        with self._connection() as conn:
            conn.execute(
                """
                INSERT INTO friendship_preferences
                    (user_id, activity_type, communication_styles, communication_frequency)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    activity_type = excluded.activity_type,
                    communication_styles = excluded.communication_styles,
                    communication_frequency = excluded.communication_frequency,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (
                    user_id,
                    preferences.activity_type,
                    json.dumps(list(preferences.communication_styles)),
                    preferences.communication_frequency,
                ),
            )

    # Interest helpers -----------------------------------------------------
    def list_interest_categories(self) -> list[str]:
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT key FROM interest_categories ORDER BY display_order, key"
            ).fetchall()
        return [str(row["key"]) for row in rows]

    def list_interests(self, category_key: Optional[str] = None) -> list[Interest]:
        query = """
            SELECT i.interest_id, i.key, i.category_key, i.display_order
            FROM interests AS i
            JOIN interest_categories AS c ON c.key = i.category_key
        """
        params: tuple[str, ...] = ()
        if category_key is not None:
            query += " WHERE i.category_key = ?"
            params = (category_key,)
        query += " ORDER BY c.display_order, i.display_order"
        with self._connection() as conn:
            rows = conn.execute(query, params).fetchall()
        return [
            Interest(
                interest_id=int(row["interest_id"]),
                key=str(row["key"]),
                category_key=str(row["category_key"]),
                display_order=int(row["display_order"]),
            )
            for row in rows
        ]

    def get_user_interests(self, user_id: int) -> list[UserInterest]:
        with self._connection() as conn:
            rows = conn.execute(
                """
                SELECT i.interest_id, i.key, i.category_key, ui.is_primary
                FROM user_interests AS ui
                JOIN interests AS i ON i.interest_id = ui.interest_id
                WHERE ui.user_id = ?
                ORDER BY ui.selection_order, i.display_order
                """,
                (user_id,),
            ).fetchall()
        return [
            UserInterest(
                interest_id=int(row["interest_id"]),
                key=str(row["key"]),
                category_key=str(row["category_key"]),
                is_primary=bool(row["is_primary"]),
            )
            for row in rows
        ]

    def save_user_interests(
        self, user_id: int, interest_ids: Sequence[int], primary_ids: Iterable[int] = ()
    ) -> None:
        """Replace the user's selection in one transaction."""
        primary = set(primary_ids)
        with self._connection() as conn:
            conn.execute("DELETE FROM user_interests WHERE user_id = ?", (user_id,))
            conn.executemany(
                """
                INSERT INTO user_interests (user_id, interest_id, is_primary, selection_order)
                VALUES (?, ?, ?, ?)
                """,
                [
                    (user_id, interest_id, int(interest_id in primary), order)
                    for order, interest_id in enumerate(interest_ids)
                ],
            )

    # Feedback helpers -----------------------------------------------------
    def create_feedback(self, user_id: int, text: str, contact_info: Optional[str]) -> int:
        with self._connection() as conn:
            cursor = conn.execute(
                """
                INSERT INTO user_feedback (user_id, feedback_text, contact_info)
                VALUES (?, ?, ?)
                RETURNING feedback_id
                """,
                (user_id, text, contact_info),
            )
            row = cursor.fetchone()
            return int(row[0])

    def _feedback_from_row(self, row: sqlite3.Row) -> Feedback:
        return Feedback(
            feedback_id=int(row["feedback_id"]),
            user_id=int(row["user_id"]),
            telegram_id=int(row["telegram_id"]),
            username=row["username"],
            first_name=row["first_name"],
            feedback_text=str(row["feedback_text"]),
            contact_info=row["contact_info"],
            is_processed=bool(row["is_processed"]),
            created_at=_parse_timestamp(row["created_at"]),
            updated_at=_parse_timestamp(row["updated_at"]),
        )

    _FEEDBACK_SELECT = """
        SELECT f.feedback_id, f.user_id, u.telegram_id, u.username, u.first_name,
               f.feedback_text, f.contact_info, f.is_processed, f.created_at, f.updated_at
        FROM user_feedback AS f
        JOIN users AS u ON u.user_id = f.user_id
    """

    def list_feedback(self, processed: Optional[bool] = None) -> list[Feedback]:
        query = self._FEEDBACK_SELECT
        params: tuple[int, ...] = ()
        if processed is not None:
            query += " WHERE f.is_processed = ?"
            params = (int(processed),)
        query += " ORDER BY f.created_at DESC, f.feedback_id DESC"
        with self._connection() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._feedback_from_row(row) for row in rows]

    def get_feedback(self, feedback_id: int) -> Optional[Feedback]:
        with self._connection() as conn:
            row = conn.execute(
                self._FEEDBACK_SELECT + " WHERE f.feedback_id = ?", (feedback_id,)
            ).fetchone()
        return self._feedback_from_row(row) if row else None

    def set_feedback_processed(self, feedback_id: int, processed: bool) -> bool:
        with self._connection() as conn:
            cursor = conn.execute(
                """
                UPDATE user_feedback
                SET is_processed = ?, updated_at = CURRENT_TIMESTAMP
                WHERE feedback_id = ?
                """,
                (int(processed), feedback_id),
            )
            return cursor.rowcount > 0

    def delete_feedback(self, feedback_id: int) -> bool:
        with self._connection() as conn:
            cursor = conn.execute("DELETE FROM user_feedback WHERE feedback_id = ?", (feedback_id,))
            return cursor.rowcount > 0

    def delete_processed_feedback(self) -> int:
        with self._connection() as conn:
            cursor = conn.execute("DELETE FROM user_feedback WHERE is_processed = 1")
            return int(cursor.rowcount)

    def feedback_counts(self) -> FeedbackCounts:
        with self._connection() as conn:
            row = conn.execute(
                """
                SELECT COUNT(*) AS total,
                       COALESCE(SUM(CASE WHEN is_processed = 0 THEN 1 ELSE 0 END), 0) AS active,
                       COALESCE(SUM(CASE WHEN is_processed = 1 THEN 1 ELSE 0 END), 0) AS archived
                FROM user_feedback
                """
            ).fetchone()
        return FeedbackCounts(
            total=int(row["total"]), active=int(row["active"]), archived=int(row["archived"])
        )


__all__ = [
    "Database",
    "Feedback",
    "FeedbackCounts",
    "FriendshipPreferences",
    "INTEREST_CATALOG",
    "Interest",
    "TimeAvailability",
    "USER_STATES",
    "USER_STATUSES",
    "UserInterest",
    "UserRecord",
]
