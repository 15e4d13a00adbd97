from __future__ import annotations

from dataclasses import dataclass, replace
import json
import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple, TypeVar

from studyflow.config.settings import settings
from studyflow.models.entities import Assessment, Subject, Task
from studyflow.services.storage import SqliteStorage, Storage, StorageError
from studyflow.state.session_state import SessionState

logger = logging.getLogger(__name__)

UNKNOWN_SUBJECT = "Unknown"

T = TypeVar("T")


@dataclass(frozen=True)
class StorageKeys:
    user: str = "studyflow_user"
    subjects: str = "studyflow_subjects"
    tasks: str = "studyflow_tasks"


def _decode_list(raw: str, from_dict: Callable[[Any], T]) -> Tuple[T, ...]:
    data = json.loads(raw)
    if not isinstance(data, list):
        raise TypeError(f"expected a list, got {type(data).__name__}")
    return tuple(from_dict(item) for item in data)


def _decode_session(raw: str) -> Optional[SessionState]:
    data = json.loads(raw)
    if data is None:
        return None
    if not isinstance(data, dict):
        raise TypeError(f"expected an object, got {type(data).__name__}")
    return SessionState.from_dict(data)


class Store:
    """
    Single source of truth for the session, subjects and tasks.

    Every mutation writes the full snapshot back to storage before returning.
    Mutations return True when that write succeeded; on failure the change
    stays in memory, the error is logged and kept in ``last_error``.
    """

    def __init__(self, storage: Storage, keys: StorageKeys | None = None) -> None:
        self.storage = storage
        self.keys = keys or StorageKeys()
        self.last_error: Optional[StorageError] = None

        self._session: Optional[SessionState] = self._load(self.keys.user, _decode_session, None)
        self._subjects: Tuple[Subject, ...] = self._load(
            self.keys.subjects, lambda raw: _decode_list(raw, Subject.from_dict), ()
        )
        self._tasks: Tuple[Task, ...] = self._load(
            self.keys.tasks, lambda raw: _decode_list(raw, Task.from_dict), ()
        )

    @classmethod
    def from_settings(cls) -> "Store":
        keys = StorageKeys(settings.user_key, settings.subjects_key, settings.tasks_key)
        return cls(SqliteStorage(settings.db_path), keys)

    def _load(self, key: str, decode: Callable[[str], T], default: T) -> T:
        try:
            raw = self.storage.read(key)
        except StorageError as exc:
            logger.warning("Could not read %s, starting empty: %s", key, exc)
            return default
        if raw is None:
            return default
        try:
            return decode(raw)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Discarding malformed record %s: %s", key, exc)
            return default

    def _persist(self) -> bool:
        try:
            if self._session is None:
                self.storage.remove(self.keys.user)
            else:
                self.storage.write(self.keys.user, json.dumps(self._session.to_dict()))
            self.storage.write(self.keys.subjects, json.dumps([s.to_dict() for s in self._subjects]))
            self.storage.write(self.keys.tasks, json.dumps([t.to_dict() for t in self._tasks]))
        except StorageError as exc:
            logger.error("Failed to persist state: %s", exc)
            self.last_error = exc
            return False
        self.last_error = None
        return True

    # Reads

    @property
    def session(self) -> Optional[SessionState]:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None and self._session.is_authenticated

    @property
    def subjects(self) -> Tuple[Subject, ...]:
        return self._subjects

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return self._tasks

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        return next((s for s in self._subjects if s.id == subject_id), None)

    def get_task(self, task_id: str) -> Optional[Task]:
        return next((t for t in self._tasks if t.id == task_id), None)

    def subject_name(self, subject_id: str) -> str:
        subject = self.get_subject(subject_id)
        return subject.name if subject else UNKNOWN_SUBJECT

    def tasks_for_subject(self, subject_id: str) -> List[Task]:
        return [t for t in self._tasks if t.subject_id == subject_id]

    # Session

    def login(self, username: str) -> bool:
        """Credentials are checked by the caller before this is invoked."""
        self._session = SessionState(username=username, is_authenticated=True)
        logger.info("Session started for %s", username)
        return self._persist()

    def logout(self) -> bool:
        self._session = None
        return self._persist()

    # Subjects

    def add_subject(self, subject: Subject) -> bool:
        self._subjects = self._subjects + (subject,)
        return self._persist()

    def update_subject(self, subject: Subject) -> bool:
        self._subjects = tuple(subject if s.id == subject.id else s for s in self._subjects)
        return self._persist()

    def delete_subject(self, subject_id: str) -> bool:
        """Removes the subject together with every task that references it."""
        subjects = tuple(s for s in self._subjects if s.id != subject_id)
        tasks = tuple(t for t in self._tasks if t.subject_id != subject_id)
        removed = len(self._tasks) - len(tasks)
        self._subjects, self._tasks = subjects, tasks
        if removed:
            logger.debug("Deleted subject %s and %d task(s)", subject_id, removed)
        return self._persist()

    def save_assessments(self, subject_id: str, assessments: Sequence[Assessment]) -> bool:
        subject = self.get_subject(subject_id)
        if subject is None:
            return self._persist()
        return self.update_subject(replace(subject, assessments=tuple(assessments)))

    # Tasks

    def add_task(self, task: Task) -> bool:
        self._tasks = self._tasks + (task,)
        return self._persist()

    def update_task(self, task: Task) -> bool:
        self._tasks = tuple(task if t.id == task.id else t for t in self._tasks)
        return self._persist()

    def toggle_task(self, task_id: str) -> bool:
        task = self.get_task(task_id)
        if task is None:
            return self._persist()
        return self.update_task(replace(task, status=task.status.toggled()))

    def delete_task(self, task_id: str) -> bool:
        self._tasks = tuple(t for t in self._tasks if t.id != task_id)
        return self._persist()
