from datetime import date
from functools import lru_cache
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, status
from pydantic import BaseModel, Field

from studyflow.config.settings import settings
from studyflow.core.forms import FormValidationError, SubjectDraft, TaskDraft
from studyflow.core.grades import summarize
from studyflow.core.queries import (
    StatusFilter,
    filter_tasks,
    month_grid,
    pending_count,
    tasks_on,
    today_tasks,
    upcoming_this_week,
)
from studyflow.models.entities import Assessment, Priority, Subject, Task, TaskStatus
from studyflow.services.auth_service import AuthServiceError, LocalAuthService
from studyflow.state.app_state import Store
from studyflow.utils.logger import setup_logger


setup_logger(settings.log_level, settings.log_file or None)
app = FastAPI(title="StudyFlow API", version="1.0.0")


class LoginPayload(BaseModel):
    username: str
    password: str


class SubjectPayload(BaseModel):
    name: str
    instructor: str = ""


class AssessmentPayload(BaseModel):
    name: str
    weight: float = Field(ge=0)
    score: Optional[float] = Field(default=None, ge=0, le=10)


class TaskPayload(BaseModel):
    subject_id: str
    name: str
    date: date
    priority: Priority = Priority.MEDIUM


class TaskUpdatePayload(TaskPayload):
    status: TaskStatus = TaskStatus.PENDING


@lru_cache(maxsize=1)
def get_store() -> Store:
    return Store.from_settings()


def get_auth() -> LocalAuthService:
    return LocalAuthService.from_settings()


def _require_session(store: Store = Depends(get_store)) -> Store:
    if not store.is_authenticated:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in")
    return store


def _saved(ok: bool, store: Store) -> None:
    if not ok:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Change applied but not saved: {store.last_error}",
        )


def _subject_or_404(store: Store, subject_id: str) -> Subject:
    subject = store.get_subject(subject_id)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")
    return subject


def _task_or_404(store: Store, task_id: str) -> Task:
    task = store.get_task(task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task


def _grades(subject: Subject) -> Dict:
    summary = summarize(subject.assessments, settings.pass_threshold)
    payload = {
        "current_average": summary.current_average,
        "projected_average": summary.projected_average,
        "current_display": summary.current_display,
        "projected_display": summary.projected_display,
        "total_weight": summary.total_weight,
        "remaining_weight": summary.remaining_weight,
        "status": type(summary.status).__name__,
        "label": summary.status.label,
    }
    needed = getattr(summary.status, "display_score", None)
    if needed is not None:
        payload["needed_average"] = needed
    passed = getattr(summary.status, "passed", None)
    if passed is not None:
        payload["passed"] = passed
    return payload


def _task_out(store: Store, task: Task) -> Dict:
    return {**task.to_dict(), "subject_name": store.subject_name(task.subject_id)}


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/auth/login")
def login(
    payload: LoginPayload,
    store: Store = Depends(get_store),
    auth: LocalAuthService = Depends(get_auth),
) -> Dict:
    try:
        result = auth.sign_in(payload.username, payload.password)
    except AuthServiceError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    _saved(store.login(result.username), store)
    return {"username": result.username, "is_authenticated": True}


@app.post("/auth/logout")
def logout(store: Store = Depends(get_store)) -> Dict[str, str]:
    _saved(store.logout(), store)
    return {"status": "signed_out"}


@app.get("/session")
def get_session(store: Store = Depends(_require_session)) -> Dict:
    return store.session.to_dict()


@app.get("/subjects")
def list_subjects(store: Store = Depends(_require_session)) -> List[Dict]:
    return [
        {**subject.to_dict(), "current_display": summarize(subject.assessments).current_display}
        for subject in store.subjects
    ]


@app.post("/subjects", status_code=status.HTTP_201_CREATED)
def create_subject(payload: SubjectPayload, store: Store = Depends(_require_session)) -> Dict:
    try:
        subject = SubjectDraft(name=payload.name, instructor=payload.instructor).build()
    except FormValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    _saved(store.add_subject(subject), store)
    return subject.to_dict()


@app.get("/subjects/{subject_id}")
def get_subject(subject_id: str, store: Store = Depends(_require_session)) -> Dict:
    subject = _subject_or_404(store, subject_id)
    return {
        **subject.to_dict(),
        "grades": _grades(subject),
        "tasks": [_task_out(store, t) for t in store.tasks_for_subject(subject_id)],
    }


@app.put("/subjects/{subject_id}")
def update_subject(subject_id: str, payload: SubjectPayload, store: Store = Depends(_require_session)) -> Dict:
    existing = _subject_or_404(store, subject_id)
    try:
        subject = SubjectDraft(name=payload.name, instructor=payload.instructor).build(existing)
    except FormValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    _saved(store.update_subject(subject), store)
    return subject.to_dict()


@app.delete("/subjects/{subject_id}")
def delete_subject(subject_id: str, store: Store = Depends(_require_session)) -> Dict[str, str]:
    _subject_or_404(store, subject_id)
    _saved(store.delete_subject(subject_id), store)
    return {"status": "deleted"}


@app.get("/subjects/{subject_id}/grades")
def get_grades(subject_id: str, store: Store = Depends(_require_session)) -> Dict:
    return _grades(_subject_or_404(store, subject_id))


@app.put("/subjects/{subject_id}/assessments")
def save_assessments(
    subject_id: str,
    payload: List[AssessmentPayload],
    store: Store = Depends(_require_session),
) -> Dict:
    _subject_or_404(store, subject_id)
    assessments = [Assessment(name=a.name, weight=a.weight, score=a.score) for a in payload]
    _saved(store.save_assessments(subject_id, assessments), store)
    return _grades(_subject_or_404(store, subject_id))


@app.get("/tasks")
def list_tasks(
    status_filter: StatusFilter = Query(StatusFilter.ALL, alias="status"),
    subject_id: Optional[str] = None,
    store: Store = Depends(_require_session),
) -> List[Dict]:
    tasks = filter_tasks(store.tasks, status_filter, subject_id)
    return [_task_out(store, t) for t in tasks]


@app.post("/tasks", status_code=status.HTTP_201_CREATED)
def create_task(payload: TaskPayload, store: Store = Depends(_require_session)) -> Dict:
    _subject_or_404(store, payload.subject_id)
    draft = TaskDraft(
        name=payload.name,
        date=payload.date,
        priority=payload.priority,
        subject_id=payload.subject_id,
    )
    try:
        task = draft.build()
    except FormValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    _saved(store.add_task(task), store)
    return _task_out(store, task)


@app.put("/tasks/{task_id}")
def update_task(task_id: str, payload: TaskUpdatePayload, store: Store = Depends(_require_session)) -> Dict:
    _task_or_404(store, task_id)
    _subject_or_404(store, payload.subject_id)
    if not payload.name.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="name: Task name is required.")
    task = Task(
        id=task_id,
        subject_id=payload.subject_id,
        name=payload.name.strip(),
        date=payload.date,
        priority=payload.priority,
        status=payload.status,
    )
    _saved(store.update_task(task), store)
    return _task_out(store, task)


@app.patch("/tasks/{task_id}/toggle")
def toggle_task(task_id: str, store: Store = Depends(_require_session)) -> Dict:
    _task_or_404(store, task_id)
    _saved(store.toggle_task(task_id), store)
    return _task_out(store, _task_or_404(store, task_id))


@app.delete("/tasks/{task_id}")
def delete_task(task_id: str, store: Store = Depends(_require_session)) -> Dict[str, str]:
    _task_or_404(store, task_id)
    _saved(store.delete_task(task_id), store)
    return {"status": "deleted"}


@app.get("/calendar/{year}/{month}")
def get_calendar(year: int, month: int, store: Store = Depends(_require_session)) -> Dict:
    if not 1 <= month <= 12:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="month must be 1-12")
    blanks, days = month_grid(year, month)
    return {
        "year": year,
        "month": month,
        "blanks": blanks,
        "days": [
            {"date": day.isoformat(), "tasks": [_task_out(store, t) for t in tasks_on(store.tasks, day)]}
            for day in days
        ],
    }


@app.get("/dashboard")
def get_dashboard(store: Store = Depends(_require_session)) -> Dict:
    today = date.today()
    return {
        "username": store.session.username,
        "today": [_task_out(store, t) for t in today_tasks(store.tasks, today)],
        "upcoming": [_task_out(store, t) for t in upcoming_this_week(store.tasks, today)],
        "pending_total": pending_count(store.tasks),
        "subject_count": len(store.subjects),
    }
