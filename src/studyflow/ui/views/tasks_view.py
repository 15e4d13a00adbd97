from typing import Callable, Optional
import flet as ft

from studyflow.core.forms import FormValidationError, TaskDraft
from studyflow.core.queries import StatusFilter, filter_tasks
from studyflow.models.entities import Priority
from studyflow.state.app_state import Store
from studyflow.ui.layout import PRIORITY_COLORS, build_shell, set_status

ALL_SUBJECTS = "all"


def build_tasks_view(
    page: ft.Page,
    store: Store,
    navigate: Callable[[str], None],
    on_logout: Callable[[], None],
) -> ft.View:
    subject_options = [ft.dropdown.Option(s.id, s.name) for s in store.subjects]

    status_filter = ft.Dropdown(
        width=180,
        label="Status",
        value=StatusFilter.ALL.value,
        options=[ft.dropdown.Option(f.value, f.value.title()) for f in StatusFilter],
    )
    subject_filter = ft.Dropdown(
        width=260,
        label="Subject",
        value=ALL_SUBJECTS,
        options=[ft.dropdown.Option(ALL_SUBJECTS, "All subjects"), *subject_options],
    )

    title = ft.TextField(label="Task", width=350)
    due = ft.TextField(label="Date (YYYY-MM-DD)", width=200)
    priority = ft.Dropdown(
        width=160,
        label="Priority",
        value=Priority.MEDIUM.value,
        options=[ft.dropdown.Option(p.value, p.value.title()) for p in Priority],
    )
    subject = ft.Dropdown(width=320, label="Subject", options=list(subject_options))
    status = ft.Text(color=ft.Colors.RED_400)
    task_list = ft.Column(spacing=8)

    def _subject_filter() -> Optional[str]:
        value = subject_filter.value or ALL_SUBJECTS
        return None if value == ALL_SUBJECTS else value

    def make_toggle_handler(task_id: str):
        def handler(_):
            if not store.toggle_task(task_id):
                set_status(status, f"Could not save: {store.last_error}")
            refresh_tasks()

        return handler

    def make_delete_handler(task_id: str):
        def handler(_):
            if not store.delete_task(task_id):
                set_status(status, f"Could not save: {store.last_error}")
            refresh_tasks()

        return handler

    def refresh_tasks() -> None:
        task_list.controls.clear()
        tasks = filter_tasks(
            store.tasks,
            StatusFilter(status_filter.value or StatusFilter.ALL.value),
            _subject_filter(),
        )

        if not tasks:
            task_list.controls.append(ft.Text("No tasks match the filters."))
            page.update()
            return

        for task in tasks:
            task_list.controls.append(
                ft.Card(
                    content=ft.Container(
                        padding=12,
                        content=ft.Row(
                            alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                            controls=[
                                ft.Checkbox(
                                    label=task.name,
                                    value=not task.is_pending,
                                    on_change=make_toggle_handler(task.id),
                                ),
                                ft.Text(store.subject_name(task.subject_id)),
                                ft.Text(task.date.isoformat()),
                                ft.Text(task.priority.value.title(), color=PRIORITY_COLORS[task.priority]),
                                ft.IconButton(icon=ft.Icons.DELETE, on_click=make_delete_handler(task.id)),
                            ],
                        ),
                    )
                )
            )

        page.update()

    def on_add(_):
        draft = TaskDraft(
            name=title.value,
            date=due.value,
            priority=Priority(priority.value) if priority.value else None,
            subject_id=subject.value,
        )
        try:
            task = draft.build()
        except FormValidationError as exc:
            set_status(status, exc.message)
            page.update()
            return

        if store.add_task(task):
            set_status(status, "Task added.", is_error=False)
        else:
            set_status(status, f"Could not save task: {store.last_error}")
        title.value = ""
        due.value = ""
        refresh_tasks()

    status_filter.on_change = lambda _: refresh_tasks()
    subject_filter.on_change = lambda _: refresh_tasks()

    refresh_tasks()

    if store.subjects:
        form = [
            ft.Text("Add Task", size=22, weight=ft.FontWeight.BOLD),
            title,
            ft.Row(controls=[due, priority]),
            subject,
            ft.Button("Add Task", on_click=on_add),
        ]
    else:
        form = [ft.Text("Add a subject before creating tasks.", italic=True)]

    body = [
        *form,
        status,
        ft.Divider(),
        ft.Text("Your Tasks", size=20, weight=ft.FontWeight.BOLD),
        ft.Row(controls=[status_filter, subject_filter]),
        task_list,
    ]
    return build_shell("/tasks", "Tasks", body, navigate, on_logout)
