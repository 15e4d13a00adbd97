from datetime import date
from typing import Callable, List
import flet as ft

from studyflow.core.queries import pending_count, today_tasks, upcoming_this_week
from studyflow.models.entities import Task
from studyflow.state.app_state import Store
from studyflow.ui.layout import PRIORITY_COLORS, build_shell


def _task_rows(store: Store, tasks: List[Task], empty_text: str, show_date: bool) -> List[ft.Control]:
    if not tasks:
        return [ft.Text(empty_text, italic=True)]
    rows: List[ft.Control] = []
    for task in tasks:
        details = store.subject_name(task.subject_id)
        if show_date:
            details = f"{details} - {task.date.strftime('%a %d/%m')}"
        rows.append(
            ft.ListTile(
                leading=ft.Icon(ft.Icons.CIRCLE, size=12, color=PRIORITY_COLORS[task.priority]),
                title=ft.Text(task.name),
                subtitle=ft.Text(details),
            )
        )
    return rows


def _stat_card(label: str, value: str) -> ft.Card:
    return ft.Card(
        content=ft.Container(
            padding=16,
            width=200,
            content=ft.Column(
                controls=[
                    ft.Text(label, color=ft.Colors.GREY_600),
                    ft.Text(value, size=26, weight=ft.FontWeight.BOLD),
                ]
            ),
        )
    )


def build_dashboard_view(
    page: ft.Page,
    store: Store,
    navigate: Callable[[str], None],
    on_logout: Callable[[], None],
) -> ft.View:
    today = date.today()
    username = store.session.username if store.session else ""

    body: List[ft.Control] = [
        ft.Text(f"Hello, {username}!", size=28, weight=ft.FontWeight.BOLD),
        ft.Text(today.strftime("%A, %d %B %Y")),
        ft.Row(
            wrap=True,
            controls=[
                _stat_card("Pending tasks", str(pending_count(store.tasks))),
                _stat_card("Subjects", str(len(store.subjects))),
            ],
        ),
        ft.Text("Today", size=20, weight=ft.FontWeight.BOLD),
        *_task_rows(store, today_tasks(store.tasks, today), "Nothing due today.", show_date=False),
        ft.Divider(),
        ft.Text("Later this week", size=20, weight=ft.FontWeight.BOLD),
        *_task_rows(store, upcoming_this_week(store.tasks, today), "Nothing else this week.", show_date=True),
    ]

    return build_shell("/", "Home", body, navigate, on_logout)
