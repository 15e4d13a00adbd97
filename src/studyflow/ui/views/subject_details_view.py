from typing import Callable, List
import flet as ft

from studyflow.config.settings import settings
from studyflow.core.forms import AssessmentDraft, FormValidationError, TaskDraft
from studyflow.core.grades import AlreadyPassed, Final, Impossible, summarize
from studyflow.models.entities import Assessment, Priority
from studyflow.state.app_state import Store
from studyflow.ui.layout import PRIORITY_COLORS, build_shell, set_status


def _status_color(status) -> str:
    if isinstance(status, Final):
        return ft.Colors.GREEN_400 if status.passed else ft.Colors.RED_400
    if isinstance(status, AlreadyPassed):
        return ft.Colors.GREEN_400
    if isinstance(status, Impossible):
        return ft.Colors.RED_400
    return ft.Colors.ORANGE_400


def build_subject_details_view(
    page: ft.Page,
    store: Store,
    subject_id: str,
    navigate: Callable[[str], None],
    on_logout: Callable[[], None],
) -> ft.View:
    route = f"/subjects/{subject_id}"
    subject = store.get_subject(subject_id)
    if subject is None:
        body = [
            ft.Text("Subject not found.", size=22),
            ft.Button("Back to Subjects", on_click=lambda _: navigate("/subjects")),
        ]
        return build_shell(route, "Subject", body, navigate, on_logout)

    drafts: List[AssessmentDraft] = [AssessmentDraft.from_assessment(a) for a in subject.assessments]

    current_text = ft.Text(size=26, weight=ft.FontWeight.BOLD)
    projected_text = ft.Text(size=26, weight=ft.FontWeight.BOLD)
    status_label = ft.Text(size=16, weight=ft.FontWeight.BOLD)
    grade_status = ft.Text(color=ft.Colors.RED_400)
    rows = ft.Column(spacing=6)

    task_name = ft.TextField(label="Task", width=300)
    task_date = ft.TextField(label="Date (YYYY-MM-DD)", width=200)
    task_priority = ft.Dropdown(
        width=160,
        label="Priority",
        value=Priority.MEDIUM.value,
        options=[ft.dropdown.Option(p.value, p.value.title()) for p in Priority],
    )
    task_status = ft.Text(color=ft.Colors.RED_400)
    task_list = ft.Column(spacing=4)

    def parsed_assessments() -> List[Assessment]:
        return [draft.build() for draft in drafts]

    def refresh_summary() -> None:
        try:
            assessments = parsed_assessments()
        except FormValidationError as exc:
            set_status(grade_status, exc.message)
            page.update()
            return
        set_status(grade_status, "")
        summary = summarize(assessments, settings.pass_threshold)
        current_text.value = summary.current_display
        projected_text.value = summary.projected_display
        status_label.value = summary.status.label
        status_label.color = _status_color(summary.status)
        page.update()

    def make_change_handler(index: int, field: str):
        def handler(e):
            setattr(drafts[index], field, e.control.value)
            refresh_summary()

        return handler

    def make_remove_handler(index: int):
        def handler(_):
            drafts.pop(index)
            render_rows()

        return handler

    def render_rows() -> None:
        rows.controls.clear()
        if not drafts:
            rows.controls.append(ft.Text("No assessments yet."))
        for index, draft in enumerate(drafts):
            rows.controls.append(
                ft.Row(
                    controls=[
                        ft.TextField(
                            label="Assessment", value=draft.name, width=240,
                            on_change=make_change_handler(index, "name"),
                        ),
                        ft.TextField(
                            label="Weight", value=draft.weight, width=100,
                            on_change=make_change_handler(index, "weight"),
                        ),
                        ft.TextField(
                            label="Score (0-10)", value=draft.score or "", width=120,
                            on_change=make_change_handler(index, "score"),
                        ),
                        ft.IconButton(icon=ft.Icons.DELETE, on_click=make_remove_handler(index)),
                    ]
                )
            )
        refresh_summary()

    def on_add_assessment(_):
        drafts.append(AssessmentDraft.from_assessment(Assessment()))
        render_rows()

    def on_save_grades(_):
        try:
            assessments = parsed_assessments()
        except FormValidationError as exc:
            set_status(grade_status, exc.message)
            page.update()
            return
        if store.save_assessments(subject_id, assessments):
            set_status(grade_status, "Grades saved.", is_error=False)
        else:
            set_status(grade_status, f"Could not save grades: {store.last_error}")
        page.update()

    def render_tasks() -> None:
        task_list.controls.clear()
        tasks = sorted(store.tasks_for_subject(subject_id), key=lambda t: t.date)
        if not tasks:
            task_list.controls.append(ft.Text("No tasks for this subject."))
        for task in tasks:
            task_list.controls.append(
                ft.ListTile(
                    leading=ft.Icon(ft.Icons.CIRCLE, size=12, color=PRIORITY_COLORS[task.priority]),
                    title=ft.Text(task.name),
                    subtitle=ft.Text(f"{task.date.isoformat()} - {task.status.value}"),
                )
            )
        page.update()

    def on_add_task(_):
        draft = TaskDraft(
            name=task_name.value,
            date=task_date.value,
            priority=Priority(task_priority.value) if task_priority.value else None,
            subject_id=subject_id,
        )
        try:
            task = draft.build()
        except FormValidationError as exc:
            set_status(task_status, exc.message)
            page.update()
            return
        if store.add_task(task):
            set_status(task_status, "Task added.", is_error=False)
        else:
            set_status(task_status, f"Could not save task: {store.last_error}")
        task_name.value = ""
        task_date.value = ""
        render_tasks()

    render_rows()
    render_tasks()

    body = [
        ft.TextButton("Back", icon=ft.Icons.ARROW_BACK, on_click=lambda _: navigate("/subjects")),
        ft.Text(subject.name, size=28, weight=ft.FontWeight.BOLD),
        ft.Text(f"Instructor: {subject.instructor or '-'}"),
        ft.Row(
            controls=[
                ft.Column(controls=[ft.Text("Current average"), current_text]),
                ft.Column(controls=[ft.Text("Projected average"), projected_text]),
            ],
            spacing=40,
        ),
        status_label,
        ft.Divider(),
        ft.Text("Assessments", size=20, weight=ft.FontWeight.BOLD),
        rows,
        ft.Row(
            controls=[
                ft.OutlinedButton("Add Assessment", icon=ft.Icons.ADD, on_click=on_add_assessment),
                ft.Button("Save Grades", icon=ft.Icons.SAVE, on_click=on_save_grades),
            ]
        ),
        grade_status,
        ft.Divider(),
        ft.Text("Tasks", size=20, weight=ft.FontWeight.BOLD),
        ft.Row(controls=[task_name, task_date, task_priority]),
        ft.Button("Add Task", on_click=on_add_task),
        task_status,
        task_list,
    ]
    return build_shell(route, subject.name, body, navigate, on_logout)
