from typing import Callable, Dict, Optional
import flet as ft

from studyflow.core.forms import FormValidationError, SubjectDraft
from studyflow.core.grades import summarize
from studyflow.models.entities import Subject
from studyflow.state.app_state import Store
from studyflow.ui.layout import build_shell, set_status


def build_subjects_view(
    page: ft.Page,
    store: Store,
    navigate: Callable[[str], None],
    on_logout: Callable[[], None],
) -> ft.View:
    name = ft.TextField(label="Subject Name", width=320)
    instructor = ft.TextField(label="Instructor", width=320)
    form_title = ft.Text("Add Subject", size=22, weight=ft.FontWeight.BOLD)
    submit = ft.Button("Add Subject")
    cancel = ft.TextButton("Cancel", visible=False)
    status = ft.Text(color=ft.Colors.RED_400)
    list_column = ft.Column(spacing=8)

    editing: Dict[str, Optional[Subject]] = {"subject": None}
    armed_delete: Dict[str, Optional[str]] = {"id": None}

    def reset_form() -> None:
        editing["subject"] = None
        name.value = ""
        instructor.value = ""
        form_title.value = "Add Subject"
        submit.text = "Add Subject"
        cancel.visible = False

    def start_edit(subject: Subject) -> None:
        editing["subject"] = subject
        name.value = subject.name
        instructor.value = subject.instructor
        form_title.value = "Edit Subject"
        submit.text = "Save Changes"
        cancel.visible = True
        page.update()

    def make_delete_handler(subject_id: str):
        def handler(_):
            # first click arms, second click deletes
            if armed_delete["id"] != subject_id:
                armed_delete["id"] = subject_id
                render_subjects()
                return
            armed_delete["id"] = None
            if store.delete_subject(subject_id):
                set_status(status, "Subject and its tasks deleted.", is_error=False)
            else:
                set_status(status, f"Deleted, but could not save: {store.last_error}")
            if editing["subject"] and editing["subject"].id == subject_id:
                reset_form()
            render_subjects()

        return handler

    def render_subjects() -> None:
        list_column.controls.clear()
        if not store.subjects:
            list_column.controls.append(ft.Text("No subjects added yet."))
            page.update()
            return

        for subject in store.subjects:
            average = summarize(subject.assessments).current_display
            armed = armed_delete["id"] == subject.id
            list_column.controls.append(
                ft.Card(
                    content=ft.Container(
                        padding=12,
                        content=ft.Column(
                            controls=[
                                ft.Text(subject.name, weight=ft.FontWeight.BOLD),
                                ft.Text(f"Instructor: {subject.instructor or '-'}"),
                                ft.Text(f"Current average: {average}"),
                                ft.Row(
                                    controls=[
                                        ft.TextButton(
                                            "Details",
                                            on_click=lambda _, sid=subject.id: navigate(f"/subjects/{sid}"),
                                        ),
                                        ft.TextButton("Edit", on_click=lambda _, s=subject: start_edit(s)),
                                        ft.TextButton(
                                            "Confirm: delete subject and its tasks" if armed else "Delete",
                                            style=ft.ButtonStyle(color=ft.Colors.RED_400) if armed else None,
                                            on_click=make_delete_handler(subject.id),
                                        ),
                                    ]
                                ),
                            ]
                        ),
                    )
                )
            )

        page.update()

    def on_submit(_):
        draft = SubjectDraft(name=name.value, instructor=instructor.value)
        try:
            subject = draft.build(editing["subject"])
        except FormValidationError as exc:
            set_status(status, exc.message)
            page.update()
            return

        saved = store.update_subject(subject) if editing["subject"] else store.add_subject(subject)
        if saved:
            set_status(status, "Subject saved.", is_error=False)
        else:
            set_status(status, f"Could not save: {store.last_error}")
        reset_form()
        render_subjects()

    def on_cancel(_):
        reset_form()
        page.update()

    submit.on_click = on_submit
    cancel.on_click = on_cancel

    render_subjects()

    body = [
        form_title,
        name,
        instructor,
        ft.Row(controls=[submit, cancel]),
        status,
        ft.Divider(),
        ft.Text("Your Subjects", size=20, weight=ft.FontWeight.BOLD),
        list_column,
    ]
    return build_shell("/subjects", "Subjects", body, navigate, on_logout)
