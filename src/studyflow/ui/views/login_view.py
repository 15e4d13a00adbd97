from typing import Callable
import flet as ft

from studyflow.services.auth_service import AuthServiceError, LocalAuthService
from studyflow.state.app_state import Store
from studyflow.ui.layout import set_status


def build_login_view(
    page: ft.Page,
    store: Store,
    on_authenticated: Callable[[], None],
) -> ft.View:
    username = ft.TextField(label="Username", width=350, autofocus=True)
    password = ft.TextField(label="Password", password=True, can_reveal_password=True, width=350)
    status_text = ft.Text(color=ft.Colors.RED_400)

    def on_sign_in(_):
        try:
            auth = LocalAuthService.from_settings()
            result = auth.sign_in(username.value or "", password.value or "")
        except AuthServiceError as exc:
            set_status(status_text, str(exc))
            page.update()
            return

        if not store.login(result.username):
            set_status(status_text, f"Signed in, but the session could not be saved: {store.last_error}")
            page.update()
        on_authenticated()

    password.on_submit = on_sign_in

    return ft.View(
        route="/login",
        controls=[
            ft.AppBar(title=ft.Text("StudyFlow - Login")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                    controls=[
                        ft.Icon(ft.Icons.MENU_BOOK, size=48, color=ft.Colors.INDIGO_400),
                        ft.Text("Welcome", size=30, weight=ft.FontWeight.BOLD),
                        ft.Text("Sign in to StudyFlow."),
                        username,
                        password,
                        ft.Button("Sign In", on_click=on_sign_in),
                        status_text,
                    ],
                ),
            ),
        ],
    )
