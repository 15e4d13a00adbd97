from typing import Callable, List
import flet as ft

from studyflow.models.entities import Priority

NAV_ROUTES = ["/", "/subjects", "/tasks", "/calendar"]

PRIORITY_COLORS = {
    Priority.HIGH: ft.Colors.RED_400,
    Priority.MEDIUM: ft.Colors.ORANGE_400,
    Priority.LOW: ft.Colors.GREEN_400,
}


def set_status(text: ft.Text, message: str, is_error: bool = True) -> None:
    text.value = message
    text.color = ft.Colors.RED_400 if is_error else ft.Colors.GREEN_400


def _selected_index(route: str) -> int:
    for index, prefix in reversed(list(enumerate(NAV_ROUTES))):
        if route == prefix or (prefix != "/" and route.startswith(prefix + "/")):
            return index
    return 0


def build_shell(
    route: str,
    title: str,
    body: List[ft.Control],
    navigate: Callable[[str], None],
    on_logout: Callable[[], None],
) -> ft.View:
    """Authenticated page frame: navigation rail on the left, content on the right."""
    rail = ft.NavigationRail(
        selected_index=_selected_index(route),
        label_type=ft.NavigationRailLabelType.ALL,
        min_width=100,
        destinations=[
            ft.NavigationRailDestination(icon=ft.Icons.HOME_OUTLINED, selected_icon=ft.Icons.HOME, label="Home"),
            ft.NavigationRailDestination(icon=ft.Icons.BOOK_OUTLINED, selected_icon=ft.Icons.BOOK, label="Subjects"),
            ft.NavigationRailDestination(
                icon=ft.Icons.CHECK_BOX_OUTLINED, selected_icon=ft.Icons.CHECK_BOX, label="Tasks"
            ),
            ft.NavigationRailDestination(
                icon=ft.Icons.CALENDAR_MONTH_OUTLINED, selected_icon=ft.Icons.CALENDAR_MONTH, label="Calendar"
            ),
        ],
        trailing=ft.TextButton("Logout", icon=ft.Icons.LOGOUT, on_click=lambda _: on_logout()),
        on_change=lambda e: navigate(NAV_ROUTES[e.control.selected_index]),
    )

    return ft.View(
        route=route,
        controls=[
            ft.AppBar(title=ft.Text(f"StudyFlow - {title}")),
            ft.Row(
                expand=True,
                vertical_alignment=ft.CrossAxisAlignment.START,
                controls=[
                    rail,
                    ft.VerticalDivider(width=1),
                    ft.Container(
                        expand=True,
                        padding=20,
                        content=ft.Column(scroll=ft.ScrollMode.AUTO, controls=body),
                    ),
                ],
            ),
        ],
    )
