from datetime import date
from typing import Callable, Dict, List, Optional
import flet as ft

from studyflow.core.queries import DAY_NAMES, month_grid, shift_month, tasks_on
from studyflow.state.app_state import Store
from studyflow.ui.layout import PRIORITY_COLORS, build_shell

CELL_WIDTH = 130
CELL_HEIGHT = 110


def _day_cell(store: Store, day: Optional[date], today: date) -> ft.Container:
    if day is None:
        return ft.Container(width=CELL_WIDTH, height=CELL_HEIGHT)

    entries: List[ft.Control] = [
        ft.Text(
            str(day.day),
            weight=ft.FontWeight.BOLD,
            color=ft.Colors.INDIGO_400 if day == today else None,
        )
    ]
    for task in tasks_on(store.tasks, day):
        entries.append(
            ft.Text(
                task.name,
                size=11,
                max_lines=1,
                color=PRIORITY_COLORS[task.priority],
                tooltip=store.subject_name(task.subject_id),
            )
        )

    return ft.Container(
        width=CELL_WIDTH,
        height=CELL_HEIGHT,
        padding=6,
        bgcolor=ft.Colors.BLUE_GREY_50,
        border_radius=4,
        content=ft.Column(spacing=2, controls=entries),
    )


def build_calendar_view(
    page: ft.Page,
    store: Store,
    navigate: Callable[[str], None],
    on_logout: Callable[[], None],
) -> ft.View:
    today = date.today()
    shown: Dict[str, int] = {"year": today.year, "month": today.month}

    heading = ft.Text(size=20, weight=ft.FontWeight.BOLD)
    grid = ft.Column(spacing=2)

    def render() -> None:
        year, month = shown["year"], shown["month"]
        heading.value = date(year, month, 1).strftime("%B %Y")
        blanks, days = month_grid(year, month)
        cells: List[Optional[date]] = [None] * blanks + list(days)
        cells += [None] * (-len(cells) % 7)

        grid.controls.clear()
        grid.controls.append(
            ft.Row(
                spacing=2,
                controls=[
                    ft.Container(width=CELL_WIDTH, content=ft.Text(name, weight=ft.FontWeight.BOLD))
                    for name in DAY_NAMES
                ],
            )
        )
        for start in range(0, len(cells), 7):
            grid.controls.append(
                ft.Row(spacing=2, controls=[_day_cell(store, day, today) for day in cells[start:start + 7]])
            )
        page.update()

    def move(delta: int) -> None:
        shown["year"], shown["month"] = shift_month(shown["year"], shown["month"], delta)
        render()

    render()

    body = [
        ft.Row(
            controls=[
                ft.IconButton(icon=ft.Icons.CHEVRON_LEFT, on_click=lambda _: move(-1)),
                heading,
                ft.IconButton(icon=ft.Icons.CHEVRON_RIGHT, on_click=lambda _: move(1)),
            ]
        ),
        grid,
    ]
    return build_shell("/calendar", "Calendar", body, navigate, on_logout)
