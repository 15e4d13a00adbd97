import logging

import flet as ft

from studyflow.services.storage import StorageError
from studyflow.state.app_state import Store
from studyflow.ui.routes import HOME, LOGIN, resolve_route
from studyflow.ui.views.calendar_view import build_calendar_view
from studyflow.ui.views.dashboard_view import build_dashboard_view
from studyflow.ui.views.login_view import build_login_view
from studyflow.ui.views.subject_details_view import build_subject_details_view
from studyflow.ui.views.subjects_view import build_subjects_view
from studyflow.ui.views.tasks_view import build_tasks_view

logger = logging.getLogger(__name__)


class StudyFlowApp:
    def __init__(self, page: ft.Page, store: Store) -> None:
        self.page = page
        self.page.title = "StudyFlow"
        self.store = store
        self.page.on_route_change = self.handle_route_change
        self.page.on_view_pop = self.handle_view_pop

    def run(self) -> None:
        self.page.go(self.page.route or HOME)

    def navigate(self, route: str) -> None:
        self.page.go(route)

    def logout(self) -> None:
        if not self.store.logout():
            logger.error("Session cleared in memory only: %s", self.store.last_error)
        self.page.go(LOGIN)

    def handle_route_change(self, _=None) -> None:
        name, subject_id, route = resolve_route(self.page.route, self.store.is_authenticated)
        if route != self.page.route:
            self.page.go(route)
            return

        if name == "login":
            view = build_login_view(self.page, self.store, on_authenticated=lambda: self.navigate(HOME))
        elif name == "subjects":
            view = build_subjects_view(self.page, self.store, self.navigate, self.logout)
        elif name == "subject_details":
            view = build_subject_details_view(self.page, self.store, subject_id, self.navigate, self.logout)
        elif name == "tasks":
            view = build_tasks_view(self.page, self.store, self.navigate, self.logout)
        elif name == "calendar":
            view = build_calendar_view(self.page, self.store, self.navigate, self.logout)
        else:
            view = build_dashboard_view(self.page, self.store, self.navigate, self.logout)

        self.page.views.clear()
        self.page.views.append(view)
        self.page.update()

    def handle_view_pop(self, _=None) -> None:
        self.page.go(HOME)


def main(page: ft.Page) -> None:
    try:
        store = Store.from_settings()
    except StorageError as exc:
        logger.error("Could not open storage: %s", exc)
        page.add(ft.Text(f"Could not open storage: {exc}", color=ft.Colors.RED_400))
        return
    StudyFlowApp(page, store).run()
