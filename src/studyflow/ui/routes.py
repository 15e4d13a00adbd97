import re
from typing import Optional, Tuple

LOGIN = "/login"
HOME = "/"

_STATIC = {HOME: "dashboard", "/subjects": "subjects", "/tasks": "tasks", "/calendar": "calendar"}
_SUBJECT_DETAIL = re.compile(r"^/subjects/([^/]+)$")


def resolve_route(route: str, authenticated: bool) -> Tuple[str, Optional[str], str]:
    """
    Map a route to ``(page, subject_id, canonical_route)``.

    Signed-out users always land on the login page, signed-in users visiting
    the login page or an unknown path land on the dashboard.
    """
    path = (route or HOME).split("?", 1)[0].rstrip("/") or HOME

    if not authenticated:
        return "login", None, LOGIN
    if path in _STATIC:
        return _STATIC[path], None, path
    match = _SUBJECT_DETAIL.match(path)
    if match:
        return "subject_details", match.group(1), path
    return "dashboard", None, HOME
