import unittest

from studyflow.ui.routes import resolve_route


class RouteTests(unittest.TestCase):
    def test_signed_out_always_goes_to_login(self):
        for route in ("/", "/tasks", "/subjects/abc", "/nowhere", "/login"):
            self.assertEqual(resolve_route(route, False), ("login", None, "/login"))

    def test_known_routes(self):
        self.assertEqual(resolve_route("/", True), ("dashboard", None, "/"))
        self.assertEqual(resolve_route("/subjects", True), ("subjects", None, "/subjects"))
        self.assertEqual(resolve_route("/tasks", True), ("tasks", None, "/tasks"))
        self.assertEqual(resolve_route("/calendar", True), ("calendar", None, "/calendar"))

    def test_subject_detail(self):
        self.assertEqual(resolve_route("/subjects/1234-ab", True), ("subject_details", "1234-ab", "/subjects/1234-ab"))

    def test_unknown_and_login_go_home_when_signed_in(self):
        for route in ("/nowhere", "/subjects/a/b", "/login", ""):
            self.assertEqual(resolve_route(route, True), ("dashboard", None, "/"))

    def test_trailing_slash_is_normalised(self):
        self.assertEqual(resolve_route("/tasks/", True), ("tasks", None, "/tasks"))


if __name__ == "__main__":
    unittest.main()
