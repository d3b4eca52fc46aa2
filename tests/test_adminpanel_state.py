"""
Unit Tests for adminpanel.state module.
"""


class TestStatePredicates:
    """Tests for the per-user panel state."""

    def test_no_user(self):
        """Test every predicate is False without a backend user."""
        from adminpanel.state import is_activated_for_user, is_hidden_for_user, is_open

        assert is_activated_for_user(None) is False
        assert is_hidden_for_user(None) is False
        assert is_open(None) is False

    def test_activated_when_any_module_enabled(self, backend_user_factory):
        from adminpanel.state import is_activated_for_user

        assert is_activated_for_user(backend_user_factory(enable={"preview": True})) is True
        assert is_activated_for_user(backend_user_factory(enable={"all": "1"})) is True

    def test_not_activated_without_enabled_modules(self, backend_user_factory):
        from adminpanel.state import is_activated_for_user

        assert is_activated_for_user(backend_user_factory(enable={})) is False
        assert is_activated_for_user(backend_user_factory(enable={"preview": "0"})) is False

    def test_hidden(self, backend_user_factory):
        from adminpanel.state import is_hidden_for_user

        assert is_hidden_for_user(backend_user_factory(hide=True)) is True
        assert is_hidden_for_user(backend_user_factory(hide=False)) is False

    def test_open(self, backend_user_factory):
        from adminpanel.state import is_open

        assert is_open(backend_user_factory(display_top=True)) is True
        assert is_open(backend_user_factory(display_top=False)) is False

    def test_predicates_are_independent(self, backend_user_factory):
        """Test a hidden, closed user can still be activated."""
        from adminpanel.state import is_activated_for_user, is_hidden_for_user, is_open

        user = backend_user_factory(hide=True, display_top=False)

        assert is_activated_for_user(user) is True
        assert is_hidden_for_user(user) is True
        assert is_open(user) is False


class TestFrontendActivation:
    """Tests for is_activated_in_frontend()."""

    def test_falls_back_to_settings(self, settings):
        from adminpanel.request import PanelRequest
        from adminpanel.state import is_activated_in_frontend

        assert is_activated_in_frontend(PanelRequest(request_id="r"), settings) is True

        settings.frontend_enabled = False
        assert is_activated_in_frontend(PanelRequest(request_id="r"), settings) is False

    def test_request_config_wins(self, settings):
        from adminpanel.request import ATTR_FRONTEND_CONFIG, PanelRequest
        from adminpanel.state import is_activated_in_frontend

        request = PanelRequest(request_id="r", attributes={ATTR_FRONTEND_CONFIG: {"admPanel": "0"}})

        assert is_activated_in_frontend(request, settings) is False
