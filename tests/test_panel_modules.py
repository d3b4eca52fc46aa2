"""
Unit Tests for the shipped panel modules (preview, cache, info).
"""

from datetime import datetime, timezone

import pytest


def _request(user=None, **kwargs):
    from adminpanel.request import PanelRequest

    return PanelRequest(request_id="req-1", backend_user=user, **kwargs)


class TestParseDate:
    """Tests for the simulated date parser."""

    def test_iso_date(self):
        from panel_modules.preview import parse_date

        assert parse_date("2024-01-01") == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_iso_datetime_with_offset(self):
        from panel_modules.preview import parse_date

        result = parse_date("2024-01-01T10:00:00+02:00")

        assert result == datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)

    def test_unix_timestamp(self):
        from panel_modules.preview import parse_date

        assert parse_date("1700000000") == datetime.fromtimestamp(1700000000, tz=timezone.utc)

    def test_small_timestamps_are_clamped(self):
        """Test values below one minute are raised to 60 seconds."""
        from panel_modules.preview import parse_date

        expected = datetime.fromtimestamp(60, tz=timezone.utc)
        assert parse_date("0") == expected
        assert parse_date("1970-01-01T00:00:10") == expected

    @pytest.mark.parametrize("value", ["", "   ", "not a date", "2024-13-45"])
    def test_unparsable_values(self, value):
        from panel_modules.preview import parse_date

        assert parse_date(value) is None


class TestPreviewModule:
    """Tests for PreviewModule."""

    def test_identity(self):
        from panel_modules.preview import PreviewModule

        module = PreviewModule()
        assert module.get_identifier() == "preview"
        assert module.get_icon_identifier() == "actions-preview"

    def test_enrich_without_options_is_not_a_preview(self, backend_user):
        from adminpanel.request import ATTR_NO_CACHE, ATTR_SIMULATION
        from panel_modules.preview import PreviewModule

        request = PreviewModule(backend_user=backend_user).enrich(_request(backend_user))
        simulation = request.get_attribute(ATTR_SIMULATION)

        assert simulation.preview is False
        assert simulation.is_simulating is False
        assert request.get_attribute(ATTR_NO_CACHE) is None

    def test_enrich_with_simulation(self, backend_user_factory):
        from adminpanel.request import ATTR_SIMULATION
        from panel_modules.preview import PreviewModule

        user = backend_user_factory(
            admin_config={
                "preview_simulate_date": "2024-06-01T12:00:00",
                "preview_simulate_user_group": "5",
                "preview_show_hidden_pages": "1",
                "preview_show_hidden_records": "0",
            }
        )

        simulation = PreviewModule(backend_user=user).enrich(_request(user)).get_attribute(ATTR_SIMULATION)

        assert simulation.preview is True
        assert simulation.simulated_time == datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
        assert simulation.simulated_user_groups == (5,)
        assert simulation.show_hidden_pages is True
        assert simulation.show_hidden_records is False

    def test_unparsable_date_is_ignored(self, backend_user_factory):
        from adminpanel.request import ATTR_SIMULATION
        from panel_modules.preview import PreviewModule

        user = backend_user_factory(admin_config={"preview_simulate_date": "someday"})

        simulation = PreviewModule(backend_user=user).enrich(_request(user)).get_attribute(ATTR_SIMULATION)

        assert simulation.simulated_time is None
        assert simulation.preview is False

    def test_fluid_debug_disables_caching(self, backend_user_factory):
        from adminpanel.request import ATTR_NO_CACHE, ATTR_SIMULATION
        from panel_modules.preview import PreviewModule

        user = backend_user_factory(admin_config={"preview_show_fluid_debug": "1"})

        request = PreviewModule(backend_user=user).enrich(_request(user))

        assert request.get_attribute(ATTR_NO_CACHE) is True
        assert request.get_attribute(ATTR_SIMULATION).no_cache is True

    def test_override_pins_option(self, backend_user_factory):
        from adminpanel.request import ATTR_SIMULATION
        from panel_modules.preview import PreviewModule

        user = backend_user_factory(override={"preview": {"show_hidden_records": "1"}})

        simulation = PreviewModule(backend_user=user).enrich(_request(user)).get_attribute(ATTR_SIMULATION)

        assert simulation.show_hidden_records is True

    def test_page_settings_reflect_options(self, backend_user_factory):
        from panel_modules.preview import PreviewModule

        user = backend_user_factory(
            admin_config={"preview_show_hidden_pages": "1", "preview_simulate_date": "<script>"}
        )

        html = PreviewModule(backend_user=user).get_page_settings()

        assert 'name="preview_show_hidden_pages" value="1" checked' in html
        assert 'name="preview_show_hidden_records" value="1" />' in html
        assert "&lt;script&gt;" in html
        assert "<script>" not in html

    def test_javascript_files(self):
        from panel_modules.preview import PreviewModule

        assert PreviewModule().get_javascript_files() == [
            "EXT:adminpanel/Resources/Public/JavaScript/Modules/Preview.js"
        ]
        assert PreviewModule().get_css_files() == []


class TestCacheModule:
    """Tests for CacheModule."""

    def test_no_cache_option(self, backend_user_factory):
        from adminpanel.request import ATTR_NO_CACHE
        from panel_modules.cache import CacheModule

        user = backend_user_factory(admin_config={"cache_no_cache": "1"})

        assert CacheModule(backend_user=user).enrich(_request(user)).get_attribute(ATTR_NO_CACHE) is True

    def test_caching_left_alone_by_default(self, backend_user):
        from adminpanel.request import ATTR_NO_CACHE
        from panel_modules.cache import CacheModule

        request = CacheModule(backend_user=backend_user).enrich(_request(backend_user))

        assert request.get_attribute(ATTR_NO_CACHE) is None

    def test_is_not_a_submit_actor(self):
        """Test the cache module never acts on submitted settings."""
        from adminpanel.interface import Capability, has_capability
        from panel_modules.cache import CacheModule

        assert not has_capability(CacheModule, Capability.ON_SUBMIT_ACTOR)

    def test_page_settings_offer_no_cache_only(self, backend_user_factory):
        from panel_modules.cache import CacheModule

        user = backend_user_factory(admin_config={"cache_no_cache": "1"})
        html = CacheModule(backend_user=user).get_page_settings()

        assert 'name="cache_no_cache"' in html
        assert "checked" in html
        assert "clear_cache" not in html


class TestInfoModules:
    """Tests for InfoModule and its submodules."""

    def test_general_information_data(self, backend_user):
        from adminpanel.context import SimulationContext
        from adminpanel.middleware import ATTR_DOCUMENT_SIZE, ATTR_PARSE_TIME
        from adminpanel.request import ATTR_NO_CACHE, ATTR_PAGE_ID, ATTR_SIMULATION
        from panel_modules.info import GeneralInformation

        request = _request(
            backend_user,
            attributes={
                ATTR_PAGE_ID: 7,
                ATTR_SIMULATION: SimulationContext(simulated_user_groups=(3,)),
                ATTR_NO_CACHE: True,
                ATTR_DOCUMENT_SIZE: 2048,
                ATTR_PARSE_TIME: 12.5,
            },
        )

        data = GeneralInformation(backend_user=backend_user).get_data_to_store(request)

        assert data == {
            "page_id": 7,
            "user_groups": [3],
            "no_cache": True,
            "document_size": 2048,
            "parse_time": 12.5,
            "backend_user": "user1",
        }

    def test_general_information_content(self):
        from adminpanel.data_storage import ModuleData
        from panel_modules.info import GeneralInformation

        html = GeneralInformation().get_content(
            ModuleData(page_id=7, user_groups=[], no_cache=False, document_size=2048, parse_time=12.5)
        )

        assert "<td>7</td>" in html
        assert "<td>2.0 KB</td>" in html
        assert "<td>12.5 ms</td>" in html

    def test_empty_content(self):
        from adminpanel.data_storage import ModuleData
        from panel_modules.info import GeneralInformation, RequestInformation

        assert "No data" in GeneralInformation().get_content(ModuleData())
        assert "No data" in RequestInformation().get_content(ModuleData())

    def test_request_information_masks_credentials(self):
        from panel_modules.info import RequestInformation

        request = _request(
            method="POST",
            path="/login",
            query_params={"page": "2", "token": "abc123"},
            headers={"accept": "text/html", "cookie": "be_typo_user=secret", "authorization": "Bearer xyz"},
            cookies={"be_typo_user": "secret"},
        )

        data = RequestInformation().get_data_to_store(request)

        assert data["method"] == "POST"
        assert data["path"] == "/login"
        assert data["query"] == {"page": "2", "token": "***"}
        assert data["headers"]["accept"] == "text/html"
        assert data["headers"]["cookie"] == "***"
        assert data["headers"]["authorization"] == "***"
        assert data["cookies"] == ["be_typo_user"]
        assert "secret" not in RequestInformation().get_content(data)

    def test_sensitive_query_values_are_masked_whole(self):
        """Test values with spaces or separators under a sensitive key are fully hidden."""
        from panel_modules.info import RequestInformation

        request = _request(
            query_params={"password": "a b", "csrf_token": "x;y", "q": "token=abc"},
            headers={"x-api-key": "k 1"},
        )

        data = RequestInformation().get_data_to_store(request)

        assert data["query"] == {"password": "***", "csrf_token": "***", "q": "token=***"}
        assert data["headers"]["x-api-key"] == "***"
        content = RequestInformation().get_content(data)
        assert "a b" not in content
        assert "x;y" not in content

    def test_short_info_shows_parse_time(self):
        from adminpanel.data_storage import ModuleDataStorageCollection
        from panel_modules.info import InfoModule

        module = InfoModule()
        assert module.get_short_info() == ""

        module.set_module_data(ModuleDataStorageCollection({"info_general": {"parse_time": 3.2}}))
        assert module.get_short_info() == "3.2 ms"

    def test_format_size(self):
        from panel_modules.info import format_size

        assert format_size(512) == "512 B"
        assert format_size(1536) == "1.5 KB"
        assert format_size(3 * 1024 * 1024) == "3.0 MB"
