import pytest

from odata_openapi.errors import ModelLoadError
from odata_openapi.settings import ConvertSettings, LinkRelKey, load_settings


class TestSettings:
    def test_defaults(self):
        settings = load_settings(None)
        assert settings.enable_operation_id is True
        assert settings.pageable_operation_name == "listMore"
        assert settings.custom_http_method_link_rel_mapping[LinkRelKey.LIST].endswith("/list")

    def test_pascal_case_file(self, tmp_path):
        f = tmp_path / "settings.yaml"
        f.write_text(
            "EnablePagination: true\n"
            "UseSuccessStatusCodeRange: true\n"
            "PageableOperationName: next\n"
            "CustomHttpMethodLinkRelMapping:\n"
            "  Delete: https://example.com/rels/delete\n"
        )
        settings = load_settings(f)
        assert settings.enable_pagination is True
        assert settings.use_success_status_code_range is True
        assert settings.pageable_operation_name == "next"
        assert settings.custom_http_method_link_rel_mapping == {
            LinkRelKey.DELETE: "https://example.com/rels/delete"
        }

    def test_empty_file(self, tmp_path):
        f = tmp_path / "settings.yaml"
        f.write_text("")
        assert load_settings(f) == ConvertSettings()

    def test_invalid_value(self, tmp_path):
        f = tmp_path / "settings.yaml"
        f.write_text("EnablePagination: [1, 2]\n")
        with pytest.raises(ModelLoadError, match="Invalid settings"):
            load_settings(f)
