from pathlib import Path

import pytest

from api_client_codegen.config import DEFAULT_IMPORT_LINES, CyclePolicy, ProjectConfig, load_config
from api_client_codegen.errors import ConfigError


class TestLoadConfig:
    def test_defaults_when_missing(self, tmp_path):
        assert load_config(None) == ProjectConfig()
        config = load_config(tmp_path / "missing.yaml")
        assert config.use_interface is True
        assert config.import_lines == DEFAULT_IMPORT_LINES
        assert config.cycle_policy == CyclePolicy.WARN
        assert config.output_dir == Path("./api")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == ProjectConfig()

    def test_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "namespace_prefix: Shop.Models\n"
            "unwrap_generic_types: [Result, Envelope]\n"
            "use_interface: false\n"
            "comment_config:\n"
            "  max_length: 80\n"
            "cycle_policy: error\n"
            "output_dir: src/api\n"
        )
        config = load_config(path)
        assert config.namespace_prefix == "Shop.Models"
        assert config.unwrap_generic_types == {"Result", "Envelope"}
        assert config.use_interface is False
        assert config.comment_config.max_length == 80
        assert config.cycle_policy == CyclePolicy.ERROR
        assert config.output_dir == Path("src/api")

    def test_legacy_json_keys(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(
            '{"UseInterface": false, "NamespacePrefix": "Shop", '
            '"ImportLine": ["import x from \'y\';"], "Comments": {"MaxLines": 2}}'
        )
        config = load_config(path)
        assert config.use_interface is False
        assert config.namespace_prefix == "Shop"
        assert config.import_lines == ["import x from 'y';"]
        assert config.comment_config.max_lines == 2

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="must be a mapping"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("a: [unclosed\n")
        with pytest.raises(ConfigError, match="Cannot read config"):
            load_config(path)

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("cycle_policy: explode\n")
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config(path)
