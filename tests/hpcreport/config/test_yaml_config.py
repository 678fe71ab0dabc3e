"""Tests for configuration loading and validation."""

import pytest
import yaml
from pydantic import ValidationError

from hpcreport.config import ConversionConfig, TargetSpec, load_config, validate_config_dict
from hpcreport.exceptions import (
    InvalidArgsError,
    InvalidBuildToolError,
    InvalidFormatError,
    NoTargetError,
)


class TestValidationOrder:

    @pytest.mark.parametrize("config", [{}, {"targets": []}, {"targets": None, "format": "xml"}])
    def test_no_target_comes_first(self, config):
        with pytest.raises(NoTargetError):
            validate_config_dict(config)

    def test_format_checked_before_build_tool(self):
        with pytest.raises(InvalidFormatError) as exc_info:
            validate_config_dict({"targets": ["a.tix"], "format": "xml", "build_tool": "make"})
        assert exc_info.value.name == "xml"

    def test_build_tool_checked_before_other_fields(self):
        with pytest.raises(InvalidBuildToolError) as exc_info:
            validate_config_dict({"targets": ["a.tix"], "build_tool": "make", "check_hash": "maybe"})
        assert str(exc_info.value) == "invalid build tool: `make'"

    def test_remaining_problems_become_invalid_args(self):
        with pytest.raises(InvalidArgsError) as exc_info:
            validate_config_dict({
                "targets": [{"tix": "a.tix", "test_suite": "spec"}],
                "unknown_option": 1,
            })

        messages = exc_info.value.messages
        assert len(messages) == 2
        assert any(m.startswith("targets.0:") and "exactly one of" in m for m in messages)
        assert any(m.startswith("unknown_option:") for m in messages)
        assert str(exc_info.value).startswith("\n  - ")

    def test_non_mapping(self):
        with pytest.raises(InvalidArgsError, match="must be a mapping, got list"):
            validate_config_dict(["a.tix"])


class TestDefaultsAndCoercion:

    def test_defaults(self):
        config = validate_config_dict({"targets": ["unit.tix"]})

        assert config.format == "codecov"
        assert config.mix_dirs == [".hpc"]
        assert config.src_dirs == []
        assert config.output is None
        assert config.check_hash is True

    def test_string_targets_coerced(self):
        config = validate_config_dict({"targets": ["dist/unit.tix", "spec"]})

        assert config.targets == [TargetSpec(tix="dist/unit.tix"), TargetSpec(test_suite="spec")]
        assert [t.name for t in config.targets] == ["dist/unit.tix", "spec"]

    def test_format_case_insensitive(self):
        assert validate_config_dict({"targets": ["a.tix"], "format": "LCOV"}).format == "LCOV"

    def test_blank_excludes_dropped(self):
        config = validate_config_dict({"targets": ["a.tix"], "exclude_modules": ["Main", " ", "Paths_pkg "]})
        assert config.exclude_modules == ["Main", "Paths_pkg"]

    def test_target_spec_is_frozen(self):
        spec = TargetSpec(tix="a.tix")
        with pytest.raises(ValidationError):
            spec.tix = "b.tix"


class TestLoadConfig:

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "hpcreport.yaml"
        path.write_text(yaml.safe_dump({
            "targets": [{"tix": "unit.tix", "mix_dirs": ["pkg/.hpc"]}, "spec"],
            "test_suites": {"spec": "dist/spec.tix"},
            "format": "lcov",
            "output": "coverage.info",
            "build_tool": "cabal",
        }))

        config = load_config(path)

        assert isinstance(config, ConversionConfig)
        assert config.targets[0].mix_dirs == ["pkg/.hpc"]
        assert config.test_suites == {"spec": "dist/spec.tix"}
        assert config.build_tool == "cabal"

    def test_dict_passthrough(self):
        assert load_config({"targets": ["a.tix"]}).targets[0].tix == "a.tix"

    def test_empty_file_has_no_targets(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        with pytest.raises(NoTargetError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidArgsError, match="cannot read configuration"):
            load_config(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("targets: [unclosed\n")

        with pytest.raises(InvalidArgsError, match="invalid YAML"):
            load_config(path)
