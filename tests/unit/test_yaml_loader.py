# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for YAML loader utilities."""

from pathlib import Path

import pytest

from src.core.config.yaml_loader import YAMLLoadError, deep_merge, load_yaml


class TestLoadYaml:
    """Tests for load_yaml function."""

    def test_load_valid_yaml_file(self, tmp_path: Path) -> None:
        """Test loading a valid YAML file."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("key: value\nnested:\n  inner: 42\n")

        result = load_yaml(yaml_file)

        assert result == {"key": "value", "nested": {"inner": 42}}

    def test_load_empty_yaml_file_returns_empty_dict(self, tmp_path: Path) -> None:
        """Test that empty YAML files return empty dict."""
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert load_yaml(yaml_file) == {}

    def test_load_yaml_with_list_root_raises_error(self, tmp_path: Path) -> None:
        """Test that YAML files with list root raise error."""
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- item1\n- item2\n")

        with pytest.raises(YAMLLoadError) as exc_info:
            load_yaml(yaml_file)

        assert "must be a mapping" in str(exc_info.value)

    def test_load_nonexistent_file_raises_error(self, tmp_path: Path) -> None:
        with pytest.raises(YAMLLoadError) as exc_info:
            load_yaml(tmp_path / "nonexistent.yaml")

        assert "does not exist" in str(exc_info.value)

    def test_load_invalid_yaml_syntax_raises_error(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("key: [unclosed\n")

        with pytest.raises(YAMLLoadError) as exc_info:
            load_yaml(yaml_file)

        assert "Invalid YAML syntax" in str(exc_info.value)


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_override_replaces_scalars_and_lists(self) -> None:
        base = {"required": ["a"], "limit": 1}

        assert deep_merge(base, {"required": ["b"]}) == {"required": ["b"], "limit": 1}

    def test_nested_dicts_are_merged(self) -> None:
        base = {"limits": {"x": 1, "y": 1}}

        assert deep_merge(base, {"limits": {"y": 2}}) == {"limits": {"x": 1, "y": 2}}

    def test_base_is_not_modified(self) -> None:
        base = {"limits": {"x": 1}}

        deep_merge(base, {"limits": {"x": 5}, "extra": True})

        assert base == {"limits": {"x": 1}}
