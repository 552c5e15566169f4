"""
Tests for CLI configuration loading and merging.
"""

from argparse import Namespace
from pathlib import Path

import pytest

from summarizedexperiment.cli.config import explicit_arg_names, load_config, merge_config_with_args


def _subset_args(**overrides):
    args = Namespace(input=None, output=None, config=None, rows=None, columns=None,
                     row_positions=None, column_positions=None)
    for key, value in overrides.items():
        setattr(args, key, value)
    return args


class TestLoadConfig:

    def test_yaml(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("rows: [A, B]\n")
        assert load_config(path) == {"rows": ["A", "B"]}

    def test_json(self, tmp_path):
        path = tmp_path / "c.json"
        path.write_text('{"row_positions": "0:3"}')
        assert load_config(path) == {"row_positions": "0:3"}

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "c.yml"
        path.write_text("")
        assert load_config(path) == {}

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "c.toml"
        path.write_text("")
        with pytest.raises(ValueError, match="Unsupported config format"):
            load_config(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "c.json"
        path.write_text("{nope")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="mapping at top level"):
            load_config(path)

    def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")


class TestMergeConfig:

    def test_config_fills_defaults(self):
        merged = merge_config_with_args({"input": "data/raw", "rows": ["A"]}, _subset_args())
        assert merged.input == Path("data/raw")
        assert merged.rows == ["A"]

    def test_explicit_cli_wins(self):
        args = _subset_args(rows="B")
        merged = merge_config_with_args({"rows": ["A"]}, args, ["--rows", "B"])
        assert merged.rows == "B"

    def test_original_namespace_untouched(self):
        args = _subset_args()
        merge_config_with_args({"rows": ["A"]}, args)
        assert args.rows is None

    def test_unknown_keys(self):
        with pytest.raises(ValueError, match="Unknown config keys: threshold"):
            merge_config_with_args({"threshold": 1}, _subset_args())

    def test_explicit_arg_names(self):
        names = explicit_arg_names(["subset", "--row-positions=0:3", "-o", "out", "--columns", "A"])
        assert names == {"row_positions", "output", "columns"}
