from pathlib import Path

from pagekiln.config import DEFAULT_CONFIG, BuildConfig, load_config


def test_defaults(tmp_path):
    config = load_config(tmp_path)
    assert config.build_root == tmp_path.resolve() / "public"
    assert config.hashes_root == tmp_path.resolve() / "cache" / "hashes"
    assert config.algorithm == DEFAULT_CONFIG["algorithm"] == "xxh3"
    assert config.suffix == ".hash"
    assert config.delimiters == "{{ }}"


def test_yaml_overrides_and_ignores_unknown_keys(tmp_path):
    (tmp_path / "pagekiln.yaml").write_text(
        "build_dir: dist\nalgorithm: sha256\nport: 4000\n", encoding="utf-8"
    )
    config = load_config(tmp_path)
    assert config.build_root == tmp_path.resolve() / "dist"
    assert config.algorithm == "sha256"
    assert not hasattr(config, "port")


def test_non_mapping_yaml_is_ignored(tmp_path):
    (tmp_path / "pagekiln.yaml").write_text("- just\n- a list\n", encoding="utf-8")
    assert load_config(tmp_path).build_dir == "public"


def test_empty_yaml_is_ignored(tmp_path):
    (tmp_path / "pagekiln.yaml").write_text("", encoding="utf-8")
    assert load_config(tmp_path).cache_dir == "cache"


def test_keyword_overrides_take_precedence(tmp_path):
    (tmp_path / "pagekiln.yaml").write_text("delimiters: '<< >>'\n", encoding="utf-8")
    assert load_config(tmp_path, delimiters="[[ ]]").delimiters == "[[ ]]"
    assert load_config(tmp_path, delimiters=None).delimiters == "<< >>"


def test_relative_root_is_made_absolute(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = BuildConfig(root=Path("."))
    assert config.build_root.is_absolute()
    assert config.build_root == tmp_path.resolve() / "public"


def test_configs_are_independent_values(tmp_path):
    a = BuildConfig(root=tmp_path / "a")
    b = BuildConfig(root=tmp_path / "b", build_dir="out")
    assert a.build_root != b.build_root
    assert a == BuildConfig(root=tmp_path / "a")
