"""Build configuration for pagekiln.

Configuration is an explicit value handed to the engine and cache rather
than process-wide state, so two builds with different roots can coexist and
tests never need to reset anything.

Key pieces:
- BuildConfig: Frozen dataclass with directory layout and hashing options.
- load_config: Reads pagekiln.yaml from a project root.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "pagekiln.yaml"

DEFAULT_CONFIG = {
    "build_dir": "public",
    "cache_dir": "cache",
    "hashes_dir": "hashes",
    "algorithm": "xxh3",
    "suffix": ".hash",
    "delimiters": "{{ }}",
}


@dataclass(frozen=True)
class BuildConfig:
    """Directory layout and options for a build.

    Attributes:
        root: Project root; relative directories are resolved against it.
        build_dir: Output directory for compiled pages.
        cache_dir: Directory for build caches.
        hashes_dir: Subdirectory of cache_dir holding fingerprint entries.
        algorithm: Fingerprint algorithm name.
        suffix: File suffix of fingerprint entries.
        delimiters: Default placeholder delimiter pair, whitespace-separated.
    """

    root: Path = field(default_factory=Path.cwd)
    build_dir: str = DEFAULT_CONFIG["build_dir"]
    cache_dir: str = DEFAULT_CONFIG["cache_dir"]
    hashes_dir: str = DEFAULT_CONFIG["hashes_dir"]
    algorithm: str = DEFAULT_CONFIG["algorithm"]
    suffix: str = DEFAULT_CONFIG["suffix"]
    delimiters: str = DEFAULT_CONFIG["delimiters"]

    @property
    def project_root(self) -> Path:
        return Path(self.root).expanduser().resolve()

    @property
    def build_root(self) -> Path:
        """Absolute directory compiled pages are written under."""
        return self.project_root / self.build_dir

    @property
    def cache_root(self) -> Path:
        return self.project_root / self.cache_dir

    @property
    def hashes_root(self) -> Path:
        """Absolute directory holding fingerprint entries."""
        return self.cache_root / self.hashes_dir


def load_config(project_root: Path, **overrides: Any) -> BuildConfig:
    """Load build configuration from pagekiln.yaml.

    Args:
        project_root: Root directory of the project.
        **overrides: Values taking precedence over the file; None is ignored.

    Returns:
        BuildConfig with defaults applied for anything not configured.
    """
    config_path = project_root / CONFIG_FILENAME
    config: dict[str, Any] = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config.update(loaded)
    config.update({k: v for k, v in overrides.items() if v is not None})
    known = {f.name for f in fields(BuildConfig)} - {"root"}
    values = {k: str(v) for k, v in config.items() if k in known}
    return BuildConfig(root=project_root, **values)
