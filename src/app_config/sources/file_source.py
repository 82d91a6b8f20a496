from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence

from app_config.errors import FileLoadError, KeyCollisionError, KeyNotFound

logger = logging.getLogger(__name__)

YAML_SUFFIXES = frozenset({".yaml", ".yml"})


def _scalar_to_text(path: Path, key: str, value: Any) -> str:
    if value is None:
        raise FileLoadError(path, f"key '{key}' has no value")
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Mapping, list, tuple, set)):
        raise FileLoadError(path, f"key '{key}' must be a scalar value, got {type(value).__name__}")
    return str(value)


def _read_yaml_settings(path: Path) -> dict[str, str]:
    try:
        import yaml  # type: ignore[import-not-found]
    except ModuleNotFoundError as e:  # pragma: no cover
        raise ModuleNotFoundError(
            "Missing dependency: PyYAML is required to load YAML settings files. Install 'PyYAML'."
        ) from e

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileLoadError(path, str(e)) from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise FileLoadError(path, f"invalid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FileLoadError(path, f"top-level YAML must be a mapping, got: {type(data).__name__}")
    return {str(k): _scalar_to_text(path, str(k), v) for k, v in data.items()}


def _read_dotenv_settings(path: Path) -> dict[str, str]:
    try:
        from dotenv import dotenv_values  # type: ignore[import-not-found]
    except ModuleNotFoundError as e:  # pragma: no cover
        raise ModuleNotFoundError(
            "Missing dependency: python-dotenv is required to load settings files. Install 'python-dotenv'."
        ) from e

    try:
        # Values are taken literally; `${VAR}` is not expanded.
        data = dotenv_values(dotenv_path=path, interpolate=False, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileLoadError(path, str(e)) from e
    return {k: _scalar_to_text(path, k, v) for k, v in data.items()}


def read_settings_file(path: Path | str) -> dict[str, str]:
    """Read a flat settings file into a key -> raw string mapping."""
    path = Path(path)
    if not path.is_file():
        raise FileLoadError(path, "file not found")
    if path.suffix.lower() in YAML_SUFFIXES:
        return _read_yaml_settings(path)
    return _read_dotenv_settings(path)


def merge_common_settings(
    primary: Mapping[str, str],
    common: Mapping[str, str],
    common_path: Path | str,
) -> dict[str, str]:
    """
    Merge a linked common file into the primary key set.

    A key may appear in both only when the values are identical.
    """
    merged = dict(primary)
    for key, value in common.items():
        existing = merged.get(key)
        if existing is not None and existing != value:
            raise KeyCollisionError(common_path, key)
        merged[key] = value
    return merged


class MappingConfigurationSource:
    """An immutable in-memory configuration source."""

    def __init__(self, values: Mapping[str, str], *, name: str = "<mapping>") -> None:
        self._values: Mapping[str, str] = MappingProxyType(dict(values))
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def get(self, key: str) -> str:
        try:
            return self._values[key]
        except KeyError:
            raise KeyNotFound(key, self._name) from None

    def keys(self) -> Iterable[str]:
        return tuple(self._values.keys())

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, keys={len(self._values)})"


class FileConfigurationSource(MappingConfigurationSource):
    """A configuration source read once from a settings file plus its linked common files."""

    def __init__(
        self,
        values: Mapping[str, str],
        *,
        path: Path,
        common_paths: Sequence[Path] = (),
    ) -> None:
        super().__init__(values, name=str(path))
        self.path = path
        self.common_paths = tuple(common_paths)

    @classmethod
    def from_file(
        cls,
        path: Path | str,
        common_paths: Sequence[Path | str] = (),
        *,
        base_dir: Optional[Path | str] = None,
    ) -> "FileConfigurationSource":
        base = Path(base_dir) if base_dir is not None else None

        def _resolve(p: Path | str) -> Path:
            candidate = Path(p)
            if base is not None and not candidate.is_absolute():
                return base / candidate
            return candidate

        primary_path = _resolve(path)
        values = read_settings_file(primary_path)
        resolved_common = [_resolve(p) for p in common_paths]
        for common_path in resolved_common:
            values = merge_common_settings(values, read_settings_file(common_path), common_path)

        logger.info(
            "settings.file_loaded path=%s common_files=%d keys=%d",
            primary_path,
            len(resolved_common),
            len(values),
        )
        return cls(values, path=primary_path, common_paths=resolved_common)
