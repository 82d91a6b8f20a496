"""
Typed settings groups.

A settings group is a class whose attributes are declared with `setting()`.
The lookup key of each attribute is the attribute's own name, and its type is
the attribute's annotation:

    class CommonAppSettings(SettingsGroup):
        Title: str = setting()
        Port: int = setting()

    CommonAppSettings.Port  # reads "Port" from the effective source, parsed as int

Values are resolved on every access; nothing is cached.
"""

from __future__ import annotations

import logging
import typing
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, Optional, Tuple, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from app_config.errors import FormatError, KeyNotFound
from app_config.sources.interfaces import ConfigurationSource
from app_config.sources.registry import effective_source

logger = logging.getLogger(__name__)

Parser = Callable[[str], Any]
G = TypeVar("G", bound="SettingsGroup")

# Keyed by "module.qualname" so a re-imported module replaces its earlier definitions.
_registered_groups: Dict[str, Type["SettingsGroup"]] = {}


def _type_label(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)


def _build_parser(tp: Any, custom: Optional[Parser]) -> Parser:
    if custom is not None:
        return custom
    if tp is str:
        return str
    adapter = TypeAdapter(tp)
    return adapter.validate_python


@dataclass(frozen=True, slots=True)
class Accessor:
    """A single declared setting: where it lives, what it is called and how it is parsed."""

    group: type
    name: str
    type: Any
    parse: Parser

    @property
    def qualified_name(self) -> str:
        return f"{self.group.__name__}.{self.name}"

    def resolve(self, source: ConfigurationSource) -> Any:
        group = self.group.__name__
        try:
            raw = source.get(self.name)
        except KeyNotFound as e:
            raise KeyNotFound(self.name, e.source, group=group) from None
        if self.type is str and self.parse is str:
            return raw
        try:
            return self.parse(raw)
        except FormatError:
            raise
        except ValidationError as e:
            errors = e.errors()
            detail = errors[0]["msg"] if errors else str(e)
            raise FormatError(self.name, raw, _type_label(self.type), detail, group=group) from e
        except (ValueError, TypeError) as e:
            raise FormatError(self.name, raw, _type_label(self.type), str(e), group=group) from e


class Setting:
    """Descriptor created by `setting()`; the key is the attribute name it is bound to."""

    def __init__(self, parse: Optional[Parser] = None) -> None:
        self.custom_parse = parse
        self.name: Optional[str] = None
        self.accessor: Optional[Accessor] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Optional["SettingsGroup"], owner: type) -> Any:
        if self.accessor is None:
            raise AttributeError(f"Setting '{self.name}' is not attached to a settings group")
        if instance is not None:
            source = instance._source
        else:
            source = effective_source()
        accessor = self.accessor
        for candidate in getattr(owner, "_accessors", ()):
            if candidate.name == self.name:
                accessor = candidate
                break
        return accessor.resolve(source)

    def __repr__(self) -> str:
        return f"Setting(name={self.name!r})"


def setting(parse: Optional[Parser] = None) -> Any:
    """
    Declare a setting on a `SettingsGroup` subclass.

    The attribute must carry a type annotation. `parse`, when given, replaces
    the default conversion from the raw string.
    """
    return Setting(parse=parse)


class SettingsGroup:
    """
    Base class for named collections of typed settings.

    Groups are never instantiated. Use the class attributes directly, or
    `bind()` a group to an explicit source.
    """

    _accessors: ClassVar[Tuple[Accessor, ...]] = ()
    _source: ConfigurationSource

    def __new__(cls, *args: Any, **kwargs: Any) -> "SettingsGroup":
        raise TypeError(f"{cls.__name__} is a settings group and cannot be instantiated; use bind() instead")

    def __init_subclass__(cls, register: bool = True, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        hints = typing.get_type_hints(cls)

        accessors: Dict[str, Accessor] = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if not isinstance(value, Setting):
                    continue
                if name not in hints:
                    raise TypeError(f"Setting '{klass.__name__}.{name}' must declare a type annotation")
                if value.accessor is None:
                    value.accessor = Accessor(
                        group=klass,
                        name=name,
                        type=hints[name],
                        parse=_build_parser(hints[name], value.custom_parse),
                    )
                accessors[name] = Accessor(
                    group=cls,
                    name=name,
                    type=value.accessor.type,
                    parse=value.accessor.parse,
                )
        cls._accessors = tuple(accessors.values())

        if register:
            _registered_groups[f"{cls.__module__}.{cls.__qualname__}"] = cls
            logger.debug("settings.group_registered group=%s accessors=%d", cls.__name__, len(cls._accessors))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} settings are read-only")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} bound to {self._source.name}>"

    @classmethod
    def accessors(cls) -> Tuple[Accessor, ...]:
        return cls._accessors

    @classmethod
    def bind(cls: Type[G], source: ConfigurationSource) -> G:
        """Return a read-only view of this group that resolves against `source` only."""
        view = object.__new__(cls)
        object.__setattr__(view, "_source", source)
        return view

    @classmethod
    def snapshot(cls, source: Optional[ConfigurationSource] = None) -> Dict[str, Any]:
        """Resolve every setting of the group. Raises on the first failure."""
        resolved = source if source is not None else effective_source()
        return {accessor.name: accessor.resolve(resolved) for accessor in cls._accessors}


def registered_groups() -> Tuple[Type[SettingsGroup], ...]:
    return tuple(_registered_groups.values())
