"""Config settings – read ListQuerySettings from the environment or a ``.env`` file.

Values are looked up as ``<PREFIX>_<FIELD>`` (``LIST_QUERY_PAGE_SIZE``).
The dotenv loader never writes into ``os.environ``; file values only fill
the gaps the process environment leaves.
"""
from __future__ import annotations

import abc
import dataclasses
import os
from typing import Any, Callable, Mapping, TypeVar

from dotenv import dotenv_values

from listquery.config.settings.base import Settings
from listquery.config.validation import (
    ConfigurationError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)
from listquery.observability.logging import get_logger

T = TypeVar("T", bound=Settings)

_log = get_logger(__name__)

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"expected one of {sorted(_TRUE | _FALSE)}")


_PARSERS: dict[str, Callable[[str], Any]] = {
    "int": lambda v: int(v.strip()),
    "float": lambda v: float(v.strip()),
    "bool": _parse_bool,
    "str": str,
}


def _env_key(settings_class: type[Settings], field_name: str) -> str:
    prefix = getattr(settings_class, "_prefix", "")
    return f"{prefix}_{field_name}".upper().lstrip("_")


class SettingsLoader(abc.ABC):
    """Port: load settings from an external source."""

    @abc.abstractmethod
    def load(self, settings_class: type[T]) -> T: ...


class EnvSettingsLoader(SettingsLoader):
    """Build settings from a mapping of environment variables.

    *environ* defaults to ``os.environ``. Fields without a variable keep
    their dataclass default.
    """

    def __init__(self, environ: Mapping[str, str | None] | None = None) -> None:
        self._environ = environ

    def load(self, settings_class: type[T]) -> T:
        environ = os.environ if self._environ is None else self._environ
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            env_key = _env_key(settings_class, field.name)
            raw = environ.get(env_key)
            if raw is None:
                if (
                    field.default is dataclasses.MISSING
                    and field.default_factory is dataclasses.MISSING  # type: ignore[misc]
                ):
                    raise MissingRequiredSettingError(env_key)
                continue
            kwargs[field.name] = self._parse(env_key, raw, field.type)

        try:
            settings = settings_class(**kwargs)
        except ConfigurationError:
            raise
        except TypeError as exc:
            raise ConfigurationError(
                f"Cannot build {settings_class.__name__}: {exc}", cause=exc
            ) from exc
        _log.debug("settings_loaded", settings=settings_class.__name__, overridden=sorted(kwargs))
        return settings

    @staticmethod
    def _parse(env_key: str, raw: str, type_hint: Any) -> Any:
        name = type_hint if isinstance(type_hint, str) else getattr(type_hint, "__name__", "str")
        parser = _PARSERS.get(name, str)
        try:
            return parser(raw)
        except ValueError as exc:
            raise InvalidSettingValueError(env_key, raw, str(exc)) from exc


class DotenvSettingsLoader(SettingsLoader):
    """Layer a ``.env`` file under the process environment.

    With ``override=True`` the file wins over variables already set.
    A missing file contributes nothing.
    """

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        self._env_file = env_file
        self._override = override

    def load(self, settings_class: type[T]) -> T:
        file_values = {k: v for k, v in dotenv_values(self._env_file).items() if v is not None}
        if self._override:
            merged = {**os.environ, **file_values}
        else:
            merged = {**file_values, **os.environ}
        return EnvSettingsLoader(merged).load(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader"]
