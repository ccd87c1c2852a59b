"""Property readers for processor configuration maps.

Every reader *removes* the key it reads from the mapping, so that after a
factory has read everything it understands, whatever is left over is an
unknown key (see ``AbstractProcessorFactory``).  Readers fail on the first
violation.

Messages::

    required property [field] is missing
    property [fields] isn't a list, but of type [str]
    illegal field option [foo]. valid values are [IP, CITY_NAME]
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, MutableMapping, Optional, Sequence, Type

from .errors import InvalidConfigType, InvalidConfigValue, MissingConfig
from .values import type_name

_MISSING = object()

_SHAPES: Dict[Type[Any], str] = {
    str: "string",
    bool: "boolean",
    list: "list",
    dict: "map",
}


def _read(config: MutableMapping[str, Any], key: str, expected: Type[Any], default: Any) -> Any:
    value = config.pop(key, _MISSING)
    if value is _MISSING or value is None:
        if default is _MISSING:
            raise MissingConfig(f"required property [{key}] is missing", key)
        return default
    if expected is list and isinstance(value, tuple):
        value = list(value)
    if not isinstance(value, expected):
        raise InvalidConfigType(
            f"property [{key}] isn't a {_SHAPES[expected]}, but of type [{type_name(value)}]",
            key,
        )
    return value


def read_string_property(config: MutableMapping[str, Any], key: str, default: Any = _MISSING) -> str:
    """Required string, unless *default* is given."""
    return _read(config, key, str, default)


def read_optional_string_property(config: MutableMapping[str, Any], key: str) -> Optional[str]:
    return _read(config, key, str, None)


def read_boolean_property(config: MutableMapping[str, Any], key: str, default: bool) -> bool:
    return _read(config, key, bool, default)


def read_list_property(config: MutableMapping[str, Any], key: str) -> List[Any]:
    return _read(config, key, list, _MISSING)


def read_optional_list_property(config: MutableMapping[str, Any], key: str) -> Optional[List[Any]]:
    return _read(config, key, list, None)


def read_map_property(config: MutableMapping[str, Any], key: str) -> Dict[str, Any]:
    return _read(config, key, dict, _MISSING)


def read_object(config: MutableMapping[str, Any], key: str) -> Any:
    """Required property of any type (``None`` counts as missing)."""
    value = config.pop(key, None)
    if value is None:
        raise MissingConfig(f"required property [{key}] is missing", key)
    return value


def read_choice(
        config: MutableMapping[str, Any],
        key: str,
        choices: Iterable[str],
        default: Any = _MISSING,
) -> str:
    """String property restricted to *choices*."""
    value = read_string_property(config, key, default)
    allowed = list(choices)
    if value not in allowed:
        raise InvalidConfigValue(
            f"illegal {key} option [{value}]. valid values are [{', '.join(allowed)}]",
            key,
        )
    return value


def read_choice_list(
        config: MutableMapping[str, Any],
        key: str,
        choices: Sequence[str],
        *,
        label: Optional[str] = None,
        normalize=str.upper,
) -> Optional[List[str]]:
    """Optional list whose every (normalized) element must be in *choices*.

    Returns ``None`` when the key is absent so the caller can apply its own
    default.  *label* names the option in the error message (defaults to
    *key*).
    """
    values = read_optional_list_property(config, key)
    if values is None:
        return None
    selected: List[str] = []
    for raw in values:
        name = normalize(raw) if isinstance(raw, str) else raw
        if name not in choices:
            raise InvalidConfigValue(
                f"illegal {label or key} option [{raw}]. valid values are [{', '.join(choices)}]",
                key,
            )
        selected.append(name)
    return selected
