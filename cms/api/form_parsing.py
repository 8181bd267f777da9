"""Decode flat form fields with PHP bracket names (a[b][]=1) into nested dicts and lists."""

import re
from typing import Any, Dict, Iterable, List, Tuple

_BRACKET_KEY = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])+)$")
_SUBKEY = re.compile(r"\[([^\[\]]*)\]")


def split_key(name: str) -> List[str]:
    """'relation[pages][]' -> ['relation', 'pages', '']. Malformed names are kept whole."""
    match = _BRACKET_KEY.match(name)
    if not match:
        return [name]
    return [match.group(1), *_SUBKEY.findall(match.group(2))]


def _assign(target: Dict[str, Any], keys: List[str], value: Any) -> None:
    key, rest = keys[0], keys[1:]
    if not rest:
        target[key] = value
        return
    if rest[0] == "":
        slot = target.get(key)
        if not isinstance(slot, list):
            slot = []
            target[key] = slot
        if len(rest) == 1:
            slot.append(value)
        else:
            child: Dict[str, Any] = {}
            slot.append(child)
            _assign(child, rest[1:], value)
        return
    slot = target.get(key)
    if not isinstance(slot, dict):
        slot = {}
        target[key] = slot
    _assign(slot, rest, value)


def decode_form(items: Iterable[Tuple[str, Any]]) -> Dict[str, Any]:
    """
    Build the nested form mapping in submission order.
    A repeated plain name keeps the last value; '[]' appends.
    """
    result: Dict[str, Any] = {}
    for name, value in items:
        _assign(result, split_key(name), value)
    return result
