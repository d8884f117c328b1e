# backend/services/answer_merge.py
from typing import Any, Mapping


def deep_merge(base: Any, patch: Any) -> Any:
    """
    Merge ``patch`` into ``base`` and return a new value.

    - dict into dict: merged key by key, recursively
    - anything else (lists, scalars, None, dict over non-dict): the patch
      value replaces the base value outright

    Lists are never merged element-wise: the caller always sends the full
    intended value of a list field. Neither argument is mutated.
    """
    if not isinstance(base, Mapping) or not isinstance(patch, Mapping):
        return _copy(patch)

    out = {k: _copy(v) for k, v in base.items()}
    for key, value in patch.items():
        out[key] = deep_merge(out[key], value) if key in out else _copy(value)
    return out


def _copy(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _copy(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_copy(v) for v in value]
    return value
