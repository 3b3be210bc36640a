"""Partial configuration merging."""

from typing import Any, Dict, Mapping, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from ..exceptions import ConfigurationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def _deep_update(target: Dict[str, Any], updates: Mapping[str, Any]) -> None:
    for key, value in updates.items():
        if isinstance(value, BaseModel):
            value = value.model_dump()
        if isinstance(value, Mapping) and isinstance(target.get(key), dict):
            _deep_update(target[key], value)
        else:
            target[key] = value


def merge_config(current: ModelT, overrides: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> ModelT:
    """Return ``current`` with ``overrides`` merged over it.

    Nested models and dicts merge key by key, so ``{"weights": {"clarity": 0.5}}``
    keeps the other weights. An empty override returns ``current`` unchanged.
    Unknown keys or invalid values raise ConfigurationError.
    """
    updates: Dict[str, Any] = dict(overrides or {})
    updates.update(kwargs)
    if not updates:
        return current

    data = current.model_dump()
    _deep_update(data, updates)
    try:
        return type(current).model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid {type(current).__name__} override: {e}") from e
