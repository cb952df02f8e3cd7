"""Outcome predictor registry.

Predictors register under a short name so the bot can select one from
settings (``PREDICTOR=rule_based``) without importing it directly. The
first docstring line of each class is its description.

    @register_predictor("my_predictor")
    class MyPredictor:
        ...

    predictor = create_predictor("my_predictor", min_score=4)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PredictorInfo:
    name: str
    cls: type
    description: str


_PREDICTORS: dict[str, PredictorInfo] = {}


def _summary(cls: type) -> str:
    doc = (cls.__doc__ or "").strip()
    return doc.splitlines()[0] if doc else ""


def register_predictor(name: str):
    """Class decorator registering an outcome predictor under ``name``.

    Raises:
        ValueError: ``name`` is already taken.
        TypeError: The class has no callable ``predict``.
    """

    def decorator(cls):
        existing = _PREDICTORS.get(name)
        if existing is not None:
            raise ValueError(
                f"Predictor '{name}' is already registered by {existing.cls.__name__}"
            )
        if not callable(getattr(cls, "predict", None)):
            raise TypeError(f"{cls.__name__} must define predict(features) to be registered")

        _PREDICTORS[name] = PredictorInfo(name=name, cls=cls, description=_summary(cls))
        logger.debug("Registered predictor %s -> %s", name, cls.__name__)
        return cls

    return decorator


def get_predictor_class(name: str) -> type:
    """Look up a registered predictor class.

    Raises:
        KeyError: Unknown name; the message lists what is available.
    """
    try:
        return _PREDICTORS[name].cls
    except KeyError:
        available = ", ".join(list_predictors()) or "(none)"
        raise KeyError(f"Unknown predictor '{name}'. Available: {available}") from None


def create_predictor(name: str, **kwargs: Any):
    """Instantiate a registered predictor; ``kwargs`` go to its constructor."""
    return get_predictor_class(name)(**kwargs)


def list_predictors() -> list[str]:
    return sorted(_PREDICTORS)


def describe_predictors() -> dict[str, str]:
    """Registered names mapped to the first docstring line of each class."""
    return {name: _PREDICTORS[name].description for name in list_predictors()}
