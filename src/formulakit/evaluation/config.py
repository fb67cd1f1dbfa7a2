"""Configuration for evaluation passes.

The active configuration is resolved in this order:

1. A value set for the current context with :func:`use_config`.
2. The module-wide default set with :func:`set_default_config`.
3. A plain :class:`EvaluationConfig` with documented defaults.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from typing import Iterator

__all__ = [
    "EvaluationConfig",
    "get_config",
    "set_default_config",
    "use_config",
]


class EvaluationConfig:
    """Sizing of the scratch arena owned by an evaluation context."""

    def __init__(
        self,
        preallocated_depth: int = 16,
        frame_width: int = 3,
    ):
        """Initialize configuration.

        Args:
            preallocated_depth:
                Number of recursion levels whose scratch frames are created
                up front. Deeper trees grow the arena on demand; the grown
                frames are kept for the lifetime of the context.

            frame_width:
                Number of scratch scalars created per pre-allocated level.
                Three covers the widest catalog function (``if``); frames are
                widened on demand when a node asks for more.

        Raises:
            ValueError: If a size is negative.
        """
        if preallocated_depth < 0:
            raise ValueError(f"preallocated_depth must be >= 0, got {preallocated_depth}.")
        if frame_width < 0:
            raise ValueError(f"frame_width must be >= 0, got {frame_width}.")
        self.preallocated_depth = int(preallocated_depth)
        self.frame_width = int(frame_width)

    def __repr__(self) -> str:
        return (
            f"EvaluationConfig(preallocated_depth={self.preallocated_depth}, "
            f"frame_width={self.frame_width})"
        )


_config_var: contextvars.ContextVar[EvaluationConfig | None] = contextvars.ContextVar(
    "formulakit_evaluation_config", default=None
)
_DEFAULT_CONFIG: EvaluationConfig | None = None


def set_default_config(config: EvaluationConfig | None) -> None:
    """Sets the module-wide default configuration.

    Args:
        config: New default, or ``None`` to restore the built-in defaults.
    """
    global _DEFAULT_CONFIG
    _DEFAULT_CONFIG = config


@contextmanager
def use_config(config: EvaluationConfig | None) -> Iterator[EvaluationConfig | None]:
    """Temporarily sets the configuration for the current context.

    Args:
        config: Configuration to use, or ``None`` to fall back to the default.

    Yields:
        The previous context setting (restored on exit).
    """
    prev = _config_var.get()
    token = _config_var.set(config)
    try:
        yield prev
    finally:
        _config_var.reset(token)


def get_config() -> EvaluationConfig:
    """Returns the configuration active in the current context."""
    config = _config_var.get()
    if config is not None:
        return config
    if _DEFAULT_CONFIG is not None:
        return _DEFAULT_CONFIG
    return EvaluationConfig()
