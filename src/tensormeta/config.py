import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .logging import get_logger

logger = get_logger(__name__)

# A cache line holds 8 int64 values on x86-64, so keep max_rank at or below 8
# unless higher-dimensional tensors are really needed.
DEFAULT_MAX_RANK = 6

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class Settings:
    max_rank: int = DEFAULT_MAX_RANK
    bounds_checks: bool = True

    def __post_init__(self) -> None:
        if self.max_rank < 1:
            raise ValueError(f"max_rank must be at least 1, got {self.max_rank}")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Settings with TENSORMETA_MAX_RANK and TENSORMETA_BOUNDS_CHECKS applied
    """
    env = os.environ if environ is None else environ
    defaults = Settings()

    max_rank = defaults.max_rank
    raw_rank = env.get("TENSORMETA_MAX_RANK")
    if raw_rank is not None:
        try:
            max_rank = int(raw_rank)
        except ValueError:
            logger.warning(f"Ignoring non-integer TENSORMETA_MAX_RANK={raw_rank!r}")

    bounds_checks = defaults.bounds_checks
    raw_checks = env.get("TENSORMETA_BOUNDS_CHECKS")
    if raw_checks is not None:
        flag = raw_checks.strip().lower()
        if flag in _TRUE_VALUES:
            bounds_checks = True
        elif flag in _FALSE_VALUES:
            bounds_checks = False
        else:
            logger.warning(f"Ignoring unrecognised TENSORMETA_BOUNDS_CHECKS={raw_checks!r}")

    settings = Settings(max_rank=max_rank, bounds_checks=bounds_checks)
    logger.debug(f"Resolved settings: {settings}")
    return settings


settings = load_settings()
