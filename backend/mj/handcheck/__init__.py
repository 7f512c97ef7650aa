from mj.handcheck.cache import CachedChecker
from mj.handcheck.optimal import (
    OptCounterChecker,
    OptHandChecker,
    OptHandRLEChecker,
    OptimalChecker,
    build_checker,
)
from mj.handcheck.settings import CheckerSettings, HandcheckSettings, Representation

__all__ = [
    "CachedChecker",
    "CheckerSettings",
    "HandcheckSettings",
    "OptCounterChecker",
    "OptHandChecker",
    "OptHandRLEChecker",
    "OptimalChecker",
    "Representation",
    "build_checker",
]
