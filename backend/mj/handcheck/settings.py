"""Hand checker configuration."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings


class Representation(str, Enum):
    """Collection type used for the free tiles while searching."""

    HAND = "hand"  # ordered sequence
    COUNTER = "counter"  # counting map
    RLE = "rle"  # run-length encoded sequence


class CheckerSettings(BaseModel):
    """
    Options for one optimal hand checker.

    None of these change the best score found; they only trade time
    against memory.
    """

    model_config = ConfigDict(frozen=True)

    representation: Representation = Representation.RLE
    # melds never cross suits, so each suit can be searched on its own
    split: bool = False
    use_memo: bool = True
    # run the per-suit searches on worker threads (only with split)
    parallel: bool = False
    max_workers: int = Field(default=4, ge=1)


class HandcheckSettings(BaseSettings):
    """Command-line defaults, read from MJ_* environment variables."""

    model_config = {"env_prefix": "MJ_"}

    representation: Representation = Representation.RLE
    split: bool = False
    use_memo: bool = True
    parallel: bool = False
    max_workers: int = Field(default=4, ge=1)
    cache_size: int = Field(default=1024, ge=0)  # 0 disables the result cache
    log_dir: str | None = Field(default=None, min_length=1)

    def checker_settings(self) -> CheckerSettings:
        return CheckerSettings(
            representation=self.representation,
            split=self.split,
            use_memo=self.use_memo,
            parallel=self.parallel,
            max_workers=self.max_workers,
        )
