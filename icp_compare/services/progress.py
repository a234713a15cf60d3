from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display service with tqdm (TTY only).

One comparison walks a fixed list of stages; the bar advances one step per
stage. In non-TTY environments (CI, pipes) no bar is created so that no ANSI
control sequences end up in captured output.
"""

__all__ = [
    "STAGES",
    "StageProgress",
    "is_tty_enabled",
]

STAGES: tuple[str, ...] = ("fetch", "parse", "resolve", "normalize", "score")


def is_tty_enabled() -> bool:
    """Check if TTY output is enabled."""
    return sys.stdout.isatty()


class StageProgress:
    """Progress tracker for the stages of one comparison run."""

    def __init__(self, stages: tuple[str, ...] = STAGES, *, description: str = "Comparing") -> None:
        self.stages = stages
        self.description = description
        self.current: str | None = None

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=len(stages),
                desc=description,
                unit="step",
                leave=False,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def start(self, stage: str) -> None:
        self.current = stage
        if self.enabled and self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({stage})")

    def finish(self, stage: str) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_description(self.description)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> StageProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
