from __future__ import annotations

from unittest.mock import patch

from icp_compare.services.progress import STAGES, StageProgress


def test_progress_disabled_without_tty():
    with patch("icp_compare.services.progress.is_tty_enabled", return_value=False):
        with StageProgress() as progress:
            assert progress.enabled is False
            assert progress.pbar is None
            progress.start("fetch")
            progress.finish("fetch")
            assert progress.current == "fetch"


def test_progress_advances_one_step_per_stage():
    with patch("icp_compare.services.progress.is_tty_enabled", return_value=True):
        progress = StageProgress()
        assert progress.pbar is not None
        for stage in STAGES:
            progress.start(stage)
            progress.finish(stage)
        assert progress.pbar.n == len(STAGES)
        progress.close()
        assert progress.pbar is None
