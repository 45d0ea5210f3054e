from __future__ import annotations

import logging

import pytest

from fastrp import ComputationTerminated, ProgressLogger, TerminationFlag


def test_logs_percentage_milestones(caplog: pytest.LogCaptureFixture) -> None:
    progress = ProgressLogger(200, "Task", log_interval=25)
    with caplog.at_level(logging.INFO, logger="fastrp"):
        for _ in range(200):
            progress.log_progress()

    messages = [record.getMessage() for record in caplog.records]
    assert messages == ["Task 25%", "Task 50%", "Task 75%", "Task 100%"]


def test_reset_starts_new_volume() -> None:
    progress = ProgressLogger(10, "Task")
    progress.log_progress(10)
    progress.reset(5)

    assert progress.progress == 0
    assert progress.task_volume == 5


def test_null_logger_is_silent(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG):
        ProgressLogger.NULL.log_message("hello")
        ProgressLogger.NULL.log_progress(5)

    assert caplog.records == []
    assert ProgressLogger.NULL.progress == 0


def test_termination_flag() -> None:
    flag = TerminationFlag()
    flag.assert_running()
    flag.stop()

    assert not flag.running()
    with pytest.raises(ComputationTerminated):
        flag.assert_running()


def test_termination_flag_with_callback() -> None:
    state = {"running": True}
    flag = TerminationFlag(lambda: state["running"])

    assert flag.running()
    state["running"] = False
    assert not flag.running()
