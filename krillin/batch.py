"""Running subtitle tasks to completion, one video or many, with progress reporting."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from krillin.client import ApiError, TaskSettings
from krillin.dto import SubtitleResult

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], None]

DEFAULT_INTERVAL = 2.0
_MAX_DISPLAY_NAME = 20


@dataclass
class TaskResult:
    """Outcome of one finished subtitle task."""

    file_name: str
    task_id: str
    subtitle_info: list[SubtitleResult] = field(default_factory=list)
    speech_download_url: str = ""


def output_tip(task_id: str) -> str:
    """Return the hint pointing the user at a task's output directory."""
    return f"若需要查看合成的视频或者文字稿，请到软件目录下的/tasks/{task_id}/output 目录下查看。"


def _report(on_progress: ProgressCallback | None, fraction: float, label: str) -> None:
    if on_progress is not None:
        on_progress(fraction, label)


def _display_name(name: str) -> str:
    if len(name) > _MAX_DISPLAY_NAME:
        return name[:17] + "..."
    return name


def wait_task_completed(
    client: Any,
    task_id: str,
    file_name: str,
    interval: float = DEFAULT_INTERVAL,
    on_progress: ProgressCallback | None = None,
) -> TaskResult:
    """Poll a task until it reaches 100 percent and return its results.

    Failed polls are logged and retried after the interval. Progress is
    reported only when the percentage changes.
    """
    last_percent = 0
    while True:
        try:
            status = client.get_task_status(task_id)
        except ApiError as exc:
            logger.error("获取任务状态失败: %s", exc)
            time.sleep(interval)
            continue

        percent = status.process_percent
        if percent != last_percent:
            _report(on_progress, percent / 100.0, f"{percent}%")
            last_percent = percent

        if percent >= 100:
            return TaskResult(
                file_name=file_name,
                task_id=status.task_id or task_id,
                subtitle_info=list(status.subtitle_info or []),
                speech_download_url=status.speech_download_url,
            )
        time.sleep(interval)


def process_videos(
    client: Any,
    paths: Iterable[str],
    settings: TaskSettings | None = None,
    interval: float = DEFAULT_INTERVAL,
    on_progress: ProgressCallback | None = None,
) -> list[TaskResult]:
    """Run one task per video in turn and return the results of those that ran.

    A video whose task cannot be started is logged and skipped.
    """
    settings = settings or TaskSettings()
    paths = list(paths)
    total = len(paths)
    results: list[TaskResult] = []
    for index, url in enumerate(paths):
        file_name = os.path.basename(url)
        _report(
            on_progress,
            index / total,
            f"处理: {index + 1}/{total}\n{_display_name(file_name)}",
        )
        try:
            task_id = client.start_task(settings.build_task(url))
        except ApiError as exc:
            logger.error("任务创建失败: %s", exc)
            continue
        results.append(wait_task_completed(client, task_id, file_name, interval, on_progress))
    return results


def run_single(
    client: Any,
    url: str,
    settings: TaskSettings | None = None,
    interval: float = DEFAULT_INTERVAL,
    on_progress: ProgressCallback | None = None,
) -> TaskResult:
    """Start a task for one video and wait for it to finish.

    Raises ApiError if the task cannot be started.
    """
    settings = settings or TaskSettings()
    task_id = client.start_task(settings.build_task(url))
    return wait_task_completed(client, task_id, os.path.basename(url), interval, on_progress)