"""Creation and status tracking of subtitle tasks."""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any

from krillin.dto import SubtitleResult, SubtitleTask, TaskStatus

_lock = threading.Lock()
_statuses: dict[str, TaskStatus] = {}


def generate_task_id(now: datetime | None = None) -> str:
    """Return a task id built from the given (or current) time."""
    now = now or datetime.now()
    return "task-" + now.strftime("%Y%m%d%H%M%S")


def create_subtitle_task(task: SubtitleTask, base_dir: str | Path = "tasks") -> TaskStatus:
    """Create the task directory and register the task as created."""
    task_id = generate_task_id()
    try:
        (Path(base_dir) / task_id).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OSError(f"创建任务目录失败: {exc}") from exc
    status = TaskStatus(task_id=task_id, process_percent=0, status="created", message="任务已创建")
    with _lock:
        _statuses[task_id] = replace(status)
    return status


def _update_status(task_id: str, **changes: Any) -> None:
    with _lock:
        current = _statuses.get(task_id) or _processing(task_id)
        _statuses[task_id] = replace(current, **changes)


def _processing(task_id: str) -> TaskStatus:
    return TaskStatus(task_id=task_id, process_percent=50, status="processing", message="正在处理中")


def get_subtitle_task_status(task_id: str) -> TaskStatus:
    """Return the task status, with download links once the task is complete."""
    with _lock:
        stored = _statuses.get(task_id)
    status = replace(stored) if stored is not None else _processing(task_id)
    if status.process_percent >= 100:
        status.subtitle_info = [
            SubtitleResult(name="字幕.srt", download_url=f"/tasks/{task_id}/output/subtitle.srt"),
            SubtitleResult(name="字幕.ass", download_url=f"/tasks/{task_id}/output/subtitle.ass"),
        ]
        if not status.speech_download_url:
            status.speech_download_url = f"/tasks/{task_id}/output/speech.mp3"
    return status