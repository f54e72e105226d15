from datetime import datetime

import pytest

from krillin import tasks
from krillin.dto import SubtitleTask
from krillin.tasks import create_subtitle_task, generate_task_id, get_subtitle_task_status


def test_generate_task_id_format():
    assert generate_task_id(datetime(2024, 1, 2, 3, 4, 5)) == "task-20240102030405"


def test_generate_task_id_defaults_to_now():
    task_id = generate_task_id()
    assert task_id.startswith("task-")
    assert len(task_id) == len("task-") + 14


def test_create_makes_directory(tmp_path):
    status = create_subtitle_task(SubtitleTask(url="local:./uploads/a.mp4"), tmp_path)
    assert (tmp_path / status.task_id).is_dir()
    assert status.status == "created"
    assert status.message == "任务已创建"
    assert status.process_percent == 0


def test_status_after_create(tmp_path):
    created = create_subtitle_task(SubtitleTask(), tmp_path)
    status = get_subtitle_task_status(created.task_id)
    assert status.task_id == created.task_id
    assert status.status == "created"
    assert status.subtitle_info is None


def test_unknown_task_is_processing():
    status = get_subtitle_task_status("task-unknown")
    assert status.task_id == "task-unknown"
    assert status.process_percent == 50
    assert status.status == "processing"
    assert status.message == "正在处理中"


def test_completed_task_has_links(tmp_path):
    created = create_subtitle_task(SubtitleTask(), tmp_path)
    tasks._update_status(created.task_id, process_percent=100)
    status = get_subtitle_task_status(created.task_id)
    tid = created.task_id
    assert [r.name for r in status.subtitle_info] == ["字幕.srt", "字幕.ass"]
    assert status.subtitle_info[0].download_url == f"/tasks/{tid}/output/subtitle.srt"
    assert status.speech_download_url == f"/tasks/{tid}/output/speech.mp3"


def test_completed_task_keeps_speech_url(tmp_path):
    created = create_subtitle_task(SubtitleTask(), tmp_path)
    tasks._update_status(created.task_id, process_percent=100, speech_download_url="/x.mp3")
    assert get_subtitle_task_status(created.task_id).speech_download_url == "/x.mp3"


def test_create_fails_when_base_is_file(tmp_path):
    blocker = tmp_path / "f"
    blocker.write_text("x")
    with pytest.raises(OSError, match="创建任务目录失败"):
        create_subtitle_task(SubtitleTask(), blocker)