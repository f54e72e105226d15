"""HTTP client for the subtitle backend: uploads, task start, status and downloads."""

from __future__ import annotations

import os
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests

from krillin.config import Config
from krillin.dto import SubtitleResult, SubtitleTask, TaskStatus

_SWITCH_ON = 1
_SWITCH_OFF = 2


class ApiError(Exception):
    """Raised when the backend cannot be reached or reports an error."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


def bool_to_int(flag: bool) -> int:
    """Encode a switch the way the API expects: 1 for on, 2 for off."""
    if not isinstance(flag, bool):
        raise TypeError(f"expected a bool switch, got {type(flag).__name__}")
    if flag:
        return _SWITCH_ON
    return _SWITCH_OFF


@dataclass
class TaskSettings:
    """Choices the user makes before starting a subtitle task."""

    source_lang: str = "en"
    target_lang: str = "zh_cn"
    bilingual_enabled: bool = True
    bilingual_position: int = 1
    voiceover_enabled: bool = False
    voiceover_gender: int = 2
    voice_clone_audio_path: str = ""
    filler_filter: bool = True
    embed_subtitle: str = "none"
    vertical_major_title: str = ""
    vertical_minor_title: str = ""

    def build_task(self, url: str) -> SubtitleTask:
        """Return the task request for one video URL."""
        return SubtitleTask(
            url=url,
            language="zh_cn",
            origin_lang=self.source_lang,
            target_lang=self.target_lang,
            bilingual=bool_to_int(self.bilingual_enabled),
            translation_subtitle_pos=self.bilingual_position,
            tts=bool_to_int(self.voiceover_enabled),
            tts_voice_code=self.voiceover_gender,
            tts_voice_clone_src_file_url=self.voice_clone_audio_path,
            modal_filter=bool_to_int(self.filler_filter),
            embed_subtitle_video_type=self.embed_subtitle,
            vertical_major_title=self.vertical_major_title,
            vertical_minor_title=self.vertical_minor_title,
        )


class SubtitleClient:
    """Talks to the backend configured by host and port."""

    def __init__(
        self,
        config: Config | None = None,
        session: requests.Session | None = None,
        timeout: float | None = 30.0,
    ) -> None:
        config = config or Config()
        self.base_url = f"http://{config.server.host}:{config.server.port}"
        self.session = session or requests.Session()
        self.timeout = timeout

    def _envelope(self, resp: requests.Response) -> Any:
        try:
            body = resp.json()
        except ValueError as exc:
            raise ApiError(f"解析响应失败: {exc}") from exc
        if not isinstance(body, dict):
            raise ApiError(f"解析响应失败: unexpected body {body!r}")
        error = body.get("error", 0)
        if error not in (0, 200):
            raise ApiError(str(body.get("msg", "")), code=error)
        return body.get("data")

    def _file_paths(self, data: Any) -> list[str]:
        paths = data.get("file_path") if isinstance(data, dict) else None
        if isinstance(paths, str):
            return [paths]
        if paths is None:
            return []
        if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
            raise ApiError(f"解析响应失败: unexpected file_path {paths!r}")
        return list(paths)

    def upload_files(self, paths: list[str | os.PathLike[str]]) -> list[str]:
        """Upload local files in one request and return the server-side paths."""
        if not paths:
            return []
        with ExitStack() as stack:
            try:
                files = [
                    ("file", (os.path.basename(os.fspath(p)), stack.enter_context(open(p, "rb"))))
                    for p in paths
                ]
            except OSError as exc:
                raise ApiError(f"打开文件失败: {exc}") from exc
            try:
                resp = self.session.post(
                    f"{self.base_url}/api/file", files=files, timeout=self.timeout
                )
            except requests.RequestException as exc:
                raise ApiError(f"上传文件失败: {exc}") from exc
        return self._file_paths(self._envelope(resp))

    def upload_file(self, path: str | os.PathLike[str]) -> str:
        """Upload one local file and return its server-side path."""
        uploaded = self.upload_files([path])
        return uploaded[0] if uploaded else ""

    def start_task(self, task: SubtitleTask) -> str:
        """Start a subtitle task and return its id."""
        try:
            resp = self.session.post(
                f"{self.base_url}/api/capability/subtitleTask",
                json=task.to_dict(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise ApiError(f"发送任务请求失败: {exc}") from exc
        data = self._envelope(resp)
        task_id = data.get("task_id", "") if isinstance(data, dict) else ""
        if not isinstance(task_id, str):
            raise ApiError(f"解析响应失败: unexpected task_id {task_id!r}")
        return task_id

    def get_task_status(self, task_id: str) -> TaskStatus:
        """Fetch the progress and results of a task."""
        try:
            resp = self.session.get(
                f"{self.base_url}/api/capability/subtitleTask",
                params={"taskId": task_id},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise ApiError(f"获取任务状态失败: {exc}") from exc
        data = self._envelope(resp) or {}
        if not isinstance(data, dict):
            raise ApiError(f"解析响应失败: unexpected data {data!r}")
        try:
            info = data.get("subtitle_info")
            results = [SubtitleResult.from_dict(item) for item in info] if info else []
        except (TypeError, ValueError) as exc:
            raise ApiError(f"解析响应失败: {exc}") from exc
        percent = data.get("process_percent") or 0
        if isinstance(percent, bool) or not isinstance(percent, int):
            raise ApiError(f"解析响应失败: unexpected process_percent {percent!r}")
        return TaskStatus(
            task_id=data.get("task_id") or "",
            process_percent=percent,
            subtitle_info=results,
            speech_download_url=data.get("speech_download_url") or "",
        )

    def download(self, url: str, dest: str | os.PathLike[str]) -> Path:
        """Download a server path to a local file and return the file's path."""
        try:
            resp = self.session.get(self.base_url + url, stream=True, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ApiError(f"下载失败: {exc}") from exc
        target = Path(dest)
        try:
            with resp, target.open("wb") as handle:
                for chunk in resp.iter_content(chunk_size=64 * 1024):
                    handle.write(chunk)
        except (OSError, requests.RequestException) as exc:
            raise ApiError(f"保存文件失败: {exc}") from exc
        return target