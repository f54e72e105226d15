"""Request, response and task records exchanged with the backend API."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any


def _json(key: str | None = None, *, omitempty: bool = False, kind: str = "", bits: int = 0,
          default: Any = None, factory: Any = None) -> Any:
    metadata = {"json": key, "omitempty": omitempty, "kind": kind, "bits": bits}
    if factory is not None:
        return field(default_factory=factory, metadata=metadata)
    return field(default=default, metadata=metadata)


def _key(f: Any) -> str:
    return f.metadata.get("json") or f.name


def _jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        to_dict = getattr(value, "to_dict", None)
        return to_dict() if callable(to_dict) else _encode(value)
    if isinstance(value, Mapping):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _encode(obj: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if f.metadata.get("omitempty") and not value:
            continue
        out[_key(f)] = _jsonable(value)
    return out


def _coerce(f: Any, key: str, raw: Any) -> Any:
    kind = f.metadata["kind"]
    if kind == "str":
        if not isinstance(raw, str):
            raise ValueError(f"{key}: expected a string, got {raw!r}")
        return raw
    if kind in ("uint", "int"):
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise ValueError(f"{key}: expected an integer, got {raw!r}")
        bits = f.metadata["bits"]
        low, high = (0, 2**bits - 1) if kind == "uint" else (-(2 ** (bits - 1)), 2 ** (bits - 1) - 1)
        if not low <= raw <= high:
            raise ValueError(f"{key}: {raw} out of range")
        return raw
    if kind == "strlist":
        if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
            raise ValueError(f"{key}: expected a list of strings, got {raw!r}")
        return list(raw)
    raise ValueError(f"{key}: unsupported field")


def _decode(cls: type, data: Any) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError("expected a JSON object")
    values = {}
    for f in fields(cls):
        key = _key(f)
        raw = data.get(key)
        if raw is None:
            continue
        values[f.name] = _coerce(f, key, raw)
    return cls(**values)


@dataclass
class WordReplacement:
    from_: str = _json("from", kind="str", default="")
    to: str = _json(kind="str", default="")

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)

    @classmethod
    def from_dict(cls, data: Any) -> WordReplacement:
        return _decode(cls, data)


@dataclass
class SubtitleTask:
    """Settings sent by the client to start a subtitle task."""

    url: str = _json(default="")
    language: str = _json(default="")
    origin_lang: str = _json(default="")
    target_lang: str = _json(default="")
    bilingual: int = _json(default=0)
    translation_subtitle_pos: int = _json(default=0)
    tts: int = _json(default=0)
    tts_voice_code: int = _json(omitempty=True, default=0)
    tts_voice_clone_src_file_url: str = _json(omitempty=True, default="")
    modal_filter: int = _json(default=0)
    replace: list[str] | None = _json(omitempty=True, default=None)
    embed_subtitle_video_type: str = _json(default="")
    vertical_major_title: str = _json(omitempty=True, default="")
    vertical_minor_title: str = _json(omitempty=True, default="")

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)


@dataclass
class SubtitleResult:
    name: str = _json(kind="str", default="")
    download_url: str = _json(kind="str", default="")

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)

    @classmethod
    def from_dict(cls, data: Any) -> SubtitleResult:
        return _decode(cls, data)


@dataclass
class TaskStatus:
    task_id: str = _json(default="")
    process_percent: int = _json(default=0)
    status: str = _json(default="")
    message: str = _json(default="")
    subtitle_info: list[SubtitleResult] | None = _json(default=None)
    speech_download_url: str = _json(default="")

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)


@dataclass
class StartVideoSubtitleTaskReq:
    """Body of a request that starts a subtitle task."""

    app_id: int = _json(kind="uint", bits=32, default=0)
    url: str = _json(kind="str", default="")
    origin_language: str = _json("origin_lang", kind="str", default="")
    target_lang: str = _json(kind="str", default="")
    bilingual: int = _json(kind="uint", bits=8, default=0)
    translation_subtitle_pos: int = _json(kind="uint", bits=8, default=0)
    modal_filter: int = _json(kind="uint", bits=8, default=0)
    tts: int = _json(kind="uint", bits=8, default=0)
    tts_voice_code: int = _json(kind="uint", bits=8, default=0)
    tts_voice_clone_src_file_url: str = _json(kind="str", default="")
    replace: list[str] | None = _json(kind="strlist", default=None)
    language: str = _json(kind="str", default="")
    embed_subtitle_video_type: str = _json(kind="str", default="")
    vertical_major_title: str = _json(kind="str", default="")
    vertical_minor_title: str = _json(kind="str", default="")
    origin_language_word_one_line: int = _json(kind="int", bits=64, default=0)

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)

    @classmethod
    def from_dict(cls, data: Any) -> StartVideoSubtitleTaskReq:
        """Decode a JSON object; missing or null fields keep their zero value.

        Raises ValueError on a non-object body, a wrong type or an out-of-range number.
        """
        return _decode(cls, data)


@dataclass
class StartVideoSubtitleTaskResData:
    task_id: str = _json(default="")

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)


@dataclass
class VideoInfo:
    title: str = _json(default="")
    description: str = _json(default="")
    translated_title: str = _json(default="")
    translated_description: str = _json(default="")
    language: str = _json(default="")

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)


@dataclass
class SubtitleInfo:
    name: str = _json(default="")
    download_url: str = _json(default="")

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)


@dataclass
class GetVideoSubtitleTaskResData:
    task_id: str = _json(default="")
    process_percent: int = _json(default=0)
    video_info: VideoInfo | None = _json(default=None)
    subtitle_info: list[SubtitleInfo] | None = _json(default=None)
    target_language: str = _json(default="")
    speech_download_url: str = _json(default="")

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)


@dataclass
class Response:
    """Envelope of every API reply: error code, message and payload."""

    error: int = _json(default=0)
    msg: str = _json(default="")
    data: Any = _json(default=None)

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)