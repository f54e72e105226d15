import json

import pytest

from krillin.dto import (
    GetVideoSubtitleTaskResData,
    Response,
    StartVideoSubtitleTaskReq,
    StartVideoSubtitleTaskResData,
    SubtitleInfo,
    SubtitleResult,
    SubtitleTask,
    TaskStatus,
    VideoInfo,
    WordReplacement,
)


def test_subtitle_task_omits_empty_optional_fields():
    data = SubtitleTask(url="local:./uploads/a.mp4", origin_lang="en", target_lang="zh_cn").to_dict()
    assert set(data) == {
        "url", "language", "origin_lang", "target_lang", "bilingual",
        "translation_subtitle_pos", "tts", "modal_filter", "embed_subtitle_video_type",
    }
    assert data["url"] == "local:./uploads/a.mp4"


def test_subtitle_task_keeps_set_optional_fields():
    task = SubtitleTask(
        tts_voice_code=2,
        tts_voice_clone_src_file_url="/tmp/voice.wav",
        replace=["a|b"],
        vertical_major_title="Main",
        vertical_minor_title="Sub",
    )
    data = task.to_dict()
    assert data["tts_voice_code"] == 2
    assert data["replace"] == ["a|b"]
    assert data["vertical_major_title"] == "Main"
    assert data["vertical_minor_title"] == "Sub"
    assert data["tts_voice_clone_src_file_url"] == "/tmp/voice.wav"


def test_word_replacement_uses_from_key():
    replacement = WordReplacement(from_="colour", to="color")
    data = replacement.to_dict()
    assert data == {"from": "colour", "to": "color"}
    assert WordReplacement.from_dict(data) == replacement


def test_subtitle_result_round_trip():
    result = SubtitleResult(name="字幕.srt", download_url="/tasks/t1/output/subtitle.srt")
    assert SubtitleResult.from_dict(result.to_dict()) == result


def test_subtitle_result_rejects_non_object():
    with pytest.raises(ValueError):
        SubtitleResult.from_dict(["name"])


def test_task_status_nil_subtitles_serialise_as_null():
    status = TaskStatus(task_id="t1", process_percent=50, status="processing")
    data = status.to_dict()
    assert data["subtitle_info"] is None
    assert json.loads(json.dumps(data))["task_id"] == "t1"


def test_task_status_nested_results():
    result = SubtitleResult(name="a", download_url="/a")
    status = TaskStatus(task_id="t1", subtitle_info=[result])
    assert status.to_dict()["subtitle_info"] == [result.to_dict()]


def test_start_request_defaults_for_missing_fields():
    req = StartVideoSubtitleTaskReq.from_dict({"url": "local:./uploads/a.mp4", "origin_lang": "en"})
    assert req.url == "local:./uploads/a.mp4"
    assert req.origin_language == "en"
    assert req.bilingual == 0
    assert req.replace is None


def test_start_request_round_trip():
    req = StartVideoSubtitleTaskReq(
        app_id=7, url="u", origin_language="en", target_lang="zh_cn", bilingual=1,
        translation_subtitle_pos=2, modal_filter=1, tts=2, tts_voice_code=1,
        replace=["x|y"], language="zh_cn", embed_subtitle_video_type="all",
        vertical_major_title="M", vertical_minor_title="m", origin_language_word_one_line=12,
    )
    data = req.to_dict()
    assert data["origin_lang"] == "en"
    assert StartVideoSubtitleTaskReq.from_dict(data) == req


def test_start_request_null_values_keep_zero():
    req = StartVideoSubtitleTaskReq.from_dict({"url": None, "bilingual": None})
    assert req == StartVideoSubtitleTaskReq()


@pytest.mark.parametrize(
    "body",
    [
        {"bilingual": 256},
        {"bilingual": -1},
        {"tts": "1"},
        {"tts": True},
        {"url": 5},
        {"replace": "a"},
        {"replace": [1]},
        {"app_id": 1.5},
    ],
)
def test_start_request_rejects_bad_values(body):
    with pytest.raises(ValueError):
        StartVideoSubtitleTaskReq.from_dict(body)


def test_start_request_rejects_non_object():
    with pytest.raises(ValueError):
        StartVideoSubtitleTaskReq.from_dict("not an object")


def test_task_result_data_nested_serialisation():
    info = VideoInfo(title="t", language="en")
    sub = SubtitleInfo(name="s", download_url="/s")
    data = GetVideoSubtitleTaskResData(
        task_id="t1", process_percent=100, video_info=info, subtitle_info=[sub]
    ).to_dict()
    assert data["video_info"] == info.to_dict()
    assert data["subtitle_info"] == [{"name": "s", "download_url": "/s"}]
    assert data["process_percent"] == 100


def test_response_wraps_dataclass_payload():
    response = Response(error=0, msg="成功", data=StartVideoSubtitleTaskResData(task_id="t1"))
    assert response.to_dict() == {"error": 0, "msg": "成功", "data": {"task_id": "t1"}}


def test_response_with_null_and_mapping_payload():
    assert Response(error=-1, msg="参数错误").to_dict()["data"] is None
    payload = {"file_path": ["local:./uploads/a.mp4"], "info": SubtitleInfo(name="n")}
    data = Response(msg="ok", data=payload).to_dict()
    assert data["data"]["info"] == {"name": "n", "download_url": ""}
    assert json.loads(json.dumps(data)) == data