# krillin

krillin holds the client-side pieces of a video subtitle translation and
dubbing service. It includes:

- the application configuration, with TOML persistence and validation
- the JSON records that the backend API exchanges
- an HTTP client for uploading videos, starting tasks, polling them and
  downloading results
- helpers that run one or many tasks to completion
- an in-process task registry
- the colour and size scheme used by the desktop client

## Install

    pip install .

To run the tests too:

    pip install ".[test]"
    pytest

## Configuration (`krillin.config`)

The default file location is `config/config.toml`, relative to the working
directory. When that file is missing or cannot be read, `load_config` returns
the built-in defaults:

    [app]
    segment_duration = 5
    transcribe_parallel_num = 10
    translate_parallel_num = 5
    transcribe_max_attempts = 3
    translate_max_attempts = 3
    proxy = ""
    transcribe_provider = "openai"   # openai, fasterwhisper, whisperkit, whispercpp, aliyun
    llm_provider = "openai"          # openai, aliyun

    [server]
    host = "127.0.0.1"
    port = 8888

    [local_model]
    fasterwhisper = "large-v2"       # tiny, medium, large-v2
    whisperkit = "large-v2"
    whispercpp = "large-v2"

    [openai]
    base_url = ""
    model = ""
    api_key = "placeholder"

    [openai.whisper]
    base_url = ""
    api_key = "placeholder"

    [aliyun.oss]
    access_key_id = ""
    access_key_secret = "placeholder"
    bucket = ""

    [aliyun.speech]
    access_key_id = ""
    access_key_secret = "placeholder"
    app_key = "placeholder"

    [aliyun.bailian]
    api_key = "placeholder"

Example:

    from krillin.config import load_config, check_config, save_config, ensure_providers

    config = load_config("config/config.toml")
    ensure_providers(config, "config/config.toml")  # fills in empty providers and saves
    proxy = check_config(config)                    # raises ConfigError on a bad setup
    save_config(config, "config/config.toml")

- `check_config` parses `app.proxy`, stores the result in
  `config.app.parsed_proxy`, and then calls `validate_config`.
- `validate_config` checks that the selected transcription and LLM providers
  have the credentials or model names they need.
- The `whisperkit` provider is accepted only on macOS, and `whispercpp` only
  on Windows. You can pass `platform` to check against a platform other than
  the current one.
- `Config.to_dict` and `Config.from_dict` convert a configuration to and from
  nested dictionaries. `from_dict` ignores unknown keys and raises
  `ConfigError` on values of the wrong type.

## API records (`krillin.dto`)

These dataclasses mirror the backend's JSON:

- `SubtitleTask`
- `SubtitleResult`
- `TaskStatus`
- `StartVideoSubtitleTaskReq`
- `StartVideoSubtitleTaskResData`
- `VideoInfo`
- `SubtitleInfo`
- `GetVideoSubtitleTaskResData`
- `WordReplacement`
- `Response`, the `{"error": ..., "msg": ..., "data": ...}` envelope

Each record has a `to_dict()`. Some also have a `from_dict()`, which validates
field types and integer ranges and raises `ValueError` on bad input.

## Client (`krillin.client`)

    from krillin.config import load_config
    from krillin.client import SubtitleClient, TaskSettings
    from krillin.batch import process_videos

    client = SubtitleClient(load_config())          # uses [server] host and port
    urls = client.upload_files(["a.mp4", "b.mp4"])
    settings = TaskSettings(source_lang="en", target_lang="zh_cn")
    for result in process_videos(client, urls, settings):
        print(result.file_name, result.task_id, result.subtitle_info)

`SubtitleClient` uses these backend routes:

| Method | Route |
| --- | --- |
| `upload_files` / `upload_file` | `POST /api/file` |
| `start_task` | `POST /api/capability/subtitleTask` |
| `get_task_status` | `GET /api/capability/subtitleTask?taskId=...` |
| `download` | `GET <server path>`, saved to a local file |

A failed request raises `ApiError`. So does a reply whose `error` is neither
0 nor 200.

`TaskSettings.build_task(url)` turns the user's choices into a
`SubtitleTask`. On/off switches are encoded by `bool_to_int` as 1 for on and
2 for off.

## Running tasks (`krillin.batch`)

- `run_single(client, url, settings)` starts one task and waits for it to
  finish.
- `process_videos(client, paths, settings)` runs the tasks one after another.
  A video whose task cannot be started is logged and skipped.
- `wait_task_completed(client, task_id, file_name)` polls a task that is
  already running until it reaches 100 percent. It retries failed polls after
  each interval.

All three take an `interval` and an optional `on_progress(fraction, label)`
callback, and return `TaskResult` objects. `output_tip(task_id)` gives the
hint that points at a task's output directory.

## Uploaded files (`krillin.files`)

`FileManager` keeps the server-side paths of uploaded files in order. It
provides `upload`, `upload_many`, `file_count`, `file_name(index)` and
`download(index, dest)`. If no client is given, it talks to
`localhost:8888`.

## Task registry (`krillin.tasks`)

- `create_subtitle_task(task, base_dir)` creates `base_dir/<task id>` and
  records the task as `created`.
- `generate_task_id` builds ids of the form `task-YYYYmmddHHMMSS`.
- `get_subtitle_task_status(task_id)` returns the stored status. A task it
  does not know is reported as `processing` at 50 percent. Once a task is at
  100 percent, the status carries links to `subtitle.srt`, `subtitle.ass` and
  `speech.mp3`.

## Theme (`krillin.theme`)

`CustomTheme(force_dark=False, base=None)` returns a light or dark `Color`
for names such as `"primary"`, `"background"` or `"error"`, and sizes for
names such as `"padding"` or `"text"`. Names it does not know go to the
`base` theme. Without a base, they raise `KeyError`.

## What this package does not do

- It has no HTTP server. The client needs a running backend that serves the
  routes listed above.
- It has no command-line program and no desktop screens.
- The task registry records tasks and reports their status, but it does no
  processing itself: no downloading, transcription, translation, dubbing or
  subtitle embedding.