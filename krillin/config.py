"""Application configuration: defaults, TOML persistence and validation."""

from __future__ import annotations

import dataclasses
import logging
import sys
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import ParseResult, urlparse

import tomli_w

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config") / "config.toml"

FASTERWHISPER_MODELS = ("tiny", "medium", "large-v2")

_INT = "int"
_STR = "str"


class ConfigError(Exception):
    """Raised when configuration is malformed or incomplete."""


def _opt(kind: str, default: Any) -> Any:
    return field(default=default, metadata={"kind": kind})


def _section(cls: type) -> Any:
    return field(default_factory=cls, metadata={"section": cls})


@dataclass
class AppConfig:
    segment_duration: int = _opt(_INT, 5)
    transcribe_parallel_num: int = _opt(_INT, 10)
    translate_parallel_num: int = _opt(_INT, 5)
    transcribe_max_attempts: int = _opt(_INT, 3)
    translate_max_attempts: int = _opt(_INT, 3)
    proxy: str = _opt(_STR, "")
    transcribe_provider: str = _opt(_STR, "openai")
    llm_provider: str = _opt(_STR, "openai")
    parsed_proxy: ParseResult | None = field(
        default=None, compare=False, repr=False, metadata={"persist": False}
    )


@dataclass
class ServerConfig:
    host: str = _opt(_STR, "127.0.0.1")
    port: int = _opt(_INT, 8888)


@dataclass
class LocalModelConfig:
    fasterwhisper: str = _opt(_STR, "large-v2")
    whisperkit: str = _opt(_STR, "large-v2")
    whispercpp: str = _opt(_STR, "large-v2")


@dataclass
class WhisperConfig:
    base_url: str = _opt(_STR, "")
    api_key: str = _opt(_STR, "")


@dataclass
class OpenAIConfig:
    base_url: str = _opt(_STR, "")
    model: str = _opt(_STR, "")
    api_key: str = _opt(_STR, "")
    whisper: WhisperConfig = _section(WhisperConfig)


@dataclass
class AliyunOssConfig:
    access_key_id: str = _opt(_STR, "")
    access_key_secret: str = _opt(_STR, "")
    bucket: str = _opt(_STR, "")


@dataclass
class AliyunSpeechConfig:
    access_key_id: str = _opt(_STR, "")
    access_key_secret: str = _opt(_STR, "")
    app_key: str = _opt(_STR, "")


@dataclass
class AliyunBailianConfig:
    api_key: str = _opt(_STR, "")


@dataclass
class AliyunConfig:
    oss: AliyunOssConfig = _section(AliyunOssConfig)
    speech: AliyunSpeechConfig = _section(AliyunSpeechConfig)
    bailian: AliyunBailianConfig = _section(AliyunBailianConfig)


@dataclass
class Config:
    app: AppConfig = _section(AppConfig)
    server: ServerConfig = _section(ServerConfig)
    local_model: LocalModelConfig = _section(LocalModelConfig)
    openai: OpenAIConfig = _section(OpenAIConfig)
    aliyun: AliyunConfig = _section(AliyunConfig)

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted fields as nested dictionaries."""
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        """Build a configuration from nested dictionaries, over the defaults.

        Unknown keys are ignored; values of the wrong type raise ConfigError.
        """
        return _from_dict(cls, data, "")


def _persisted(obj_or_cls: Any) -> list[dataclasses.Field]:
    return [f for f in dataclasses.fields(obj_or_cls) if f.metadata.get("persist", True)]


def _to_dict(obj: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in _persisted(obj):
        value = getattr(obj, f.name)
        out[f.name] = _to_dict(value) if "section" in f.metadata else value
    return out


def _from_dict(cls: type, data: Any, where: str) -> Any:
    if not isinstance(data, dict):
        raise ConfigError(f"{where or 'config'}: expected a table")
    instance = cls()
    for f in _persisted(cls):
        if f.name not in data:
            continue
        value = data[f.name]
        key = f"{where}.{f.name}" if where else f.name
        if "section" in f.metadata:
            value = _from_dict(f.metadata["section"], value, key)
        elif f.metadata["kind"] == _INT:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{key}: expected an integer, got {value!r}")
        elif not isinstance(value, str):
            raise ConfigError(f"{key}: expected a string, got {value!r}")
        setattr(instance, f.name, value)
    return instance


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> Config:
    """Load the configuration file, or return defaults if it is absent or unreadable."""
    path = Path(path)
    if not path.exists():
        return Config()
    logger.info("已找到配置文件，从配置文件中加载配置")
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
        return Config.from_dict(data)
    except (tomllib.TOMLDecodeError, ConfigError, OSError) as exc:
        logger.error("加载配置文件失败: %s", exc)
        return Config()


def save_config(config: Config, path: str | Path = DEFAULT_CONFIG_PATH) -> None:
    """Write the configuration as TOML, creating the directory if needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomli_w.dumps(config.to_dict()), encoding="utf-8")


def _os_name(platform: str) -> str:
    if platform in ("win32", "cygwin", "windows"):
        return "windows"
    if platform.startswith("linux"):
        return "linux"
    return platform


def validate_config(config: Config, platform: str | None = None) -> None:
    """Check that the selected providers have what they need."""
    os_name = _os_name(platform or sys.platform)
    app = config.app
    local = config.local_model

    match app.transcribe_provider:
        case "openai":
            if not config.openai.whisper.api_key:
                raise ConfigError("使用OpenAI转写服务需要配置 OpenAI API Key")
        case "fasterwhisper":
            if local.fasterwhisper not in FASTERWHISPER_MODELS:
                raise ConfigError("检测到开启了fasterwhisper，但模型选型配置不正确，请检查配置")
        case "whisperkit":
            if os_name != "darwin":
                logger.error("whisperkit只支持macos, 当前系统: %s", os_name)
                raise ConfigError("whisperkit只支持macos")
            if local.whisperkit != "large-v2":
                raise ConfigError("检测到开启了whisperkit，但模型选型配置不正确，请检查配置")
        case "whispercpp":
            if os_name != "windows":
                logger.error("whispercpp only support windows, current os: %s", os_name)
                raise ConfigError("whispercpp only support windows")
            if local.whispercpp != "large-v2":
                raise ConfigError("检测到开启了whisper.cpp，但模型选型配置不正确，请检查配置")
        case "aliyun":
            speech = config.aliyun.speech
            if not (speech.access_key_id and speech.access_key_secret and speech.app_key):
                raise ConfigError("使用阿里云语音服务需要配置相关密钥")
        case _:
            raise ConfigError("不支持的转录提供商")

    match app.llm_provider:
        case "openai":
            if not config.openai.api_key:
                raise ConfigError("使用OpenAI LLM服务需要配置 OpenAI API Key")
        case "aliyun":
            if not config.aliyun.bailian.api_key:
                raise ConfigError("使用阿里云百炼服务需要配置 API Key")
        case _:
            raise ConfigError("不支持的LLM提供商")


def check_config(config: Config, platform: str | None = None) -> ParseResult:
    """Parse the proxy address, validate the configuration and return the parsed proxy."""
    try:
        parsed = urlparse(config.app.proxy)
    except ValueError as exc:
        raise ConfigError(f"invalid proxy address: {exc}") from exc
    config.app.parsed_proxy = parsed
    validate_config(config, platform)
    return parsed


def ensure_providers(config: Config, path: str | Path = DEFAULT_CONFIG_PATH) -> Config:
    """Make sure both providers are set; if either is missing, default them and save."""
    if not config.app.transcribe_provider or not config.app.llm_provider:
        config.app.transcribe_provider = "openai"
        config.app.llm_provider = "openai"
        save_config(config, path)
    return config