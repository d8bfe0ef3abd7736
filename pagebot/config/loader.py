"""模块说明：loader。"""

import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

from pagebot.config.schema import Config

# 旧版扁平 config.json 的键 -> messenger 段中的字段
_LEGACY_MESSENGER_KEYS = {
    "PAGE_ACCESS_TOKEN": "pageAccessToken",
    "VERIFY_TOKEN": "verifyToken",
    "admin": "adminId",
}


def get_config_path() -> Path:
    """函数说明：get_config_path。"""
    return Path.home() / ".pagebot" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """读取 JSON 配置；文件不存在或格式错误时回退到默认配置（此时读取 PAGEBOT_ 环境变量）。"""
    path = config_path or get_config_path()
    config = None

    if path.exists():
        try:
            with open(path) as f:
                data = json.load(f)
            data = _migrate_config(data)
            config = Config.model_validate(convert_keys(data))
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            logger.warning("Using default configuration.")

    if config is None:
        config = Config()

    # 托管平台通常只注入 PORT
    port = os.environ.get("PORT")
    if port and port.isdigit():
        config.gateway.port = int(port)

    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """函数说明：save_config。"""
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = convert_to_camel(config.model_dump())

    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def _migrate_config(data: dict) -> dict:
    """把旧版扁平键（PAGE_ACCESS_TOKEN / VERIFY_TOKEN / admin）迁移到 messenger 段。"""
    if not isinstance(data, dict):
        raise ValueError("config root must be a JSON object")

    messenger = data.setdefault("messenger", {})
    if not isinstance(messenger, dict):
        raise ValueError("messenger section must be a JSON object")
    for legacy_key, new_key in _LEGACY_MESSENGER_KEYS.items():
        if legacy_key in data:
            value = data.pop(legacy_key)
            messenger.setdefault(new_key, str(value))
    return data


def convert_keys(data: Any) -> Any:
    """函数说明：convert_keys。"""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """函数说明：convert_to_camel。"""
    if isinstance(data, dict):
        return {snake_to_camel(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    """函数说明：camel_to_snake。"""
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)


def snake_to_camel(name: str) -> str:
    """函数说明：snake_to_camel。"""
    components = name.split("_")
    return components[0] + "".join(x.title() for x in components[1:])
