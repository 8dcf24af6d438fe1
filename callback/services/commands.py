"""
回调消息中的指令处理。

指令只对配置的 WX_ID 生效，命中后调用下游接口（天气文本 / 发送图片）。
出站请求和回复内容都做短时去重，避免回调重推导致下游重复发送。
"""

from __future__ import annotations

import json
import logging
from typing import Callable

from django.conf import settings

from . import dedup
from .http_client import HttpClientError, get_http_client
from .payload import extract_content, extract_path, extract_wx_id

logger = logging.getLogger(__name__)

WEATHER_COMMAND = "#指令-天气"
IMAGE_COMMAND = "#指令-图片"

WEATHER_MSG_TYPE = 7
IMAGE_MSG_TYPE = 8

DEDUP_SKIPPED = "dedup_skipped"


def _config() -> dict:
    return settings.MSG_CALLBACK


def _to_json(data: dict) -> str:
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def _post(request_body: str) -> str:
    url = _config()["API_URL"]
    return get_http_client().post_bytes(url, request_body).decode("utf-8", errors="replace")


def matches(data: dict | None, command: str) -> bool:
    if not data:
        return False
    wx_id = extract_wx_id(data)
    if wx_id != _config()["WX_ID"]:
        return False
    content = extract_content(data)
    return bool(content) and command in content


def run_weather(data: dict) -> str:
    wx_id = extract_wx_id(data)
    message = _config()["WEATHER_MESSAGE"]
    request_body = _to_json({"type": WEATHER_MSG_TYPE, "wx_id": wx_id, "msg": message})

    if dedup.get_cache(dedup.OUTBOUND_REQUEST).is_duplicate(dedup.sha256_hex(request_body)):
        logger.info("[MSG] 天气请求去重命中 wx_id=%s", wx_id)
        return DEDUP_SKIPPED
    if dedup.get_cache(dedup.RESPONSE_MSG).is_duplicate(dedup.sha256_hex(message)):
        logger.info("[MSG] 天气回复内容去重命中 wx_id=%s", wx_id)
        return DEDUP_SKIPPED

    return _post(request_body)


def run_image(data: dict) -> str:
    wx_id = extract_wx_id(data)
    path = extract_path(data, IMAGE_COMMAND) or _config()["DEFAULT_IMAGE_PATH"]
    request_body = _to_json({"type": IMAGE_MSG_TYPE, "wx_id": wx_id, "path": path})

    if dedup.get_cache(dedup.OUTBOUND_REQUEST).is_duplicate(dedup.sha256_hex(request_body)):
        logger.info("[MSG] 图片请求去重命中 wx_id=%s path=%s", wx_id, path)
        return DEDUP_SKIPPED

    return _post(request_body)


COMMAND_HANDLERS: dict[str, Callable[[dict], str]] = {
    WEATHER_COMMAND: run_weather,
    IMAGE_COMMAND: run_image,
}


def dispatch(data: dict | None) -> dict[str, str]:
    """
    依次执行所有命中的指令，返回 {指令: 下游响应}。
    单个指令失败只记日志，不影响其它指令和回调应答。
    """
    results = {}
    for command, handler in COMMAND_HANDLERS.items():
        if not matches(data, command):
            continue
        logger.info("[MSG] 命中指令 %s", command)
        try:
            response = handler(data)
        except HttpClientError as exc:
            logger.error("[MSG] 指令执行失败 %s: %s", command, exc)
            continue
        except Exception:
            logger.exception("[MSG] 指令执行异常 %s", command)
            continue
        logger.info("[MSG] 指令 %s 下游响应: %s", command, response)
        results[command] = response
    return results
