"""
回调请求体 / 请求头的解析与脱敏工具。

回调 body 不保证是 JSON，所有解析函数对非 JSON 输入返回 None，不抛异常。
"""

from __future__ import annotations

import json

SENSITIVE_HEADER_MARKERS = ("authorization", "cookie", "token")
HEADER_VALUE_LIMIT = 512

CONTENT_KEYS = ("content", "msg", "message")
CHALLENGE_KEYS = ("echostr", "challenge")
WX_ID_KEYS = ("wx_id", "wxId", "wxid")
PATH_KEYS = ("path", "file", "filePath")
TASK_ID_KEYS = ("task_id", "taskId", "submit_id", "submitId", "history_id", "historyId")
STATUS_KEYS = ("status", "state")
TYPE_KEYS = ("type", "event", "action")


def is_blank(value) -> bool:
    return value is None or not str(value).strip()


def first_non_blank(*values):
    for value in values:
        if not is_blank(value):
            return value
    return None


def truncate(text: str | None, max_len: int) -> str | None:
    if text is None:
        return None
    if max_len <= 0:
        return ""
    if len(text) <= max_len:
        return text
    return f"{text[:max_len]}...(truncated,{len(text)})"


def sanitize_headers(headers) -> dict:
    """token / cookie / authorization 类请求头打码，其它值截断。"""
    if not headers:
        return {}
    safe = {}
    for key, value in headers.items():
        if key is None:
            continue
        if any(marker in key.lower() for marker in SENSITIVE_HEADER_MARKERS):
            safe[key] = "***"
        else:
            safe[key] = truncate(value, HEADER_VALUE_LIMIT)
    return safe


def parse_json_object(body: str | None) -> dict | None:
    if is_blank(body):
        return None
    try:
        data = json.loads(body)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def get_text(data: dict | None, key: str) -> str | None:
    """按字符串读取 JSON 字段；数字等标量转成字符串，对象 / 数组序列化为 JSON。"""
    if not data:
        return None
    value = data.get(key)
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def first_field(data: dict | None, keys) -> str | None:
    return first_non_blank(*(get_text(data, key) for key in keys))


def extract_content(data: dict | None) -> str | None:
    return first_field(data, CONTENT_KEYS)


def extract_wx_id(data: dict | None) -> str | None:
    return first_field(data, WX_ID_KEYS)


def extract_challenge(data: dict | None, params: dict) -> str | None:
    """query / form 参数优先，其次 JSON body。"""
    by_param = first_non_blank(*(params.get(key) for key in CHALLENGE_KEYS))
    if by_param:
        return by_param
    return first_field(data, CHALLENGE_KEYS)


def extract_hints(data: dict | None) -> tuple[str | None, str | None, str | None]:
    """(task_id, status, type)，仅用于日志定位。"""
    return (
        first_field(data, TASK_ID_KEYS),
        first_field(data, STATUS_KEYS),
        first_field(data, TYPE_KEYS),
    )


def extract_path(data: dict | None, command: str) -> str | None:
    """
    优先读取 path / file / filePath；否则从 content 中解析 "<command> <path>"，
    支持 "<command>:xxx"、"<command>=xxx"、"<command> xxx"。
    """
    if not data:
        return None
    path = first_field(data, PATH_KEYS)
    if path:
        return path.strip()
    content = extract_content(data)
    if not content or command not in content:
        return None
    after = content.split(command, 1)[1].strip()
    after = after.lstrip(":= \t\r\n")
    return after or None
