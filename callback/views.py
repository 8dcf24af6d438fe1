"""
通用 webhook 回调入口 /msg。

GET 用于握手校验，POST 接收推送：记录请求、内容去重、执行指令，
最后回显 echostr / challenge（没有则返回 ok）。
"""

import json
import logging

from django.conf import settings
from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from callback.services import commands, dedup
from callback.services.payload import (
    extract_challenge,
    extract_content,
    extract_hints,
    parse_json_object,
    sanitize_headers,
    truncate,
)

logger = logging.getLogger(__name__)

DEFAULT_ANSWER = "ok"


def _text_response(text: str) -> HttpResponse:
    return HttpResponse(text, content_type="text/plain; charset=utf-8")


def _dumps(data) -> str:
    return json.dumps(data, ensure_ascii=False)


def _params(request: HttpRequest) -> dict:
    params = request.GET.dict()
    if request.method == "POST":
        params.update(request.POST.dict())
    return params


def _handshake(request: HttpRequest) -> HttpResponse:
    params = _params(request)
    logger.info(
        "[MSG] GET 回调 remote=%s params=%s headers=%s",
        request.META.get("REMOTE_ADDR"),
        _dumps(params),
        _dumps(sanitize_headers(request.headers)),
    )
    return _text_response(extract_challenge(None, params) or DEFAULT_ANSWER)


def _receive(request: HttpRequest) -> HttpResponse:
    # 先读原始 body，之后 request.POST 会基于已缓存的 body 解析
    body = request.body.decode(request.encoding or "utf-8", errors="replace")
    params = _params(request)
    body_limit = int(settings.MSG_CALLBACK.get("BODY_LOG_LIMIT", 10_000))

    logger.info(
        "[MSG] POST 回调 remote=%s contentType=%s userAgent=%s params=%s headers=%s",
        request.META.get("REMOTE_ADDR"),
        request.content_type,
        request.headers.get("User-Agent"),
        _dumps(params),
        _dumps(sanitize_headers(request.headers)),
    )
    logger.info("[MSG] POST body=%s", truncate(body, body_limit))

    data = parse_json_object(body)
    if data is not None:
        task_id, status, msg_type = extract_hints(data)
        logger.info("[MSG] 关键信息 taskId=%s status=%s type=%s", task_id, status, msg_type)

    answer = extract_challenge(data, params) or DEFAULT_ANSWER

    content = extract_content(data)
    if content and dedup.get_cache(dedup.REQUEST_CONTENT).is_duplicate(dedup.sha256_hex(content)):
        logger.info("[MSG] 回调内容去重命中，跳过指令处理")
        return _text_response(answer)

    commands.dispatch(data)
    return _text_response(answer)


@csrf_exempt
@require_http_methods(["GET", "POST"])
def msg_callback(request: HttpRequest) -> HttpResponse:
    if request.method == "GET":
        return _handshake(request)
    return _receive(request)
