"""
视图公共部分：JSON 请求解析、统一返回结构与异常映射。

返回结构：
- 成功：{"success": true, "message": ..., "data": ...}
- 失败：{"success": false, "error": "..."}
"""

import json
import logging
from functools import wraps
from typing import Callable

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from wechatpy.exceptions import (
    InvalidAppIdException,
    InvalidSignatureException,
    WeChatClientException,
)

from wx.services.exceptions import (
    AppConfigNotFoundError,
    InvalidParamError,
    UserCheckError,
)

logger = logging.getLogger(__name__)

ViewFunc = Callable[..., HttpResponse]

_JSON_PARAMS = {"ensure_ascii": False}


def success_response(message: str | None = None, data=None, **extra) -> JsonResponse:
    payload = {"success": True}
    if message is not None:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    payload.update(extra)
    return JsonResponse(payload, json_dumps_params=_JSON_PARAMS)


def error_response(error: str, status: int = 400) -> JsonResponse:
    return JsonResponse({"success": False, "error": error}, status=status, json_dumps_params=_JSON_PARAMS)


def xml_response(xml: str) -> HttpResponse:
    return HttpResponse(xml, content_type="application/xml; charset=utf-8")


def json_body(request: HttpRequest) -> dict:
    """解析 JSON 请求体；空 body 视为 {}，非对象直接判为参数错误。"""
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (TypeError, ValueError):
        raise InvalidParamError("请求体不是合法的JSON！")
    if not isinstance(data, dict):
        raise InvalidParamError("请求体必须是JSON对象！")
    return data


def wx_api(view_func: ViewFunc) -> ViewFunc:
    """
    免 CSRF（供外部系统调用），并把服务层异常转换为统一的 JSON 错误：
    参数/配置错误 400，用户校验失败 403，微信接口错误 502，其它 500。
    """

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except (InvalidParamError, AppConfigNotFoundError) as exc:
            logger.warning("[WX] %s 参数错误: %s", request.path, exc)
            return error_response(str(exc), status=400)
        except (UserCheckError, InvalidAppIdException, InvalidSignatureException) as exc:
            logger.warning("[WX] %s 用户校验失败: %s", request.path, exc)
            return error_response(str(exc), status=403)
        except WeChatClientException as exc:
            logger.error("[WX] %s 微信接口调用失败: %s", request.path, exc)
            return error_response(str(exc), status=502)
        except Exception as exc:
            logger.exception("[WX] %s 处理异常: %s", request.path, exc)
            return error_response(str(exc), status=500)

    return csrf_exempt(wrapper)
