"""模板消息发送逻辑。"""

import logging

from wechatpy.exceptions import WeChatClientException

from .client import get_mp_client
from .exceptions import InvalidParamError, WxServiceError
from .params import require_dict, require_list, require_text

logger = logging.getLogger(__name__)


def build_template_data(data: dict, color: str | None = None) -> dict:
    """{"keyword1": "值"} -> {"keyword1": {"value": "值", "color": color}}。"""
    template_data = {}
    for key, value in data.items():
        item = {"value": value}
        if color:
            item["color"] = color
        template_data[key] = item
    return template_data


def _send(client, request: dict) -> str:
    to_user = require_text(request, "toUser")
    template_id = require_text(request, "templateId")
    data = require_dict(request, "data")
    mini_program = request.get("miniProgram")
    if mini_program is not None and not isinstance(mini_program, dict):
        raise InvalidParamError("miniProgram参数格式不正确！")

    # 注：url 建议指向 OAuth 回调地址，便于在跳转时识别用户。
    result = client.message.send_template(
        to_user,
        template_id,
        build_template_data(data, request.get("color")),
        request.get("url"),
        mini_program,
    )
    msg_id = str(result.get("msgid", "")) if isinstance(result, dict) else ""
    logger.info("[WX] 模板消息发送成功 toUser=%s templateId=%s msgId=%s", to_user, template_id, msg_id)
    return msg_id


def send_template_message(appid: str, request: dict) -> dict:
    client = get_mp_client(appid)
    if not isinstance(request, dict):
        raise InvalidParamError("模板消息格式不正确！")
    msg_id = _send(client, request)
    return {
        "msgId": msg_id,
        "toUser": request.get("toUser"),
        "templateId": request.get("templateId"),
    }


def batch_send_template_messages(appid: str, request: dict) -> dict:
    """逐条发送，单条失败不影响其它消息。"""
    client = get_mp_client(appid)
    messages = require_list(request, "messages")

    results = []
    success_count = 0
    for message in messages:
        to_user = message.get("toUser") if isinstance(message, dict) else None
        try:
            if not isinstance(message, dict):
                raise InvalidParamError("消息格式不正确！")
            msg_id = _send(client, message)
        except (WxServiceError, WeChatClientException) as exc:
            logger.warning("[WX] 批量模板消息单条失败 toUser=%s error=%s", to_user, exc)
            results.append({"success": False, "toUser": to_user, "error": str(exc)})
            continue
        success_count += 1
        results.append({"success": True, "toUser": to_user, "msgId": msg_id, "message": "发送成功"})

    return {
        "results": results,
        "total": len(messages),
        "successCount": success_count,
        "failCount": len(messages) - success_count,
    }
