import logging

from celery import shared_task
from wechatpy.exceptions import WeChatClientException

from wx.services.exceptions import WxServiceError
from wx.services.templates import send_template_message

logger = logging.getLogger(__name__)


@shared_task(name="wx.send_template_message")
def send_template_message_task(appid: str, request: dict) -> str | None:
    """异步发送模板消息，失败只记日志（被动回复不能等待它）。"""
    try:
        data = send_template_message(appid, request)
    except (WxServiceError, WeChatClientException) as exc:
        logger.error("[WX] 异步发送模板消息失败 appid=%s error=%s", appid, exc)
        return None
    return data["msgId"]
