"""被动回复消息接口：/wx/reply/<appid>/...，成功时直接返回 XML。"""

import logging

from django.views.decorators.http import require_POST

from wx.services import replies as reply_service
from wx.services.client import get_mp_client
from wx.tasks import send_template_message_task

from .base import json_body, success_response, wx_api, xml_response

logger = logging.getLogger(__name__)


def _reply_view(renderer):
    @wx_api
    @require_POST
    def view(request, appid):
        xml = renderer(appid, json_body(request))
        logger.info("[WX] 回复消息XML: %s", xml)
        return xml_response(xml)

    view.__name__ = renderer.__name__
    return view


reply_text = _reply_view(reply_service.render_text)
reply_image = _reply_view(reply_service.render_image)
reply_voice = _reply_view(reply_service.render_voice)
reply_video = _reply_view(reply_service.render_video)
reply_music = _reply_view(reply_service.render_music)
reply_news = _reply_view(reply_service.render_news)
smart_reply = _reply_view(reply_service.render_smart_reply)


@wx_api
@require_POST
def reply_with_template(request, appid):
    """
    组合回复：先构造同步回复 XML，模板消息交给 Celery 异步发送，不阻塞回复。
    没有 replyMessage 时返回 JSON。
    """
    get_mp_client(appid)
    payload = json_body(request)

    reply_xml = None
    if payload.get("replyMessage"):
        reply_xml = reply_service.render_reply_message(appid, payload["replyMessage"])
        logger.info("[WX] 同步回复消息构建成功")

    template_message = payload.get("templateMessage")
    if template_message:
        try:
            send_template_message_task.delay(appid, template_message)
        except Exception:
            # 任务系统不可用时只记日志，被动回复照常返回
            logger.exception("[WX] 模板消息提交异步任务失败 appid=%s", appid)
        else:
            logger.info("[WX] 模板消息已提交异步发送 appid=%s", appid)

    if reply_xml is not None:
        return xml_response(reply_xml)
    return success_response(message="处理完成")
