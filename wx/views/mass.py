"""群发消息接口：/wx/mass/<appid>/..."""

from django.views.decorators.http import require_GET, require_http_methods, require_POST

from wx.services import mass as mass_service

from .base import json_body, success_response, wx_api


def _mass_view(sender, message):
    @wx_api
    @require_POST
    def view(request, appid):
        data = sender(appid, json_body(request))
        return success_response(message=message, data=data)

    view.__name__ = sender.__name__
    return view


send_text_by_open_ids = _mass_view(mass_service.send_text_by_open_ids, "群发文本消息已提交")
send_image_by_open_ids = _mass_view(mass_service.send_image_by_open_ids, "群发图片消息已提交")
send_news_by_open_ids = _mass_view(mass_service.send_news_by_open_ids, "群发图文消息已提交")
send_text_by_tag = _mass_view(mass_service.send_text_by_tag, "按标签群发文本消息已提交")
send_news_by_tag = _mass_view(mass_service.send_news_by_tag, "按标签群发图文消息已提交")
preview = _mass_view(mass_service.preview, "预览消息发送成功")


@wx_api
@require_GET
def status(request, appid, msg_id):
    return success_response(data=mass_service.get_status(appid, msg_id))


@wx_api
@require_http_methods(["DELETE"])
def delete(request, appid, msg_id):
    data = mass_service.delete(appid, msg_id, request.GET.get("articleIdx"))
    return success_response(message="删除群发消息成功", data=data)
