"""模板消息接口：/wx/template/<appid>/..."""

from django.views.decorators.http import require_POST

from wx.services import templates as template_service

from .base import json_body, success_response, wx_api


@wx_api
@require_POST
def send(request, appid):
    data = template_service.send_template_message(appid, json_body(request))
    return success_response(message="模板消息发送成功", data=data)


@wx_api
@require_POST
def batch_send(request, appid):
    data = template_service.batch_send_template_messages(appid, json_body(request))
    return success_response(data=data)
