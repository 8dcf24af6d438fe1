"""客服消息接口：/wx/kefu/<appid>/..."""

from django.views.decorators.http import require_POST

from wx.services import kefu as kefu_service

from .base import json_body, success_response, wx_api


def _kefu_view(sender, message):
    @wx_api
    @require_POST
    def view(request, appid):
        sender(appid, json_body(request))
        return success_response(message=message)

    view.__name__ = sender.__name__
    return view


send_text = _kefu_view(kefu_service.send_text, "文本消息发送成功")
send_image = _kefu_view(kefu_service.send_image, "图片消息发送成功")
send_voice = _kefu_view(kefu_service.send_voice, "语音消息发送成功")
send_video = _kefu_view(kefu_service.send_video, "视频消息发送成功")
send_music = _kefu_view(kefu_service.send_music, "音乐消息发送成功")
send_news = _kefu_view(kefu_service.send_news, "图文消息发送成功")
send_mp_news = _kefu_view(kefu_service.send_mp_news, "图文消息（mpnews）发送成功")
send_card = _kefu_view(kefu_service.send_card, "卡券消息发送成功")
send_mini_program_page = _kefu_view(kefu_service.send_mini_program_page, "小程序卡片消息发送成功")


@wx_api
@require_POST
def send_with_template(request, appid):
    """组合发送：先客服消息，再模板消息。"""
    results = kefu_service.send_with_template(appid, json_body(request))
    return success_response(results=results)
