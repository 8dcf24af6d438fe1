"""用户接口：/wx/user/<appid>/..."""

import logging

from django.views.decorators.http import require_GET

from wx.services import users as user_service

from .base import success_response, wx_api

logger = logging.getLogger(__name__)


@wx_api
@require_GET
def login(request, appid):
    """小程序登录，返回 openid / session_key / unionid。"""
    session = user_service.login(appid, request.GET.get("code"))
    return success_response(data=session)


def _decrypt(request, appid):
    return user_service.decrypt_user_data(
        appid,
        request.GET.get("sessionKey"),
        request.GET.get("rawData"),
        request.GET.get("signature"),
        request.GET.get("encryptedData"),
        request.GET.get("iv"),
    )


@wx_api
@require_GET
def info(request, appid):
    """校验并解密小程序用户信息。"""
    return success_response(data=_decrypt(request, appid))


@wx_api
@require_GET
def phone(request, appid):
    """校验并解密小程序用户绑定的手机号。"""
    return success_response(data=_decrypt(request, appid))


@wx_api
@require_GET
def user_info_list(request, appid):
    data = user_service.get_user_info_list(appid, request.GET.get("openids"))
    return success_response(data=data)


@wx_api
@require_GET
def user_list(request, appid):
    data = user_service.get_follower_list(appid, request.GET.get("nextOpenid"))
    return success_response(data=data)
