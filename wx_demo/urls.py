"""
URL configuration for wx_demo.

- /wx/...  公众号 / 小程序接口代理（wx 应用）
- /msg     第三方通用回调（callback 应用）
"""
from django.urls import include, path

urlpatterns = [
    path("wx/", include("wx.urls", namespace="wx")),
    path("", include("callback.urls", namespace="callback")),
]
