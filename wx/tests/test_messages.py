from django.urls import reverse
from wechatpy.exceptions import WeChatClientException

from wx.services import templates as template_service

from .base import MP_APPID, WxClientTestCase


class KefuMessageTests(WxClientTestCase):
    def test_send_text(self):
        response = self.post_json(
            reverse("wx:kefu_send_text", args=[MP_APPID]),
            {"toUser": "o-1", "content": "你好"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True, "message": "文本消息发送成功"})
        self.wechat.message.send_text.assert_called_once_with("o-1", "你好")

    def test_missing_field(self):
        response = self.post_json(reverse("wx:kefu_send_text", args=[MP_APPID]), {"toUser": "o-1"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"success": False, "error": "content参数不能为空！"})
        self.wechat.message.send_text.assert_not_called()

    def test_invalid_json_body(self):
        response = self.client.post(
            reverse("wx:kefu_send_text", args=[MP_APPID]),
            data="not-json",
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 400)

    def test_wechat_error_maps_to_bad_gateway(self):
        self.wechat.message.send_image.side_effect = WeChatClientException(45015, "response out of time limit")

        response = self.post_json(
            reverse("wx:kefu_send_image", args=[MP_APPID]),
            {"toUser": "o-1", "mediaId": "m-1"},
        )

        self.assertEqual(response.status_code, 502)
        self.assertFalse(response.json()["success"])

    def test_send_news_maps_pic_url(self):
        self.post_json(
            reverse("wx:kefu_send_news", args=[MP_APPID]),
            {
                "toUser": "o-1",
                "articles": [{"title": "t", "description": "d", "url": "http://u", "picUrl": "http://p"}],
            },
        )

        self.wechat.message.send_articles.assert_called_once_with(
            "o-1",
            [{"title": "t", "description": "d", "url": "http://u", "picurl": "http://p"}],
        )

    def test_send_mp_news(self):
        self.post_json(reverse("wx:kefu_send_mp_news", args=[MP_APPID]), {"toUser": "o-1", "mediaId": "m-1"})
        self.wechat.message.send_articles.assert_called_once_with("o-1", "m-1")

    def test_send_music_defaults_hq_url(self):
        self.post_json(
            reverse("wx:kefu_send_music", args=[MP_APPID]),
            {"toUser": "o-1", "musicUrl": "http://m.mp3", "thumbMediaId": "t-1", "title": "歌"},
        )

        self.wechat.message.send_music.assert_called_once_with(
            "o-1", "http://m.mp3", "http://m.mp3", "t-1", title="歌", description=None
        )

    def test_send_mini_program_page(self):
        response = self.post_json(
            reverse("wx:kefu_send_mini_program_page", args=[MP_APPID]),
            {
                "toUser": "o-1",
                "title": "打开小程序",
                "appId": "wx-mini",
                "pagePath": "pages/index",
                "thumbMediaId": "t-1",
            },
        )

        self.assertEqual(response.status_code, 200)
        self.wechat.message.send_mini_program_page.assert_called_once_with(
            "o-1",
            {"title": "打开小程序", "appid": "wx-mini", "pagepath": "pages/index", "thumb_media_id": "t-1"},
        )

    def test_requires_post(self):
        response = self.client.get(reverse("wx:kefu_send_text", args=[MP_APPID]))
        self.assertEqual(response.status_code, 405)

    def test_send_with_template_reports_each_part(self):
        self.wechat.message.send_text.side_effect = WeChatClientException(45047, "out of limit")
        self.wechat.message.send_template.return_value = {"errcode": 0, "msgid": 200228332}

        response = self.post_json(
            reverse("wx:kefu_send_with_template", args=[MP_APPID]),
            {
                "kefuMessage": {"msgType": "TEXT", "toUser": "o-1", "content": "hi"},
                "templateMessage": {"toUser": "o-1", "templateId": "tpl-1", "data": {"first": "您好"}},
            },
        )

        self.assertEqual(response.status_code, 200)
        results = response.json()["results"]
        self.assertEqual(results[0]["type"], "kefu")
        self.assertFalse(results[0]["success"])
        self.assertEqual(
            results[1],
            {"type": "template", "success": True, "msgId": "200228332", "message": "模板消息发送成功"},
        )

    def test_send_with_template_unsupported_kefu_type(self):
        response = self.post_json(
            reverse("wx:kefu_send_with_template", args=[MP_APPID]),
            {"kefuMessage": {"msgType": "video", "toUser": "o-1"}},
        )

        results = response.json()["results"]
        self.assertEqual(len(results), 1)
        self.assertFalse(results[0]["success"])
        self.assertIn("video", results[0]["error"])


class TemplateMessageTests(WxClientTestCase):
    def test_build_template_data(self):
        self.assertEqual(
            template_service.build_template_data({"first": "a", "remark": "b"}, "#173177"),
            {"first": {"value": "a", "color": "#173177"}, "remark": {"value": "b", "color": "#173177"}},
        )
        self.assertEqual(template_service.build_template_data({"first": "a"}), {"first": {"value": "a"}})

    def test_send(self):
        self.wechat.message.send_template.return_value = {"errcode": 0, "msgid": 123}

        response = self.post_json(
            reverse("wx:template_send", args=[MP_APPID]),
            {
                "toUser": "o-1",
                "templateId": "tpl-1",
                "url": "http://detail",
                "miniProgram": {"appid": "wx-mini", "pagepath": "pages/a"},
                "data": {"first": "您好"},
            },
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {
                "success": True,
                "message": "模板消息发送成功",
                "data": {"msgId": "123", "toUser": "o-1", "templateId": "tpl-1"},
            },
        )
        self.wechat.message.send_template.assert_called_once_with(
            "o-1",
            "tpl-1",
            {"first": {"value": "您好"}},
            "http://detail",
            {"appid": "wx-mini", "pagepath": "pages/a"},
        )

    def test_send_requires_data(self):
        response = self.post_json(
            reverse("wx:template_send", args=[MP_APPID]),
            {"toUser": "o-1", "templateId": "tpl-1"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "data参数不能为空！")

    def test_batch_send_counts_failures(self):
        self.wechat.message.send_template.side_effect = [
            {"errcode": 0, "msgid": 1},
            WeChatClientException(43004, "require subscribe"),
        ]

        response = self.post_json(
            reverse("wx:template_batch_send", args=[MP_APPID]),
            {
                "messages": [
                    {"toUser": "o-1", "templateId": "tpl", "data": {"k": "v"}},
                    {"toUser": "o-2", "templateId": "tpl", "data": {"k": "v"}},
                    {"toUser": "o-3", "templateId": "tpl"},
                ]
            },
        )

        data = response.json()["data"]
        self.assertEqual(data["total"], 3)
        self.assertEqual(data["successCount"], 1)
        self.assertEqual(data["failCount"], 2)
        self.assertEqual(data["results"][0], {"success": True, "toUser": "o-1", "msgId": "1", "message": "发送成功"})
        self.assertEqual(data["results"][2]["error"], "data参数不能为空！")
        self.assertEqual(self.wechat.message.send_template.call_count, 2)

    def test_batch_send_requires_messages(self):
        response = self.post_json(reverse("wx:template_batch_send", args=[MP_APPID]), {"messages": []})
        self.assertEqual(response.status_code, 400)
