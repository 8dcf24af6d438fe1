import os
import tempfile
from unittest.mock import MagicMock, patch

from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from wechatpy.exceptions import WeChatClientException

from .base import MP_APPID, WxClientTestCase


def _wechat_file_response(content: bytes, content_type: str, filename: str) -> MagicMock:
    response = MagicMock()
    response.content = content
    response.headers = {
        "Content-Type": content_type,
        "Content-disposition": f'attachment; filename="{filename}"',
    }
    return response


class TempMediaTests(WxClientTestCase):
    def test_upload_temp_media(self):
        uploaded = []

        def fake_upload(media_type, media):
            uploaded.append((media_type, media.read()))
            return {"type": media_type, "media_id": f"m-{len(uploaded)}", "created_at": 1700000000}

        self.wechat.media.upload.side_effect = fake_upload

        response = self.client.post(
            reverse("wx:temp_upload", args=[MP_APPID]),
            {
                "file": [
                    SimpleUploadedFile("a.png", b"png-bytes", content_type="image/png"),
                    SimpleUploadedFile("b.png", b"more-bytes", content_type="image/png"),
                ]
            },
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["count"], 2)
        self.assertEqual(body["mediaList"][0], {"mediaId": "m-1", "type": "image", "createdAt": 1700000000, "url": None})
        self.assertEqual(uploaded, [("image", b"png-bytes"), ("image", b"more-bytes")])

    def test_upload_thumb_uses_thumb_media_id(self):
        self.wechat.media.upload.return_value = {"type": "thumb", "thumb_media_id": "th-1", "created_at": 1}

        response = self.client.post(
            reverse("wx:temp_upload", args=[MP_APPID]),
            {"mediaType": "thumb", "file": SimpleUploadedFile("t.jpg", b"jpg")},
        )

        self.assertEqual(response.json()["mediaList"][0]["mediaId"], "th-1")

    def test_upload_requires_multipart(self):
        response = self.post_json(reverse("wx:temp_upload", args=[MP_APPID]), {})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "请求不是multipart格式！")

    def test_upload_requires_file(self):
        response = self.client.post(reverse("wx:temp_upload", args=[MP_APPID]), {"mediaType": "image"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "未找到上传的文件！")

    def test_upload_rejects_unknown_media_type(self):
        response = self.client.post(
            reverse("wx:temp_upload", args=[MP_APPID]),
            {"mediaType": "gif", "file": SimpleUploadedFile("a.gif", b"gif")},
        )

        self.assertEqual(response.status_code, 400)
        self.wechat.media.upload.assert_not_called()

    def test_download_temp_media(self):
        self.wechat.media.download.return_value = _wechat_file_response(b"jpeg", "image/jpeg", "photo.jpg")

        response = self.client.get(reverse("wx:temp_download", args=[MP_APPID, "m-1"]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.content, b"jpeg")
        self.assertEqual(response["Content-Type"], "image/jpeg")
        self.assertEqual(response["Content-Disposition"], "attachment; filename*=UTF-8''photo.jpg")

    def test_download_temp_video_returns_json(self):
        self.wechat.media.download.return_value = {"video_url": "http://v.test/1.mp4"}

        response = self.client.get(reverse("wx:temp_download", args=[MP_APPID, "v-1"]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {"success": True, "message": "获取临时素材成功", "data": {"video_url": "http://v.test/1.mp4"}},
        )

    def _upload_recording_temp_paths(self):
        paths = []
        real_mkstemp = tempfile.mkstemp

        def recording_mkstemp(*args, **kwargs):
            fd, path = real_mkstemp(*args, **kwargs)
            paths.append(path)
            return fd, path

        with patch("wx.services.materials.tempfile.mkstemp", side_effect=recording_mkstemp):
            response = self.client.post(
                reverse("wx:temp_upload", args=[MP_APPID]),
                {"file": SimpleUploadedFile("a.png", b"png-bytes")},
            )
        return response, paths

    def test_temp_file_removed_after_upload(self):
        self.wechat.media.upload.return_value = {"type": "image", "media_id": "m-1", "created_at": 1}

        response, paths = self._upload_recording_temp_paths()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(paths), 1)
        self.assertFalse(os.path.exists(paths[0]))

    def test_temp_file_removed_when_wechat_fails(self):
        self.wechat.media.upload.side_effect = WeChatClientException(40004, "invalid media type")

        response, paths = self._upload_recording_temp_paths()

        self.assertEqual(response.status_code, 502)
        self.assertEqual(len(paths), 1)
        self.assertFalse(os.path.exists(paths[0]))


class PermanentMaterialTests(WxClientTestCase):
    def test_upload_image_returns_url(self):
        self.wechat.media.upload_image.return_value = "http://mmbiz.qpic.cn/x"

        response = self.client.post(
            reverse("wx:permanent_upload_image", args=[MP_APPID]),
            {"file": SimpleUploadedFile("a.png", b"png")},
        )

        self.assertEqual(response.json()["mediaList"], [{"url": "http://mmbiz.qpic.cn/x", "originalFilename": "a.png"}])

    def test_upload_video_requires_title(self):
        response = self.client.post(
            reverse("wx:permanent_upload", args=[MP_APPID]),
            {"mediaType": "video", "file": SimpleUploadedFile("a.mp4", b"mp4")},
        )

        self.assertEqual(response.status_code, 400)
        self.wechat.material.add.assert_not_called()

    def test_upload_video(self):
        self.wechat.material.add.return_value = {"media_id": "v-1"}

        response = self.client.post(
            reverse("wx:permanent_upload", args=[MP_APPID]),
            {"mediaType": "video", "title": "片头", "file": SimpleUploadedFile("a.mp4", b"mp4")},
        )

        self.assertEqual(response.json()["mediaList"], [{"mediaId": "v-1", "url": None}])
        kwargs = self.wechat.material.add.call_args.kwargs
        self.assertEqual(kwargs, {"title": "片头", "introduction": ""})

    def test_upload_news(self):
        self.wechat.material.add_articles.return_value = {"media_id": "n-1"}

        response = self.post_json(
            reverse("wx:permanent_upload_news", args=[MP_APPID]),
            {
                "articles": [
                    {
                        "thumbMediaId": "th-1",
                        "title": "标题",
                        "content": "<p>正文</p>",
                        "contentSourceUrl": "http://src",
                        "showCoverPic": True,
                    }
                ]
            },
        )

        self.assertEqual(response.json()["data"], {"mediaId": "n-1"})
        article = self.wechat.material.add_articles.call_args.args[0][0]
        self.assertEqual(article["thumb_media_id"], "th-1")
        self.assertEqual(article["content_source_url"], "http://src")
        self.assertEqual(article["show_cover_pic"], 1)
        self.assertEqual(article["need_open_comment"], 0)

    def test_upload_news_requires_articles(self):
        response = self.post_json(reverse("wx:permanent_upload_news", args=[MP_APPID]), {"articles": []})
        self.assertEqual(response.status_code, 400)

    def test_get_news_material(self):
        self.wechat.material.get.return_value = [{"title": "标题"}]

        response = self.client.get(reverse("wx:permanent_get", args=[MP_APPID, "n-1"]))

        self.assertEqual(response.json()["data"], {"articles": [{"title": "标题"}]})

    def test_get_file_material(self):
        self.wechat.material.get.return_value = _wechat_file_response(b"voice", "audio/amr", "v.amr")

        response = self.client.get(reverse("wx:permanent_get", args=[MP_APPID, "v-1"]))

        self.assertEqual(response.content, b"voice")
        self.assertEqual(response["Content-Type"], "audio/amr")

    def test_delete(self):
        self.wechat.material.delete.return_value = {"errcode": 0, "errmsg": "ok"}
        response = self.client.delete(reverse("wx:permanent_delete", args=[MP_APPID, "m-1"]))
        self.assertEqual(response.status_code, 200)

        self.wechat.material.delete.return_value = {"errcode": 40007, "errmsg": "invalid media_id"}
        response = self.client.delete(reverse("wx:permanent_delete", args=[MP_APPID, "m-1"]))
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["error"], "删除永久素材失败")

    def test_update_news(self):
        response = self.post_json(
            reverse("wx:permanent_update_news", args=[MP_APPID]),
            {"mediaId": "n-1", "index": 0, "article": {"thumbMediaId": "th", "title": "t", "content": "c"}},
        )

        self.assertEqual(response.status_code, 200)
        args = self.wechat.material.update_article.call_args.args
        self.assertEqual(args[:2], ("n-1", 0))
        self.assertEqual(args[2]["title"], "t")

    def test_count(self):
        self.wechat.material.get_count.return_value = {
            "voice_count": 1,
            "video_count": 2,
            "image_count": 3,
            "news_count": 4,
        }

        response = self.client.get(reverse("wx:permanent_count", args=[MP_APPID]))

        self.assertEqual(
            response.json()["data"],
            {"voiceCount": 1, "videoCount": 2, "imageCount": 3, "newsCount": 4},
        )

    def test_list(self):
        self.wechat.material.batchget.return_value = {"total_count": 30, "item_count": 1, "item": [{"media_id": "x"}]}

        response = self.client.get(
            reverse("wx:permanent_list", args=[MP_APPID]),
            {"mediaType": "NEWS", "offset": "10", "count": "5"},
        )

        self.assertEqual(
            response.json()["data"],
            {"totalCount": 30, "itemCount": 1, "items": [{"media_id": "x"}]},
        )
        self.wechat.material.batchget.assert_called_once_with("news", 10, 5)

    def test_list_count_out_of_range(self):
        response = self.client.get(
            reverse("wx:permanent_list", args=[MP_APPID]),
            {"mediaType": "image", "count": "21"},
        )
        self.assertEqual(response.status_code, 400)
