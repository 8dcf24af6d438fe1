from unittest.mock import patch

from django.test import SimpleTestCase, override_settings

from wx.services import client as client_service
from wx.services.exceptions import AppConfigNotFoundError, InvalidParamError

from .base import MA_APPID, MP_APPID, TEST_WX_SETTINGS


@override_settings(**TEST_WX_SETTINGS)
class ClientRegistryTests(SimpleTestCase):
    def setUp(self):
        client_service.reset_clients()
        self.addCleanup(client_service.reset_clients)

    def test_client_is_cached_per_appid(self):
        with patch("wx.services.client.WeChatClient") as mock_cls:
            first = client_service.get_mp_client(MP_APPID)
            second = client_service.get_mp_client(MP_APPID)

        self.assertIs(first, second)
        mock_cls.assert_called_once()
        self.assertEqual(mock_cls.call_args.args, (MP_APPID, "mp-secret"))

    def test_mp_and_ma_clients_are_separate(self):
        with patch("wx.services.client.WeChatClient") as mock_cls:
            client_service.get_mp_client(MP_APPID)
            client_service.get_ma_client(MA_APPID)

        self.assertEqual(mock_cls.call_count, 2)
        self.assertEqual(mock_cls.call_args.args, (MA_APPID, "ma-secret"))

    def test_blank_appid(self):
        with self.assertRaisesMessage(InvalidParamError, "appid参数不能为空！"):
            client_service.get_mp_client("  ")

    def test_unknown_appid(self):
        with self.assertRaises(AppConfigNotFoundError):
            client_service.get_mp_client("wx-unknown")
        # 小程序 appid 不能当公众号用
        with self.assertRaises(AppConfigNotFoundError):
            client_service.get_mp_client(MA_APPID)

    @override_settings(
        WX_MP_CONFIGS=[
            {"appId": "", "secret": "ignored"},
            {"appId": "wx-dup", "secret": "first"},
            {"appId": "wx-dup", "secret": "second"},
        ]
    )
    def test_blank_and_duplicate_configs(self):
        self.assertEqual(client_service.get_mp_config("wx-dup")["secret"], "first")
        with self.assertRaises(InvalidParamError):
            client_service.get_mp_config("")

    def test_memory_session_storage(self):
        from wechatpy.session.memorystorage import MemoryStorage

        self.assertIsInstance(client_service._session_storage(), MemoryStorage)
