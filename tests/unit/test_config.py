# PATH: tests/unit/test_config.py
"""
Unit tests for configuration loading.
"""

import unittest
from pathlib import Path
from unittest.mock import patch

import httpx

from config import fetch_chain_ids, get_settings, load_chains, supported_chain_ids
from core.constants import DEFAULT_RAW_BASE_URL, AssetMode, ErrorCode
from core.exceptions import IOFailure

CONFIG_DIR = Path(__file__).parent.parent.parent / "config"
CHAINS_URL = "https://chains.example/mainnet.json"


def _response(status_code, json_body=None):
    return httpx.Response(
        status_code,
        json=json_body,
        request=httpx.Request("GET", CHAINS_URL),
    )


class TestChainsConfig(unittest.TestCase):
    """Tests for chains.yaml loading."""

    def test_config_dir_exists(self):
        self.assertTrue((CONFIG_DIR / "chains.yaml").exists())

    def test_load_chains(self):
        chains = load_chains()

        self.assertIsInstance(chains, dict)
        self.assertIn("arbitrum_one", chains)

    def test_supported_chain_ids_from_yaml(self):
        chains = supported_chain_ids()

        self.assertIn(1, chains)
        self.assertIn(8453, chains)
        self.assertNotIn(31337, chains)


class TestRemoteChainList(unittest.TestCase):
    """Tests for fetch_chain_ids."""

    def test_reads_id_and_chain_id_keys(self):
        body = [{"id": 1, "name": "Ethereum"}, {"chainId": 10}, {"name": "no id"}, "junk"]
        with patch("config.httpx.get", return_value=_response(200, body)):
            self.assertEqual(fetch_chain_ids(CHAINS_URL), {1, 10})

    def test_supported_chain_ids_prefers_url(self):
        with patch("config.httpx.get", return_value=_response(200, [{"id": 7}])):
            self.assertEqual(supported_chain_ids(CHAINS_URL), {7})

    def test_http_error(self):
        with patch("config.httpx.get", return_value=_response(500, {})):
            with self.assertRaises(IOFailure) as ctx:
                fetch_chain_ids(CHAINS_URL)
        self.assertEqual(ctx.exception.code, ErrorCode.CHAIN_LIST_FETCH_FAILED)

    def test_wrong_shape(self):
        with patch("config.httpx.get", return_value=_response(200, {"chains": []})):
            with self.assertRaises(IOFailure):
                fetch_chain_ids(CHAINS_URL)


class TestSettings(unittest.TestCase):
    """Tests for environment settings."""

    def setUp(self):
        get_settings.cache_clear()

    def tearDown(self):
        get_settings.cache_clear()

    def test_defaults(self):
        with patch("config.load_dotenv"), patch.dict("os.environ", {}, clear=True):
            settings = get_settings()

        self.assertEqual(settings.registry_root, "chains/evm")
        self.assertEqual(settings.output_file, "tokenlist.json")
        self.assertEqual(settings.raw_base_url, DEFAULT_RAW_BASE_URL)
        self.assertEqual(settings.asset_mode, AssetMode.RAW_URL)
        self.assertFalse(settings.has_object_store)

    def test_environment_overrides(self):
        env = {
            "REGISTRY_ROOT": "/data/chains",
            "LOGO_ASSET_MODE": "CDN",
            "LOGO_CDN_BASE_URL": "https://cdn.example/",
            "OBJECT_STORE_BUCKET": "logos",
            "OBJECT_STORE_ACCESS_KEY_ID": "key",
            "OBJECT_STORE_SECRET_ACCESS_KEY": "secret",
            "UPLOAD_MAX_ATTEMPTS": "5",
            "ASSET_CONCURRENCY": "8",
        }
        with patch("config.load_dotenv"), patch.dict("os.environ", env, clear=True):
            settings = get_settings()

        self.assertEqual(settings.registry_root, "/data/chains")
        self.assertEqual(settings.asset_mode, AssetMode.CDN_UPLOAD)
        self.assertEqual(settings.cdn_base_url, "https://cdn.example")
        self.assertEqual(settings.upload_max_attempts, 5)
        self.assertEqual(settings.asset_concurrency, 8)
        self.assertTrue(settings.has_object_store)


if __name__ == "__main__":
    unittest.main()
