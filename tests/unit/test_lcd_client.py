"""Unit tests for the LCD client."""

import json

import pytest
import requests
import responses

from wasm_deployer.exceptions import ConfigurationError, LedgerClientError
from wasm_deployer.lcd import LCDClient

LCD = "http://lcd.example.com"


class TestBroadcastSync:
    """Test the broadcast_sync method."""

    @responses.activate
    def test_request_format(self):
        def request_callback(request):
            body = json.loads(request.body)
            assert body["tx_bytes"] == "c2lnbmVk"
            assert body["mode"] == "BROADCAST_MODE_SYNC"
            return (200, {}, json.dumps({"tx_response": {"txhash": "ABC", "code": 0, "raw_log": "[]"}}))

        responses.add_callback(
            responses.POST,
            f"{LCD}/cosmos/tx/v1beta1/txs",
            callback=request_callback,
            content_type="application/json",
        )

        result = LCDClient(LCD).broadcast_sync("c2lnbmVk")

        assert result.txhash == "ABC"
        assert result.accepted

    @responses.activate
    def test_rejected_broadcast(self):
        responses.add(
            responses.POST,
            f"{LCD}/cosmos/tx/v1beta1/txs",
            json={
                "tx_response": {
                    "txhash": "ABC",
                    "code": 32,
                    "codespace": "sdk",
                    "raw_log": "account sequence mismatch, expected 6, got 5: incorrect account sequence",
                }
            },
            status=200,
        )

        result = LCDClient(LCD).broadcast_sync("c2lnbmVk")

        assert not result.accepted
        assert result.code == 32
        assert result.codespace == "sdk"
        assert "sequence mismatch" in result.raw_log

    @responses.activate
    def test_http_error(self):
        responses.add(responses.POST, f"{LCD}/cosmos/tx/v1beta1/txs", body="boom", status=500)

        with pytest.raises(LedgerClientError):
            LCDClient(LCD).broadcast_sync("c2lnbmVk")

    @responses.activate
    def test_network_error(self):
        responses.add(
            responses.POST,
            f"{LCD}/cosmos/tx/v1beta1/txs",
            body=requests.ConnectionError("refused"),
        )

        with pytest.raises(LedgerClientError):
            LCDClient(LCD).broadcast_sync("c2lnbmVk")


class TestTxInfo:
    """Test the tx_info method."""

    @responses.activate
    def test_included_transaction(self, store_code_raw_log: str):
        responses.add(
            responses.GET,
            f"{LCD}/cosmos/tx/v1beta1/txs/ABC",
            json={
                "tx": {},
                "tx_response": {
                    "txhash": "ABC",
                    "height": "1234",
                    "code": 0,
                    "raw_log": store_code_raw_log,
                    "logs": json.loads(store_code_raw_log),
                },
            },
            status=200,
        )

        result = LCDClient(LCD).tx_info("ABC")

        assert result is not None
        assert result.height == 1234
        assert result.raw_log == store_code_raw_log
        assert result.succeeded

    @responses.activate
    def test_unknown_transaction_404(self):
        responses.add(
            responses.GET,
            f"{LCD}/cosmos/tx/v1beta1/txs/ABC",
            json={"code": 5, "message": "tx not found: ABC"},
            status=404,
        )

        assert LCDClient(LCD).tx_info("ABC") is None

    @responses.activate
    def test_unknown_transaction_400(self):
        responses.add(
            responses.GET,
            f"{LCD}/cosmos/tx/v1beta1/txs/ABC",
            json={"code": 3, "message": "tx (ABC) not found"},
            status=400,
        )

        assert LCDClient(LCD).tx_info("ABC") is None

    @responses.activate
    def test_bad_request_is_an_error(self):
        responses.add(
            responses.GET,
            f"{LCD}/cosmos/tx/v1beta1/txs/ABC",
            json={"code": 3, "message": "invalid tx hash"},
            status=400,
        )

        with pytest.raises(LedgerClientError):
            LCDClient(LCD).tx_info("ABC")

    @responses.activate
    def test_failed_transaction(self):
        responses.add(
            responses.GET,
            f"{LCD}/cosmos/tx/v1beta1/txs/ABC",
            json={"tx_response": {"txhash": "ABC", "height": "9", "code": 5, "raw_log": "out of gas"}},
            status=200,
        )

        result = LCDClient(LCD).tx_info("ABC")

        assert result is not None
        assert not result.succeeded
        assert result.raw_log == "out of gas"

    @responses.activate
    def test_server_error(self):
        responses.add(responses.GET, f"{LCD}/cosmos/tx/v1beta1/txs/ABC", body="bad gateway", status=502)

        with pytest.raises(LedgerClientError):
            LCDClient(LCD).tx_info("ABC")


class TestAccountSequence:
    """Test the account_sequence method."""

    @responses.activate
    def test_base_account(self):
        responses.add(
            responses.GET,
            f"{LCD}/cosmos/auth/v1beta1/accounts/terra1deployer",
            json={
                "account": {
                    "@type": "/cosmos.auth.v1beta1.BaseAccount",
                    "address": "terra1deployer",
                    "account_number": "11",
                    "sequence": "27",
                }
            },
            status=200,
        )

        assert LCDClient(LCD).account_sequence("terra1deployer") == 27

    @responses.activate
    def test_vesting_account(self):
        responses.add(
            responses.GET,
            f"{LCD}/cosmos/auth/v1beta1/accounts/terra1vesting",
            json={
                "account": {
                    "@type": "/cosmos.vesting.v1beta1.ContinuousVestingAccount",
                    "base_vesting_account": {"base_account": {"sequence": "3"}},
                }
            },
            status=200,
        )

        assert LCDClient(LCD).account_sequence("terra1vesting") == 3

    @responses.activate
    def test_missing_sequence(self):
        responses.add(
            responses.GET,
            f"{LCD}/cosmos/auth/v1beta1/accounts/terra1odd",
            json={"account": {"address": "terra1odd"}},
            status=200,
        )

        with pytest.raises(LedgerClientError):
            LCDClient(LCD).account_sequence("terra1odd")


class TestFromEnv:
    """Test LCDClient.from_env."""

    def test_reads_url(self, monkeypatch):
        monkeypatch.setenv("WASM_DEPLOYER_LCD_URL", "http://lcd.example.com/")

        client = LCDClient.from_env()
        assert client.url == "http://lcd.example.com"

    def test_missing_url(self, monkeypatch):
        monkeypatch.delenv("WASM_DEPLOYER_LCD_URL", raising=False)

        with pytest.raises(ConfigurationError):
            LCDClient.from_env()
