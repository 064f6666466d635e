import unittest
from pathlib import Path
from unittest import mock
import sys

import requests

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "coldnews" / "src"
sys.path.insert(0, str(SRC))

from coldnews import stats
from coldnews.models.stats import MarketQuote
from coldnews.providers import cnbc, yahoo


def _json_response(data, status=200):
    resp = mock.Mock()
    resp.status_code = status
    resp.json.return_value = data
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Server Error")
    return resp


def _chart(price=None, prev=None):
    meta = {}
    if price is not None:
        meta["regularMarketPrice"] = price
    if prev is not None:
        meta["chartPreviousClose"] = prev
    return {"chart": {"result": [{"meta": meta}], "error": None}}


class TestFormulas(unittest.TestCase):
    def test_vix_proxy(self):
        self.assertEqual(stats.vix_fng_proxy(20), 50)
        self.assertEqual(stats.vix_fng_proxy(30), 20)
        self.assertEqual(stats.vix_fng_proxy(2), 100)
        self.assertEqual(stats.vix_fng_proxy(45), 0)

    def test_gold_sentiment(self):
        self.assertEqual(stats.gold_sentiment_from_change(0), 50)
        self.assertAlmostEqual(stats.gold_sentiment_from_change(1.5), 65)
        self.assertEqual(stats.gold_sentiment_from_change(10), 90)
        self.assertEqual(stats.gold_sentiment_from_change(-10), 10)


class TestYahoo(unittest.TestCase):
    def test_quote_change(self):
        with mock.patch("coldnews.providers.yahoo.requests.get", return_value=_json_response(_chart(110, 100))):
            quote = yahoo.get_quote("^GSPC")
        self.assertEqual(quote.price, 110)
        self.assertAlmostEqual(quote.change_percent, 10.0)

    def test_quote_zero_previous_close(self):
        with mock.patch("coldnews.providers.yahoo.requests.get", return_value=_json_response(_chart(110, 0))):
            quote = yahoo.get_quote("^GSPC")
        self.assertEqual(quote, MarketQuote(price=110, change_percent=0))

    def test_quote_missing_previous_close(self):
        with mock.patch("coldnews.providers.yahoo.requests.get", return_value=_json_response(_chart(110))):
            quote = yahoo.get_quote("^GSPC")
        self.assertEqual(quote.change_percent, 0)

    def test_price_fallback_on_status(self):
        with mock.patch("coldnews.providers.yahoo.requests.get", return_value=_json_response({}, 500)):
            self.assertEqual(yahoo.get_price("^VIX", 20), 20)

    def test_price_fallback_on_missing_field(self):
        with mock.patch("coldnews.providers.yahoo.requests.get", return_value=_json_response({"chart": {"result": []}})):
            self.assertEqual(yahoo.get_price("DX-Y.NYB", 100), 100)

    def test_negative_price_is_unusable(self):
        with mock.patch("coldnews.providers.yahoo.requests.get", return_value=_json_response(_chart(-5))):
            self.assertEqual(yahoo.get_price("GC=F", 2000), 2000)

    def test_symbol_is_encoded_in_path(self):
        with mock.patch("coldnews.providers.yahoo.requests.get", return_value=_json_response(_chart(18.5))) as get:
            self.assertEqual(yahoo.get_price("^VIX", 20), 18.5)
        self.assertTrue(get.call_args.args[0].endswith("/chart/%5EVIX"))
        self.assertEqual(get.call_args.kwargs["params"]["range"], "1d")


class TestCnbc(unittest.TestCase):
    def test_single_object(self):
        payload = {"QuickQuoteResult": {"QuickQuote": {"symbol": "US2Y", "last": "3.95"}}}
        with mock.patch("coldnews.providers.cnbc.requests.get", return_value=_json_response(payload)):
            self.assertEqual(cnbc.get_price("US2Y", 4.0), 3.95)

    def test_array_wrapped(self):
        payload = {"QuickQuoteResult": {"QuickQuote": [{"symbol": ".BADI", "last": "1,842"}]}}
        with mock.patch("coldnews.providers.cnbc.requests.get", return_value=_json_response(payload)):
            self.assertEqual(cnbc.get_price(".BADI", 1500), 1842)

    def test_missing_last(self):
        payload = {"QuickQuoteResult": {"QuickQuote": [{"symbol": ".BADI"}]}}
        with mock.patch("coldnews.providers.cnbc.requests.get", return_value=_json_response(payload)):
            self.assertEqual(cnbc.get_price(".BADI", 1500), 1500)

    def test_result_not_an_object(self):
        payload = {"QuickQuoteResult": "x"}
        with mock.patch("coldnews.providers.cnbc.requests.get", return_value=_json_response(payload)):
            self.assertEqual(cnbc.get_price("US2Y", 4.0), 4.0)


class TestSentiment(unittest.TestCase):
    def test_cnn_score_used_when_available(self):
        payload = {"fear_and_greed": {"score": 63.5}}
        with mock.patch("coldnews.providers.fear_greed.requests.get", return_value=_json_response(payload)):
            self.assertEqual(stats.get_stock_fng(30), 64)

    def test_cnn_failure_uses_vix_proxy(self):
        with mock.patch("coldnews.providers.fear_greed.requests.get", return_value=_json_response({}, 418)):
            self.assertEqual(stats.get_stock_fng(30), 20)

    def test_crypto_value(self):
        payload = {"data": [{"value": "72", "value_classification": "Greed"}]}
        with mock.patch("coldnews.providers.fear_greed.requests.get", return_value=_json_response(payload)):
            self.assertEqual(stats.get_crypto_fng(), 72)

    def test_gold_sentiment_from_five_day_chart(self):
        with mock.patch("coldnews.providers.yahoo.requests.get", return_value=_json_response(_chart(2020, 2000))) as get:
            self.assertAlmostEqual(stats.get_gold_sentiment(), 60)
        self.assertEqual(get.call_args.kwargs["params"]["range"], "5d")

    def test_cnn_block_not_an_object(self):
        payload = {"fear_and_greed": [1]}
        with mock.patch("coldnews.providers.fear_greed.requests.get", return_value=_json_response(payload)):
            self.assertEqual(stats.get_stock_fng(30), 20)

    def test_crypto_zero_is_no_reading(self):
        payload = {"data": [{"value": "0", "value_classification": "Extreme Fear"}]}
        with mock.patch("coldnews.providers.fear_greed.requests.get", return_value=_json_response(payload)):
            self.assertEqual(stats.get_crypto_fng(), 50)


class TestMarketStats(unittest.TestCase):
    def test_all_providers_down(self):
        with mock.patch("requests.get", side_effect=requests.ConnectionError("offline")):
            snapshot = stats.get_market_stats(max_workers=4)

        self.assertEqual(snapshot.model_dump(mode="json", by_alias=True), {
            "vix": 20.0,
            "stockFnG": 50.0,
            "cryptoFnG": 50.0,
            "goldSentiment": 50.0,
            "us10Y": 4.0,
            "us2Y": 4.0,
            "dollarIndex": 100.0,
            "brentCrude": 80.0,
            "goldPrice": 2000.0,
            "copper": 3.8,
            "bdi": 1500.0,
            "crb": 270.0,
            "sox": {"price": 0.0, "changePercent": 0.0},
            "sp500": {"price": 0.0, "changePercent": 0.0},
            "dji": {"price": 0.0, "changePercent": 0.0},
            "twii": {"price": 0.0, "changePercent": 0.0},
        })

    def test_stock_sentiment_reads_resolved_vix(self):
        def fake_get(url, **kwargs):
            if url.endswith("/chart/%5EVIX"):
                return _json_response(_chart(25))
            raise requests.ConnectionError("offline")

        with mock.patch("requests.get", side_effect=fake_get):
            snapshot = stats.get_market_stats(max_workers=4)

        self.assertEqual(snapshot.vix, 25)
        self.assertEqual(snapshot.stock_fng, 35)
        self.assertEqual(snapshot.dollar_index, 100)

    def test_malformed_nested_payloads_fall_back(self):
        payload = {"QuickQuoteResult": "oops", "fear_and_greed": [1]}
        with mock.patch("requests.get", return_value=_json_response(payload)):
            snapshot = stats.get_market_stats(max_workers=4)

        self.assertEqual(snapshot.us_2y, 4.0)
        self.assertEqual(snapshot.bdi, 1500)
        self.assertEqual(snapshot.vix, 20)
        self.assertEqual(snapshot.stock_fng, 50)
        self.assertEqual(snapshot.crypto_fng, 50)
        self.assertEqual(snapshot.sp500, MarketQuote())


if __name__ == "__main__":
    unittest.main()
