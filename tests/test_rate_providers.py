import http.client
import unittest
import urllib.error
from decimal import Decimal
from unittest import mock

from expense_manager.core.config import Settings
from expense_manager.services.http_client import HttpError, get_json
from expense_manager.services.rates.base import RateSourceUnavailable
from expense_manager.services.rates.providers import (
    ExternalHTTPRateSource,
    StaticRateSource,
    make_rate_source,
    parse_rates_payload,
)


class RecordingFetcher:
    def __init__(self, payload=None, error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.calls = []

    def __call__(self, url, timeout=None, retries=None):
        self.calls.append({"url": url, "timeout": timeout, "retries": retries})
        if self.error is not None:
            raise self.error
        return self.payload


class ExternalHTTPRateSourceTests(unittest.TestCase):
    def test_fetches_base_url_with_code_once(self) -> None:
        fetcher = RecordingFetcher({"base": "USD", "rates": {"EUR": 0.85, "GBP": 0.73}})
        source = ExternalHTTPRateSource(
            "https://rates.example/v4/latest/", timeout=2.5, fetch_json=fetcher
        )

        rates = source.fetch_rates("usd")

        self.assertEqual(
            fetcher.calls,
            [{"url": "https://rates.example/v4/latest/USD", "timeout": 2.5, "retries": 0}],
        )
        self.assertEqual(rates["EUR"], Decimal("0.85"))
        self.assertEqual(rates["GBP"], Decimal("0.73"))
        self.assertEqual(rates["USD"], Decimal("1"))

    def test_http_failure_is_unavailable(self) -> None:
        source = ExternalHTTPRateSource(
            "https://rates.example", fetch_json=RecordingFetcher(error=HttpError("boom"))
        )
        with self.assertRaises(RateSourceUnavailable):
            source.fetch_rates("USD")

    def test_malformed_payloads_are_unavailable(self) -> None:
        for payload in (
            [],
            {"result": "error"},
            {"rates": []},
            {"rates": {}},
            {"rates": {"EUR": "abc"}},
            {"rates": {"EUR": None}},
            {"rates": {"EUR": True}},
            {"rates": {"EUR": 0}},
            {"rates": {"EUR": -1.2}},
        ):
            with self.subTest(payload=payload):
                with self.assertRaises(RateSourceUnavailable):
                    parse_rates_payload(payload)

    def test_codes_are_upper_cased(self) -> None:
        parsed = parse_rates_payload({"rates": {"eur": 0.9, "jpy": 150}})
        self.assertEqual(parsed, {"EUR": Decimal("0.9"), "JPY": Decimal("150")})


class StaticRateSourceTests(unittest.TestCase):
    def test_usd_table_is_returned_as_is(self) -> None:
        source = StaticRateSource({"USD": 1, "EUR": "0.85"})
        self.assertEqual(source.fetch_rates("USD"), {"USD": Decimal("1"), "EUR": Decimal("0.85")})

    def test_other_bases_are_rebased(self) -> None:
        source = StaticRateSource({"USD": 1, "EUR": "0.85", "JPY": "150"})
        rates = source.fetch_rates("eur")
        self.assertEqual(rates["EUR"], Decimal("1"))
        self.assertEqual(rates["USD"], Decimal("1.176471"))
        self.assertEqual(rates["JPY"], Decimal("176.470588"))

    def test_unknown_base_is_unavailable(self) -> None:
        with self.assertRaises(RateSourceUnavailable):
            StaticRateSource({"USD": 1}).fetch_rates("XYZ")


class ProviderFactoryTests(unittest.TestCase):
    def test_registry_builds_configured_source(self) -> None:
        static = Settings(exchange_rate_provider="static")
        external = Settings(exchange_rate_provider="external-http")
        self.assertIsInstance(make_rate_source(static), StaticRateSource)
        self.assertIsInstance(make_rate_source(external), ExternalHTTPRateSource)

    def test_unknown_kind_rejected(self) -> None:
        with self.assertRaises(ValueError):
            make_rate_source(Settings(exchange_rate_provider="carrier-pigeon"))


class HttpClientTests(unittest.TestCase):
    def test_single_attempt_by_default(self) -> None:
        with mock.patch(
            "expense_manager.services.http_client.urllib.request.urlopen",
            side_effect=urllib.error.URLError("unreachable"),
        ) as urlopen:
            with self.assertRaises(HttpError):
                get_json("https://rates.example/USD", timeout=1.0)
        self.assertEqual(urlopen.call_count, 1)

    def test_timeout_is_http_error(self) -> None:
        with mock.patch(
            "expense_manager.services.http_client.urllib.request.urlopen",
            side_effect=TimeoutError("timed out"),
        ):
            with self.assertRaises(HttpError):
                get_json("https://rates.example/USD", timeout=0.01)

    def test_truncated_body_is_http_error(self) -> None:
        response = mock.MagicMock()
        response.status = 200
        response.read.side_effect = http.client.IncompleteRead(b'{"ra', 100)
        with mock.patch(
            "expense_manager.services.http_client.urllib.request.urlopen"
        ) as urlopen:
            urlopen.return_value.__enter__.return_value = response
            with self.assertRaises(HttpError):
                get_json("https://rates.example/USD", timeout=1.0)


if __name__ == "__main__":
    unittest.main()
