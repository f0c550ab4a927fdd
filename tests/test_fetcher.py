import unittest
from unittest import mock

import requests

from policypulse.ingestion.fetcher import Fetcher
from policypulse.ingestion.results import FailureKind


def _response(status=200, body=b"<html><body>ok</body></html>", encoding="utf-8", chunk=64 * 1024):
    resp = mock.Mock()
    resp.status_code = status
    resp.encoding = encoding
    resp.chunks_read = 0

    def iter_content(chunk_size=chunk):
        for i in range(0, len(body), chunk):
            resp.chunks_read += 1
            yield body[i : i + chunk]

    resp.iter_content.side_effect = iter_content
    return resp


class TestFetcherSecurity(unittest.TestCase):
    def setUp(self):
        self.session = mock.Mock()
        self.fetcher = Fetcher(session=self.session)

    def test_blocks_localhost(self):
        r = self.fetcher.get("http://localhost:1234/")
        self.assertEqual(r.failure.reason, "blocked_host")
        self.session.get.assert_not_called()

    def test_blocks_private_ip(self):
        r = self.fetcher.get("http://127.0.0.1:1234/")
        self.assertEqual(r.failure.reason, "blocked_private_ip")

    def test_blocks_non_http_scheme(self):
        r = self.fetcher.get("file:///etc/passwd")
        self.assertEqual(r.failure.kind, FailureKind.FETCH)
        self.assertEqual(r.failure.reason, "bad_scheme")


class TestFetcherResponses(unittest.TestCase):
    url = "https://www.moneycontrol.com/news/politics/"

    def test_success_returns_markup(self):
        session = mock.Mock()
        session.get.return_value = _response()
        r = Fetcher(timeout_ms=5000, session=session).get(self.url)
        self.assertTrue(r.ok)
        self.assertIn("ok", r.value)
        self.assertEqual(session.get.call_args.kwargs["timeout"], 5.0)

    def test_non_success_status_is_fetch_failure(self):
        session = mock.Mock()
        session.get.return_value = _response(status=403)
        r = Fetcher(session=session).get(self.url)
        self.assertFalse(r.ok)
        self.assertEqual(r.failure.kind, FailureKind.FETCH)
        self.assertEqual(r.failure.reason, "http_403")
        self.assertEqual(r.failure.url, self.url)

    def test_timeout_is_fetch_failure(self):
        session = mock.Mock()
        session.get.side_effect = requests.exceptions.Timeout("slow")
        r = Fetcher(timeout_ms=2000, session=session).get(self.url)
        self.assertEqual(r.failure.kind, FailureKind.FETCH)
        self.assertTrue(r.failure.reason.startswith("timeout"))

    def test_connection_error_is_fetch_failure(self):
        session = mock.Mock()
        session.get.side_effect = requests.exceptions.ConnectionError("reset")
        r = Fetcher(session=session).get(self.url)
        self.assertTrue(r.failure.reason.startswith("request_error"))

    def test_oversized_body_rejected(self):
        session = mock.Mock()
        session.get.return_value = _response(body=b"x" * 11)
        r = Fetcher(max_bytes=10, session=session).get(self.url)
        self.assertEqual(r.failure.reason, "too_large")

    def test_body_is_streamed_and_reading_stops_past_cap(self):
        session = mock.Mock()
        resp = _response(body=b"x" * 100, chunk=10)
        session.get.return_value = resp
        r = Fetcher(max_bytes=25, session=session).get(self.url)
        self.assertEqual(r.failure.reason, "too_large")
        self.assertTrue(session.get.call_args.kwargs["stream"])
        self.assertEqual(resp.chunks_read, 3)
        resp.close.assert_called_once()

    def test_connection_drop_mid_body_is_fetch_failure(self):
        session = mock.Mock()
        resp = _response()
        resp.iter_content.side_effect = requests.exceptions.ChunkedEncodingError("broken")
        session.get.return_value = resp
        r = Fetcher(session=session).get(self.url)
        self.assertEqual(r.failure.kind, FailureKind.FETCH)
        self.assertTrue(r.failure.reason.startswith("request_error"))
        resp.close.assert_called_once()

    def test_unknown_encoding_falls_back_to_utf8(self):
        session = mock.Mock()
        session.get.return_value = _response(body="café".encode("utf-8"), encoding="not-a-codec")
        r = Fetcher(session=session).get(self.url)
        self.assertEqual(r.value, "café")


if __name__ == "__main__":
    unittest.main()
