from __future__ import annotations

import unittest

from app.scraping.errors import (
    FetchNetworkError,
    FetchTimeoutError,
    HTTPStatusError,
    PolicyDeniedError,
)
from app.scraping.retry import RetryExecutor


class _Flaky:
    def __init__(self, failures: list[Exception], value: str = "body") -> None:
        self.failures = list(failures)
        self.value = value
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.value


class TestRetryExecutor(unittest.TestCase):
    def setUp(self) -> None:
        self.sleeps: list[float] = []
        self.executor = RetryExecutor(
            max_retries=3,
            backoff_initial_seconds=1.0,
            backoff_multiplier=2.0,
            backoff_max_seconds=5.0,
            sleep=self.sleeps.append,
        )

    def test_success_on_first_attempt(self) -> None:
        operation = _Flaky([])

        result = self.executor.run(operation)

        self.assertTrue(result.success)
        self.assertEqual(result.data, "body")
        self.assertEqual(result.retry_count, 0)
        self.assertEqual(self.sleeps, [])

    def test_transient_failures_are_retried_with_backoff(self) -> None:
        operation = _Flaky(
            [
                FetchNetworkError("connection reset", url="https://example.com"),
                HTTPStatusError(url="https://example.com", status_code=503),
            ]
        )

        result = self.executor.run(operation)

        self.assertTrue(result.success)
        self.assertEqual(result.retry_count, 2)
        self.assertEqual(operation.calls, 3)
        self.assertEqual(self.sleeps, [1.0, 2.0])

    def test_exhausted_retries_report_last_error(self) -> None:
        failures = [FetchTimeoutError(url="https://example.com", timeout_seconds=30) for _ in range(4)]
        operation = _Flaky(failures)

        result = self.executor.run(operation)

        self.assertFalse(result.success)
        self.assertEqual(result.retry_count, 3)
        self.assertEqual(operation.calls, 4)
        self.assertIn("timed out", result.error)
        self.assertEqual(self.sleeps, [1.0, 2.0, 4.0])

    def test_client_errors_are_permanent(self) -> None:
        for status_code in (400, 403, 404, 429):
            with self.subTest(status_code=status_code):
                operation = _Flaky([HTTPStatusError(url="https://example.com", status_code=status_code)])

                result = self.executor.run(operation)

                self.assertFalse(result.success)
                self.assertEqual(result.retry_count, 0)
                self.assertEqual(operation.calls, 1)

    def test_policy_denial_is_permanent(self) -> None:
        operation = _Flaky([PolicyDeniedError("https://example.com/private")])

        result = self.executor.run(operation)

        self.assertFalse(result.success)
        self.assertEqual(result.error, "Scraping not allowed by robots.txt")
        self.assertEqual(operation.calls, 1)

    def test_backoff_is_capped(self) -> None:
        self.assertEqual(self.executor.backoff_seconds(0), 1.0)
        self.assertEqual(self.executor.backoff_seconds(2), 4.0)
        self.assertEqual(self.executor.backoff_seconds(3), 5.0)
        self.assertEqual(self.executor.backoff_seconds(10), 5.0)

    def test_zero_retries_means_single_attempt(self) -> None:
        executor = RetryExecutor(max_retries=0, sleep=self.sleeps.append)
        operation = _Flaky([FetchNetworkError("down", url="https://example.com")])

        result = executor.run(operation)

        self.assertFalse(result.success)
        self.assertEqual(result.retry_count, 0)
        self.assertEqual(operation.calls, 1)

    def test_unexpected_exceptions_propagate(self) -> None:
        def broken() -> str:
            raise KeyError("boom")

        with self.assertRaises(KeyError):
            self.executor.run(broken)


if __name__ == "__main__":
    unittest.main()
