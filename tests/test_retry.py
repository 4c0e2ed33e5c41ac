import pytest

from cognovain.errors import (
    RateLimitError,
    UpstreamAccessError,
    UpstreamContentError,
    UpstreamError,
    UpstreamExhaustedRetries,
)
from cognovain.utils.retry import retry_async


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


class FlakyOperation:
    def __init__(self, failures, result="ok", error_factory=lambda: UpstreamError("503 backend unavailable")):
        self.failures = failures
        self.result = result
        self.error_factory = error_factory
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error_factory()
        return self.result


class TestRetryAsync:
    @pytest.mark.asyncio
    async def test_succeeds_after_two_failures(self):
        sleep = RecordingSleep()
        operation = FlakyOperation(failures=2, result="analysis")

        result = await retry_async(operation, max_retries=3, base_delay=1.0, sleep=sleep)

        assert result == "analysis"
        assert operation.calls == 3
        assert sleep.delays == [1.0, 2.0]
        assert sleep.delays == sorted(sleep.delays)

    @pytest.mark.asyncio
    async def test_exhausted_after_max_attempts(self):
        sleep = RecordingSleep()
        operation = FlakyOperation(failures=10)

        with pytest.raises(UpstreamExhaustedRetries) as exc_info:
            await retry_async(operation, max_retries=3, base_delay=1.0, sleep=sleep)

        assert operation.calls == 3
        # no wait after the final attempt
        assert sleep.delays == [1.0, 2.0]
        assert exc_info.value.attempts == 3
        assert str(exc_info.value) == "Failed after 3 attempts: 503 backend unavailable"

    @pytest.mark.asyncio
    async def test_quota_error_short_circuits(self):
        sleep = RecordingSleep()
        operation = FlakyOperation(failures=10, error_factory=lambda: RateLimitError(upstream=True))

        with pytest.raises(RateLimitError) as exc_info:
            await retry_async(operation, max_retries=3, base_delay=1.0, sleep=sleep)

        assert operation.calls == 1
        assert sleep.delays == []
        assert exc_info.value.upstream is True
        assert not isinstance(exc_info.value, UpstreamExhaustedRetries)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error_cls", [UpstreamAccessError, UpstreamContentError])
    async def test_access_and_content_errors_are_not_retried(self, error_cls):
        operation = FlakyOperation(failures=10, error_factory=error_cls)

        with pytest.raises(error_cls):
            await retry_async(operation, max_retries=3, base_delay=1.0, sleep=RecordingSleep())

        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_first_attempt_success_does_not_sleep(self):
        sleep = RecordingSleep()

        result = await retry_async(FlakyOperation(failures=0), sleep=sleep)

        assert result == "ok"
        assert sleep.delays == []
