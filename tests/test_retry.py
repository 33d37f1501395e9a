"""with_retries decorator."""

from unittest.mock import patch

import pytest
import requests

from market_reaction.core.retry import with_retries


@pytest.fixture
def sleeps():
    with patch("market_reaction.core.retry.time.sleep") as mock_sleep:
        yield mock_sleep


class TestWithRetries:
    def test_succeeds_after_failures(self, sleeps):
        calls = []

        @with_retries(max_retries=3, initial_delay=2)
        def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise requests.ConnectionError("reset")
            return "ok"

        assert flaky() == "ok"
        assert len(calls) == 3
        assert [c.args[0] for c in sleeps.call_args_list] == [2, 4]

    def test_gives_up(self, sleeps):
        @with_retries(max_retries=1, initial_delay=1)
        def broken():
            raise RuntimeError("nope")

        with pytest.raises(RuntimeError):
            broken()
        assert sleeps.call_count == 1

    def test_predicate_short_circuits(self, sleeps):
        @with_retries(max_retries=3, retry_if=lambda exc: not isinstance(exc, ValueError))
        def fatal():
            raise ValueError("bad input")

        with pytest.raises(ValueError):
            fatal()
        sleeps.assert_not_called()

