import asyncio
import logging

import pytest

from studyflow.agents.retry import is_transient_overload, with_retry


class Overloaded(Exception):
    def __init__(self, message="The model is temporarily unavailable"):
        super().__init__(message)
        self.code = 503


class _Response:
    status_code = 503


class HTTPStatusLike(Exception):
    def __init__(self):
        super().__init__("server error")
        self.response = _Response()


def scripted(outcomes):
    """Operation that raises/returns outcomes in order and counts calls."""
    calls = {"n": 0}

    async def operation():
        outcome = outcomes[calls["n"]]
        calls["n"] += 1
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    return operation, calls


def recording_sleep():
    delays = []

    async def sleep(seconds):
        delays.append(seconds)

    return sleep, delays


@pytest.mark.parametrize("failures", [0, 1, 2])
def test_succeeds_after_transient_failures(failures):
    operation, calls = scripted([Overloaded()] * failures + ["done"])
    sleep, delays = recording_sleep()

    result = asyncio.run(with_retry(operation, max_attempts=3, initial_delay_ms=1000, sleep=sleep))

    assert result == "done"
    assert calls["n"] == failures + 1
    assert delays == [1.0, 2.0][:failures]
    assert delays == sorted(delays)


def test_non_transient_error_propagates_unchanged_without_retry():
    error = ValueError("bad request")
    operation, calls = scripted([error, "never"])
    sleep, delays = recording_sleep()

    with pytest.raises(ValueError) as exc:
        asyncio.run(with_retry(operation, sleep=sleep))

    assert exc.value is error
    assert calls["n"] == 1
    assert delays == []


def test_gives_up_after_max_attempts(caplog):
    last = Overloaded("still overloaded")
    operation, calls = scripted([Overloaded(), Overloaded(), last])
    sleep, delays = recording_sleep()

    with caplog.at_level(logging.WARNING, logger="studyflow.agents.retry"):
        with pytest.raises(Overloaded) as exc:
            asyncio.run(with_retry(operation, max_attempts=3, initial_delay_ms=10, sleep=sleep))

    assert exc.value is last
    assert calls["n"] == 3
    assert delays == [0.01, 0.02]
    levels = [r.levelno for r in caplog.records]
    assert levels.count(logging.WARNING) == 2
    assert levels.count(logging.ERROR) == 1


@pytest.mark.parametrize(
    "error",
    [
        Overloaded(),
        HTTPStatusLike(),
        RuntimeError("503 UNAVAILABLE"),
        RuntimeError("The model is Overloaded. Please try again later."),
    ],
)
def test_transient_signatures(error):
    assert is_transient_overload(error)


@pytest.mark.parametrize("error", [ValueError("nope"), RuntimeError("429 rate limited")])
def test_other_errors_are_not_transient(error):
    assert not is_transient_overload(error)
