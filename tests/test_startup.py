"""Tests for the startup waiter."""

import pytest
import requests

from wingops.exceptions import ExternalCallError
from wingops.services.startup import StartupWaiter


class FakeProcess:
    def __init__(self, returncode=None):
        self.returncode = returncode
        self.terminated = False

    def poll(self):
        return self.returncode

    def terminate(self):
        self.terminated = True
        self.returncode = -15

    def wait(self, timeout=None):
        return self.returncode

    def kill(self):
        self.returncode = -9


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class Response:
    def __init__(self, status_code):
        self.status_code = status_code


def make_waiter(process, clock, responses=()):
    responses = list(responses)
    launched = []

    def popen(args, **kwargs):
        launched.append((args, kwargs))
        return process

    def http_get(url, timeout):
        item = responses.pop(0) if responses else Response(503)
        if isinstance(item, Exception):
            raise item
        return item

    waiter = StartupWaiter(sleep=clock.sleep, clock=clock, http_get=http_get, popen=popen)
    return waiter, launched


class TestFixedWait:
    def test_waits_then_terminates(self):
        process, clock = FakeProcess(), FakeClock()
        waiter, launched = make_waiter(process, clock)

        waiter.run_fixed(["dotnet", "run"], 30, env={"ConnectionStrings__DefaultConnection": "x"})

        assert clock.sleeps == [30]
        assert process.terminated
        assert launched[0][1]["env"] == {"ConnectionStrings__DefaultConnection": "x"}

    def test_early_crash_is_an_error(self):
        process, clock = FakeProcess(returncode=1), FakeClock()
        waiter, _ = make_waiter(process, clock)

        with pytest.raises(ExternalCallError) as excinfo:
            waiter.run_fixed(["dotnet", "run"], 30)

        assert excinfo.value.returncode == 1
        assert not process.terminated

    def test_missing_executable(self):
        clock = FakeClock()

        def popen(args, **kwargs):
            raise FileNotFoundError(args[0])

        waiter = StartupWaiter(sleep=clock.sleep, clock=clock, popen=popen)

        with pytest.raises(ExternalCallError):
            waiter.run_fixed(["dotnet", "run"], 30)


class TestReadinessProbe:
    def test_polls_until_ready(self):
        process, clock = FakeProcess(), FakeClock()
        waiter, _ = make_waiter(
            process,
            clock,
            [requests.ConnectionError("refused"), Response(503), Response(200)],
        )

        elapsed = waiter.run_until_ready(
            ["dotnet", "run"], "http://localhost:5000/health/ready", timeout=60, interval=3
        )

        assert elapsed == 6
        assert clock.sleeps == [3, 3]
        assert process.terminated

    def test_timeout_is_a_failure(self):
        process, clock = FakeProcess(), FakeClock()
        waiter, _ = make_waiter(process, clock)

        with pytest.raises(ExternalCallError) as excinfo:
            waiter.run_until_ready(
                ["dotnet", "run"], "http://localhost:5000/health/ready", timeout=9, interval=3
            )

        assert "not ready after 9s" in excinfo.value.message
        assert process.terminated
