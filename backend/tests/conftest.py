"""Root conftest — shared test configuration and fakes.

Invariants:
    - Tests never reach a real ledger gateway, Consul agent or peer
    - Settings come from defaults, not from a developer's .env

Design Decisions:
    - FakeLedger records every invocation: tests assert on call count,
      transaction name, mode and argument order
"""

import os

import pytest

# Ensure tests don't accidentally delegate to a real peer
os.environ.setdefault("REMOTE_ENABLED", "false")
os.environ.setdefault("DISCOVERY_ENABLED", "false")


class FakeLedger:
    """LedgerClient double. Set `result` or `error` before dispatching."""

    def __init__(self, result: bytes = b"ok", error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls: list[dict] = []

    async def submit(self, transaction, args):
        return self._record("submit", transaction, args)

    async def evaluate(self, transaction, args):
        return self._record("evaluate", transaction, args)

    def _record(self, mode, transaction, args):
        self.calls.append(
            {"mode": mode, "transaction": transaction, "args": list(args)},
        )
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def fake_ledger():
    return FakeLedger()
