from __future__ import annotations

import errno
import signal

import pytest

from ztcp.application.cancellation import CancellationToken


def test_token_starts_clear_and_can_be_reset() -> None:
    token = CancellationToken()
    assert token.cancelled is False

    token.cancel()
    assert token.cancelled is True

    token.reset()
    assert token.cancelled is False


def test_interrupt_cancels_and_raises_eintr() -> None:
    token = CancellationToken()

    with pytest.raises(InterruptedError) as excinfo:
        token.interrupt(signal.SIGINT, None)

    assert excinfo.value.errno == errno.EINTR
    assert token.cancelled is True


@pytest.mark.skipif(not hasattr(signal, "SIGUSR1"), reason="requires SIGUSR1")
def test_interrupt_on_installs_and_restores_handler() -> None:
    token = CancellationToken()
    previous = signal.getsignal(signal.SIGUSR1)

    with token.interrupt_on(signal.SIGUSR1):
        assert signal.getsignal(signal.SIGUSR1) == token.interrupt
        with pytest.raises(InterruptedError):
            signal.raise_signal(signal.SIGUSR1)

    assert token.cancelled is True
    assert signal.getsignal(signal.SIGUSR1) == previous
