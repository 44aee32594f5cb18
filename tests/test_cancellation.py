import pytest

from musiclib.utils.cancellation import CancellationRequested, CancellationToken


@pytest.mark.unit
def test_token_without_deadline_only_cancels_explicitly():
    token = CancellationToken()
    assert token.is_cancelled is False
    assert token.remaining() is None
    token.raise_if_cancelled()

    token.cancel()
    assert token.is_cancelled is True
    with pytest.raises(CancellationRequested, match="before persisting"):
        token.raise_if_cancelled("persisting")


@pytest.mark.unit
def test_token_deadline_uses_clock():
    now = [100.0]
    token = CancellationToken(2.5, clock=lambda: now[0])
    assert token.remaining() == 2.5

    now[0] = 102.0
    assert token.is_cancelled is False
    assert token.remaining() == pytest.approx(0.5)

    now[0] = 103.0
    assert token.is_cancelled is True
    assert token.remaining() == 0.0
