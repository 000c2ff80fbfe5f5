from tweetfleet.cache import EphemeralStore
from tweetfleet.oauth_state import OAuthStateManager


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _manager(clock: FakeClock, ttl: float = 300) -> OAuthStateManager:
    store = EphemeralStore(default_ttl=ttl, sweep_interval=ttl, clock=clock)
    return OAuthStateManager(store, ttl_seconds=ttl)


def test_issued_token_redeems_exactly_once():
    manager = _manager(FakeClock())
    token = manager.issue()

    assert manager.redeem(token) is True
    assert manager.redeem(token) is False
    assert manager.redeem(token) is False


def test_issued_tokens_are_unique_and_opaque():
    manager = _manager(FakeClock())
    tokens = {manager.issue() for _ in range(50)}

    assert len(tokens) == 50
    assert all(len(token) == 32 for token in tokens)


def test_unknown_and_empty_tokens_are_rejected():
    manager = _manager(FakeClock())

    assert manager.redeem("never-issued") is False
    assert manager.redeem("") is False


def test_token_expires_without_being_redeemed():
    clock = FakeClock()
    manager = _manager(clock, ttl=300)
    token = manager.issue()

    clock.now += 301

    assert manager.redeem(token) is False


def test_token_redeemable_just_before_expiry():
    clock = FakeClock()
    manager = _manager(clock, ttl=300)
    token = manager.issue()

    clock.now += 299

    assert manager.redeem(token) is True
