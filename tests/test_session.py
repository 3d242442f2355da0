from gigauth.auth.session import SessionManager
from gigauth.core.principals import Role, SessionUser

ALICE = SessionUser(id="w-1", role=Role.WORKER)


def test_cookie_format_and_immediate_authentication(sessions):
    record, cookie = sessions.create(ALICE)
    assert cookie.startswith("s:" + record.sid + ".")
    assert sessions.resolve(cookie) == ALICE


def test_tampered_cookie_is_same_as_no_cookie(sessions):
    _, cookie = sessions.create(ALICE)
    assert sessions.resolve(cookie[:-2] + ("A" if cookie[-2] != "A" else "B") + cookie[-1]) is None
    assert sessions.resolve("s:" + "x" * 43 + ".forged") is None
    assert sessions.resolve("") is None
    assert sessions.resolve(None) is None


def test_signature_from_other_secret_is_rejected(sessions, clock):
    other = SessionManager("another-secret", clock=clock, store=sessions.store)
    _, cookie = other.create(ALICE)
    assert sessions.resolve(cookie) is None


def test_unsigned_session_id_is_rejected(sessions):
    record, _ = sessions.create(ALICE)
    assert sessions.resolve(record.sid) is None
    assert sessions.resolve("s:" + record.sid) is None


def test_logout_destroys_session(sessions):
    _, cookie = sessions.create(ALICE)
    assert sessions.destroy(cookie)
    assert sessions.resolve(cookie) is None
    assert not sessions.destroy(cookie)


def test_session_expires_after_max_age(sessions, clock):
    _, cookie = sessions.create(ALICE)
    clock.advance(sessions.max_age - 1)
    assert sessions.resolve(cookie) == ALICE
    clock.advance(1)
    assert sessions.resolve(cookie) is None
    assert len(sessions.store) == 0


def test_activity_does_not_extend_fixed_expiry(sessions, clock):
    record, cookie = sessions.create(ALICE)
    for _ in range(4):
        clock.advance(sessions.max_age / 4 - 1)
        assert sessions.resolve(cookie) == ALICE
    assert sessions.store.get(record.sid).expires_at == record.expires_at
    clock.advance(10)
    assert sessions.resolve(cookie) is None


def test_resave_does_not_resurrect_destroyed_session(sessions, clock):
    record, cookie = sessions.create(ALICE)
    sessions.destroy(cookie)
    sessions.store.touch(record.sid, clock())
    assert sessions.store.get(record.sid) is None


def test_sweep_purges_only_expired(sessions, clock):
    _, old = sessions.create(ALICE)
    clock.advance(sessions.max_age - 10)
    _, fresh = sessions.create(SessionUser(id="e-1", role=Role.EMPLOYER))
    clock.advance(10)
    assert sessions.sweep() == 1
    assert sessions.resolve(old) is None
    assert sessions.resolve(fresh).role is Role.EMPLOYER


def test_sweep_loop_survives_a_failing_sweep():
    import asyncio

    from gigauth.app import _sweep_sessions

    class FlakySessions:
        calls = 0

        def sweep(self):
            self.calls += 1
            if self.calls == 1:
                raise RuntimeError("store unavailable")
            return 0

    async def run(flaky):
        task = asyncio.create_task(_sweep_sessions(flaky, 0))
        for _ in range(100):
            if flaky.calls >= 3:
                break
            await asyncio.sleep(0)
        assert not task.done()
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    flaky = FlakySessions()
    asyncio.run(run(flaky))
    assert flaky.calls >= 3
