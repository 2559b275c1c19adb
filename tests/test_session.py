from bson import ObjectId

from taskboard.auth.models import Identity
from taskboard.auth.session import SessionStore

ALICE = Identity(id=ObjectId(), name="Alice", email="a@x.com")


class _Clock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_token_resolves_until_max_age():
    clock = _Clock()
    sessions = SessionStore(max_age=60, clock=clock)
    token = sessions.create(ALICE)
    clock.now += 59
    assert sessions.get(token) == ALICE
    clock.now += 1
    assert sessions.get(token) is None
    assert len(sessions) == 0


def test_expired_tokens_are_evicted_on_create():
    clock = _Clock()
    sessions = SessionStore(max_age=60, clock=clock)
    for _ in range(50):
        sessions.create(ALICE)
    assert len(sessions) == 50

    clock.now += 61
    fresh = sessions.create(ALICE)
    assert len(sessions) == 1
    assert sessions.get(fresh) == ALICE


def test_destroy_and_unknown_tokens():
    sessions = SessionStore(max_age=60)
    token = sessions.create(ALICE)
    sessions.destroy(token)
    sessions.destroy(token)
    assert sessions.get(token) is None
    assert sessions.get("") is None


def test_app_sessions_follow_configured_lifetime(app, client):
    assert app.state.sessions.max_age == app.state.settings.session_max_age


def test_cookieless_logins_do_not_accumulate_past_lifetime(app, client):
    clock = _Clock()
    app.state.sessions.clock = clock
    client.post("/register", data={"name": "Alice", "email": "a@x.com", "password": "pw1"})
    for _ in range(20):
        client.cookies.clear()
        client.post("/login", data={"email": "a@x.com", "password": "pw1"}, follow_redirects=False)
    assert len(app.state.sessions) == 20

    clock.now += app.state.settings.session_max_age
    client.cookies.clear()
    client.post("/login", data={"email": "a@x.com", "password": "pw1"}, follow_redirects=False)
    assert len(app.state.sessions) == 1
    assert client.get("/", follow_redirects=False).status_code == 200
