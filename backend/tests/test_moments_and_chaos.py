"""Tests for the status-gated features: the moments feed and the chaos session handle."""
from gamenight.services import chaos_service, moment_service
from gamenight.services.chaos_service import ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH
from tests.conftest import add_guest, as_token, as_user, create_game_night, create_test_user, set_status


def _in_progress(client):
    host = create_test_user(client, name="Hana")
    event = create_game_night(client, host)
    guest = add_guest(client, event, host, name="Gus")["guest"]
    set_status(client, event, host, "LOCKED_IN")
    set_status(client, event, host, "IN_PROGRESS")
    return host, event, guest


class TestMoments:

    def test_locked_while_planning(self, client):
        host = create_test_user(client)
        event = create_game_night(client, host)
        url = f"/api/game-nights/{event['event_id']}/moments/"
        assert client.get(url, params=as_user(host)).status_code == 409
        resp = client.post(url, params=as_user(host), json={"type": "QUOTE", "content": "too early"})
        assert resp.status_code == 409

    def test_capture_and_list_newest_first(self, client):
        host, event, guest = _in_progress(client)
        url = f"/api/game-nights/{event['event_id']}/moments/"
        client.post(url, params=as_token(guest), json={"type": "QUOTE", "content": "I meant to do that"})
        resp = client.post(url, params=as_user(host), json={"type": "CHAOS", "content": "Table flip"})
        assert resp.status_code == 201
        assert resp.json()["created_by_id"] != guest["guest_id"]

        feed = client.get(url, params=as_token(guest)).json()
        assert [m["content"] for m in feed] == ["Table flip", "I meant to do that"]

        detail = client.get(f"/api/game-nights/{event['event_id']}", params=as_user(host)).json()
        assert len(detail["moments"]) == 2

    def test_still_open_after_completion(self, client):
        host, event, guest = _in_progress(client)
        set_status(client, event, host, "COMPLETED")
        resp = client.post(
            f"/api/game-nights/{event['event_id']}/moments/", params=as_token(guest),
            json={"type": "HIGHLIGHT", "content": "Gus won everything"},
        )
        assert resp.status_code == 201

    def test_feed_capped(self, client, monkeypatch):
        monkeypatch.setattr(moment_service, "FEED_LIMIT", 3)
        host, event, guest = _in_progress(client)
        url = f"/api/game-nights/{event['event_id']}/moments/"
        for i in range(5):
            client.post(url, params=as_user(host), json={"type": "QUOTE", "content": f"quote {i}"})
        feed = client.get(url, params=as_user(host)).json()
        assert [m["content"] for m in feed] == ["quote 4", "quote 3", "quote 2"]

    def test_blank_content_rejected(self, client):
        host, event, guest = _in_progress(client)
        resp = client.post(
            f"/api/game-nights/{event['event_id']}/moments/", params=as_user(host),
            json={"type": "QUOTE", "content": "  "},
        )
        assert resp.status_code == 422


class TestChaosSession:

    def test_locked_until_in_progress(self, client):
        host = create_test_user(client)
        event = create_game_night(client, host)
        resp = client.post(f"/api/game-nights/{event['event_id']}/chaos-session/", params=as_user(host))
        assert resp.status_code == 409

    def test_start_is_idempotent(self, client):
        host, event, guest = _in_progress(client)
        url = f"/api/game-nights/{event['event_id']}/chaos-session/"
        first = client.post(url, params=as_user(host)).json()
        second = client.post(url, params=as_user(host)).json()
        assert first == second
        assert len(first["room_code"]) == ROOM_CODE_LENGTH
        assert set(first["room_code"]) <= set(ROOM_CODE_ALPHABET)
        assert first["join_url"].endswith(f"/chaos/join/{first['room_code']}")

        seen = client.get(url, params=as_token(guest)).json()
        assert seen["room_code"] == first["room_code"]

    def test_guest_cannot_start(self, client):
        host, event, guest = _in_progress(client)
        resp = client.post(f"/api/game-nights/{event['event_id']}/chaos-session/", params=as_token(guest))
        assert resp.status_code == 403

    def test_no_session_is_404(self, client):
        host, event, guest = _in_progress(client)
        resp = client.get(f"/api/game-nights/{event['event_id']}/chaos-session/", params=as_user(host))
        assert resp.status_code == 404

    def test_room_code_retries_on_collision(self, client, db, monkeypatch):
        host, event, guest = _in_progress(client)
        taken = client.post(f"/api/game-nights/{event['event_id']}/chaos-session/", params=as_user(host)).json()
        picks = iter(taken["room_code"] + "ZZZZZZ")
        monkeypatch.setattr(chaos_service.secrets, "choice", lambda alphabet: next(picks))
        assert chaos_service.new_room_code(db) == "ZZZZZZ"
