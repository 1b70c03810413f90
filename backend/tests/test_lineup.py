"""Tests for the game lineup and vote toggling.

Vote aggregates are read-time sums; the concurrency test fires many votes for one
(entry, guest) pair from separate threads and sessions and checks one row survives.
"""
import threading

import pytest

from gamenight.errors import ValidationError
from gamenight.models.lineup import Vote
from gamenight.services import lineup_service
from gamenight.services.identity_service import InviteCapability
from tests.conftest import (
    add_guest, add_lineup_entry, as_token, as_user, create_game_night, create_test_user,
)


def _setup(client):
    host = create_test_user(client, name="Hana")
    event = create_game_night(client, host)
    return host, event


def _vote(client, event, entry, guest, value):
    return client.post(
        f"/api/game-nights/{event['event_id']}/lineup/{entry['entry_id']}/vote",
        params=as_token(guest), json={"value": value},
    )


def _lineup(client, event, params):
    return client.get(f"/api/game-nights/{event['event_id']}/lineup/", params=params).json()


class TestLineupEntries:

    def test_entries_appended_in_play_order(self, client):
        host, event = _setup(client)
        first = add_lineup_entry(client, event, host, custom_name="Catan")
        second = add_lineup_entry(client, event, host, game_ref="bgg-822", game_title="Carcassonne")
        assert first["play_order"] == 0
        assert second["play_order"] == 1
        assert second["display_name"] == "Carcassonne"
        assert first["status"] == "QUEUED"
        assert first["vote_count"] == 0

    def test_exactly_one_game_source(self, client):
        host, event = _setup(client)
        url = f"/api/game-nights/{event['event_id']}/lineup/"
        assert client.post(url, params=as_user(host), json={}).status_code == 422
        both = client.post(url, params=as_user(host), json={"game_ref": "x", "custom_name": "y"})
        assert both.status_code == 422

    def test_guest_cannot_add(self, client):
        host, event = _setup(client)
        guest = add_guest(client, event, host, name="Gus")["guest"]
        resp = client.post(
            f"/api/game-nights/{event['event_id']}/lineup/", params=as_token(guest), json={"custom_name": "Uno"},
        )
        assert resp.status_code == 403

    def test_play_then_record_outcome(self, client):
        host, event = _setup(client)
        entry = add_lineup_entry(client, event, host, custom_name="Coup")
        url = f"/api/game-nights/{event['event_id']}/lineup/{entry['entry_id']}"

        playing = client.patch(url, params=as_user(host), json={"status": "PLAYING"}).json()
        assert playing["started_at"] is not None
        assert playing["completed_at"] is None

        done = client.patch(url, params=as_user(host), json={
            "status": "COMPLETED", "winner_name": "Gus", "chaos_level": 4, "notes": "Table flipped",
        }).json()
        assert done["status"] == "COMPLETED"
        assert done["winner_name"] == "Gus"
        assert done["chaos_level"] == 4
        assert done["completed_at"] is not None

    def test_chaos_level_range(self, client):
        host, event = _setup(client)
        entry = add_lineup_entry(client, event, host, custom_name="Coup")
        resp = client.patch(
            f"/api/game-nights/{event['event_id']}/lineup/{entry['entry_id']}",
            params=as_user(host), json={"chaos_level": 6},
        )
        assert resp.status_code == 422

    def test_record_outcome_service(self, client, db):
        host, event = _setup(client)
        entry = add_lineup_entry(client, event, host, custom_name="Coup")
        host_row = client.get(f"/api/game-nights/{event['event_id']}/guests/", params=as_user(host)).json()[0]
        with pytest.raises(ValidationError):
            lineup_service.record_outcome(
                db, event["event_id"], InviteCapability(host_row["invite_token"]), entry["entry_id"],
                winner_name="Hana", chaos_level=0,
            )

    def test_remove_entry_drops_votes(self, client, db):
        host, event = _setup(client)
        guest = add_guest(client, event, host, name="Gus")["guest"]
        entry = add_lineup_entry(client, event, host, custom_name="Coup")
        _vote(client, event, entry, guest, 1)

        resp = client.delete(
            f"/api/game-nights/{event['event_id']}/lineup/{entry['entry_id']}", params=as_user(host),
        )
        assert resp.status_code == 204
        assert _lineup(client, event, as_user(host)) == []
        assert db.query(Vote).filter(Vote.entry_id == entry["entry_id"]).count() == 0


class TestVoting:

    def test_same_vote_twice_toggles_off(self, client):
        host, event = _setup(client)
        gus = add_guest(client, event, host, name="Gus")["guest"]
        pat = add_guest(client, event, host, name="Pat")["guest"]
        entry = add_lineup_entry(client, event, host, custom_name="Catan")

        _vote(client, event, entry, pat, 1)
        first = _vote(client, event, entry, gus, 1).json()
        assert first == {"entry_id": entry["entry_id"], "vote_count": 2, "voter_count": 2, "my_vote": 1}

        second = _vote(client, event, entry, gus, 1).json()
        assert second["my_vote"] == 0
        assert second["vote_count"] == 1
        assert second["voter_count"] == 1

    def test_switching_vote(self, client):
        host, event = _setup(client)
        gus = add_guest(client, event, host, name="Gus")["guest"]
        entry = add_lineup_entry(client, event, host, custom_name="Catan")
        _vote(client, event, entry, gus, 1)
        result = _vote(client, event, entry, gus, -1).json()
        assert result["my_vote"] == -1
        assert result["vote_count"] == -1

    def test_out_of_range_vote_rejected(self, client, db):
        host, event = _setup(client)
        gus = add_guest(client, event, host, name="Gus")["guest"]
        entry = add_lineup_entry(client, event, host, custom_name="Catan")
        assert _vote(client, event, entry, gus, 2).status_code == 422
        with pytest.raises(ValidationError):
            lineup_service.vote(db, event["event_id"], InviteCapability(gus["invite_token"]), entry["entry_id"], 5)

    def test_unsupported_dialect_is_refused(self, client, db, monkeypatch):
        host, event = _setup(client)
        gus = add_guest(client, event, host, name="Gus")["guest"]
        entry = add_lineup_entry(client, event, host, custom_name="Catan")
        monkeypatch.setattr(db.get_bind().dialect, "name", "mysql")
        with pytest.raises(NotImplementedError, match="mysql"):
            lineup_service._upsert_statement(db, event["event_id"], entry["entry_id"], gus["guest_id"], 1)
        monkeypatch.undo()
        assert db.query(Vote).count() == 0

    def test_vote_needs_a_guest(self, client):
        host, event = _setup(client)
        entry = add_lineup_entry(client, event, host, custom_name="Catan")
        resp = client.post(
            f"/api/game-nights/{event['event_id']}/lineup/{entry['entry_id']}/vote", json={"value": 1},
        )
        assert resp.status_code == 401

    def test_unknown_entry_is_404(self, client):
        host, event = _setup(client)
        gus = add_guest(client, event, host, name="Gus")["guest"]
        resp = _vote(client, event, {"entry_id": "missing"}, gus, 1)
        assert resp.status_code == 404

    def test_host_votes_too(self, client):
        host, event = _setup(client)
        entry = add_lineup_entry(client, event, host, custom_name="Catan")
        resp = client.post(
            f"/api/game-nights/{event['event_id']}/lineup/{entry['entry_id']}/vote",
            params=as_user(host), json={"value": 1},
        )
        assert resp.json()["vote_count"] == 1

    def test_my_vote_is_per_viewer(self, client):
        host, event = _setup(client)
        gus = add_guest(client, event, host, name="Gus")["guest"]
        pat = add_guest(client, event, host, name="Pat")["guest"]
        entry = add_lineup_entry(client, event, host, custom_name="Catan")
        _vote(client, event, entry, gus, -1)
        assert _lineup(client, event, as_token(gus))[0]["my_vote"] == -1
        assert _lineup(client, event, as_token(pat))[0]["my_vote"] == 0


class TestRanking:

    def test_rank_is_stable_on_ties(self):
        rows = [
            {"entry_id": "c", "play_order": 2, "vote_count": 1},
            {"entry_id": "a", "play_order": 0, "vote_count": 1},
            {"entry_id": "b", "play_order": 1, "vote_count": 3},
            {"entry_id": "d", "play_order": 3, "vote_count": -1},
        ]
        assert [r["entry_id"] for r in lineup_service.rank(rows)] == ["b", "a", "c", "d"]

    def test_downvoted_entry_drops_below(self, client):
        host, event = _setup(client)
        gus = add_guest(client, event, host, name="Gus")["guest"]
        first = add_lineup_entry(client, event, host, custom_name="First")
        add_lineup_entry(client, event, host, custom_name="Second")
        _vote(client, event, first, gus, -1)
        names = [e["display_name"] for e in _lineup(client, event, as_user(host))]
        assert names == ["Second", "First"]


class TestConcurrentVotes:

    def test_one_row_per_guest_and_entry(self, client, session_factory):
        host, event = _setup(client)
        gus = add_guest(client, event, host, name="Gus")["guest"]
        entry = add_lineup_entry(client, event, host, custom_name="Catan")
        credential = InviteCapability(gus["invite_token"])
        errors = []
        workers = 8

        def cast():
            session = session_factory()
            try:
                lineup_service.vote(session, event["event_id"], credential, entry["entry_id"], 1)
            except Exception as exc:  # collected and asserted below
                errors.append(exc)
            finally:
                session.close()

        threads = [threading.Thread(target=cast) for _ in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        check = session_factory()
        try:
            rows = check.query(Vote).filter(Vote.entry_id == entry["entry_id"]).all()
        finally:
            check.close()
        assert len(rows) == 1
        # an even number of +1 toggles nets back to zero
        assert rows[0].value == (1 if workers % 2 else 0)
