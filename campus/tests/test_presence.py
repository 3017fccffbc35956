import asyncio
import logging
from datetime import timedelta

import pytest
from django.utils import timezone

from profiles import presence
from profiles.models import PresenceRecord
from profiles.presence import PresenceTracker


@pytest.mark.django_db
class TestEffectiveStatus:
    def test_online_right_after_heartbeat(self, alice):
        record = presence.heartbeat(alice.id)
        assert presence.is_effectively_online(record)

    def test_missing_record_is_offline(self):
        assert presence.is_effectively_online(None) is False

    def test_recent_heartbeat_keeps_user_online_after_flag_clears(self, alice, settings):
        record = presence.heartbeat(alice.id)
        record = presence.mark_offline(alice.id)
        beat = record.last_heartbeat

        assert presence.is_effectively_online(record, now=beat + timedelta(seconds=settings.PRESENCE_STALE_SECONDS - 1))
        assert not presence.is_effectively_online(record, now=beat + timedelta(seconds=settings.PRESENCE_STALE_SECONDS + 1))

    def test_no_flicker_while_heartbeats_arrive_on_schedule(self, alice, settings):
        interval = timedelta(seconds=settings.PRESENCE_HEARTBEAT_SECONDS)
        record = presence.heartbeat(alice.id)
        record.is_online = False
        start = record.last_heartbeat
        for step in range(10):
            record.last_heartbeat = start + interval * step
            # just before the next beat lands
            now = record.last_heartbeat + interval - timedelta(milliseconds=1)
            assert presence.is_effectively_online(record, now=now)

    def test_expire_stale_clears_dead_sessions(self, alice, bob, settings):
        presence.heartbeat(alice.id)
        presence.heartbeat(bob.id)
        old = timezone.now() - timedelta(seconds=settings.PRESENCE_STALE_SECONDS * 2)
        PresenceRecord.objects.filter(user=alice).update(last_heartbeat=old)

        assert presence.expire_stale() == 1
        alice_record = PresenceRecord.objects.get(user=alice)
        assert alice_record.is_online is False
        assert not presence.is_effectively_online(alice_record)
        assert PresenceRecord.objects.get(user=bob).is_online is True

    def test_offline_write_keeps_last_heartbeat(self, alice):
        beat = presence.heartbeat(alice.id).last_heartbeat
        assert presence.mark_offline(alice.id).last_heartbeat == beat

    def test_event_shape(self, alice):
        record = presence.heartbeat(alice.id)
        event = presence.presence_event(record)
        assert event["type"] == "presence.update"
        assert event["user_id"] == alice.id
        assert event["is_online"] is True
        assert event["stamp"] == record.updated_at.timestamp()


@pytest.mark.django_db(transaction=True)
class TestPresenceTracker:
    async def test_start_and_cancel(self, monkeypatch):
        writes = []
        monkeypatch.setattr(presence, "mark_online", lambda user_id: writes.append(("online", user_id)))
        monkeypatch.setattr(presence, "mark_offline", lambda user_id: writes.append(("offline", user_id)))
        monkeypatch.setattr(presence, "heartbeat", lambda user_id: writes.append(("beat", user_id)))

        cancel = await PresenceTracker(interval=0.01).start(7)
        await asyncio.sleep(0.05)
        await cancel()
        await cancel()

        assert writes[0] == ("online", 7)
        assert writes[-1] == ("offline", 7)
        assert ("beat", 7) in writes
        assert writes.count(("offline", 7)) == 1

        settled = len(writes)
        await asyncio.sleep(0.03)
        assert len(writes) == settled

    async def test_failed_heartbeat_is_logged_and_retried(self, monkeypatch, caplog):
        beats = []

        def flaky_heartbeat(user_id):
            beats.append(user_id)
            if len(beats) == 1:
                raise RuntimeError("database is down")

        monkeypatch.setattr(presence, "mark_online", lambda user_id: None)
        monkeypatch.setattr(presence, "mark_offline", lambda user_id: None)
        monkeypatch.setattr(presence, "heartbeat", flaky_heartbeat)

        with caplog.at_level(logging.ERROR, logger="profiles.presence"):
            cancel = await PresenceTracker(interval=0.01).start(7)
            await asyncio.sleep(0.06)
            await cancel()

        assert len(beats) >= 2
        assert "database is down" in caplog.text


@pytest.mark.django_db
class TestPresenceViews:
    def test_heartbeat_and_read(self, alice, bob, client_for):
        response = client_for(alice).post("/profiles/heartbeat/")
        assert response.status_code == 200
        assert response.data["online"] is True

        response = client_for(bob).get(f"/profiles/presence/{alice.id}/")
        assert response.data["online"] is True

    def test_unknown_user(self, alice, client_for):
        assert client_for(alice).get("/profiles/presence/99999/").status_code == 404

    def test_batchmates_online_first(self, alice, bob, carol, client_for):
        presence.heartbeat(carol.id)
        response = client_for(alice).get("/profiles/batchmates/")
        assert [entry["name"] for entry in response.data] == ["Carol", "Bob"]
        assert response.data[0]["online"] is True
