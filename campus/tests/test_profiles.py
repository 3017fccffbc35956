import cloudinary.exceptions
import cloudinary.uploader
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from profiles.models import Profile
from profiles.serializers import roster_event


@pytest.mark.django_db
class TestMyProfile:
    def test_update_fields_and_name(self, alice, client_for):
        response = client_for(alice).post("/profiles/profile/", {
            "name": "Alice Liddell",
            "branch": "CSE",
            "year": "3",
            "pronouns": "she/her",
        })
        assert response.status_code == 200
        assert response.data["name"] == "Alice Liddell"
        alice.refresh_from_db()
        assert alice.name == "Alice Liddell"
        assert Profile.objects.get(user=alice).branch == "CSE"

    def test_picture_goes_to_cloudinary(self, alice, client_for, monkeypatch):
        calls = []

        def fake_upload(file, **options):
            calls.append(options)
            return {"secure_url": "https://res.cloudinary.com/test/profile_pictures/user_1.png"}

        monkeypatch.setattr(cloudinary.uploader, "upload", fake_upload)
        image = SimpleUploadedFile("me.png", b"\x89PNG fake", content_type="image/png")
        response = client_for(alice).post("/profiles/profile/", {"profile_picture": image})

        assert response.status_code == 200
        assert calls[0]["public_id"] == f"user_{alice.id}"
        assert Profile.objects.get(user=alice).profile_picture.endswith("user_1.png")

    def test_rejects_unsupported_picture(self, alice, client_for):
        image = SimpleUploadedFile("me.gif", b"GIF89a", content_type="image/gif")
        response = client_for(alice).post("/profiles/profile/", {"profile_picture": image})
        assert response.status_code == 400

    def test_cloudinary_failure_is_retryable(self, alice, client_for, monkeypatch):
        def failing_upload(file, **options):
            raise cloudinary.exceptions.Error("timeout")

        monkeypatch.setattr(cloudinary.uploader, "upload", failing_upload)
        image = SimpleUploadedFile("me.jpg", b"\xff\xd8 fake", content_type="image/jpeg")
        response = client_for(alice).post("/profiles/profile/", {"profile_picture": image})
        assert response.status_code == 503
        assert response.data["retry"] is True


@pytest.mark.django_db
class TestRoster:
    def test_profile_save_publishes_roster_entry(self, alice, monkeypatch, django_capture_on_commit_callbacks):
        sent = []
        monkeypatch.setattr("live.broadcast.group_send", lambda group, event: sent.append((group, event)))
        profile = Profile.objects.get(user=alice)
        profile.branch = "ECE"
        with django_capture_on_commit_callbacks(execute=True):
            profile.save()

        group, event = sent[-1]
        assert group == "roster"
        assert event == roster_event(profile)
        assert event["user"]["branch"] == "ECE"

    def test_view_other_profile(self, alice, bob, client_for):
        response = client_for(alice).get(f"/profiles/user/{bob.id}/")
        assert response.data["email"] == "bob@miet.ac.in"
        assert client_for(alice).get("/profiles/user/99999/").status_code == 404
