import pytest

from campus.errors import EmptyText, NotFound, ValidationError
from feed import services
from feed.models import Post


@pytest.fixture
def post(alice):
    return services.create_post(alice, "first day", "https://cdn.example.com/p/1.jpg", Post.PHOTO)


@pytest.mark.django_db
class TestCreatePost:
    def test_defaults(self, post):
        assert post.author_name == "Alice"
        assert post.reactions == {"iloveu": [], "kataiZeher": [], "kyaDekhLiya": []}

    def test_bad_media_type(self, alice):
        with pytest.raises(ValidationError):
            services.create_post(alice, "", "https://cdn.example.com/p/1.gif", "gif")

    def test_bad_url(self, alice):
        with pytest.raises(ValidationError):
            services.create_post(alice, "", "ftp://cdn.example.com/p/1.jpg", Post.PHOTO)


@pytest.mark.django_db
class TestReactions:
    def test_toggle(self, post, alice, bob):
        services.toggle_post_reaction(post.id, bob, "iloveu")
        reactions = services.toggle_post_reaction(post.id, alice, "iloveu")
        assert reactions["iloveu"] == [bob.id, alice.id]

        reactions = services.toggle_post_reaction(post.id, bob, "iloveu")
        assert reactions["iloveu"] == [alice.id]

    def test_unknown_reaction(self, post, bob):
        with pytest.raises(ValidationError):
            services.toggle_post_reaction(post.id, bob, "meh")

    def test_missing_post(self, bob):
        with pytest.raises(NotFound):
            services.toggle_post_reaction(99999, bob, "iloveu")


@pytest.mark.django_db
class TestCommentStreak:
    def test_three_in_a_row(self, post, carol):
        streaks = [services.add_comment(post.id, carol, f"comment {i}").streak_count for i in range(3)]
        assert streaks == [1, 2, 3]

    def test_interruption_resets(self, post, carol, bob):
        services.add_comment(post.id, carol, "one")
        services.add_comment(post.id, carol, "two")
        assert services.add_comment(post.id, bob, "me too").streak_count == 1
        assert services.add_comment(post.id, carol, "three").streak_count == 1
        assert services.add_comment(post.id, carol, "four").streak_count == 2

    def test_streaks_are_per_post(self, post, alice, carol):
        other = services.create_post(alice, "", "https://cdn.example.com/p/2.jpg", Post.PHOTO)
        services.add_comment(post.id, carol, "one")
        assert services.add_comment(other.id, carol, "elsewhere").streak_count == 1
        assert services.add_comment(post.id, carol, "two").streak_count == 2

    def test_empty_comment(self, post, carol):
        with pytest.raises(EmptyText):
            services.add_comment(post.id, carol, "   ")


@pytest.mark.django_db
class TestFeedViews:
    def test_create_list_react_comment(self, alice, bob, client_for):
        response = client_for(alice).post("/feed/posts/", {
            "media_url": "https://cdn.example.com/p/9.mp4",
            "media_type": "video",
            "caption": "clip",
        }, format="json")
        assert response.status_code == 201
        post_id = response.data["id"]

        response = client_for(bob).post(f"/feed/posts/{post_id}/react/", {"reaction": "kataiZeher"}, format="json")
        assert response.data["reactions"]["kataiZeher"] == [bob.id]

        response = client_for(bob).post(f"/feed/posts/{post_id}/comments/", {"text": "nice"}, format="json")
        assert response.status_code == 201
        assert response.data["streak_count"] == 1

        listing = client_for(bob).get("/feed/posts/")
        assert listing.data["count"] == 1
        assert listing.data["results"][0]["comments"][0]["text"] == "nice"

    def test_unknown_reaction(self, alice, bob, client_for):
        post = services.create_post(alice, "", "https://cdn.example.com/p/1.jpg", Post.PHOTO)
        response = client_for(bob).post(f"/feed/posts/{post.id}/react/", {"reaction": "meh"}, format="json")
        assert response.status_code == 400
