"""
Tests for the post endpoints.
"""
import pytest

from blog_api.models import Comment, Post

from .conftest import make_user

POSTS_URL = "/api/posts/"


def make_post(author, title, status=Post.Status.PUBLISHED, **extra):
    extra.setdefault("content", f"Body of {title} with some words in it.")
    return Post.objects.create(author=author, title=title, status=status, **extra)


class TestCreatePost:
    def test_create(self, db, api, user):
        response = api.post(
            POSTS_URL,
            {
                "title": "Hello World!",
                "content": "A first post that is long enough.",
                "category": "Travel",
                "tags": ["Trips", "europe"],
                "status": "published",
            },
            user=user,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["slug"] == "hello-world"
        assert data["category"] == "Travel"
        assert sorted(data["tags"]) == ["europe", "trips"]
        assert data["author"]["id"] == user.pk
        assert data["is_published"] is True
        assert data["published_at"] is not None
        assert data["read_time"] == 1
        assert data["excerpt"].endswith("...")

    def test_defaults_to_draft_in_other(self, db, api, user):
        response = api.post(
            POSTS_URL,
            {"title": "Quiet", "content": "Nobody should see this yet."},
            user=user,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "draft"
        assert data["category"] == "Other"
        assert data["published_at"] is None

    def test_requires_auth(self, db, api):
        response = api.post(POSTS_URL, {"title": "Anon", "content": "Anonymous content"})

        assert response.status_code == 401
        assert Post.objects.count() == 0

    def test_validation(self, db, api, user):
        response = api.post(
            POSTS_URL,
            {
                "title": "",
                "content": "short",
                "category": "Gardening",
                "tags": "not-a-list",
                "excerpt": "x" * 301,
            },
            user=user,
        )

        assert response.status_code == 400
        errors = {e["field"]: e["message"] for e in response.json()["errors"]}
        assert errors == {
            "title": "Title is required",
            "content": "Content must be at least 10 characters long",
            "category": "Invalid category",
            "tags": "Tags must be an array",
            "excerpt": "Excerpt cannot exceed 300 characters",
        }

    def test_non_string_fields_rejected(self, db, api, user):
        response = api.post(
            POSTS_URL,
            {"title": ["a", "b"], "content": 12345678901, "excerpt": {"x": 1}},
            user=user,
        )

        assert response.status_code == 400
        errors = {e["field"]: e["message"] for e in response.json()["errors"]}
        assert errors == {
            "title": "Must be a string",
            "content": "Must be a string",
            "excerpt": "Must be a string",
        }
        assert Post.objects.count() == 0


class TestListPosts:
    def test_only_published(self, db, api, user, post):
        make_post(user, "Hidden draft", status=Post.Status.DRAFT)
        make_post(user, "Old news", status=Post.Status.ARCHIVED)

        response = api.get(POSTS_URL)

        assert response.status_code == 200
        titles = [p["title"] for p in response.json()["data"]]
        assert titles == ["Test Post"]

    def test_pagination(self, db, api, user):
        for i in range(25):
            make_post(user, f"Post number {i}")

        response = api.get(POSTS_URL, {"page": 2, "limit": 10})

        body = response.json()
        assert len(body["data"]) == 10
        assert body["pagination"] == {"page": 2, "limit": 10, "total": 25, "pages": 3}

        last = api.get(POSTS_URL, {"page": 3, "limit": 10}).json()
        assert len(last["data"]) == 5

    def test_bad_pagination_params_fall_back(self, db, api, post):
        body = api.get(POSTS_URL, {"page": "zero", "limit": -4}).json()

        assert body["pagination"]["page"] == 1
        assert body["pagination"]["limit"] == 10

    def test_page_past_the_end(self, db, api, post):
        for page in (2, "99999999999999999999"):
            response = api.get(POSTS_URL, {"page": page})

            assert response.status_code == 200
            body = response.json()
            assert body["data"] == []
            assert body["pagination"]["total"] == 1
            assert body["pagination"]["pages"] == 1

    def test_empty_listing(self, db, api):
        body = api.get(POSTS_URL).json()

        assert body["data"] == []
        assert body["pagination"] == {"page": 1, "limit": 10, "total": 0, "pages": 0}

    def test_search(self, db, api, user, post):
        tagged = make_post(user, "Unrelated title")
        tagged.set_tags(["Django"])
        make_post(user, "Cooking", content="Recipes for pasta and more.")

        response = api.get(POSTS_URL, {"search": "django"})

        titles = [p["title"] for p in response.json()["data"]]
        assert titles == ["Unrelated title"]

        response = api.get(POSTS_URL, {"search": "PASTA"})
        assert [p["title"] for p in response.json()["data"]] == ["Cooking"]

    def test_category_and_author_filters(self, db, api, user, other_user, post):
        make_post(other_user, "Road trip", category="Travel")

        by_category = api.get(POSTS_URL, {"category": "Travel"}).json()["data"]
        by_author = api.get(POSTS_URL, {"author": user.pk}).json()["data"]

        assert [p["title"] for p in by_category] == ["Road trip"]
        assert [p["title"] for p in by_author] == ["Test Post"]

    def test_sorting(self, db, api, user):
        make_post(user, "Banana")
        make_post(user, "Apple")

        response = api.get(POSTS_URL, {"sort_by": "title", "sort_order": "asc"})

        assert [p["title"] for p in response.json()["data"]] == ["Apple", "Banana"]

    def test_counts(self, db, api, post, user, other_user, comment):
        post.like(other_user)

        data = api.get(POSTS_URL).json()["data"][0]

        assert data["like_count"] == 1
        assert data["comment_count"] == 1


class TestPostDetail:
    def test_by_slug(self, db, api, post, comment, user):
        reply = Comment.objects.create(post=post, author=user, parent=comment, content="Thanks")

        response = api.get(f"{POSTS_URL}test-post/")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == post.pk
        assert data["content"] == post.content
        assert data["view_count"] == 1
        assert [c["id"] for c in data["comments"]] == [comment.pk]
        assert [r["id"] for r in data["comments"][0]["replies"]] == [reply.pk]

    def test_view_count_increments(self, db, api, post):
        api.get(f"{POSTS_URL}test-post/")
        api.get(f"{POSTS_URL}test-post/")

        post.refresh_from_db()
        assert post.view_count == 2

    def test_unknown_slug(self, db, api):
        response = api.get(f"{POSTS_URL}missing/")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Post not found"}

    def test_draft_not_visible(self, db, api, user):
        make_post(user, "Secret", status=Post.Status.DRAFT)

        response = api.get(f"{POSTS_URL}secret/")

        assert response.status_code == 404


class TestUpdatePost:
    def test_owner_updates(self, db, api, post, user):
        response = api.put(
            f"{POSTS_URL}{post.pk}/",
            {"title": "Renamed Post", "tags": ["fresh"]},
            user=user,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Renamed Post"
        assert data["slug"] == "renamed-post"
        assert data["tags"] == ["fresh"]
        assert data["content"] == post.content

    def test_other_user_forbidden(self, db, api, post, other_user):
        response = api.put(f"{POSTS_URL}{post.pk}/", {"title": "Hijacked"}, user=other_user)

        assert response.status_code == 403
        assert response.json()["message"] == "Not authorized to update this post"
        post.refresh_from_db()
        assert post.title == "Test Post"

    def test_admin_updates(self, db, api, post, admin_user):
        response = api.put(f"{POSTS_URL}{post.pk}/", {"status": "archived"}, user=admin_user)

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "archived"

    def test_anonymous(self, db, api, post):
        response = api.put(f"{POSTS_URL}{post.pk}/", {"title": "Nope"})

        assert response.status_code == 401

    def test_missing(self, db, api, user):
        response = api.put(f"{POSTS_URL}999/", {"title": "Nope"}, user=user)

        assert response.status_code == 404

    def test_invalid_update(self, db, api, post, user):
        response = api.put(f"{POSTS_URL}{post.pk}/", {"content": "tiny"}, user=user)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "content"


class TestDeletePost:
    def test_owner_deletes_with_comments(self, db, api, post, comment, user):
        Comment.objects.create(post=post, author=user, parent=comment, content="Reply")

        response = api.delete(f"{POSTS_URL}{post.pk}/", user=user)

        assert response.status_code == 200
        assert response.json()["message"] == "Post deleted successfully"
        assert not Post.objects.exists()
        assert not Comment.objects.exists()

    def test_other_user_forbidden(self, db, api, post, other_user):
        response = api.delete(f"{POSTS_URL}{post.pk}/", user=other_user)

        assert response.status_code == 403
        assert Post.objects.filter(pk=post.pk).exists()

    def test_admin_deletes(self, db, api, post, admin_user):
        response = api.delete(f"{POSTS_URL}{post.pk}/", user=admin_user)

        assert response.status_code == 200
        assert not Post.objects.exists()


class TestLikes:
    def test_like_then_unlike(self, db, api, post, other_user):
        url = f"{POSTS_URL}{post.pk}/like/"

        response = api.post(url, user=other_user)
        assert response.status_code == 200
        assert response.json()["like_count"] == 1

        response = api.post(url, user=other_user)
        assert response.status_code == 400
        assert response.json()["message"] == "Post already liked"

        response = api.delete(url, user=other_user)
        assert response.status_code == 200
        assert response.json()["like_count"] == 0

    def test_unlike_before_like(self, db, api, post, user):
        response = api.delete(f"{POSTS_URL}{post.pk}/like/", user=user)

        assert response.status_code == 400
        assert response.json()["message"] == "Post not liked"

    def test_requires_auth(self, db, api, post):
        assert api.post(f"{POSTS_URL}{post.pk}/like/").status_code == 401

    def test_missing_post(self, db, api, user):
        assert api.post(f"{POSTS_URL}999/like/", user=user).status_code == 404


class TestFeedAndCategories:
    def test_feed(self, db, api, user, other_user, post):
        stranger = make_user("stranger")
        make_post(other_user, "From a friend")
        make_post(other_user, "Friend draft", status=Post.Status.DRAFT)
        make_post(stranger, "From a stranger")
        user.follow(other_user)

        response = api.get(f"{POSTS_URL}feed/", user=user)

        assert response.status_code == 200
        assert [p["title"] for p in response.json()["data"]] == ["From a friend"]

    def test_feed_requires_auth(self, db, api):
        assert api.get(f"{POSTS_URL}feed/").status_code == 401

    @pytest.mark.django_db
    def test_categories(self, api):
        response = api.get(f"{POSTS_URL}categories/")

        assert response.status_code == 200
        assert "Technology" in response.json()["data"]
        assert "Other" in response.json()["data"]
