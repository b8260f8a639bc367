"""
Shared fixtures for django-blog-api tests.
"""
import pytest
from django.contrib.auth import get_user_model

from blog_api.auth import issue_token
from blog_api.models import Comment, Post

User = get_user_model()


class JsonClient:
    """Django test client speaking JSON, optionally as a given user."""

    def __init__(self, client):
        self.client = client

    def _auth(self, user):
        if user is None:
            return {}
        return {"HTTP_AUTHORIZATION": f"Bearer {issue_token(user)}"}

    def get(self, url, params=None, user=None):
        return self.client.get(url, params or {}, **self._auth(user))

    def post(self, url, data=None, user=None):
        return self.client.post(
            url, data or {}, content_type="application/json", **self._auth(user)
        )

    def put(self, url, data=None, user=None):
        return self.client.put(
            url, data or {}, content_type="application/json", **self._auth(user)
        )

    def delete(self, url, user=None):
        return self.client.delete(url, **self._auth(user))


@pytest.fixture
def api(client):
    return JsonClient(client)


def make_user(username, role=User.Role.USER, **extra):
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="testpass123",
        first_name=username.title(),
        last_name="Tester",
        role=role,
        **extra,
    )


@pytest.fixture
def user(db):
    """Create a test user."""
    return make_user("testuser")


@pytest.fixture
def other_user(db):
    return make_user("other")


@pytest.fixture
def admin_user(db):
    return make_user("boss", role=User.Role.ADMIN)


@pytest.fixture
def moderator(db):
    return make_user("mod", role=User.Role.MODERATOR)


@pytest.fixture
def post(db, user):
    """Create a published test post."""
    return Post.objects.create(
        title="Test Post",
        content="This is a test post body with enough words.",
        author=user,
        category="Technology",
        status=Post.Status.PUBLISHED,
    )


@pytest.fixture
def comment(db, post, other_user):
    return Comment.objects.create(post=post, author=other_user, content="Great post!")
