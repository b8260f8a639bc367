"""
Post and Tag models for django-blog-api.
"""
import math
import re

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.text import slugify

from ..conf import blog_settings
from ..exceptions import BadRequest

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slug_from_title(title):
    """
    Derive a URL slug from a post title.

    Lowercases the title, collapses every run of non-alphanumerics into a
    single hyphen and trims hyphens from both ends:

        >>> slug_from_title("Hello World!")
        'hello-world'
    """
    slug = _NON_ALNUM.sub("-", (title or "").lower()).strip("-")
    return slug[:blog_settings.SLUG_MAX_LENGTH].strip("-") or "post"


def read_time_for(content):
    """Minutes needed to read ``content``, rounded up, at least one."""
    words = len((content or "").split())
    return max(1, math.ceil(words / blog_settings.WORDS_PER_MINUTE))


def excerpt_for(content):
    """Default excerpt: the first EXCERPT_LENGTH characters plus an ellipsis."""
    return content[:blog_settings.EXCERPT_LENGTH] + "..."


class TagManager(models.Manager):
    def from_names(self, names):
        """
        Return Tag objects for a list of names, creating missing ones.

        Names are trimmed and lowercased; blanks and duplicates are skipped.
        """
        tags = []
        seen = set()
        for raw in names:
            name = str(raw).strip().lower()
            if not name or name in seen:
                continue
            seen.add(name)
            tag, _ = self.get_or_create(name=name)
            tags.append(tag)
        return tags


class Tag(models.Model):
    """
    Flat, lowercase tag for posts.
    """

    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TagManager()

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.name = self.name.strip().lower()
        if not self.slug:
            self.slug = slugify(self.name)[:100]
        super().save(*args, **kwargs)


class PostQuerySet(models.QuerySet):
    def published(self):
        return self.filter(status=Post.Status.PUBLISHED)

    def with_counts(self):
        """Annotate like and comment totals for list responses."""
        return self.annotate(
            num_likes=models.Count("likes", distinct=True),
            num_comments=models.Count("comments", distinct=True),
        )


class Post(models.Model):
    """
    Blog post.

    Supports:
    - Slug and read time derived from title and content
    - Draft / published / archived lifecycle with a one-time publish stamp
    - Guarded likes and an atomic view counter
    """

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"
        ARCHIVED = "archived", "Archived"

    CATEGORY_CHOICES = blog_settings.CATEGORY_CHOICES

    # Content
    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    content = models.TextField()
    excerpt = models.CharField(max_length=500, blank=True)
    featured_image = models.CharField(max_length=500, blank=True)

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="posts",
    )

    # Taxonomy
    category = models.CharField(
        max_length=50,
        choices=CATEGORY_CHOICES,
        default=blog_settings.DEFAULT_CATEGORY,
        db_index=True,
    )
    tags = models.ManyToManyField(Tag, related_name="posts", blank=True)

    # Status
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True,
    )
    published_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Set once, on the first save as published",
    )

    # Engagement
    likes = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name="liked_posts",
        blank=True,
    )
    view_count = models.PositiveIntegerField(default=0)
    read_time = models.PositiveIntegerField(default=1)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PostQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["author", "-created_at"], name="blog_post_author_created_idx"),
            models.Index(fields=["status", "-published_at"], name="blog_post_status_pub_idx"),
        ]

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_title = instance.__dict__.get("title")
        return instance

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        self.title = self.title.strip()

        # Slug follows the title; keep it stable while the title is unchanged
        if not self.slug or self.title != getattr(self, "_loaded_title", None):
            self.slug = self._unique_slug(slug_from_title(self.title))

        self.read_time = read_time_for(self.content)

        if not self.excerpt:
            self.excerpt = excerpt_for(self.content)

        if self.status == self.Status.PUBLISHED and not self.published_at:
            self.published_at = timezone.now()

        super().save(*args, **kwargs)
        self._loaded_title = self.title

    def _unique_slug(self, base_slug):
        slug = base_slug
        counter = 1
        while Post.objects.filter(slug=slug).exclude(pk=self.pk).exists():
            slug = f"{base_slug}-{counter}"
            counter += 1
        return slug

    @property
    def is_published(self):
        return self.status == self.Status.PUBLISHED

    @property
    def like_count(self):
        if hasattr(self, "num_likes"):
            return self.num_likes
        return self.likes.count()

    @property
    def comment_count(self):
        if hasattr(self, "num_comments"):
            return self.num_comments
        return self.comments.count()

    def is_owned_by(self, user):
        return user is not None and self.author_id == user.pk

    def is_liked_by(self, user):
        return self.likes.filter(pk=user.pk).exists()

    def like(self, user):
        """Add a like from ``user``; returns the new like count."""
        if self.is_liked_by(user):
            raise BadRequest("Post already liked")
        self.likes.add(user)
        return self.likes.count()

    def unlike(self, user):
        """Remove the like from ``user``; returns the new like count."""
        if not self.is_liked_by(user):
            raise BadRequest("Post not liked")
        self.likes.remove(user)
        return self.likes.count()

    def set_tags(self, names):
        self.tags.set(Tag.objects.from_names(names))

    def publish(self):
        """Publish the post, stamping published_at the first time."""
        self.status = self.Status.PUBLISHED
        self.save()

    def archive(self):
        self.status = self.Status.ARCHIVED
        self.save()

    def increment_view_count(self):
        """Increment view count atomically."""
        Post.objects.filter(pk=self.pk).update(view_count=models.F("view_count") + 1)
        self.view_count += 1
