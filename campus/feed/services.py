# feed/services.py
import logging

from django.conf import settings
from django.db import DatabaseError, transaction

from campus.errors import EmptyText, NotFound, TransientBackendError, ValidationError
from feed.models import Comment, Post

logger = logging.getLogger(__name__)


def create_post(author, caption, media_url, media_type):
    if media_type not in (Post.PHOTO, Post.VIDEO):
        raise ValidationError("Media type must be 'photo' or 'video'")
    if not media_url or not media_url.startswith(('https://', 'http://')):
        raise ValidationError("A valid media URL is required")
    try:
        post = Post.objects.create(
            author=author,
            author_name=author.display_name,
            author_email=author.email,
            media_url=media_url,
            media_type=media_type,
            caption=(caption or '').strip(),
        )
    except DatabaseError as e:
        raise TransientBackendError(f"Could not create post: {str(e)}")
    logger.info(f"Post {post.id} created by user {author.id}")
    return post


def toggle_post_reaction(post_id, user, reaction):
    if reaction not in settings.FEED_REACTIONS:
        raise ValidationError(f"Unknown reaction: {reaction}")
    with transaction.atomic():
        try:
            post = Post.objects.select_for_update().get(id=post_id)
        except Post.DoesNotExist:
            raise NotFound("Post not found")
        reactions = {key: list(post.reactions.get(key, [])) for key in settings.FEED_REACTIONS}
        if user.id in reactions[reaction]:
            reactions[reaction].remove(user.id)
        else:
            reactions[reaction].append(user.id)
        post.reactions = reactions
        post.save(update_fields=['reactions'])
    return reactions


def add_comment(post_id, author, text):
    """Comment on a post. A run of comments by the same author with nobody in between counts up the streak."""
    if text is None or not text.strip():
        raise EmptyText("Comment cannot be empty")
    try:
        with transaction.atomic():
            try:
                post = Post.objects.select_for_update().get(id=post_id)
            except Post.DoesNotExist:
                raise NotFound("Post not found")
            previous = post.comments.order_by('-timestamp', '-id').first()
            streak = previous.streak_count + 1 if previous and previous.author_id == author.id else 1
            comment = Comment.objects.create(
                post=post,
                author=author,
                author_name=author.display_name,
                author_email=author.email,
                text=text.strip(),
                streak_count=streak,
            )
    except DatabaseError as e:
        raise TransientBackendError(f"Could not add comment: {str(e)}")
    logger.debug(f"Comment {comment.id} on post {post_id} with streak {streak}")
    return comment
