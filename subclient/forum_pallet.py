"""A forum pallet: posts, comments on posts and comments, and their hierarchy."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from .origin import Origin, ensure_signed
from .scale import encode_compact

log = logging.getLogger(__name__)

U32_MAX = (1 << 32) - 1
DEFAULT_MAX_CONTENT_LENGTH = 280
DEFAULT_MAX_COMMENTS = 1000

# Encoded sizes of the account id, moment and block number types (all u64).
ACCOUNT_ID_SIZE = 8
MOMENT_SIZE = 8
BLOCK_NUMBER_SIZE = 8
_U32_SIZE = 4


class ForumError(Exception):
    """Base class of the errors this pallet raises."""


class ContentTooLong(ForumError):
    """The content exceeds the maximum length."""


class CommentsOverflow(ForumError):
    """An item already holds the maximum number of comments."""


def _bounded_vec_max_len(max_length: int) -> int:
    return len(encode_compact(max_length)) + max_length


@dataclass(eq=False)
class Post:
    """A top-level post; equal when id, content and author are equal."""

    post_id: int
    content: bytes
    author: Any
    timestamp: int = 0
    block_number: int = 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Post):
            return NotImplemented
        return (
            self.post_id == other.post_id
            and self.content == other.content
            and self.author == other.author
        )

    @classmethod
    def max_encoded_len(cls, max_content_length: int) -> int:
        return (
            _U32_SIZE
            + _bounded_vec_max_len(max_content_length)
            + ACCOUNT_ID_SIZE
            + MOMENT_SIZE
            + BLOCK_NUMBER_SIZE
        )


@dataclass(eq=False)
class Comment:
    """A comment on a post or another comment; equal when id, content, author and parent are."""

    comment_id: int
    content: bytes
    author: Any
    parent_item: int
    timestamp: int = 0
    block_number: int = 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Comment):
            return NotImplemented
        return (
            self.comment_id == other.comment_id
            and self.content == other.content
            and self.author == other.author
            and self.parent_item == other.parent_item
        )

    @classmethod
    def max_encoded_len(cls, max_content_length: int) -> int:
        return (
            _U32_SIZE
            + _bounded_vec_max_len(max_content_length)
            + ACCOUNT_ID_SIZE
            + _U32_SIZE
            + MOMENT_SIZE
            + BLOCK_NUMBER_SIZE
        )


@dataclass(frozen=True)
class PostSubmitted:
    post_id: int
    who: Any
    content: bytes


@dataclass(frozen=True)
class CommentSubmitted:
    comment_id: int
    who: Any
    content: bytes


@dataclass
class ForumPallet:
    """Forum state; posts and comments share one counter of item ids."""

    max_content_length: int = DEFAULT_MAX_CONTENT_LENGTH
    max_comments: int = DEFAULT_MAX_COMMENTS
    now: int = 0
    current_block: int = 0
    events: list = field(default_factory=list)
    _posts: dict = field(default_factory=dict, repr=False)
    _comments: dict = field(default_factory=dict, repr=False)
    _kids: dict = field(default_factory=dict, repr=False)
    _item_counter: int = 0

    def _bounded(self, content: bytes) -> bytes:
        data = bytes(content)
        if len(data) > self.max_content_length:
            raise ContentTooLong()
        return data

    def _increment_item_counter(self) -> None:
        self._item_counter = min(self._item_counter + 1, U32_MAX)

    def post_content(self, origin: Origin, content: bytes) -> None:
        """Add a post from the signer of the call."""
        who = ensure_signed(origin)
        self.add_post(who, content)

    def comment_on(self, origin: Origin, parent_item: int, content: bytes) -> None:
        """Add a comment from the signer of the call to ``parent_item``."""
        who = ensure_signed(origin)
        self.add_comment_to(who, parent_item, content)

    def timestamp(self) -> int:
        return self.now

    def block_number(self) -> int:
        return self.current_block

    def add_post(self, who: Any, content: bytes) -> None:
        data = self._bounded(content)
        post_id = self._item_counter
        self._posts[post_id] = Post(
            post_id, data, who, self.timestamp(), self.block_number()
        )
        self._increment_item_counter()
        self.events.append(PostSubmitted(post_id, who, data))

    def add_comment_to(self, who: Any, parent_item: int, content: bytes) -> None:
        data = self._bounded(content)
        siblings = self._kids.get(parent_item)
        if siblings is not None and len(siblings) >= self.max_comments:
            raise CommentsOverflow()
        comment_id = self._item_counter
        self._comments[comment_id] = Comment(
            comment_id, data, who, parent_item, self.timestamp(), self.block_number()
        )
        self._increment_item_counter()
        if siblings is not None:
            log.info("adding comment: %s to parent: %s", comment_id, parent_item)
            siblings.append(comment_id)
        else:
            log.info("inserting as a new kid entry: %s -> %s", parent_item, comment_id)
            self._kids[parent_item] = [comment_id]
        self.events.append(CommentSubmitted(comment_id, who, data))

    def get_post(self, post_id: int) -> Optional[Post]:
        log.info("getting post_id: %s", post_id)
        return self._posts.get(post_id)

    def post(self, post_id: int) -> Optional[Post]:
        return self._posts.get(post_id)

    def comment(self, comment_id: int) -> Optional[Comment]:
        return self._comments.get(comment_id)

    def kids(self, item_id: int) -> Optional[list]:
        """Ids of the direct comments on an item, in the order they were added."""
        siblings = self._kids.get(item_id)
        return None if siblings is None else list(siblings)

    def item_counter(self) -> int:
        return self._item_counter