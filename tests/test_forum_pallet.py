import pytest

from subclient.forum_pallet import (
    Comment,
    CommentSubmitted,
    CommentsOverflow,
    ContentTooLong,
    ForumPallet,
    Post,
    PostSubmitted,
)
from subclient.origin import BadOrigin, Origin


def test_it_works_posting_content():
    forum = ForumPallet()
    content = b"hello"
    current_item = forum.item_counter()
    assert current_item == 0
    forum.post_content(Origin.signed(1000), content)
    assert current_item == 0

    assert forum.get_post(0) == Post(
        post_id=0,
        content=content,
        author=1000,
        timestamp=forum.timestamp(),
        block_number=forum.block_number(),
    )

    comment1 = b"I'm 1st comment"
    item1 = forum.item_counter()
    forum.comment_on(Origin.signed(2000), 0, comment1)
    assert item1 == 1

    item2 = forum.item_counter()
    forum.comment_on(Origin.signed(2000), 0, b"This is a 2nd comment")
    assert item2 == 2

    item3 = forum.item_counter()
    forum.comment_on(
        Origin.signed(3000), 1, b"> I'm a comment  to the 1st comment \nThis"
    )
    assert item3 == 3

    item4 = forum.item_counter()
    forum.comment_on(Origin.signed(3000), 2, b"I'm a comment for the 2nd comment")
    assert item4 == 4

    assert forum.comment(1) == Comment(
        comment_id=1,
        content=comment1,
        author=2000,
        parent_item=0,
        timestamp=forum.timestamp(),
        block_number=forum.block_number(),
    )
    assert forum.kids(0) == [1, 2]
    assert forum.kids(1) == [3]
    assert forum.kids(2) == [4]

    assert Post.max_encoded_len(280) == 310
    assert Comment.max_encoded_len(280) == 314


def test_post_lookup_via_getter():
    forum = ForumPallet()
    forum.post_content(Origin.signed(1000), b"hello")
    assert forum.post(0) == forum.get_post(0)
    assert forum.post(1) is None


def test_events_are_emitted_in_order():
    forum = ForumPallet()
    forum.post_content(Origin.signed(1000), b"hello")
    forum.comment_on(Origin.signed(2000), 0, b"reply")
    assert forum.events == [
        PostSubmitted(0, 1000, b"hello"),
        CommentSubmitted(1, 2000, b"reply"),
    ]


def test_post_equality_ignores_time_and_block():
    assert Post(0, b"hello", 1000, 5, 6) == Post(0, b"hello", 1000, 7, 8)
    assert Post(0, b"hello", 1000) != Post(0, b"hello", 2000)


def test_content_too_long_is_rejected():
    forum = ForumPallet(max_content_length=280)
    with pytest.raises(ContentTooLong):
        forum.post_content(Origin.signed(1000), b"x" * 281)
    assert forum.item_counter() == 0
    assert forum.get_post(0) is None


def test_content_at_limit_is_accepted():
    forum = ForumPallet(max_content_length=280)
    forum.post_content(Origin.signed(1000), b"x" * 280)
    assert forum.get_post(0).content == b"x" * 280


def test_comments_overflow_leaves_state():
    forum = ForumPallet(max_comments=1)
    forum.post_content(Origin.signed(1000), b"hello")
    forum.comment_on(Origin.signed(2000), 0, b"first")
    with pytest.raises(CommentsOverflow):
        forum.comment_on(Origin.signed(2000), 0, b"second")
    assert forum.kids(0) == [1]
    assert forum.item_counter() == 2
    assert forum.comment(2) is None


def test_unsigned_post_is_rejected():
    forum = ForumPallet()
    with pytest.raises(BadOrigin):
        forum.post_content(Origin.root(), b"hello")
    with pytest.raises(BadOrigin):
        forum.comment_on(Origin.none(), 0, b"hello")
    assert forum.item_counter() == 0


def test_kids_of_unknown_item_is_none():
    forum = ForumPallet()
    assert forum.kids(0) is None


def test_timestamp_and_block_recorded():
    forum = ForumPallet(now=1234, current_block=7)
    forum.post_content(Origin.signed(1000), b"hello")
    post = forum.get_post(0)
    assert post.timestamp == 1234
    assert post.block_number == 7