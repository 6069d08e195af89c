"""Integration tests for descriptor-driven repository queries."""

from __future__ import annotations

from datetime import datetime
from datetime import timedelta
from datetime import timezone

from sqlalchemy.orm import Session

from crudapp.db.models.post import Post
from crudapp.db.repository.posts import count_posts_by_author
from crudapp.db.repository.posts import create_post
from crudapp.db.repository.posts import list_posts
from crudapp.db.repository.todos import create_todo
from crudapp.db.repository.todos import list_todos
from crudapp.db.repository.users import create_user
from crudapp.db.repository.users import find_user_ids_by_username
from crudapp.queries.filters import build_filter
from crudapp.services.posts import POST_FILTER_PROFILE
from crudapp.services.todos import TODO_FILTER_PROFILE


def _seed_users(session: Session):
    john = create_user(session, username="johnny", email="john@example.com", password_hash="x")
    mary = create_user(session, username="mary", email="mary@example.com", password_hash="x")
    return john, mary


def _resolver(session: Session):
    return lambda _, text: find_user_ids_by_username(session, text)


def test_author_name_resolves_to_matching_users(session: Session) -> None:
    john, mary = _seed_users(session)
    create_post(session, author_id=john.id, title="First post", content="content body")
    create_post(session, author_id=mary.id, title="Second post", content="content body")
    session.commit()

    descriptor = build_filter({"author": "JOHN"}, POST_FILTER_PROFILE, resolve_reference=_resolver(session))
    posts = list_posts(session, descriptor)

    assert [post.author_id for post in posts] == [john.id]


def test_unknown_author_name_returns_no_posts(session: Session) -> None:
    john, _ = _seed_users(session)
    create_post(session, author_id=john.id, title="First post", content="content body")
    session.commit()

    descriptor = build_filter({"author": "nobody"}, POST_FILTER_PROFILE, resolve_reference=_resolver(session))

    assert list_posts(session, descriptor) == []


def test_title_match_is_case_insensitive_and_literal(session: Session) -> None:
    john, _ = _seed_users(session)
    create_post(session, author_id=john.id, title="Weekly Report", content="content body")
    create_post(session, author_id=john.id, title="100% done", content="content body")
    create_post(session, author_id=john.id, title="Unrelated", content="content body")
    session.commit()

    report = list_posts(session, build_filter({"title": "weekly"}, POST_FILTER_PROFILE))
    percent = list_posts(session, build_filter({"title": "0%"}, POST_FILTER_PROFILE))

    assert [post.title for post in report] == ["Weekly Report"]
    assert [post.title for post in percent] == ["100% done"]


def test_current_month_filter_only_applies_with_author(session: Session) -> None:
    john, _ = _seed_users(session)
    now = datetime(2026, 2, 14, 12, 0, tzinfo=timezone.utc)
    recent = create_post(session, author_id=john.id, title="February", content="content body")
    old = create_post(session, author_id=john.id, title="January", content="content body")
    recent.created_at = datetime(2026, 2, 1, 0, 30, tzinfo=timezone.utc)
    old.created_at = datetime(2026, 1, 31, 23, 30, tzinfo=timezone.utc)
    session.commit()

    with_author = build_filter(
        {"author": str(john.id), "isCurrentMonth": "true"},
        POST_FILTER_PROFILE,
        now=now,
    )
    without_author = build_filter({"isCurrentMonth": "true"}, POST_FILTER_PROFILE, now=now)

    assert [post.title for post in list_posts(session, with_author)] == ["February"]
    assert {post.title for post in list_posts(session, without_author)} == {"February", "January"}


def test_sort_and_pagination(session: Session) -> None:
    john, _ = _seed_users(session)
    base = datetime(2026, 1, 1, 8, 0)
    for index in range(5):
        post = create_post(session, author_id=john.id, title=f"Post {index}", content="content body")
        post.created_at = base + timedelta(hours=index)
        post.updated_at = base + timedelta(hours=10 - index)
    session.commit()

    by_created = list_posts(session, build_filter({"sort": "ctime", "limit": "2", "page": "2"}, POST_FILTER_PROFILE))
    by_updated = list_posts(session, build_filter({"limit": "2"}, POST_FILTER_PROFILE))

    assert [post.title for post in by_created] == ["Post 2", "Post 1"]
    assert [post.title for post in by_updated] == ["Post 0", "Post 1"]


def test_count_posts_by_author(session: Session) -> None:
    john, mary = _seed_users(session)
    for index in range(3):
        create_post(session, author_id=john.id, title=f"Post {index}", content="content body")
    session.commit()

    assert count_posts_by_author(session, john.id) == 3
    assert count_posts_by_author(session, mary.id) == 0
    assert session.query(Post).count() == 3


def test_todo_search_spans_title_and_description(session: Session) -> None:
    create_todo(session, title="Groceries", status="completed")
    create_todo(session, title="Errands", description="buy GROCERIES later", status="completed")
    create_todo(session, title="Groceries again", status="pending")
    create_todo(session, title="Laundry", status="completed")
    session.commit()

    descriptor = build_filter({"status": "completed", "search": "groceries"}, TODO_FILTER_PROFILE)

    assert {todo.title for todo in list_todos(session, descriptor)} == {"Groceries", "Errands"}
