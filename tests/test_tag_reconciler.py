from uuid import uuid4

import pytest

from common.errors import NotFoundError, ValidationError
from common.models import Post, PostTag, Tag
from common.services.tag_service import TagReconciler, dedupe_tag_names


@pytest.fixture
def reconciler(session_factory):
    return TagReconciler(session_factory)


@pytest.fixture
def post_id(session_factory, admin):
    pid = str(uuid4())
    with session_factory() as session:
        session.add(Post(id=pid, title="My First Post", slug="my-first-post", author_id=admin["id"]))
    return pid


def _tag_names(session_factory, post_id):
    with session_factory() as session:
        rows = (
            session.query(Tag.name)
            .join(PostTag, PostTag.tag_id == Tag.id)
            .filter(PostTag.post_id == post_id)
            .order_by(Tag.name)
            .all()
        )
        return [r.name for r in rows]


def _tag_count(session_factory):
    with session_factory() as session:
        return session.query(Tag).count()


def test_dedupe_keeps_first_spelling():
    assert dedupe_tag_names(["React", "react", " REACT ", "Vue"]) == [("react", "React"), ("vue", "Vue")]


def test_dedupe_rejects_names_without_slug():
    with pytest.raises(ValidationError):
        dedupe_tag_names(["News", "!!!"])


def test_reconcile_creates_missing_tags(reconciler, session_factory, post_id):
    result = reconciler.reconcile(post_id, ["News", "Tutorial"])

    assert sorted(t["slug"] for t in result) == ["news", "tutorial"]
    assert _tag_names(session_factory, post_id) == ["News", "Tutorial"]
    assert _tag_count(session_factory) == 2


def test_reconcile_is_idempotent(reconciler, session_factory, post_id):
    reconciler.reconcile(post_id, ["News", "Tutorial"])
    reconciler.reconcile(post_id, ["News", "Tutorial"])

    assert _tag_names(session_factory, post_id) == ["News", "Tutorial"]
    assert _tag_count(session_factory) == 2
    with session_factory() as session:
        assert session.query(PostTag).filter(PostTag.post_id == post_id).count() == 2


def test_reconcile_replaces_previous_set(reconciler, session_factory, post_id):
    reconciler.reconcile(post_id, ["News", "Tutorial"])
    reconciler.reconcile(post_id, ["Tutorial", "Python"])

    assert _tag_names(session_factory, post_id) == ["Python", "Tutorial"]
    # unlinked tags are kept for reuse
    assert _tag_count(session_factory) == 3


def test_reconcile_with_empty_list_removes_all_links(reconciler, session_factory, post_id):
    reconciler.reconcile(post_id, ["News"])
    assert reconciler.reconcile(post_id, []) == []
    assert _tag_names(session_factory, post_id) == []
    assert _tag_count(session_factory) == 1


def test_reconcile_collapses_case_duplicates(reconciler, session_factory, post_id):
    result = reconciler.reconcile(post_id, ["React", "react"])

    assert [t["name"] for t in result] == ["React"]
    assert _tag_count(session_factory) == 1


def test_reconcile_reuses_existing_tag_by_slug(reconciler, session_factory, post_id):
    with session_factory() as session:
        session.add(Tag(id=str(uuid4()), name="JavaScript", slug="javascript"))

    result = reconciler.reconcile(post_id, ["javascript"])

    assert [t["name"] for t in result] == ["JavaScript"]
    assert _tag_count(session_factory) == 1


def test_reconcile_unknown_post(reconciler):
    with pytest.raises(NotFoundError):
        reconciler.reconcile(str(uuid4()), ["News"])


def test_reconcile_failure_keeps_previous_tags(reconciler, session_factory, post_id, monkeypatch):
    reconciler.reconcile(post_id, ["News", "Tutorial"])
    original = TagReconciler._resolve_tag

    def flaky(self, session, slug, name):
        if slug == "broken":
            raise RuntimeError("database went away")
        return original(self, session, slug, name)

    monkeypatch.setattr(TagReconciler, "_resolve_tag", flaky)

    with pytest.raises(RuntimeError):
        reconciler.reconcile(post_id, ["Python", "Broken"])

    assert _tag_names(session_factory, post_id) == ["News", "Tutorial"]
    assert _tag_count(session_factory) == 2
