"""Unit tests for task access control."""
import pytest

from tasktrack.core.errors import AssigneeNotFound, NotPermitted, NotVisible
from tasktrack.core.scope import (
    authorize_modify,
    authorize_read,
    authorize_reassignment,
    can_modify_task,
    can_read_task,
    get_tasks_for_scope,
    resolve_assignee,
)


@pytest.fixture
def people(make_user):
    """Creator, assignee and an unrelated user."""
    return {
        "creator": make_user("creator@x.com"),
        "assignee": make_user("assignee@x.com"),
        "outsider": make_user("outsider@x.com"),
    }


def test_read_and_modify_rules(people, make_task, scope_for):
    """Creator and assignee can read; only the creator can modify."""
    task = make_task(people["creator"], people["assignee"])

    creator = scope_for(people["creator"])
    assignee = scope_for(people["assignee"])
    outsider = scope_for(people["outsider"])

    assert can_read_task(creator, task)
    assert can_read_task(assignee, task)
    assert not can_read_task(outsider, task)

    assert can_modify_task(creator, task)
    assert not can_modify_task(assignee, task)
    assert not can_modify_task(outsider, task)


def test_authorize_read(people, make_task, scope_for):
    """Unrelated users and missing tasks are not visible."""
    task = make_task(people["creator"], people["assignee"])

    assert authorize_read(scope_for(people["assignee"]), task) is task
    with pytest.raises(NotVisible):
        authorize_read(scope_for(people["outsider"]), task)
    with pytest.raises(NotVisible):
        authorize_read(scope_for(people["creator"]), None)


def test_authorize_modify_assignee_not_permitted(people, make_task, scope_for):
    """The assignee sees the task but may not change it."""
    task = make_task(people["creator"], people["assignee"])

    assert authorize_modify(scope_for(people["creator"]), task) is task
    with pytest.raises(NotPermitted):
        authorize_modify(scope_for(people["assignee"]), task)


def test_authorize_modify_outsider_not_visible(people, make_task, scope_for):
    """An unrelated user's write attempt does not reveal that the task exists."""
    task = make_task(people["creator"], people["assignee"])

    with pytest.raises(NotVisible):
        authorize_modify(scope_for(people["outsider"]), task)
    with pytest.raises(NotVisible):
        authorize_modify(scope_for(people["outsider"]), None)


def test_resolve_assignee_defaults_to_creator(db_session, people, scope_for):
    """No assignee means the creator."""
    creator = scope_for(people["creator"])
    assert resolve_assignee(db_session, creator, None) == people["creator"].id
    assert resolve_assignee(db_session, creator, "") == people["creator"].id
    assert resolve_assignee(db_session, creator, people["creator"].id) == people["creator"].id


def test_resolve_assignee_existing_user(db_session, people, scope_for):
    """Any existing user may be assigned."""
    creator = scope_for(people["creator"])
    assert resolve_assignee(db_session, creator, people["assignee"].id) == people["assignee"].id


def test_resolve_assignee_missing_user(db_session, people, scope_for):
    """A missing assignee is rejected."""
    with pytest.raises(AssigneeNotFound) as exc_info:
        resolve_assignee(db_session, scope_for(people["creator"]), "no-such-user")
    assert exc_info.value.assignee_id == "no-such-user"


def test_authorize_reassignment(db_session, people, make_task, scope_for):
    """Only the creator may reassign, and only to an existing user."""
    task = make_task(people["creator"])
    creator = scope_for(people["creator"])

    assert (
        authorize_reassignment(db_session, creator, task, people["outsider"].id)
        == people["outsider"].id
    )
    with pytest.raises(AssigneeNotFound):
        authorize_reassignment(db_session, creator, task, "no-such-user")

    assigned = make_task(people["creator"], people["assignee"])
    with pytest.raises(NotPermitted):
        authorize_reassignment(
            db_session, scope_for(people["assignee"]), assigned, people["assignee"].id
        )


def test_get_tasks_for_scope(db_session, people, make_task, scope_for):
    """Listing returns created and assigned tasks only."""
    created = make_task(people["creator"], title="created")
    assigned = make_task(people["outsider"], people["creator"], title="assigned")
    make_task(people["outsider"], title="unrelated")

    tasks = get_tasks_for_scope(db_session, scope_for(people["creator"]))
    assert [t.id for t in tasks] == [created.id, assigned.id]


def test_get_tasks_for_scope_filters(db_session, people, make_task, scope_for):
    """Status and priority filters narrow the listing."""
    task = make_task(people["creator"])
    task.status = "complete"
    task.priority = "high"
    db_session.commit()
    make_task(people["creator"])

    scope = scope_for(people["creator"])
    assert [t.id for t in get_tasks_for_scope(db_session, scope, status="complete")] == [task.id]
    assert [t.id for t in get_tasks_for_scope(db_session, scope, priority="high")] == [task.id]
    assert get_tasks_for_scope(db_session, scope, status="complete", priority="low") == []
