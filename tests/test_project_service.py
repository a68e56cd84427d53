"""
Tests for ProjectService: project lifecycle and membership management.
"""
import pytest

from collab_todo.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from collab_todo.models.project_models import (
    CreateProjectRequest,
    InviteMemberRequest,
    ProjectRole,
    UpdateProjectRequest,
)
from collab_todo.models.todo_models import CreateTodoRequest


async def setup_users(user_store, *names):
    users = {}
    for name in names:
        users[name] = await user_store.create_user(f"{name}@example.com", "secret123", name.title())
    return users


@pytest.mark.asyncio
async def test_create_project_makes_caller_owner(project_service, user_store):
    users = await setup_users(user_store, "alice")

    project = await project_service.create_project(CreateProjectRequest(name="Alpha"), users["alice"].id)
    detail = await project_service.get_project_detail(project.id, users["alice"].id)

    assert project.member_count == 1
    assert detail.current_user_role == ProjectRole.OWNER
    assert [m.user_email for m in detail.members] == ["alice@example.com"]
    assert [p.id for p in await project_service.get_user_projects(users["alice"].id)] == [project.id]


@pytest.mark.asyncio
async def test_get_project_rules(project_service, user_store):
    users = await setup_users(user_store, "alice", "bob")
    project = await project_service.create_project(CreateProjectRequest(name="Alpha"), users["alice"].id)

    with pytest.raises(PermissionDeniedError):
        await project_service.get_project_by_id(project.id, users["bob"].id)
    with pytest.raises(NotFoundError):
        await project_service.get_project_by_id(404, users["alice"].id)
    with pytest.raises(ValidationError):
        await project_service.get_project_by_id(0, users["alice"].id)


@pytest.mark.asyncio
async def test_invite_by_email(project_service, user_store):
    users = await setup_users(user_store, "alice", "bob")
    project = await project_service.create_project(CreateProjectRequest(name="Alpha"), users["alice"].id)

    member = await project_service.invite_member(project.id, InviteMemberRequest(email="BOB@example.com"), users["alice"].id)

    assert member.user_id == users["bob"].id
    assert member.role == ProjectRole.MEMBER
    assert member.invited_by == users["alice"].id
    assert member.user_name == "Bob"
    assert (await project_service.get_project_by_id(project.id, users["bob"].id)).member_count == 2

    with pytest.raises(ConflictError):
        await project_service.invite_member(project.id, InviteMemberRequest(email="bob@example.com"), users["alice"].id)
    with pytest.raises(NotFoundError):
        await project_service.invite_member(project.id, InviteMemberRequest(email="nobody@example.com"), users["alice"].id)


@pytest.mark.asyncio
async def test_member_cannot_invite(project_service, user_store):
    users = await setup_users(user_store, "alice", "bob", "carol")
    project = await project_service.create_project(CreateProjectRequest(name="Alpha"), users["alice"].id)
    await project_service.invite_member(project.id, InviteMemberRequest(email="bob@example.com"), users["alice"].id)

    with pytest.raises(PermissionDeniedError):
        await project_service.invite_member(project.id, InviteMemberRequest(email="carol@example.com"), users["bob"].id)


@pytest.mark.asyncio
async def test_update_and_delete_project_permissions(project_service, user_store):
    users = await setup_users(user_store, "alice", "bob")
    alice, bob = users["alice"].id, users["bob"].id
    project = await project_service.create_project(CreateProjectRequest(name="Alpha"), alice)
    await project_service.invite_member(project.id, InviteMemberRequest(email="bob@example.com", role=ProjectRole.ADMIN), alice)

    updated = await project_service.update_project(project.id, UpdateProjectRequest(name="Beta"), bob)
    assert updated.name == "Beta"
    with pytest.raises(ValidationError):
        await project_service.update_project(project.id, UpdateProjectRequest(), bob)
    with pytest.raises(PermissionDeniedError):
        await project_service.delete_project(project.id, bob)

    await project_service.delete_project(project.id, alice)
    with pytest.raises(NotFoundError):
        await project_service.get_project_by_id(project.id, alice)


@pytest.mark.asyncio
async def test_role_changes(project_service, user_store):
    users = await setup_users(user_store, "alice", "bob", "carol")
    alice, bob, carol = users["alice"].id, users["bob"].id, users["carol"].id
    project = await project_service.create_project(CreateProjectRequest(name="Alpha"), alice)
    await project_service.invite_member(project.id, InviteMemberRequest(email="bob@example.com", role=ProjectRole.ADMIN), alice)
    await project_service.invite_member(project.id, InviteMemberRequest(email="carol@example.com", role=ProjectRole.ADMIN), alice)

    # admins are peers
    with pytest.raises(PermissionDeniedError):
        await project_service.update_member_role(project.id, carol, ProjectRole.MEMBER, bob)
    with pytest.raises(PermissionDeniedError):
        await project_service.update_member_role(project.id, alice, ProjectRole.MEMBER, bob)
    with pytest.raises(PermissionDeniedError):
        await project_service.update_member_role(project.id, carol, ProjectRole.OWNER, alice)
    with pytest.raises(NotFoundError):
        await project_service.update_member_role(project.id, "ghost", ProjectRole.MEMBER, alice)

    demoted = await project_service.update_member_role(project.id, carol, ProjectRole.VIEWER, alice)
    assert demoted.role == ProjectRole.VIEWER


@pytest.mark.asyncio
async def test_remove_and_leave(project_service, user_store):
    users = await setup_users(user_store, "alice", "bob", "carol")
    alice, bob, carol = users["alice"].id, users["bob"].id, users["carol"].id
    project = await project_service.create_project(CreateProjectRequest(name="Alpha"), alice)
    for email in ("bob@example.com", "carol@example.com"):
        await project_service.invite_member(project.id, InviteMemberRequest(email=email), alice)

    with pytest.raises(PermissionDeniedError):
        await project_service.leave_project(project.id, alice)
    with pytest.raises(PermissionDeniedError):
        await project_service.remove_member(project.id, carol, bob)

    await project_service.leave_project(project.id, bob)
    await project_service.remove_member(project.id, carol, alice)

    members = await project_service.get_project_members(project.id, alice)
    assert [m.user_id for m in members] == [alice]
    assert (await project_service.get_project_by_id(project.id, alice)).member_count == 1
    with pytest.raises(PermissionDeniedError):
        await project_service.get_project_by_id(project.id, bob)


@pytest.mark.asyncio
async def test_collaboration_scenario(project_service, todo_service, user_store):
    users = await setup_users(user_store, "alice", "bob")
    alice, bob = users["alice"].id, users["bob"].id

    project = await project_service.create_project(CreateProjectRequest(name="Shared"), alice)
    assert project.member_count == 1
    await project_service.invite_member(project.id, InviteMemberRequest(email="bob@example.com"), alice)

    bobs_todo = await todo_service.create_todo(
        CreateTodoRequest(title="For Alice", project_id=project.id, assigned_to=alice), bob
    )
    alices_todo = await todo_service.create_todo(CreateTodoRequest(title="Alice's", project_id=project.id), alice)

    with pytest.raises(PermissionDeniedError):
        await todo_service.delete_todo(alices_todo.id, bob)
    await todo_service.delete_todo(bobs_todo.id, alice)
    await todo_service.delete_todo(alices_todo.id, alice)

    assert await todo_service.get_todos_by_project(project.id, alice) == []
    assert (await project_service.get_project_by_id(project.id, alice)).todo_count == 0


@pytest.mark.asyncio
async def test_removed_or_departed_member_is_unassigned(project_service, todo_service, user_store):
    users = await setup_users(user_store, "alice", "bob", "carol")
    alice, bob, carol = users["alice"].id, users["bob"].id, users["carol"].id
    project = await project_service.create_project(CreateProjectRequest(name="Shared"), alice)
    for email in ("bob@example.com", "carol@example.com"):
        await project_service.invite_member(project.id, InviteMemberRequest(email=email), alice)
    for_bob = await todo_service.create_todo(CreateTodoRequest(title="Bob's", project_id=project.id, assigned_to=bob), alice)
    for_carol = await todo_service.create_todo(
        CreateTodoRequest(title="Carol's", project_id=project.id, assigned_to=carol), alice
    )

    await project_service.remove_member(project.id, bob, alice)
    await project_service.leave_project(project.id, carol)

    assert (await todo_service.get_todo_by_id(for_bob.id, alice)).assigned_to is None
    assert (await todo_service.get_todo_by_id(for_carol.id, alice)).assigned_to is None
    assert (await project_service.get_project_by_id(project.id, alice)).member_count == 1
    assert (await project_service.get_project_by_id(project.id, alice)).todo_count == 2


@pytest.mark.asyncio
async def test_members_listed_highest_role_first(project_service, user_store):
    users = await setup_users(user_store, "alice", "bob", "carol", "dave")
    alice = users["alice"].id
    project = await project_service.create_project(CreateProjectRequest(name="Alpha"), alice)
    await project_service.invite_member(project.id, InviteMemberRequest(email="bob@example.com", role="viewer"), alice)
    await project_service.invite_member(project.id, InviteMemberRequest(email="carol@example.com", role="Admin"), alice)
    await project_service.invite_member(project.id, InviteMemberRequest(email="dave@example.com"), alice)

    members = await project_service.get_project_members(project.id, alice)
    detail = await project_service.get_project_detail(project.id, alice)

    assert [m.user_name for m in members] == ["Alice", "Carol", "Dave", "Bob"]
    assert [m.role for m in members] == [ProjectRole.OWNER, ProjectRole.ADMIN, ProjectRole.MEMBER, ProjectRole.VIEWER]
    assert [m.user_id for m in detail.members] == [m.user_id for m in members]
