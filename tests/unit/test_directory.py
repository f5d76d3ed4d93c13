"""Unit tests for member directory and profile operations."""

import pytest
from libs.auth.models import UserRole
from libs.common.errors import NotFoundError, ValidationError
from services.media_service.models import Asset
from services.members_service.services import directory
from sqlalchemy import select
from tests.factories import CoachFactory, UserFactory, persist


@pytest.mark.asyncio
@pytest.mark.unit
async def test_display_names_batches_full_names(db_session):
    ana = await persist(db_session, UserFactory.create(first_name="Ana", last_name="Ruiz"))
    ben = await persist(db_session, CoachFactory.create(first_name="Ben", last_name="Ode"))

    names = await directory.display_names(db_session, [ana.id, ben.id, None, 9999])

    assert names == {ana.id: "Ana Ruiz", ben.id: "Ben Ode"}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_list_users_newest_first(db_session):
    first = await persist(db_session, UserFactory.create())
    second = await persist(db_session, CoachFactory.create(is_active=False))
    third = await persist(db_session, UserFactory.create(role=UserRole.ADMIN))

    users = await directory.list_users(db_session)

    assert [u.id for u in users] == [third.id, second.id, first.id]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_profile_changes_given_fields_only(db_session):
    user = await persist(
        db_session, UserFactory.create(first_name="Sam", last_name="Lee", bio="Old")
    )

    updated = await directory.update_profile(
        db_session, user.id, first_name="  Samira ", last_name="", bio=None
    )

    assert updated.first_name == "Samira"
    assert updated.last_name == "Lee"
    assert updated.bio == "Old"

    cleared = await directory.update_profile(db_session, user.id, bio="")
    assert cleared.bio == ""


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_profile_missing_user(db_session):
    with pytest.raises(NotFoundError, match="User not found"):
        await directory.update_profile(db_session, 4242, first_name="X")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_set_avatar_replaces_previous_one(db_session, asset_store):
    user = await persist(db_session, UserFactory.create())

    first = await directory.set_avatar(
        db_session, asset_store, user.id, filename="me.png", data=b"one"
    )
    first_url = first.profile_image_url
    assert first_url.startswith("/uploads/avatar/")

    second = await directory.set_avatar(
        db_session, asset_store, user.id, filename="me.webp", data=b"two"
    )

    assert second.profile_image_url != first_url
    assert second.profile_image_url.endswith(".webp")
    assets = (
        await db_session.execute(select(Asset).order_by(Asset.id))
    ).scalars().all()
    assert [(a.url, a.is_deleted) for a in assets] == [
        (first_url, True),
        (second.profile_image_url, False),
    ]
    assert all(a.object_type == "user" and a.object_id == user.id for a in assets)
    assert not asset_store.path_for(assets[0].asset_key).exists()


@pytest.mark.asyncio
@pytest.mark.unit
async def test_invalid_avatar_keeps_current_one(db_session, asset_store):
    user = await persist(db_session, UserFactory.create())
    current = await directory.set_avatar(
        db_session, asset_store, user.id, filename="me.png", data=b"ok"
    )
    current_url = current.profile_image_url

    with pytest.raises(ValidationError):
        await directory.set_avatar(
            db_session, asset_store, user.id, filename="me.svg", data=b"<svg/>"
        )

    await db_session.refresh(user)
    assert user.profile_image_url == current_url


@pytest.mark.asyncio
@pytest.mark.unit
async def test_clear_avatar(db_session, asset_store):
    user = await persist(db_session, UserFactory.create())
    await directory.set_avatar(
        db_session, asset_store, user.id, filename="me.png", data=b"img"
    )
    asset = (await db_session.execute(select(Asset))).scalar_one()

    cleared = await directory.clear_avatar(db_session, asset_store, user.id)

    assert cleared.profile_image_url is None
    await db_session.refresh(asset)
    assert asset.is_deleted is True
    assert not asset_store.path_for(asset.asset_key).exists()

    # Nothing to clear is not an error.
    again = await directory.clear_avatar(db_session, asset_store, user.id)
    assert again.profile_image_url is None
