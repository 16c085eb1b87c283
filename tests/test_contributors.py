"""Tests for the contributor registry."""

import uuid
from datetime import date
from decimal import Decimal

import pytest

from conftest import actor_for
from prorights.core.exceptions import (
    DuplicateContributorError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from prorights.models import ContributorRole, UserRole
from prorights.services.contributors import ContributorRegistry
from prorights.services.distribution import DistributionService
from prorights.services.usage import UsageService

COMPOSER = ContributorRole.COMPOSER
AUTHOR = ContributorRole.AUTHOR
VOCALIST = ContributorRole.VOCALIST


@pytest.fixture
def registry():
    return ContributorRegistry()


async def percentages(registry, db, work):
    return [c.percentage for c in await registry.list_contributors(db, work.id)]


class TestAddContributor:
    async def test_first_contributor_gets_full_quota(self, db, registry, make_user, make_work):
        owner = await make_user()
        work = await make_work(owner)

        contributor = await registry.add_contributor(db, actor_for(owner), work.id, owner.id, COMPOSER)

        assert contributor.percentage == Decimal("40.00")

    async def test_adding_recalculates_bucket(self, db, registry, make_user, make_work):
        owner = await make_user()
        cowriter = await make_user()
        work = await make_work(owner)
        actor = actor_for(owner)

        await registry.add_contributor(db, actor, work.id, owner.id, COMPOSER)
        await registry.add_contributor(db, actor, work.id, cowriter.id, COMPOSER)

        assert await percentages(registry, db, work) == [Decimal("20.00"), Decimal("20.00")]

    async def test_other_buckets_untouched(self, db, registry, make_user, make_work):
        owner = await make_user()
        singer = await make_user()
        lyricist = await make_user()
        work = await make_work(owner)
        actor = actor_for(owner)

        await registry.add_contributor(db, actor, work.id, owner.id, COMPOSER)
        await registry.add_contributor(db, actor, work.id, lyricist.id, AUTHOR)
        await registry.add_contributor(db, actor, work.id, singer.id, VOCALIST)

        assert await percentages(registry, db, work) == [
            Decimal("40.00"),
            Decimal("40.00"),
            Decimal("20.00"),
        ]

    async def test_same_user_in_two_roles_allowed(self, db, registry, make_user, make_work):
        owner = await make_user()
        work = await make_work(owner)
        actor = actor_for(owner)

        await registry.add_contributor(db, actor, work.id, owner.id, COMPOSER)
        await registry.add_contributor(db, actor, work.id, owner.id, AUTHOR)

        assert len(await registry.list_contributors(db, work.id)) == 2

    async def test_duplicate_rejected(self, db, registry, make_user, make_work):
        owner = await make_user()
        work = await make_work(owner)
        actor = actor_for(owner)
        await registry.add_contributor(db, actor, work.id, owner.id, COMPOSER)

        with pytest.raises(DuplicateContributorError):
            await registry.add_contributor(db, actor, work.id, owner.id, COMPOSER)

    async def test_unknown_work(self, db, registry, make_user):
        owner = await make_user()

        with pytest.raises(NotFoundError):
            await registry.add_contributor(db, actor_for(owner), uuid.uuid4(), owner.id, COMPOSER)

    async def test_unknown_user(self, db, registry, make_user, make_work):
        owner = await make_user()
        work = await make_work(owner)

        with pytest.raises(NotFoundError):
            await registry.add_contributor(db, actor_for(owner), work.id, uuid.uuid4(), COMPOSER)

    async def test_business_account_cannot_contribute(self, db, registry, make_user, make_work):
        owner = await make_user()
        business = await make_user(role=UserRole.BUSINESS)
        work = await make_work(owner)

        with pytest.raises(ValidationError):
            await registry.add_contributor(db, actor_for(owner), work.id, business.id, VOCALIST)

    async def test_only_owner_or_admin(self, db, registry, make_user, make_work):
        owner = await make_user()
        stranger = await make_user()
        admin = await make_user(role=UserRole.ADMIN)
        work = await make_work(owner)

        with pytest.raises(PermissionDeniedError):
            await registry.add_contributor(db, actor_for(stranger), work.id, stranger.id, COMPOSER)

        contributor = await registry.add_contributor(db, actor_for(admin), work.id, stranger.id, COMPOSER)
        assert contributor.user_id == stranger.id


class TestRemoveContributor:
    async def test_remaining_members_recalculated(self, db, registry, make_user, make_work):
        owner = await make_user()
        a = await make_user()
        b = await make_user()
        work = await make_work(owner)
        actor = actor_for(owner)

        first = await registry.add_contributor(db, actor, work.id, owner.id, COMPOSER)
        await registry.add_contributor(db, actor, work.id, a.id, COMPOSER)
        await registry.add_contributor(db, actor, work.id, b.id, COMPOSER)
        assert await percentages(registry, db, work) == [Decimal("13.33")] * 3

        await registry.remove_contributor(db, actor, first.id)

        assert await percentages(registry, db, work) == [Decimal("20.00")] * 2

    async def test_unknown_contributor(self, db, registry, make_user):
        owner = await make_user()

        with pytest.raises(NotFoundError):
            await registry.remove_contributor(db, actor_for(owner), uuid.uuid4())

    async def test_contributor_with_distributions_cannot_be_removed(
        self, db, registry, make_user, make_work, make_license
    ):
        owner = await make_user()
        business = await make_user(role=UserRole.BUSINESS)
        work = await make_work(owner)
        business_license = await make_license(business)
        contributor = await registry.add_contributor(db, actor_for(owner), work.id, owner.id, COMPOSER)

        usage = UsageService(distributor=DistributionService(), auto_distribute=True)
        await usage.submit_usage_report(
            db, actor_for(business), business_license.id, work.id, 10, date(2024, 1, 1), date(2024, 2, 1)
        )

        with pytest.raises(ValidationError):
            await registry.remove_contributor(db, actor_for(owner), contributor.id)


class TestChangeRole:
    async def test_moves_between_buckets(self, db, registry, make_user, make_work):
        owner = await make_user()
        other = await make_user()
        work = await make_work(owner)
        actor = actor_for(owner)

        await registry.add_contributor(db, actor, work.id, owner.id, COMPOSER)
        moving = await registry.add_contributor(db, actor, work.id, other.id, COMPOSER)

        await registry.change_role(db, actor, moving.id, VOCALIST)

        assert await percentages(registry, db, work) == [Decimal("40.00"), Decimal("20.00")]

    async def test_same_role_is_noop(self, db, registry, make_user, make_work):
        owner = await make_user()
        work = await make_work(owner)
        contributor = await registry.add_contributor(db, actor_for(owner), work.id, owner.id, AUTHOR)

        result = await registry.change_role(db, actor_for(owner), contributor.id, AUTHOR)

        assert result.percentage == Decimal("40.00")

    async def test_collision_with_existing_role(self, db, registry, make_user, make_work):
        owner = await make_user()
        work = await make_work(owner)
        actor = actor_for(owner)
        await registry.add_contributor(db, actor, work.id, owner.id, AUTHOR)
        composer = await registry.add_contributor(db, actor, work.id, owner.id, COMPOSER)

        with pytest.raises(DuplicateContributorError):
            await registry.change_role(db, actor, composer.id, AUTHOR)


class TestListContributors:
    async def test_insertion_order_with_user_data(self, db, registry, make_user, make_work):
        owner = await make_user(first_name="Nina", last_name="Vale")
        singer = await make_user(first_name="Omar", last_name="Reyes")
        work = await make_work(owner)
        actor = actor_for(owner)

        await registry.add_contributor(db, actor, work.id, singer.id, VOCALIST)
        await registry.add_contributor(db, actor, work.id, owner.id, COMPOSER)

        contributors = await registry.list_contributors(db, work.id)

        assert [c.user.display_name for c in contributors] == ["Omar Reyes", "Nina Vale"]
        assert [c.sequence for c in contributors] == [0, 1]

    async def test_unknown_work(self, db, registry):
        with pytest.raises(NotFoundError):
            await registry.list_contributors(db, uuid.uuid4())

    async def test_recalculate_is_idempotent(self, db, registry, make_user, make_work):
        owner = await make_user()
        a = await make_user()
        work = await make_work(owner)
        actor = actor_for(owner)
        await registry.add_contributor(db, actor, work.id, owner.id, AUTHOR)
        await registry.add_contributor(db, actor, work.id, a.id, AUTHOR)

        first = [c.percentage for c in await registry.recalculate_work(db, work.id)]
        second = [c.percentage for c in await registry.recalculate_work(db, work.id)]

        assert first == second == [Decimal("20.00"), Decimal("20.00")]
