"""Unit tests for the in-memory account repositories."""

from datetime import datetime, timezone

import pytest
from unittest.mock import MagicMock

from menu_guard.domain.account.entities.history_entry import NewHistoryEntry
from menu_guard.domain.account.entities.user_profile import UserProfile
from menu_guard.domain.account.exceptions import ProfileNotFoundError
from menu_guard.domain.analysis.entities.analysis_result import (
    SAVED_RESULT_UNREADABLE,
    STORED_RESULT_INVALID,
)


def _new_entry(user_id="user-1", created_at=None, results=()):
    return NewHistoryEntry(
        user_id=user_id,
        input_text="Pasted Text",
        result=list(results),
        allergies="Peanuts",
        preferences="",
        created_at=created_at,
    )


class TestInMemoryProfileRepository:
    @pytest.mark.asyncio
    async def test_get_or_create_keeps_existing_row(self, profile_repository, identity):
        default = UserProfile.default_for(identity)
        stored = await profile_repository.get_or_create(default)
        stored.update(allergies="Sesame")
        await profile_repository.save(stored)

        again = await profile_repository.get_or_create(UserProfile.default_for(identity))

        assert again.allergies == "Sesame"
        assert profile_repository.count() == 1

    @pytest.mark.asyncio
    async def test_returned_profiles_are_copies(self, profile_repository, identity):
        profile = await profile_repository.get_or_create(UserProfile.default_for(identity))
        profile.username = "mutated"

        stored = await profile_repository.find_by_id(identity.id)
        assert stored.username == "ada"

    @pytest.mark.asyncio
    async def test_save_missing(self, profile_repository, identity):
        with pytest.raises(ProfileNotFoundError):
            await profile_repository.save(UserProfile.default_for(identity))

    @pytest.mark.asyncio
    async def test_history_is_not_stored_on_profile(
        self, profile_repository, identity, make_history_entry
    ):
        profile = await profile_repository.get_or_create(UserProfile.default_for(identity))
        profile = profile.with_history([make_history_entry(1, datetime.now(timezone.utc))])
        await profile_repository.save(profile)

        stored = await profile_repository.find_by_id(identity.id)
        assert stored.analysis_history == []

    @pytest.mark.asyncio
    async def test_delete(self, profile_repository, identity):
        await profile_repository.get_or_create(UserProfile.default_for(identity))
        assert await profile_repository.delete(identity.id) is True
        assert await profile_repository.delete(identity.id) is False


class TestInMemoryHistoryRepository:
    @pytest.mark.asyncio
    async def test_ids_increase(self, history_repository):
        first = await history_repository.add(_new_entry())
        second = await history_repository.add(_new_entry())
        assert second.id > first.id

    @pytest.mark.asyncio
    async def test_list_newest_first_per_user(self, history_repository, pad_thai_results):
        await history_repository.add(
            _new_entry(created_at=datetime(2026, 3, 1, tzinfo=timezone.utc))
        )
        await history_repository.add(
            _new_entry(
                created_at=datetime(2026, 3, 5, tzinfo=timezone.utc), results=pad_thai_results
            )
        )
        await history_repository.add(_new_entry(user_id="user-2"))

        entries = await history_repository.list_for_user("user-1")

        assert [e.created_at.day for e in entries] == [5, 1]
        assert entries[0].result == pad_thai_results

    @pytest.mark.asyncio
    async def test_corrupt_row_decodes_to_data_error(self, history_repository):
        entry = await history_repository.add(_new_entry())
        history_repository._rows[0]["result"] = "not json list"

        entries = await history_repository.list_for_user("user-1")

        assert entries[0].id == entry.id
        assert entries[0].result[0].item_name == "Data Error"
        assert entries[0].result[0].reasoning == STORED_RESULT_INVALID

    @pytest.mark.asyncio
    async def test_unreadable_saved_result(self, history_repository):
        malformed = MagicMock()
        malformed.to_dict.return_value = {"itemName": "Soup"}

        entry = await history_repository.add(_new_entry(results=[malformed]))

        assert entry.result[0].item_name == "Data Error"
        assert entry.result[0].reasoning == SAVED_RESULT_UNREADABLE

    @pytest.mark.asyncio
    async def test_delete_scoped_to_owner(self, history_repository):
        entry = await history_repository.add(_new_entry())

        assert await history_repository.delete("user-2", entry.id) is False
        assert await history_repository.delete("user-1", entry.id) is True
        assert await history_repository.list_for_user("user-1") == []
