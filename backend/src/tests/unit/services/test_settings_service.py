"""Unit tests for SettingsService browse, read, edit and cache refresh."""

import json

import pytest

from quill.core.exceptions import NoPermissionError, NotFoundError, ValidationError
from quill.schemas.setting import Setting, SettingsResult
from quill.services.settings_service import SettingsService
from quill.settings.access import CORE_FROM_EXTERNAL, NO_PERMISSION_TO_READ
from quill.settings.cache import SettingsCache


class TestBrowse:
    @pytest.mark.asyncio
    async def test_anonymous_browse_only_sees_blog_settings(self, service, permissions):
        result = await service.browse({})

        assert isinstance(result, list)
        assert {setting.key for setting in result} == {"title", "description"}
        assert permissions.calls == []

    @pytest.mark.asyncio
    async def test_anonymous_browse_with_no_options(self, service):
        result = await service.browse()

        assert "apiKey" not in {setting.key for setting in result}

    @pytest.mark.asyncio
    async def test_external_browse_strips_core(self, service, external):
        result = await service.browse({"context": external})

        assert isinstance(result, SettingsResult)
        assert "apiKey" not in result.keys()
        assert {"title", "activeTheme", "labs", "availableThemes"} <= set(result.keys())
        assert result.meta.filters is None

    @pytest.mark.asyncio
    async def test_internal_browse_includes_core(self, service, internal):
        result = await service.browse({"context": internal})

        assert "apiKey" in result.keys()

    @pytest.mark.asyncio
    async def test_browse_type_filter(self, service, external):
        result = await service.browse({"context": external, "type": "blog,theme"})

        assert result.keys() == ["activeTheme", "title", "description", "availableThemes"]
        assert result.meta.filters.type == "blog,theme"

    @pytest.mark.asyncio
    async def test_browse_denied(self, store, cache, make_permissions, external):
        service = SettingsService(store, cache, make_permissions(browse=False))

        with pytest.raises(NoPermissionError):
            await service.browse({"context": external})

    @pytest.mark.asyncio
    async def test_browse_recomputes_available_themes(self, service, internal):
        service.set_available_themes({"lyra": {"package.json": None}})

        result = await service.browse({"context": internal, "type": "theme"})

        derived = next(setting for setting in result.settings if setting.key == "availableThemes")
        assert json.loads(derived.value) == [{"name": "lyra", "package": False, "active": False}]

    @pytest.mark.asyncio
    async def test_mutating_browse_result_leaves_cache_intact(self, service, cache, internal):
        result = await service.browse({"context": internal})

        title = next(setting for setting in result.settings if setting.key == "title")
        title.value = "Hijacked"

        assert cache.get("title").value == "My Blog"


class TestRead:
    @pytest.mark.asyncio
    async def test_read_blog_setting_by_key(self, service, permissions):
        result = await service.read("title")

        assert result.settings == [Setting(key="title", value="My Blog", type="blog")]
        assert permissions.calls == []

    @pytest.mark.asyncio
    async def test_read_missing_key(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            await service.read({"key": "missing"})

        assert exc_info.value.details["key"] == "missing"

    @pytest.mark.asyncio
    async def test_read_core_from_external_fails_before_checker(self, service, permissions):
        with pytest.raises(NoPermissionError) as exc_info:
            await service.read("apiKey", {"context": {"internal": False}})

        assert exc_info.value.message_key == CORE_FROM_EXTERNAL
        assert permissions.calls == []

    @pytest.mark.asyncio
    async def test_read_core_internal(self, service, internal):
        result = await service.read({"key": "apiKey", "context": internal})

        assert result.keys() == ["apiKey"]

    @pytest.mark.asyncio
    async def test_read_denied_message_differs_from_not_found(self, store, cache, make_permissions, external):
        service = SettingsService(store, cache, make_permissions(read=[]))

        with pytest.raises(NoPermissionError) as exc_info:
            await service.read({"key": "labs", "context": external})

        assert exc_info.value.message_key == NO_PERMISSION_TO_READ
        assert exc_info.value.error_code == "NO_PERMISSION"

    @pytest.mark.asyncio
    async def test_read_derived_available_themes(self, service, external):
        result = await service.read({"key": "availableThemes", "context": external})

        assert [item["name"] for item in json.loads(result.settings[0].value)] == ["casper", "lyra"]

    @pytest.mark.asyncio
    async def test_read_active_theme_carries_available_themes(self, service, internal):
        result = await service.read({"key": "activeTheme", "context": internal})

        assert result.keys() == ["activeTheme", "availableThemes"]
        assert json.loads(result.settings[1].value)[0] == {
            "name": "casper",
            "package": {"name": "casper", "version": "1.0.0"},
            "active": True,
        }

    @pytest.mark.asyncio
    async def test_read_other_key_has_no_derived_entry(self, service):
        result = await service.read("title")

        assert result.keys() == ["title"]


class TestEdit:
    @pytest.mark.asyncio
    async def test_type_pseudo_entry_is_stripped_and_becomes_filter(self, service, store, cache):
        result = await service.edit(
            {"settings": [{"key": "title", "value": "New Blog"}, {"key": "type", "value": "blog"}]}
        )

        persisted, _ = store.edit_calls[0]
        assert [item.key for item in persisted] == ["title"]
        assert result.meta.filters.type == "blog"
        assert result.keys() == ["title"]
        assert cache.get("title").value == "New Blog"

    @pytest.mark.asyncio
    async def test_shorthand_key_value(self, service, cache):
        result = await service.edit("title", "Shorthand")

        assert result.settings[0].value == "Shorthand"
        assert cache.get("title").value == "Shorthand"

    @pytest.mark.asyncio
    async def test_non_string_values_are_json_serialized(self, service, store, cache, internal):
        await service.edit(
            {"settings": [{"key": "labs", "value": {"subscribers": True}}]},
            {"context": internal},
        )

        persisted, _ = store.edit_calls[0]
        assert persisted[0].value == '{"subscribers": true}'
        assert cache.get("labs", resolve=True) == {"subscribers": True}

    @pytest.mark.asyncio
    async def test_available_themes_is_silently_dropped(self, service, store):
        result = await service.edit(
            {"settings": [{"key": "availableThemes", "value": []}, {"key": "title", "value": "x"}]}
        )

        persisted, _ = store.edit_calls[0]
        assert [item.key for item in persisted] == ["title"]
        assert "availableThemes" not in result.keys()

    @pytest.mark.asyncio
    async def test_denied_key_aborts_whole_batch(self, store, cache, make_permissions, external):
        service = SettingsService(store, cache, make_permissions(edit=["title"]))
        before = cache.get_all()

        with pytest.raises(NoPermissionError):
            await service.edit(
                {"settings": [{"key": "title", "value": "New"}, {"key": "labs", "value": "{}"}]},
                {"context": external},
            )

        assert store.edit_calls == []
        assert store.records["title"]["value"] == "My Blog"
        assert cache.get_all() == before

    @pytest.mark.asyncio
    async def test_core_edit_from_external_is_refused(self, service, store, external):
        with pytest.raises(NoPermissionError) as exc_info:
            await service.edit({"settings": [{"key": "apiKey", "value": "stolen"}]}, {"context": external})

        assert exc_info.value.message_key == CORE_FROM_EXTERNAL
        assert store.edit_calls == []

    @pytest.mark.asyncio
    async def test_unknown_key_is_not_found(self, service, store):
        with pytest.raises(NotFoundError):
            await service.edit("nope", "x")

        assert store.edit_calls == []

    @pytest.mark.asyncio
    async def test_acting_user_tags_the_write(self, service, store, external):
        await service.edit({"settings": [{"key": "title", "value": "x"}]}, {"context": external})

        _, user = store.edit_calls[0]
        assert user == "user-1"
        assert store.records["title"]["updated_by"] == "user-1"

    @pytest.mark.asyncio
    async def test_explicit_user_wins_over_context_identity(self, service, store, external):
        await service.edit({"settings": [{"key": "title", "value": "x"}]}, {"context": external, "user": "admin"})

        _, user = store.edit_calls[0]
        assert user == "admin"

    @pytest.mark.asyncio
    async def test_editing_active_theme_returns_fresh_available_themes(self, service, cache, internal):
        result = await service.edit({"settings": [{"key": "activeTheme", "value": "lyra"}]}, {"context": internal})

        derived = next(setting for setting in result.settings if setting.key == "availableThemes")
        active = [item["name"] for item in json.loads(derived.value) if item["active"]]
        assert active == ["lyra"]
        assert cache.get("availableThemes") is None

    @pytest.mark.asyncio
    async def test_store_failure_propagates_and_cache_untouched(self, service, store, cache):
        store.fail_with = RuntimeError("disk full")

        with pytest.raises(RuntimeError, match="disk full"):
            await service.edit("title", "x")

        assert cache.get("title").value == "My Blog"

    @pytest.mark.asyncio
    async def test_malformed_payload_is_validation_error(self, service):
        with pytest.raises(ValidationError):
            await service.edit({"settings": [{"value": "no key"}]})

    @pytest.mark.asyncio
    async def test_schema_rejection_prevents_persistence(self, store, cache, permissions):
        class RejectingChecker:
            async def check_object(self, payload, resource_name):
                raise ValidationError(resource_name, "nope")

        service = SettingsService(store, cache, permissions, schema_checker=RejectingChecker())

        with pytest.raises(ValidationError):
            await service.edit("title", "x")

        assert store.edit_calls == []


class TestRefreshCache:
    @pytest.mark.asyncio
    async def test_refresh_from_store(self, store, permissions):
        cache = SettingsCache(store)
        service = SettingsService(store, cache, permissions)

        snapshot = await service.refresh_cache()

        assert store.find_all_calls == 1
        assert snapshot["title"].value == "My Blog"

    @pytest.mark.asyncio
    async def test_refresh_with_explicit_settings_skips_store(self, service, store):
        snapshot = await service.refresh_cache({"title": Setting(key="title", value="Direct", type="blog")})

        assert store.find_all_calls == 0
        assert snapshot["title"].value == "Direct"

    @pytest.mark.asyncio
    async def test_out_of_band_store_write_visible_only_after_refresh(self, service, store):
        store.records["title"]["value"] = "Changed elsewhere"

        before = await service.read("title")
        await service.refresh_cache()
        after = await service.read("title")

        assert before.settings[0].value == "My Blog"
        assert after.settings[0].value == "Changed elsewhere"
