import pytest
from fastapi import HTTPException

from taklifnoma.modules.templates.editor import TemplateEditor
from taklifnoma.modules.templates.schemas import TemplateUpdate, TemplateConfig
from taklifnoma.modules.templates.service import CustomTemplateService, is_missing_table_error
from tests.conftest import USER_ID, OTHER_USER_ID, api_error


@pytest.fixture
def service(fake_db, local_store):
    return CustomTemplateService(fake_db, local_store)


def make_editor(name="Bahor"):
    editor = TemplateEditor()
    editor.set_data("templateName", name)
    return editor


class TestLocalStore:
    def test_save_get_list_delete(self, local_store):
        first = local_store.save({"user_id": USER_ID, "name": "A"})
        second = local_store.save({"user_id": OTHER_USER_ID, "name": "B"})

        assert first["id"].startswith("local_")
        assert first["id"] != second["id"]
        assert first["is_local"] is True
        assert local_store.get(first["id"])["name"] == "A"
        assert [r["name"] for r in local_store.list(USER_ID)] == ["A"]
        assert len(local_store.list()) == 2

        assert local_store.delete(first["id"]) is True
        assert local_store.get(first["id"]) is None
        assert local_store.delete(first["id"]) is False

    def test_empty_store_lists_nothing(self, local_store):
        assert local_store.list(USER_ID) == []


@pytest.mark.parametrize("error,expected", [
    (api_error('relation "public.custom_templates" does not exist', "42P01"), True),
    (api_error("Could not find the table 'public.custom_templates' in the schema cache", "PGRST205"), True),
    (api_error("JSON object requested, multiple (or no) rows returned", "PGRST116"), True),
    (api_error("new row violates row-level security policy", "42501"), False),
    (RuntimeError("connection reset"), False),
])
def test_is_missing_table_error(error, expected):
    assert is_missing_table_error(error) is expected


class TestSaveTemplate:
    def test_remote_insert(self, service, fake_db, local_store):
        result = service.save_template(make_editor(), USER_ID)

        assert result.storage == "remote"
        assert result.fallback_reason is None
        assert result.template.name == "Bahor"
        assert result.template.is_local is False
        assert fake_db.tables["custom_templates"][0]["user_id"] == USER_ID
        assert local_store.list() == []

    def test_missing_table_falls_back_to_local_store(self, service, fake_db, local_store):
        fake_db.missing_tables.add("custom_templates")

        result = service.save_template(make_editor(), USER_ID)

        assert result.storage == "local"
        assert result.fallback_reason == "table_missing"
        assert "uploaded once the database is available" in result.message
        assert result.template.id.startswith("local_")
        assert result.template.pending_sync is True
        stored = local_store.get(result.template.id)
        assert stored["config"]["layout"]["borderRadius"] == 16
        assert stored["user_id"] == USER_ID

    def test_other_remote_errors_also_fall_back(self, service, fake_db, local_store):
        fake_db.fail("custom_templates", "insert", api_error("new row violates row-level security policy", "42501"))

        result = service.save_template(make_editor(), USER_ID)

        assert result.storage == "local"
        assert result.fallback_reason == "remote_error"
        assert len(local_store.list(USER_ID)) == 1

    def test_requires_signed_in_user(self, service):
        with pytest.raises(HTTPException) as exc:
            service.save_template(make_editor(), None)
        assert exc.value.status_code == 401

    def test_requires_template_name(self, service, fake_db):
        with pytest.raises(HTTPException) as exc:
            service.save_template(make_editor("  "), USER_ID)
        assert exc.value.status_code == 400
        assert fake_db.calls == []


class TestSync:
    def test_pending_templates_are_uploaded_and_removed(self, service, fake_db, local_store):
        fake_db.missing_tables.add("custom_templates")
        saved = service.save_template(make_editor(), USER_ID)
        fake_db.missing_tables.clear()

        result = service.sync_local_templates(USER_ID)

        assert len(result.synced) == 1
        assert result.failed == 0
        assert result.remaining == 0
        assert local_store.get(saved.template.id) is None
        row = fake_db.tables["custom_templates"][0]
        assert row["id"] == result.synced[0]
        assert "is_local" not in row and "pending_sync" not in row

    def test_failed_uploads_stay_local(self, service, fake_db, local_store):
        fake_db.missing_tables.add("custom_templates")
        service.save_template(make_editor(), USER_ID)

        result = service.sync_local_templates(USER_ID)

        assert result.synced == []
        assert result.failed == 1
        assert result.remaining == 1

    def test_only_own_templates_are_synced(self, service, fake_db, local_store):
        local_store.save({"user_id": OTHER_USER_ID, "name": "X", "pending_sync": True})
        result = service.sync_local_templates(USER_ID)
        assert result.synced == []
        assert len(local_store.list(OTHER_USER_ID)) == 1


class TestReadUpdateDelete:
    def test_list_merges_remote_and_local(self, service, fake_db, local_store):
        service.save_template(make_editor("Remote"), USER_ID)
        local_store.save({"user_id": USER_ID, "name": "Local", "pending_sync": True})

        names = [t.name for t in service.list_templates(USER_ID)]
        assert names == ["Remote", "Local"]
        assert [t.name for t in service.list_templates(USER_ID, include_local=False)] == ["Remote"]

    def test_list_survives_missing_table(self, service, fake_db, local_store):
        local_store.save({"user_id": USER_ID, "name": "Local"})
        fake_db.missing_tables.add("custom_templates")
        assert [t.name for t in service.list_templates(USER_ID)] == ["Local"]

    def test_get_reads_string_encoded_config(self, service, fake_db):
        fake_db.tables["custom_templates"] = [{
            "id": "t1", "user_id": USER_ID, "name": "Old",
            "config": '{"layout": {"style": "modern", "borderRadius": 4}}',
        }]
        template = service.get_template("t1", USER_ID)
        assert template.config.layout.style == "modern"
        assert template.config.layout.border_radius == 4

    def test_private_template_of_other_user_is_hidden(self, service, fake_db):
        fake_db.tables["custom_templates"] = [
            {"id": "t1", "user_id": OTHER_USER_ID, "name": "Private", "is_public": False},
            {"id": "t2", "user_id": OTHER_USER_ID, "name": "Shared", "is_public": True},
        ]
        with pytest.raises(HTTPException) as exc:
            service.get_template("t1", USER_ID)
        assert exc.value.status_code == 404
        assert service.get_template("t2", USER_ID).name == "Shared"

    def test_local_template_of_other_user_is_hidden(self, service, local_store):
        record = local_store.save({"user_id": OTHER_USER_ID, "name": "X"})
        with pytest.raises(HTTPException) as exc:
            service.get_template(record["id"], USER_ID)
        assert exc.value.status_code == 404

    def test_update_remote_config_keeps_sections_in_step(self, service, fake_db):
        saved = service.save_template(make_editor(), USER_ID)
        config = TemplateConfig()
        config.layout.style = "classic"

        updated = service.update_template(saved.template.id, TemplateUpdate(config=config, is_public=True), USER_ID)

        assert updated.config.layout.style == "classic"
        assert updated.is_public is True
        assert fake_db.tables["custom_templates"][0]["layout"]["style"] == "classic"

    def test_update_local_template(self, service, local_store):
        record = local_store.save({"user_id": USER_ID, "name": "Old", "pending_sync": True})
        updated = service.update_template(record["id"], TemplateUpdate(name="New"), USER_ID)
        assert updated.name == "New"
        assert local_store.get(record["id"])["name"] == "New"
        assert local_store.get(record["id"])["pending_sync"] is True

    def test_update_without_fields_is_rejected(self, service):
        with pytest.raises(HTTPException) as exc:
            service.update_template("t1", TemplateUpdate(), USER_ID)
        assert exc.value.status_code == 400

    def test_delete_remote_and_local(self, service, fake_db, local_store):
        saved = service.save_template(make_editor(), USER_ID)
        local = local_store.save({"user_id": USER_ID, "name": "L"})

        service.delete_template(saved.template.id, USER_ID)
        service.delete_template(local["id"], USER_ID)

        assert fake_db.tables["custom_templates"] == []
        assert local_store.list() == []
        with pytest.raises(HTTPException) as exc:
            service.delete_template(saved.template.id, USER_ID)
        assert exc.value.status_code == 404

    def test_public_listing(self, service, fake_db):
        fake_db.tables["custom_templates"] = [
            {"id": "a", "name": "A", "is_public": True, "is_active": True, "usage_count": 3},
            {"id": "b", "name": "B", "is_public": True, "is_active": False, "usage_count": 9},
            {"id": "c", "name": "C", "is_public": False, "is_active": True, "usage_count": 1},
        ]
        assert [t.id for t in service.list_public_templates()] == ["a"]
