"""Unit tests for the file-backed store: persistence, damaged files, isolation of records."""
import json
from datetime import datetime

import pytest

from lms_api.repositories import JsonStore
from lms_api.schemas.certificate_schemas import Certificate
from lms_api.schemas.progress_schemas import ProgressStatus
from lms_api.schemas.user_schemas import User


def _cert(cert_id: str) -> Certificate:
    return Certificate(
        id=cert_id,
        user_id="u1",
        course_id="c1",
        user_name="Ana",
        course_title="Intro",
        issued_at=datetime(2024, 5, 1, 12, 0, 0),
    )


@pytest.mark.unit
class TestJsonStore:
    def test_mutations_survive_reload(self, tmp_path, catalog_builder):
        data_dir = tmp_path / "data"
        catalog_builder(JsonStore(data_dir))
        JsonStore(data_dir).users.add_xp("u1", 7)

        reloaded = JsonStore(data_dir)
        assert reloaded.users.get("u1").xp == 7
        assert reloaded.courses.get_course("c1").lesson_ids() == ["l1", "l2"]

    def test_files_use_camel_case(self, tmp_path, catalog_builder):
        data_dir = tmp_path / "data"
        catalog_builder(JsonStore(data_dir))
        courses = json.loads((data_dir / "courses.json").read_text(encoding="utf-8"))
        lesson = courses[0]["modules"][0]["lessons"][0]
        assert "videoUrl" in lesson
        assert lesson["moduleId"] == "m1"

    def test_unparseable_file_falls_back_to_empty(self, tmp_path):
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        (data_dir / "users.json").write_text("{not json", encoding="utf-8")
        store = JsonStore(data_dir)
        assert store.users.list_users() == []

    def test_invalid_records_are_skipped(self, tmp_path):
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        (data_dir / "users.json").write_text(
            json.dumps([{"id": "ok", "name": "Fine"}, {"name": "no id"}]), encoding="utf-8"
        )
        assert [u.id for u in JsonStore(data_dir).users.list_users()] == ["ok"]

    def test_legacy_pending_status(self, tmp_path):
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        (data_dir / "progress.json").write_text(
            json.dumps([{"userId": "u1", "lessonId": "l1", "status": "PENDING", "attempts": 1, "score": 2}]),
            encoding="utf-8",
        )
        progress = JsonStore(data_dir).progress.get("u1", "l1")
        assert progress.status == ProgressStatus.IN_PROGRESS

    def test_nested_children_get_parent_ids(self, tmp_path):
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        (data_dir / "courses.json").write_text(
            json.dumps([{
                "id": "c1",
                "title": "Intro",
                "modules": [{"id": "m1", "title": "Basics", "order": 1,
                             "lessons": [{"id": "l1", "title": "First", "order": 1}]}],
            }]),
            encoding="utf-8",
        )
        lesson = JsonStore(data_dir).courses.get_lesson("l1")
        assert lesson.module_id == "m1"

    def test_returned_records_are_copies(self, json_store):
        json_store.users.add(User(id="u1", name="Ana"))
        user = json_store.users.get("u1")
        user.xp = 999
        assert json_store.users.get("u1").xp == 0


@pytest.mark.unit
class TestCertificateIssue:
    def test_issue_is_idempotent_per_user_and_course(self, store):
        first, created = store.certificates.issue(_cert("cert_a"))
        second, created_again = store.certificates.issue(_cert("cert_b"))
        assert created is True
        assert created_again is False
        assert second.id == first.id == "cert_a"
        assert len(store.certificates.list_certificates()) == 1

    def test_list_filters_by_user(self, store):
        store.certificates.issue(_cert("cert_a"))
        assert len(store.certificates.list_certificates("u1")) == 1
        assert store.certificates.list_certificates("u2") == []
