import os
import time

import pytest

from conftest import principal
from modules.common.errors import Forbidden, NotFound, ValidationFailed
from modules.maintenance.schemas.maintenance_schemas import MaintenanceCreate
from modules.maintenance.services.maintenance_service import MaintenanceService
from modules.projects.schemas.project_schemas import ProjectCreate
from modules.projects.services.project_service import ProjectService
from modules.uploads.models.file_upload import EntityType, FileUpload
from modules.uploads.services.entity_ref import EntityRef, MaintenanceRef, ProjectRef, ProjectResultRef
from modules.uploads.services.storage_sweep import delete_orphaned_files
from modules.uploads.services.upload_service import UploadService

MAX_FILE_SIZE = 1024


def _issue(session, user):
    return MaintenanceService.create_issue(
        session, principal(user), MaintenanceCreate(kategori="Hardware", jenis_masalah="Printer jam", deskripsi="x")
    )


def test_parse_entity_ref():
    ref = EntityRef.parse("project_result", "12")
    assert isinstance(ref, ProjectResultRef)
    assert ref.entity_id == 12
    assert ref.entity_type == EntityType.PROJECT_RESULT
    with pytest.raises(ValidationFailed):
        EntityRef.parse("invoice", "1")
    with pytest.raises(ValidationFailed):
        EntityRef.parse("maintenance", "abc")


def test_stored_name_is_sanitized():
    assert UploadService.build_stored_name(3, "foto kerusakan (1).jpg", timestamp_ms=1700000000000) == \
        "3_1700000000000_foto_kerusakan__1_.jpg"


def test_owner_uploads_attachment(session, staff, tmp_path):
    issue = _issue(session, staff)
    record = UploadService.upload_file(
        session, principal(staff), MaintenanceRef(issue.id), b"abc", "foto.png", "image/png",
        str(tmp_path), MAX_FILE_SIZE,
    )

    assert record.file_size == 3
    assert record.file_path.startswith(f"/uploads/maintenance/{issue.id}_")
    stored = tmp_path / "maintenance" / record.file_path.rsplit("/", 1)[1]
    assert stored.read_bytes() == b"abc"
    assert [f.id for f in UploadService.list_files(session, MaintenanceRef(issue.id))] == [record.id]


def test_upload_checks_owner_and_permission(session, staff, other_staff, tmp_path):
    with pytest.raises(NotFound):
        UploadService.upload_file(session, principal(staff), MaintenanceRef(999), b"a", "a.png", None, str(tmp_path))

    issue = _issue(session, staff)
    with pytest.raises(Forbidden):
        UploadService.upload_file(
            session, principal(other_staff), MaintenanceRef(issue.id), b"a", "a.png", None, str(tmp_path)
        )


def test_upload_rejects_empty_and_oversized(session, staff, tmp_path):
    issue = _issue(session, staff)
    ref = MaintenanceRef(issue.id)
    with pytest.raises(ValidationFailed):
        UploadService.upload_file(session, principal(staff), ref, b"", "a.png", None, str(tmp_path), MAX_FILE_SIZE)
    with pytest.raises(ValidationFailed):
        UploadService.upload_file(
            session, principal(staff), ref, b"x" * (MAX_FILE_SIZE + 1), "a.png", None, str(tmp_path), MAX_FILE_SIZE
        )
    assert session.query(FileUpload).count() == 0


def test_only_it_attaches_project_results(session, staff, admin, tmp_path):
    project = ProjectService.create_project(
        session, principal(staff), ProjectCreate(title="Portal", description="x")
    )
    UploadService.upload_file(session, principal(staff), ProjectRef(project.id), b"a", "brief.pdf", None, str(tmp_path))
    with pytest.raises(Forbidden):
        UploadService.upload_file(
            session, principal(staff), ProjectResultRef(project.id), b"a", "hasil.pdf", None, str(tmp_path)
        )
    record = UploadService.upload_file(
        session, principal(admin), ProjectResultRef(project.id), b"a", "hasil.pdf", None, str(tmp_path)
    )
    assert record.file_path.startswith("/uploads/project_result/")


def test_sweep_removes_only_old_orphans(session, staff, tmp_path):
    issue = _issue(session, staff)
    kept = UploadService.upload_file(
        session, principal(staff), MaintenanceRef(issue.id), b"a", "kept.png", None, str(tmp_path)
    )
    orphan_dir = tmp_path / "maintenance"
    old_orphan = orphan_dir / "99_1_old.png"
    fresh_orphan = orphan_dir / "99_2_fresh.png"
    old_orphan.write_bytes(b"x")
    fresh_orphan.write_bytes(b"x")
    two_hours_ago = time.time() - 2 * 60 * 60
    os.utime(old_orphan, (two_hours_ago, two_hours_ago))
    kept_path = orphan_dir / kept.file_path.rsplit("/", 1)[1]
    os.utime(kept_path, (two_hours_ago, two_hours_ago))

    assert delete_orphaned_files(session, str(tmp_path), grace_minutes=60) == 1
    assert not old_orphan.exists()
    assert fresh_orphan.exists()
    assert kept_path.exists()


def test_sweep_without_upload_dir(session, tmp_path):
    assert delete_orphaned_files(session, str(tmp_path / "missing")) == 0
