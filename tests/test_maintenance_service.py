import datetime as dt

import pytest

from conftest import principal
from modules.common.errors import Forbidden, NotFound, ValidationFailed
from modules.events.models.event import Event, EventType
from modules.logs.models.log import Log
from modules.maintenance.models.maintenance_issue import MaintenanceIssue, MaintenanceStatus
from modules.maintenance.schemas.maintenance_schemas import MaintenanceCreate, MaintenanceUpdate
from modules.maintenance.services.maintenance_service import MaintenanceService
from modules.notifications.models.notification import Notification
from modules.uploads.models.file_upload import EntityType, FileUpload


def _create(session, user, **overrides):
    data = dict(kategori="Hardware", jenis_masalah="Printer jam", deskripsi="Kertas macet di lantai 3")
    data.update(overrides)
    return MaintenanceService.create_issue(session, principal(user), MaintenanceCreate(**data))


def test_create_with_deadline_adds_calendar_event(session, staff):
    issue = _create(session, staff, deadline=dt.date(2026, 2, 1))

    assert issue.status == MaintenanceStatus.PENDING
    event = session.query(Event).one()
    assert event.title == "Deadline: Printer jam"
    assert event.date == dt.date(2026, 2, 1)
    assert event.event_type == EventType.DEADLINE_MAINTENANCE
    assert event.reference_id == issue.id
    assert event.color == "orange"
    assert session.query(Log).filter(Log.type == "CREATE").count() == 1


def test_create_without_deadline_has_no_event(session, staff):
    _create(session, staff)
    assert session.query(Event).count() == 0


def test_create_requires_text_fields(session, staff):
    with pytest.raises(ValidationFailed):
        _create(session, staff, deskripsi="  ")


def test_other_category_detail_kept_only_for_other(session, staff):
    issue = _create(session, staff, kategori="Other", other_kategori="Lift")
    assert issue.other_kategori == "Lift"
    issue = _create(session, staff, kategori="Hardware", other_kategori="Lift")
    assert issue.other_kategori is None


def test_staff_sees_only_own_issues(session, staff, other_staff, admin):
    _create(session, staff)
    _create(session, other_staff, jenis_masalah="Monitor mati")

    mine = MaintenanceService.list_issues(session, principal(staff))
    assert [i.jenis_masalah for i in mine] == ["Printer jam"]
    assert len(MaintenanceService.list_issues(session, principal(admin))) == 2


def test_get_issue_of_someone_else_is_forbidden(session, staff, other_staff):
    issue = _create(session, staff)
    with pytest.raises(Forbidden):
        MaintenanceService.get_issue(session, principal(other_staff), issue.id)
    with pytest.raises(NotFound):
        MaintenanceService.get_issue(session, principal(staff), 999)


def test_staff_cannot_change_status(session, staff):
    issue = _create(session, staff)
    with pytest.raises(Forbidden):
        MaintenanceService.update_issue(
            session, principal(staff), issue.id, MaintenanceUpdate(status=MaintenanceStatus.RESOLVED)
        )


def test_it_status_change_notifies_owner(session, staff, admin):
    issue = _create(session, staff)
    updated = MaintenanceService.update_issue(
        session, principal(admin), issue.id, MaintenanceUpdate(status=MaintenanceStatus.RESOLVED)
    )

    assert updated.status == MaintenanceStatus.RESOLVED
    notification = session.query(Notification).one()
    assert notification.user_id == staff.id
    assert notification.type == "maintenance_status"
    assert notification.title == "Status Maintenance Diperbarui"
    assert "RESOLVED" in notification.message
    assert session.query(Log).filter(Log.type == "maintenance_status_update").count() == 1


def test_it_field_edits_on_others_issue_are_ignored(session, staff, admin):
    issue = _create(session, staff)
    MaintenanceService.update_issue(
        session, principal(admin), issue.id,
        MaintenanceUpdate(jenis_masalah="Diubah", status=MaintenanceStatus.IN_PROGRESS),
    )
    session.refresh(issue)
    assert issue.jenis_masalah == "Printer jam"
    assert issue.status == MaintenanceStatus.IN_PROGRESS


def test_non_owner_staff_cannot_update(session, staff, other_staff):
    issue = _create(session, staff)
    with pytest.raises(Forbidden):
        MaintenanceService.update_issue(session, principal(other_staff), issue.id, MaintenanceUpdate(deskripsi="x"))


def test_empty_update_rejected(session, staff):
    issue = _create(session, staff)
    with pytest.raises(ValidationFailed):
        MaintenanceService.update_issue(session, principal(staff), issue.id, MaintenanceUpdate())


def test_owner_deadline_edit_moves_event(session, staff):
    issue = _create(session, staff, deadline=dt.date(2026, 2, 1))
    MaintenanceService.update_issue(
        session, principal(staff), issue.id, MaintenanceUpdate(deadline=dt.date(2026, 3, 1))
    )
    event = session.query(Event).one()
    assert event.date == dt.date(2026, 3, 1)

    MaintenanceService.update_issue(session, principal(staff), issue.id, MaintenanceUpdate(deadline=None))
    assert session.query(Event).count() == 0


def test_delete_cascades_only_own_dependents(session, staff, admin):
    issue = _create(session, staff, deadline=dt.date(2026, 2, 1))
    other = _create(session, staff, jenis_masalah="Monitor mati", deadline=dt.date(2026, 2, 2))
    for entity_id in (issue.id, other.id):
        session.add(FileUpload(
            entity_type=EntityType.MAINTENANCE, entity_id=entity_id, file_name="a.png",
            file_type="image/png", file_size=3, file_path=f"/uploads/maintenance/{entity_id}_a.png",
            uploaded_by_id=staff.id,
        ))
    session.commit()

    MaintenanceService.delete_issue(session, principal(admin), issue.id)

    assert session.get(MaintenanceIssue, issue.id) is None
    assert [e.reference_id for e in session.query(Event).all()] == [other.id]
    assert [f.entity_id for f in session.query(FileUpload).all()] == [other.id]
    log = session.query(Log).filter(Log.type == "maintenance_delete").one()
    assert log.description == 'Admin deleted maintenance "Printer jam"'


def test_delete_by_other_staff_forbidden(session, staff, other_staff):
    issue = _create(session, staff)
    with pytest.raises(Forbidden):
        MaintenanceService.delete_issue(session, principal(other_staff), issue.id)
