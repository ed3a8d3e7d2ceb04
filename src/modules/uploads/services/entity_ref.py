from dataclasses import dataclass
from typing import ClassVar, Type

from modules.auth.services.permission import Action
from modules.common.errors import ValidationFailed
from modules.maintenance.models.maintenance_issue import MaintenanceIssue
from modules.projects.models.project_item import ProjectItem
from modules.uploads.models.file_upload import EntityType


@dataclass(frozen=True)
class EntityRef:
    """Owning record of an uploaded file: Maintenance(id) | Project(id) | ProjectResult(id)"""
    entity_id: int

    entity_type: ClassVar[EntityType]
    owner_model: ClassVar[Type]
    attach_action: ClassVar[Action] = Action.ATTACH

    @staticmethod
    def parse(entity_type, entity_id) -> "EntityRef":
        try:
            kind = EntityType(entity_type)
        except ValueError:
            raise ValidationFailed(f"Unknown entity type: {entity_type}")
        try:
            parsed_id = int(entity_id)
        except (TypeError, ValueError):
            raise ValidationFailed("Entity ID must be an integer")
        return REF_TYPES[kind](parsed_id)


@dataclass(frozen=True)
class MaintenanceRef(EntityRef):
    entity_type: ClassVar[EntityType] = EntityType.MAINTENANCE
    owner_model: ClassVar[Type] = MaintenanceIssue


@dataclass(frozen=True)
class ProjectRef(EntityRef):
    entity_type: ClassVar[EntityType] = EntityType.PROJECT
    owner_model: ClassVar[Type] = ProjectItem


@dataclass(frozen=True)
class ProjectResultRef(EntityRef):
    entity_type: ClassVar[EntityType] = EntityType.PROJECT_RESULT
    owner_model: ClassVar[Type] = ProjectItem
    attach_action: ClassVar[Action] = Action.ATTACH_RESULT


REF_TYPES = {
    EntityType.MAINTENANCE: MaintenanceRef,
    EntityType.PROJECT: ProjectRef,
    EntityType.PROJECT_RESULT: ProjectResultRef,
}
