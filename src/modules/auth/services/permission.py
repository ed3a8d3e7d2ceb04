from enum import Enum

from modules.auth.schemas.auth_schemas import Principal
from modules.events.models.event import Event
from modules.logs.models.log import Log
from modules.maintenance.models.maintenance_issue import MaintenanceIssue
from modules.notifications.models.notification import Notification
from modules.projects.models.project_item import ProjectItem
from modules.users.models.user import UserRole

class Action(str, Enum):
    VIEW = "view"
    EDIT = "edit"
    SET_STATUS = "set_status"
    DELETE = "delete"
    ATTACH = "attach"
    ATTACH_RESULT = "attach_result"
    CREATE = "create"
    MARK_READ = "mark_read"
    READ_LOGS = "read_logs"

# Actions granted by role alone, regardless of ownership
ROLE_PERMISSIONS = {
    UserRole.IT: [Action.SET_STATUS, Action.ATTACH_RESULT, Action.CREATE, Action.READ_LOGS],
    UserRole.NON_IT: [],
}

def can_perform_action(user_role: UserRole, action: Action) -> bool:
    return action in ROLE_PERMISSIONS.get(user_role, [])

def can_mutate(actor: Principal, resource, action: Action) -> bool:
    """
    Single authorization policy for every resource service.

    `resource` is either a loaded row (ownership rules apply) or a model
    class for actions that have no row yet (creating an event, reading logs).
    """
    if isinstance(resource, (MaintenanceIssue, ProjectItem)):
        is_owner = resource.user_id == actor.id
        if action == Action.EDIT:
            return is_owner
        if action in (Action.VIEW, Action.DELETE, Action.ATTACH):
            return is_owner or actor.is_it
        if action == Action.ATTACH_RESULT:
            return isinstance(resource, ProjectItem) and can_perform_action(actor.role, action)
        return can_perform_action(actor.role, action)

    if isinstance(resource, Event):
        # Deadline events live and die with their source record
        if action == Action.DELETE:
            return not resource.event_type.is_deadline and actor.is_it
        return False

    if isinstance(resource, Notification):
        return action == Action.MARK_READ and resource.user_id == actor.id

    if resource is Event:
        return action == Action.CREATE and can_perform_action(actor.role, action)

    if resource is Log:
        return action == Action.READ_LOGS and can_perform_action(actor.role, action)

    return False
