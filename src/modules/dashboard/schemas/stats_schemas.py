from pydantic import BaseModel

class MaintenanceStats(BaseModel):
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    resolved: int = 0
    rejected: int = 0

class ProjectStats(BaseModel):
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    rejected: int = 0

class DashboardStats(BaseModel):
    maintenance: MaintenanceStats
    projects: ProjectStats
    events: int
    notifications: int
    # IT only; always 0 for staff
    logs: int = 0
    users: int = 0
