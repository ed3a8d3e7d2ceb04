from .maintenance_issue import MaintenanceIssue, MaintenanceStatus, OTHER_CATEGORY

__all__ = ['MaintenanceIssue', 'MaintenanceStatus', 'OTHER_CATEGORY']
