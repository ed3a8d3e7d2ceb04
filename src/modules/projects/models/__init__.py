from .project_item import ProjectItem, ProjectStatus, ResultType

__all__ = ['ProjectItem', 'ProjectStatus', 'ResultType']
