from .auth_service import AuthService
from .permission import Action, can_mutate, can_perform_action

__all__ = ['AuthService', 'Action', 'can_mutate', 'can_perform_action']
