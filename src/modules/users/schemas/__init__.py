from .user_schemas import OwnerSummary, ProfileResponse, ProfileUpdate

__all__ = ['OwnerSummary', 'ProfileResponse', 'ProfileUpdate']
