from .auth_schemas import (
    Principal, LoginRequest, RegisterRequest, RegisterResponse, UserSummary,
    UserResponse, TokenResponse, DivisionResponse, BranchResponse
)

__all__ = [
    'Principal', 'LoginRequest', 'RegisterRequest', 'RegisterResponse', 'UserSummary',
    'UserResponse', 'TokenResponse', 'DivisionResponse', 'BranchResponse'
]
