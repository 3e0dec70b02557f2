from domain.user.user import AuthenticatedUser, User

__all__ = ["AuthenticatedUser", "User"]
