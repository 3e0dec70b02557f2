from application.users.user_service import UserService

__all__ = ["UserService"]
