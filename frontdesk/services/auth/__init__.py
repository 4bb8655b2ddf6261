from frontdesk.services.auth.auth_service import AuthService

__all__ = ["AuthService"]
