from enum import Enum

from session import Session
from user import Role


class Screen(str, Enum):
    LOGIN = "login"
    REGISTER = "register"
    ADMIN_DASHBOARD = "admin_dashboard"
    USER_DASHBOARD = "user_dashboard"


class AuthView:
    """Giriş/kayıt ekranı arasındaki yerel geçiş; kalıcı değildir."""

    def __init__(self, show_login: bool = True) -> None:
        self.show_login = show_login

    def switch_to_register(self) -> None:
        self.show_login = False

    def switch_to_login(self) -> None:
        self.show_login = True


def select_screen(session: Session, view: AuthView) -> Screen:
    """Oturum durumundan ekran seçimi. Hata durumu yoktur."""
    user = session.user
    if user is None:
        return Screen.LOGIN if view.show_login else Screen.REGISTER
    if user.role is Role.ADMIN:
        return Screen.ADMIN_DASHBOARD
    return Screen.USER_DASHBOARD
