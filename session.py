import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from api_client import LibraryApiClient
from config import settings
from errors import ApiError, AuthError, NetworkError
from token_store import TokenStore
from user import User
from utils.validators import CredentialsValidator

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    PENDING_VERIFICATION = "pending_verification"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class SessionEvent:
    """Oturum değişikliği: 'login', 'logout' veya 'verified'."""

    type: str
    user: Optional[User]


SessionListener = Callable[[SessionEvent], None]


class Session:
    """Kimin oturum açtığının tek doğruluk kaynağı.

    Durumlar: ANONYMOUS, PENDING_VERIFICATION, AUTHENTICATED.
    ``user`` yalnızca token en son başarıyla doğrulandıysa mevcuttur;
    kayıtlı bir token ile başlatılan oturum doğrulama bekler.
    """

    def __init__(
        self,
        client: LibraryApiClient,
        store: TokenStore,
        logout_on_network_error: Optional[bool] = None,
    ) -> None:
        self.client = client
        self.store = store
        self.logout_on_network_error = (
            settings.logout_on_verify_network_error if logout_on_network_error is None else logout_on_network_error
        )
        self._listeners: List[SessionListener] = []
        self._user: Optional[User] = None
        self._token: Optional[str] = store.load()
        if self._token:
            logger.info("Kayıtlı token bulundu, doğrulama bekleniyor")

    # ------------------------- Okuma ------------------------- #
    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def state(self) -> SessionState:
        if self._user is not None:
            return SessionState.AUTHENTICATED
        if self._token:
            return SessionState.PENDING_VERIFICATION
        return SessionState.ANONYMOUS

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Dinleyici ekle; kaydı silen bir fonksiyon döndürür."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------- İşlemler ------------------------- #
    def login(self, email: str, password: str) -> User:
        """Kimlik bilgilerini gönder; başarısızlıkta önceki oturum korunur."""
        CredentialsValidator.validate_login(email, password)
        data = self._authenticate(lambda: self.client.login(email.strip(), password), "Login failed")
        return self._establish(data, "Login failed")

    def register(self, name: str, email: str, password: str, role: str = "user") -> User:
        role_value = CredentialsValidator.validate_registration(name, email, password, role)
        data = self._authenticate(
            lambda: self.client.register(name.strip(), email.strip(), password, role_value.value),
            "Registration failed",
        )
        return self._establish(data, "Registration failed")

    def logout(self) -> None:
        """Kayıtlı token'ı, bellekteki token'ı ve kullanıcıyı temizle. İdempotent."""
        was_active = self._token is not None or self._user is not None
        self.store.clear()
        self._token = None
        self._user = None
        if was_active:
            logger.info("Oturum kapatıldı")
            self._emit(SessionEvent("logout", None))

    def verify(self) -> SessionState:
        """Kayıtlı token'ı sunucuda doğrula ve ortaya çıkan durumu döndür.

        Yalnızca PENDING_VERIFICATION durumunda çalışır. 4xx yanıtı veya
        ``user`` alanı olmayan yanıt oturumu kapatır. Ağ hataları ve 5xx
        yanıtları token'ı korur (``logout_on_network_error`` açık değilse).
        """
        if self.state is not SessionState.PENDING_VERIFICATION:
            return self.state

        try:
            data = self.client.verify(self._token)
        except ApiError as exc:
            if exc.is_client_error or self.logout_on_network_error:
                logger.info("Token reddedildi (HTTP %s), oturum kapatılıyor", exc.status_code)
                self.logout()
            else:
                logger.warning("Doğrulama sunucu hatası (HTTP %s), token korunuyor", exc.status_code)
            return self.state
        except NetworkError as exc:
            if self.logout_on_network_error:
                logger.warning("Doğrulama başarısız (%s), oturum kapatılıyor", exc)
                self.logout()
            else:
                logger.warning("Doğrulama sunucusuna ulaşılamadı (%s), token korunuyor", exc)
            return self.state

        user_data = data.get("user") if isinstance(data, dict) else None
        if not isinstance(user_data, dict):
            logger.info("Doğrulama yanıtında kullanıcı yok, oturum kapatılıyor")
            self.logout()
            return self.state

        self._user = User.from_dict(user_data)
        logger.info("Oturum doğrulandı: %s", self._user.email or self._user.name)
        self._emit(SessionEvent("verified", self._user))
        return self.state

    # ------------------------- Yardımcılar ------------------------- #
    @staticmethod
    def _authenticate(call: Callable[[], Any], default_message: str) -> Dict[str, Any]:
        try:
            data = call()
        except ApiError as exc:
            raise AuthError(exc.server_message or default_message, status_code=exc.status_code) from exc
        return data if isinstance(data, dict) else {}

    def _establish(self, data: Dict[str, Any], default_message: str) -> User:
        token = data.get("token")
        user_data = data.get("user")
        if not isinstance(token, str) or not token:
            raise AuthError(data.get("message") or default_message)
        if not isinstance(user_data, dict):
            raise AuthError(default_message)

        user = User.from_dict(user_data)
        self.store.save(token)
        self._token = token
        self._user = user
        logger.info("Oturum açıldı: %s (%s)", user.email or user.name, user.role.value)
        self._emit(SessionEvent("login", user))
        return user

    def _emit(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            listener(event)
