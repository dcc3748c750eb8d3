"""İstemci genelinde kullanılan hata türleri."""

from typing import Optional


class LibraryClientError(Exception):
    """Tüm istemci hatalarının temel sınıfı."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NetworkError(LibraryClientError):
    """Sunucuya ulaşılamadı veya yanıt ayrıştırılamadı."""


class TransportError(NetworkError):
    """İstek sunucuya hiç ulaşmadı (bağlantı, zaman aşımı). Yeniden denenebilir."""


class ApiError(LibraryClientError):
    """Sunucu 2xx dışı bir durum kodu döndürdü."""

    def __init__(self, status_code: int, server_message: Optional[str] = None) -> None:
        super().__init__(server_message or f"HTTP {status_code}")
        self.status_code = status_code
        # sunucunun gövdede bildirdiği mesaj (varsa)
        self.server_message = server_message

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500


class AuthError(LibraryClientError):
    """Geçersiz kimlik bilgileri veya sunucunun bildirdiği kimlik doğrulama hatası."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ValidationError(LibraryClientError):
    """Yerel form doğrulaması başarısız oldu; ağ çağrısı yapılmadı."""
