import logging
from typing import Callable, List, Optional

from api_client import LibraryApiClient
from book import Book
from errors import ApiError, AuthError, NetworkError
from session import Session
from utils.validators import BookValidator

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[str], bool]


class UserDashboard:
    """Salt okunur kitap listesi. Her yenilemede tüm liste yeniden çekilir."""

    heading = "Library"
    listing_title = "Available Books"

    def __init__(self, session: Session, client: Optional[LibraryApiClient] = None) -> None:
        self.session = session
        self.client = client or session.client
        self._books: List[Book] = []

    @property
    def books(self) -> List[Book]:
        return list(self._books)

    @property
    def count(self) -> int:
        return len(self._books)

    @property
    def welcome(self) -> str:
        name = self.session.user.name if self.session.user else ""
        return f"{self.heading} - Welcome {name}!"

    def refresh(self) -> List[Book]:
        """Listeyi sunucudan çek. Hata olursa loglanır ve önceki liste korunur."""
        try:
            self._books = self.client.list_books()
        except (NetworkError, ApiError) as exc:
            logger.error("Error fetching books: %s", exc)
        return self.books


class AdminDashboard(UserDashboard):
    """Kitap ekleme ve silme; her başarılı değişiklikten sonra liste yeniden çekilir."""

    heading = "Admin Dashboard"
    listing_title = "All Books"

    def _require_admin(self) -> str:
        user = self.session.user
        if user is None or not user.is_admin or not self.session.token:
            raise AuthError("Admin privileges required")
        return self.session.token

    def add_book(self, title: str, author: Optional[str] = None, description: str = "") -> Optional[Book]:
        token = self._require_admin()
        clean_title = BookValidator.validate_title(title)
        try:
            book = self.client.create_book(token, clean_title, author, description)
        except (NetworkError, ApiError) as exc:
            logger.error("Error adding book %r: %s", clean_title, exc)
            return None
        logger.info("Kitap eklendi: %s", book.title)
        self.refresh()
        return book

    def delete_book(self, book_id: str, confirm: Optional[ConfirmFn] = None) -> bool:
        """Onay alınırsa kitabı sil. Reddedilen onayda hiçbir istek yapılmaz."""
        token = self._require_admin()
        book_id = BookValidator.validate_book_id(book_id)
        if confirm is not None and not confirm(book_id):
            logger.info("Silme iptal edildi: %s", book_id)
            return False
        try:
            self.client.delete_book(token, book_id)
        except (NetworkError, ApiError) as exc:
            logger.error("Error deleting book %s: %s", book_id, exc)
            return False
        logger.info("Kitap silindi: %s", book_id)
        self.refresh()
        return True
