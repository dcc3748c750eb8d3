import re
from typing import Optional

from errors import ValidationError
from user import Role

MIN_PASSWORD_LENGTH = 6


class CredentialsValidator:
    """Local checks run before any auth request leaves the process."""

    @staticmethod
    def _is_blank(value: Optional[str]) -> bool:
        return value is None or not value.strip()

    @staticmethod
    def validate_login(email: Optional[str], password: Optional[str]) -> None:
        if CredentialsValidator._is_blank(email) or not password:
            raise ValidationError("Email and password are required")

    @staticmethod
    def validate_registration(name: Optional[str], email: Optional[str], password: Optional[str], role: Optional[str]) -> Role:
        """Raise ValidationError or return the parsed role."""
        if CredentialsValidator._is_blank(name) or CredentialsValidator._is_blank(email) or not password:
            raise ValidationError("All fields are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        # kayıt sırasında rol kapalı küme: bilinmeyen değer sessizce düşürülmez
        raw = (role or Role.USER.value).strip().lower()
        try:
            return Role(raw)
        except ValueError:
            raise ValidationError(f"Role must be one of: {', '.join(r.value for r in Role)}") from None


class BookValidator:
    """Very basic checks for the admin 'Add Book' form."""

    @staticmethod
    def validate_title(title: Optional[str]) -> str:
        if title is None or not title.strip():
            raise ValidationError("Title is required")
        return title.strip()

    @staticmethod
    def validate_book_id(book_id: Optional[str]) -> str:
        # path segment olarak gönderilecek; eğik çizgi ve boşluk kabul edilmez
        if book_id is None or not book_id.strip() or re.search(r"[/\s]", book_id.strip()):
            raise ValidationError("Invalid book id")
        return book_id.strip()
