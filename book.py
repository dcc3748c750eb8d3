from __future__ import annotations


class Book:
    """Uzak katalogdaki tek bir kitabın geçici okuması."""

    def __init__(self, id: str, title: str, author: str | None = None, description: str = "") -> None:
        self.id = id
        self.title = (title or "").strip()
        self.author = author.strip() if author and author.strip() else None
        self.description = description or ""

    @property
    def display_author(self) -> str:
        return self.author or "Unknown"

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} - {self.display_author}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(self.id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "description": self.description,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        # Mongo tabanlı sunucu kimliği '_id' olarak gönderir
        raw_id = data.get("_id", data.get("id"))
        author = data.get("author")
        # sunucu sayısal alan gönderebilir (ör. başlık 1984)
        return Book(
            id=str(raw_id) if raw_id is not None else "",
            title=_text(data.get("title")),
            author=str(author) if author is not None else None,
            description=_text(data.get("description")),
        )


def _text(value: object) -> str:
    return "" if value is None else str(value)
