import os
import json
from typing import List, Any, Optional
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

# Environment variable to control CLI output mode
# İzin verilen değerler: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode
    # Geçersiz değerleri yoksay; mevcut varsayılanı koru

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def print_books_result(books: List[Any], title: str = "Books") -> None:
    """Kitap listesini mevcut çıktı moduna göre yazdır.
    - plain: 'ID - Title by Author' satırları, veya 'No books found.'
    - json: JSON dizisi olarak id, title, author, description
    - rich: Rich tablosu
    """
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
        return

    if not books:
        print("No books found.")
        return

    if mode == "rich":
        table = Table(title=f"📚 {title} ({len(books)})", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Description", style="dim")
        for b in books:
            table.add_row(escape(b.id), escape(b.title), escape(b.display_author), escape(b.description))
        _console.print(table)
    else:
        print(f"{title} ({len(books)}):")
        for b in books:
            line = f"{b.id} - {b.title} by {b.display_author}"
            if b.description:
                line += f" ({b.description})"
            print(line)

def print_user_result(user: Optional[Any], state: str) -> None:
    """Oturumdaki kullanıcıyı yazdır; kullanıcı yoksa yalnızca durum."""
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps({"state": state, "user": user.to_dict() if user else None}, ensure_ascii=False))
        return

    if user is None:
        print(f"Not logged in ({state}).")
        return

    if mode == "rich":
        content = (
            f"[bold]Name:[/] {escape(user.name)}\n"
            f"[bold]Email:[/] {escape(user.email)}\n"
            f"[bold]Role:[/] {user.role.value}"
        )
        _console.print(Panel.fit(content, title="👤 Session", border_style="blue"))
    else:
        print(f"Logged in as {user.name} <{user.email}> ({user.role.value})")

def print_error(message: str) -> None:
    if get_output_mode() == "rich":
        _console.print(f"[bold red]Error:[/] {escape(message)}")
    else:
        print(f"Error: {message}")
