import logging
import sys
from typing import List, Optional, Type

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from api_client import LibraryApiClient
from config import settings
from dashboards import AdminDashboard, UserDashboard
from errors import AuthError, LibraryClientError, ValidationError
from router import AuthView, Screen, select_screen
from session import Session, SessionEvent, SessionState
from token_store import TokenStore
from utils.ui_helpers import print_books_result, print_error, print_user_result, set_output_mode

APP_NAME = settings.app_name

console = Console()
logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


_open_clients: List[LibraryApiClient] = []


def close_clients() -> None:
    while _open_clients:
        _open_clients.pop().close()


def bootstrap(verify: bool = True) -> Session:
    """Oturumu oluştur ve (kayıtlı token varsa) bir kez doğrula.

    Uygulamanın tek başlatma adımıdır; dönüşte doğrulama tamamlanmıştır
    ve sonuç ``session.state`` üzerinden okunabilir.
    """
    client = LibraryApiClient()
    _open_clients.append(client)
    session = Session(client, TokenStore())
    if verify and session.state is SessionState.PENDING_VERIFICATION:
        state = session.verify()
        logger.info("Başlangıç doğrulaması: %s", state.value)
    return session


def _require_user(session: Session) -> None:
    if session.is_authenticated:
        return
    if session.state is SessionState.PENDING_VERIFICATION:
        print_error("Could not verify the saved session. Check your connection and try again.")
    else:
        print_error("Not logged in. Run 'login' first.")
    raise typer.Exit(code=1)


# --- Typer CLI Uygulaması ---
app = typer.Typer(help="Library catalog client")


@app.callback()
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
):
    """Global options for the CLI (e.g. output mode)."""
    configure_logging()
    if output:
        set_output_mode(output)
    # komut bitince (Exit dahil) açılan HTTP bağlantıları kapatılır
    ctx.call_on_close(close_clients)


@app.command("login")
def cli_login(
    email: str = typer.Argument(..., help="Account email"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
):
    """Log in and persist the session token."""
    session = bootstrap(verify=False)
    try:
        user = session.login(email, password)
    except (AuthError, ValidationError) as e:
        print_error(e.message)
        raise typer.Exit(code=1)
    except LibraryClientError as e:
        print_error(f"Login failed: {e.message}")
        raise typer.Exit(code=1)
    print(f"Logged in as {user.name} ({user.role.value})")


@app.command("register")
def cli_register(
    name: str = typer.Argument(..., help="Full name"),
    email: str = typer.Argument(..., help="Account email"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True,
        help="Password (min 6 characters)",
    ),
    role: str = typer.Option("user", "--role", "-r", help="Account role: user | admin"),
):
    """Create an account and log in with it."""
    session = bootstrap(verify=False)
    try:
        user = session.register(name, email, password, role)
    except (AuthError, ValidationError) as e:
        print_error(e.message)
        raise typer.Exit(code=1)
    except LibraryClientError as e:
        print_error(f"Registration failed: {e.message}")
        raise typer.Exit(code=1)
    print(f"Registered and logged in as {user.name} ({user.role.value})")


@app.command("logout")
def cli_logout():
    """Forget the saved session."""
    session = bootstrap(verify=False)
    session.logout()
    print("Logged out.")


@app.command("whoami")
def cli_whoami():
    """Show the verified user of the saved session."""
    session = bootstrap()
    print_user_result(session.user, session.state.value)


@app.command("books")
def cli_books():
    """List all books in the catalog."""
    session = bootstrap()
    _require_user(session)
    dashboard = UserDashboard(session)
    books = dashboard.refresh()
    print_books_result(books, title=dashboard.listing_title)


@app.command("add")
def cli_add(
    title: str = typer.Argument(..., help="Book title"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="Author"),
    description: str = typer.Option("", "--description", "-d", help="Description"),
):
    """Add a book (admin only)."""
    session = bootstrap()
    _require_user(session)
    dashboard = AdminDashboard(session)
    try:
        book = dashboard.add_book(title, author, description)
    except (AuthError, ValidationError) as e:
        print_error(e.message)
        raise typer.Exit(code=1)
    if book is None:
        print_error("Could not add the book.")
        raise typer.Exit(code=1)
    print(f"Added: {book.title} by {book.display_author}")
    print(f"{dashboard.listing_title}: {dashboard.count}")


@app.command("remove")
def cli_remove(
    book_id: str = typer.Argument(..., help="Book identifier"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
):
    """Delete a book by id (admin only)."""
    session = bootstrap()
    _require_user(session)
    dashboard = AdminDashboard(session)
    if not session.user.is_admin:
        print_error("Admin privileges required")
        raise typer.Exit(code=1)
    if not yes and not Confirm.ask("Are you sure you want to delete this book?", default=False):
        print("Deletion cancelled.")
        return
    try:
        deleted = dashboard.delete_book(book_id)
    except (AuthError, ValidationError) as e:
        print_error(e.message)
        raise typer.Exit(code=1)
    if not deleted:
        print_error(f"Could not delete book {book_id}.")
        raise typer.Exit(code=1)
    print(f"Book {book_id} has been deleted.")
    print(f"{dashboard.listing_title}: {dashboard.count}")


# --- Etkileşimli menü ---
def _header(title: str) -> None:
    console.print(Panel.fit(f"[bold]{escape(title)}[/]", border_style="cyan", box=box.HEAVY))


def _show_books(dashboard: UserDashboard) -> None:
    books = dashboard.books
    if not books:
        console.print("[yellow]No books found.[/]")
        return
    table = Table(title=f"📚 {dashboard.listing_title} ({len(books)})", show_lines=True, header_style="bold cyan")
    table.add_column("ID", style="magenta", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Author", style="white")
    table.add_column("Description", style="dim")
    for book in books:
        table.add_row(escape(book.id), escape(book.title), escape(book.display_author), escape(book.description))
    console.print(table)


def login_screen(session: Session, view: AuthView) -> bool:
    _header(APP_NAME)
    choice = Prompt.ask("[1] Login  [2] Register here  [0] Exit", choices=["1", "2", "0"], default="1")
    if choice == "0":
        return False
    if choice == "2":
        view.switch_to_register()
        return True
    email = Prompt.ask("Email").strip()
    password = Prompt.ask("Password", password=True)
    try:
        with console.status("[bold green]Logging in..."):
            session.login(email, password)
    except (AuthError, ValidationError) as e:
        console.print(f"[bold red]{escape(e.message or 'Login failed')}[/]")
    except LibraryClientError as e:
        console.print(f"[bold red]Login failed:[/] {escape(e.message)}")
    return True


def register_screen(session: Session, view: AuthView) -> bool:
    _header(f"{APP_NAME} - Register")
    choice = Prompt.ask("[1] Register  [2] Login here  [0] Exit", choices=["1", "2", "0"], default="1")
    if choice == "0":
        return False
    if choice == "2":
        view.switch_to_login()
        return True
    name = Prompt.ask("Full Name").strip()
    email = Prompt.ask("Email").strip()
    password = Prompt.ask("Password (min 6 characters)", password=True)
    role = Prompt.ask("Role", choices=["user", "admin"], default="user")
    try:
        with console.status("[bold green]Registering..."):
            session.register(name, email, password, role)
    except (AuthError, ValidationError) as e:
        console.print(f"[bold red]{escape(e.message or 'Registration failed')}[/]")
    except LibraryClientError as e:
        console.print(f"[bold red]Registration failed:[/] {escape(e.message)}")
    return True


def dashboard_screen(session: Session, dashboard: UserDashboard) -> bool:
    _header(dashboard.welcome)
    _show_books(dashboard)

    is_admin = isinstance(dashboard, AdminDashboard)
    choices = ["1", "9", "0"]
    labels = "[1] Refresh"
    if is_admin:
        choices[1:1] = ["2", "3"]
        labels += "  [2] Add Book  [3] Delete"
    labels += "  [9] Logout  [0] Exit"

    choice = Prompt.ask(labels, choices=choices, default="1")
    if choice == "0":
        return False
    if choice == "9":
        session.logout()
    elif choice == "1":
        dashboard.refresh()
    elif choice == "2" and is_admin:
        title = Prompt.ask("Book Title")
        author = Prompt.ask("Author", default="") or None
        description = Prompt.ask("Description", default="")
        try:
            book = dashboard.add_book(title, author, description)
        except ValidationError as e:
            console.print(f"[bold red]{escape(e.message)}[/]")
        else:
            if book is None:
                console.print("[red]❌ Could not add the book.[/]")
    elif choice == "3" and is_admin:
        book_id = Prompt.ask("Book ID")
        try:
            deleted = dashboard.delete_book(
                book_id,
                confirm=lambda _id: Confirm.ask("🗑️ Are you sure you want to delete this book?", default=False),
            )
        except ValidationError as e:
            console.print(f"[bold red]{escape(e.message)}[/]")
        else:
            if not deleted:
                console.print("[blue]No book was deleted.[/]")
    return True


_DASHBOARDS: dict = {
    Screen.ADMIN_DASHBOARD: AdminDashboard,
    Screen.USER_DASHBOARD: UserDashboard,
}


def run_menu() -> None:
    """Oturum durumuna göre ekran seçen etkileşimli döngü."""
    configure_logging()
    with console.status("[dim]Checking saved session..."):
        session = bootstrap()
    view = AuthView()
    mounted: dict = {"screen": None, "dashboard": None}

    def on_session_change(event: SessionEvent) -> None:
        # oturum değişince pano yeniden kurulur (ve listeyi yeniden çeker)
        mounted["screen"] = None
        mounted["dashboard"] = None
        if event.type == "logout":
            view.switch_to_login()

    session.subscribe(on_session_change)

    running = True
    try:
        while running:
            screen = select_screen(session, view)
            if screen is Screen.LOGIN:
                running = login_screen(session, view)
            elif screen is Screen.REGISTER:
                running = register_screen(session, view)
            else:
                if mounted["screen"] is not screen:
                    dashboard_cls: Type[UserDashboard] = _DASHBOARDS[screen]
                    mounted["dashboard"] = dashboard_cls(session)
                    mounted["dashboard"].refresh()
                    mounted["screen"] = screen
                running = dashboard_screen(session, mounted["dashboard"])
            console.print()
    finally:
        close_clients()
    console.print("[green]Goodbye![/]")


def cli() -> None:
    if len(sys.argv) > 1:
        app()
    else:
        run_menu()


if __name__ == "__main__":
    cli()
