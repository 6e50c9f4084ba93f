#!/usr/bin/env python3
"""
Fee Portal CLI - Command line front-end for the school fee-management backend

List and manage students, classes, fee structures and payments, download
receipts and view the collection dashboard.

Usage:
    python cli.py login --email admin@school.test
    python cli.py students list --page 2
    python cli.py payments void 42 --reason "Duplicate entry"
"""

import asyncio
import sys
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

from feeportal.schemas.api.common import Pagination
from feeportal.services.api_client import (
    ApiClient,
    ApiError,
    FileTokenStore,
    ResponseDecodeError,
    UnauthorizedError,
    extract_list,
)
from feeportal.services.data_fetcher import DataFetcher, FormSubmitter, PaginatedFetcher
from feeportal.services.reporting import summarize_dashboard
from feeportal.services.school_api import SchoolApi
from feeportal.utils.logger import get_logger
from feeportal.utils.settings import get_settings

logger = get_logger(__name__)
console = Console()

Column = Tuple[str, str]

STUDENT_COLUMNS: List[Column] = [
    ("ID", "id"),
    ("Student ID", "student_id"),
    ("First Name", "first_name"),
    ("Last Name", "last_name"),
    ("Class", "class_name"),
    ("Active", "is_active"),
]
CLASS_COLUMNS: List[Column] = [
    ("ID", "id"),
    ("Name", "name"),
    ("Grade", "grade"),
    ("Section", "section"),
    ("Academic Year", "academic_year"),
]
STRUCTURE_COLUMNS: List[Column] = [
    ("ID", "id"),
    ("Name", "name"),
    ("Type", "fee_type"),
    ("Amount", "amount"),
    ("Due", "due_date"),
    ("Academic Year", "academic_year"),
]
ASSIGNMENT_COLUMNS: List[Column] = [
    ("ID", "id"),
    ("Student", "student_id"),
    ("Fee Structure", "fee_structure_id"),
    ("Status", "status"),
    ("Due", "due_date"),
]
PAYMENT_COLUMNS: List[Column] = [
    ("ID", "id"),
    ("Receipt", "receipt_number"),
    ("Student", "student_id"),
    ("Amount", "amount_paid"),
    ("Method", "payment_method"),
    ("Date", "payment_date"),
    ("Status", "status"),
]


def _notify(error: ApiError) -> None:
    console.print(f"[red]❌ {error.message}[/red] [dim]({error.status_code})[/dim]")
    if error.details:
        for field, message in error.details.items():
            console.print(f"   [yellow]{field}[/yellow]: {message}")


def _session_expired(login_route: str) -> None:
    console.print("[yellow]⚠️  Session expired. Run `cli.py login` to sign in again.[/yellow]")


def _api() -> SchoolApi:
    settings = get_settings()
    client = ApiClient(
        token_store=FileTokenStore(settings.TOKEN_STORE_PATH),
        notifier=_notify,
        on_auth_failure=_session_expired,
    )
    return SchoolApi(client)


def _fail(error: Exception) -> None:
    """Report errors the client did not already announce, then exit 1."""
    if isinstance(error, (UnauthorizedError, ResponseDecodeError)):
        console.print(f"[red]❌ {error.message}[/red]")
    elif not isinstance(error, ApiError):
        console.print(f"[red]❌ Error: {error}[/red]")
    logger.error(f"CLI command failed: {error}")
    sys.exit(1)


def _value(record: Any, key: str) -> str:
    if isinstance(record, dict):
        value = record.get(key)
    else:
        value = getattr(record, key, None)
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "✅" if value else "❌"
    return str(value)


def _render_table(title: str, records: Iterable[Any], columns: Sequence[Column]) -> None:
    table = Table(title=title)
    for header, _ in columns:
        table.add_column(header)
    count = 0
    for record in records:
        table.add_row(*[_value(record, key) for _, key in columns])
        count += 1
    if count == 0:
        console.print(f"[yellow]No records found for {title.lower()}[/yellow]")
        return
    console.print(table)


def _render_pagination(pagination: Optional[Pagination]) -> None:
    if pagination is None or pagination.total_pages <= 1:
        return
    first = (pagination.page - 1) * pagination.limit + 1
    last = min(pagination.page * pagination.limit, pagination.total)
    console.print(
        f"[dim]Showing {first} to {last} of {pagination.total} "
        f"(page {pagination.page} of {pagination.total_pages})[/dim]"
    )


@click.group()
@click.version_option(version="1.0.0")
def cli():
    """
    🏫 Fee Portal CLI

    Manage students, fees and payments against the school fee backend.
    """
    pass


# ----------------------------------------------------------------------
# Session
# ----------------------------------------------------------------------


@cli.command()
def status():
    """🔌 Check backend connectivity and the stored session"""
    settings = get_settings()
    api = _api()

    table = Table(title="🔧 Connection", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Backend", settings.API_BASE_URL)
    table.add_row("Reachable", "✅ Yes" if api.client.check_connection() else "❌ No")
    table.add_row("Signed in", "✅ Yes" if api.client.token_store.get_access_token() else "❌ No")
    console.print(table)


@cli.command()
@click.option("--email", prompt=True, help="Account email")
@click.option("--password", prompt=True, hide_input=True, help="Account password")
def login(email: str, password: str):
    """🔑 Sign in and store the session tokens"""
    try:
        response = _api().auth.login(email, password)
    except Exception as e:
        _fail(e)
        return

    user = (response.data or {}).get("user") or {}
    name = f"{user.get('first_name', '')} {user.get('last_name', '')}".strip() or email
    console.print(f"[green]✅ Login successful[/green] - signed in as [bold]{name}[/bold] ({user.get('role', 'unknown role')})")


@cli.command()
def logout():
    """🚪 Sign out and forget the stored tokens"""
    try:
        _api().auth.logout()
    except ApiError as e:
        logger.warning(f"Backend logout failed, tokens cleared locally: {e.message}")
    console.print("[green]✅ Logged out[/green]")


@cli.command()
def whoami():
    """👤 Show the signed-in user's profile"""
    try:
        user = _api().auth.get_current_user()
    except Exception as e:
        _fail(e)
        return

    table = Table(title="👤 Profile", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    for key, value in user.model_dump(exclude_none=True).items():
        table.add_row(str(key), str(value))
    console.print(table)


# ----------------------------------------------------------------------
# Students
# ----------------------------------------------------------------------


@cli.group()
def students():
    """🎓 Student records"""
    pass


async def _load_student_page(api: SchoolApi, page: int, limit: int, filters: dict) -> PaginatedFetcher:
    fetcher = PaginatedFetcher(api.students.get_all, "students", page_size=limit, immediate=False)
    fetcher.page = page
    await fetcher.refresh(filters)
    return fetcher


@students.command("list")
@click.option("--page", type=int, default=1, show_default=True, help="Page number")
@click.option("--limit", type=int, default=None, help="Page size (defaults to DEFAULT_PAGE_SIZE)")
@click.option("--search", type=str, help="Free-text search")
@click.option("--class-id", type=str, help="Only students in this class")
def list_students(page: int, limit: Optional[int], search: Optional[str], class_id: Optional[str]):
    """List students, one page at a time"""
    api = _api()
    filters = {"search": search, "class_id": class_id}
    try:
        fetcher = asyncio.run(_load_student_page(api, page, limit or get_settings().DEFAULT_PAGE_SIZE, filters))
    except Exception as e:
        _fail(e)
        return

    _render_table("🎓 Students", fetcher.items, STUDENT_COLUMNS)
    _render_pagination(fetcher.pagination)


@students.command("show")
@click.argument("student_id")
def show_student(student_id: str):
    """Show one student with their fees"""
    api = _api()

    async def _load():
        async with DataFetcher(lambda: api.students.get_by_id(student_id)) as profile, \
                DataFetcher(lambda: api.students.get_fees(student_id)) as fees:
            await profile.wait()
            await fees.wait()
            return profile, fees

    try:
        profile, fees = asyncio.run(_load())
    except Exception as e:
        _fail(e)
        return

    if profile.error:
        _fail(profile.error)
        return

    record = profile.data or {}
    if isinstance(record, dict) and isinstance(record.get("student"), dict):
        record = record["student"]
    lines = [f"[cyan]{key}[/cyan]: {value}" for key, value in record.items()]
    console.print(Panel("\n".join(lines), title=f"🎓 Student {student_id}"))

    if fees.error is None:
        fee_items, _ = extract_list(fees.data, "fees")
        _render_table("💰 Fees", fee_items, [("ID", "id"), ("Status", "status"), ("Due", "due_date"), ("Balance", "balance_amount")])


@students.command("delete")
@click.argument("student_id")
@click.option("--yes", is_flag=True, help="Skip confirmation")
def delete_student(student_id: str, yes: bool):
    """Delete a student"""
    if not yes and not click.confirm(f"Delete student {student_id}?", default=False):
        console.print("[yellow]Operation cancelled.[/yellow]")
        sys.exit(0)

    submitter = FormSubmitter(_api().students.delete, success_message=f"Student {student_id} deleted")
    submitter.announce = lambda message: console.print(f"[green]✅ {message}[/green]")
    if not asyncio.run(submitter.submit(student_id)):
        _fail(submitter.error)


@students.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def import_students(csv_file: Path):
    """Bulk-import students from a CSV file"""
    api = _api()
    with Progress(TextColumn("[cyan]Uploading {task.description}"), BarColumn(), TextColumn("{task.percentage:>3.0f}%"), console=console) as progress:
        task_id = progress.add_task(csv_file.name, total=100)
        try:
            response = api.students.bulk_import(csv_file, on_progress=lambda pct: progress.update(task_id, completed=pct))
        except Exception as e:
            _fail(e)
            return

    console.print(f"[green]✅ {response.message or 'Import submitted'}[/green]")
    if isinstance(response.data, dict):
        for key, value in response.data.items():
            if not isinstance(value, (list, dict)):
                console.print(f"   [cyan]{key}[/cyan]: {value}")


# ----------------------------------------------------------------------
# Classes
# ----------------------------------------------------------------------


@cli.group()
def classes():
    """🏫 Classes"""
    pass


@classes.command("list")
@click.option("--academic-year", type=str, help="Filter by academic year")
def list_classes(academic_year: Optional[str]):
    """List classes"""
    try:
        result = _api().classes.list_classes({"academic_year": academic_year})
    except Exception as e:
        _fail(e)
        return
    _render_table("🏫 Classes", result.items, CLASS_COLUMNS)


# ----------------------------------------------------------------------
# Fees
# ----------------------------------------------------------------------


@cli.group()
def fees():
    """💰 Fee structures and assignments"""
    pass


@fees.command("structures")
@click.option("--class-id", type=str, help="Only structures for this class")
def list_structures(class_id: Optional[str]):
    """List fee structures"""
    try:
        result = _api().fee_structures.list_fee_structures({"class_id": class_id})
    except Exception as e:
        _fail(e)
        return
    _render_table("💰 Fee Structures", result.items, STRUCTURE_COLUMNS)
    _render_pagination(result.pagination)


@fees.command("assignments")
@click.option("--status", type=str, help="assigned, paid, overdue or waived")
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--limit", type=int, default=None)
def list_assignments(status: Optional[str], page: int, limit: Optional[int]):
    """List fee assignments"""
    params = {"status": status, "page": page, "limit": limit or get_settings().DEFAULT_PAGE_SIZE}
    try:
        result = _api().fee_structures.list_assignments(params)
    except Exception as e:
        _fail(e)
        return
    _render_table("📋 Fee Assignments", result.items, ASSIGNMENT_COLUMNS)
    _render_pagination(result.pagination)


@fees.command("assign")
@click.argument("structure_id")
@click.option("--student", "student_ids", multiple=True, help="Student ID. Can be used multiple times.")
@click.option("--class-id", type=str, help="Assign to every student in this class")
@click.option("--due-date", type=str, help="Due date in YYYY-MM-DD format")
def assign_fee(structure_id: str, student_ids: tuple, class_id: Optional[str], due_date: Optional[str]):
    """Assign a fee structure to students"""
    if not student_ids and not class_id:
        console.print("[red]❌ Error: Provide --student or --class-id[/red]")
        sys.exit(1)

    payload = {"student_ids": list(student_ids) or None, "class_id": class_id, "due_date": due_date}
    payload = {k: v for k, v in payload.items() if v is not None}
    try:
        response = _api().fee_structures.assign_to_students(structure_id, **payload)
    except Exception as e:
        _fail(e)
        return
    console.print(f"[green]✅ {response.message or 'Fee structure assigned'}[/green]")


# ----------------------------------------------------------------------
# Payments
# ----------------------------------------------------------------------


@cli.group()
def payments():
    """🧾 Payments and receipts"""
    pass


@payments.command("list")
@click.option("--student-id", type=str, help="Only payments for this student")
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--limit", type=int, default=None)
def list_payments(student_id: Optional[str], page: int, limit: Optional[int]):
    """List recorded payments"""
    params = {"student_id": student_id, "page": page, "limit": limit or get_settings().DEFAULT_PAGE_SIZE}
    try:
        result = _api().payments.list_payments(params)
    except Exception as e:
        _fail(e)
        return
    _render_table("🧾 Payments", result.items, PAYMENT_COLUMNS)
    _render_pagination(result.pagination)


@payments.command("void")
@click.argument("payment_id")
@click.option("--reason", type=str, required=True, help="Why the payment is being voided")
def void_payment(payment_id: str, reason: str):
    """Void a payment"""
    try:
        response = _api().payments.void_payment(payment_id, reason)
    except Exception as e:
        _fail(e)
        return
    console.print(f"[green]✅ {response.message or f'Payment {payment_id} voided'}[/green]")


@payments.command("receipt")
@click.argument("payment_id")
@click.option("--output", type=click.Path(file_okay=False, path_type=Path), default=Path("."), show_default=True, help="Directory to save into")
def download_receipt(payment_id: str, output: Path):
    """Download a payment receipt"""
    output.mkdir(parents=True, exist_ok=True)
    try:
        saved = _api().payments.download_receipt(payment_id, output)
    except Exception as e:
        _fail(e)
        return
    console.print(f"[green]✅ Receipt saved to {saved}[/green]")


# ----------------------------------------------------------------------
# Dashboard
# ----------------------------------------------------------------------


@cli.command()
def dashboard():
    """📊 Collection summary"""
    try:
        response = _api().dashboard.get_stats()
    except Exception as e:
        _fail(e)
        return

    summary = summarize_dashboard(response.data or {})
    table = Table(title="📊 Fee Collection", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Total fees", f"{summary.total_fees:,.2f}")
    table.add_row("Collected", f"{summary.collected_amount:,.2f}")
    table.add_row("Pending", f"{summary.pending_amount:,.2f}")
    table.add_row("Overdue", f"{summary.overdue_amount:,.2f}")
    table.add_row("Collection rate", f"{summary.collection_rate:.2f}%")
    table.add_row("Defaulters", str(summary.defaulters_count))
    console.print(table)


if __name__ == "__main__":
    cli()
