"""
Command-line front end for the MX3 booking client.

Reads MX3_USERNAME and MX3_PASSWORD from the environment (or a .env file next
to the package) and renders results as terminal tables.
"""

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from mx3booker.client import MX3Client
from mx3booker.config import LoginDetails
from mx3booker.exceptions import MX3Error
from mx3booker.models import SlotStatus, StationType, TimeSlot

console = Console()

STATION_TYPE_LABELS = {
    StationType.PRIVATE_STATION: "Private Stations (1hr)",
    StationType.OPEN_GYM: "Open Gym (30min)",
    StationType.CARDIO: "Cardio (30min)",
}


def build_schedule_table(slots: list[TimeSlot]) -> Table:
    """Group slots by station and list the open times for each."""
    table = Table(show_lines=False)
    table.add_column("Category", style="cyan")
    table.add_column("Station", style="bold")
    table.add_column("Available times")

    by_type: dict[StationType, dict[str, list[TimeSlot]]] = {}
    for slot in slots:
        by_type.setdefault(slot.station_type, {}).setdefault(
            slot.station_name, []
        ).append(slot)

    for station_type, stations in by_type.items():
        label = STATION_TYPE_LABELS.get(station_type, station_type.value)
        for station_name, station_slots in stations.items():
            available = [
                s.time for s in station_slots if s.status == SlotStatus.AVAILABLE
            ]
            table.add_row(
                label,
                station_name,
                ", ".join(available) if available else "[red]fully booked[/red]",
            )
            label = ""

    return table


async def show_schedule(client: MX3Client, date: str | None) -> int:
    schedule = await client.get_schedule(date)
    credits = await client.get_credits()

    if not schedule.slots:
        target = f" for {date}" if date else ""
        console.print(f"[yellow]No schedule available{target}.[/yellow]")
        console.print(f"Available dates: {', '.join(schedule.dates) or 'none'}")
        return 0

    console.print(
        f"[bold]Schedule for {schedule.date}[/bold] ({credits} credits remaining)"
    )
    console.print(f"Available dates: {', '.join(schedule.dates)}")
    console.print(build_schedule_table(schedule.slots))
    return 0


async def show_credits(client: MX3Client) -> int:
    credits = await client.get_credits()
    console.print(f"{credits} gym credits remaining")
    return 0


async def show_bookings(client: MX3Client) -> int:
    reservations = await client.get_my_bookings()
    credits = await client.get_credits()

    console.print(f"{credits} gym credits remaining\n")
    if not reservations:
        console.print("No upcoming reservations.")
        return 0

    table = Table(title="Upcoming reservations")
    table.add_column("Station", style="bold")
    table.add_column("Date")
    table.add_column("Time")
    for reservation in reservations:
        table.add_row(reservation.station_name, reservation.date, reservation.time)
    console.print(table)
    return 0


async def book(client: MX3Client, station: str, date: str, time: str) -> int:
    result = await client.book_slot(station, date, time)
    if result.success:
        console.print(f"[green]Booked {station} on {date} at {time}[/green]")
        return 0
    console.print(f"[red]Booking failed ({result.error.value}): {result.message}[/red]")
    return 1


async def cancel(client: MX3Client, station: str, date: str, time: str) -> int:
    result = await client.cancel_booking(station, date, time)
    style = "green" if result.success else "red"
    console.print(f"[{style}]{result.message}[/{style}]")
    return 0 if result.success else 1


async def run_command(args: argparse.Namespace) -> int:
    credentials = LoginDetails().credentials()

    async with MX3Client(credentials) as client:
        if args.command == "schedule":
            return await show_schedule(client, args.date)
        if args.command == "credits":
            return await show_credits(client)
        if args.command == "bookings":
            return await show_bookings(client)
        if args.command == "book":
            return await book(client, args.station, args.date, args.time)
        if args.command == "cancel":
            return await cancel(client, args.station, args.date, args.time)

    raise ValueError(f"Unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="MX3 Fitness Noe Valley booking client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s schedule                         # First bookable day
  %(prog)s schedule --date 2026-02-10
  %(prog)s book "Noe 1" 2026-02-10 5:00am
  %(prog)s cancel "Noe 1" 2026-02-10 5:00am
        """,
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    schedule = subparsers.add_parser("schedule", help="Show slot availability")
    schedule.add_argument("--date", help="Date in YYYY-MM-DD format")

    subparsers.add_parser("credits", help="Show remaining gym credits")
    subparsers.add_parser("bookings", help="List upcoming reservations")

    for name, help_text in (
        ("book", "Reserve a slot"),
        ("cancel", "Cancel an existing reservation"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument(
            "station", help='Station name (e.g. "Noe 1", "Air Bike") or id'
        )
        command.add_argument("date", help="Date in YYYY-MM-DD format")
        command.add_argument("time", help='Time in h:mmam/pm format (e.g. "5:00am")')

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point with argument parsing."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        return asyncio.run(run_command(args))
    except (MX3Error, ValidationError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    except KeyboardInterrupt:
        console.print("\nCancelled by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
