"""
Export service: printable tables for the document renderer.

Builders only format an already-computed TripView, so an exported document
always matches what is on screen. Output depends on nothing but the view.
"""
from typing import List
from tripboard.core.utils import format_amount, format_date_short
from tripboard.schemas.export import ExportDocument, ExportTable
from tripboard.schemas.trip import TripView

PACKED_GLYPH = "✓"
UNPACKED_GLYPH = "☐"


def _filename(view: TripView, suffix: str) -> str:
    return f"{view.trip.title or 'trip'}-{suffix}.pdf"


def _location(view: TripView) -> str:
    return ", ".join(part for part in (view.trip.destination, view.trip.country) if part)


def build_itinerary_export(view: TripView) -> ExportDocument:
    """Day-by-day table of the (possibly filtered) itinerary."""
    trip = view.trip
    rows = [
        [
            day.day_label,
            day.stop.name,
            format_date_short(day.stop.date),
            day.stop.status.value.upper(),
            day.stop.activity or "-",
        ]
        for day in view.itinerary.stops
    ]
    return ExportDocument(
        filename=_filename(view, "itinerary"),
        title=trip.title or "Trip Itinerary",
        subtitle_lines=[
            _location(view),
            f"{format_date_short(trip.start_date)} - {format_date_short(trip.end_date)}",
        ],
        tables=[ExportTable(headers=["Day", "Stop", "Date", "Status", "Activity"], rows=rows)],
    )


def build_expense_export(view: TripView) -> ExportDocument:
    """Expense table with total, and budget/remaining when a budget is set."""
    summary = view.expenses
    lines: List[str] = [f"Total Spent: {format_amount(summary.total)}"]
    if summary.utilization.is_set:
        lines.append(f"Budget: {format_amount(summary.utilization.budget)}")
        lines.append(f"Remaining: {format_amount(summary.utilization.remaining)}")

    rows = [
        [
            line.expense.item,
            line.expense.category.upper(),
            format_amount(line.expense.amount),
            format_date_short(line.expense.created_at.date() if line.expense.created_at else None),
            line.creator_name,
        ]
        for line in summary.expenses
    ]
    return ExportDocument(
        filename=_filename(view, "expenses"),
        title=view.trip.title or "Trip Expenses",
        subtitle_lines=[_location(view)],
        summary_lines=lines,
        tables=[ExportTable(headers=["Item", "Category", "Amount", "Date", "Created By"], rows=rows)],
        footer=f"Total: {format_amount(summary.total)}",
    )


def build_packing_export(view: TripView) -> ExportDocument:
    """One table per category that has items, plus overall progress."""
    progress = view.packing.progress
    tables = []
    for group in view.packing.groups:
        if not group.items:
            continue
        rows = [
            [
                PACKED_GLYPH if item.is_packed else UNPACKED_GLYPH,
                item.name,
                f"x{item.quantity}",
                item.notes or "-",
                item.created_by.name if item.created_by and item.created_by.name else "You",
            ]
            for item in group.items
        ]
        tables.append(ExportTable(
            title=group.label,
            headers=[PACKED_GLYPH, "Item", "Qty", "Notes", "Added By"],
            rows=rows,
        ))

    return ExportDocument(
        filename=_filename(view, "packing-list"),
        title=view.trip.title or "Packing List",
        subtitle_lines=[_location(view)],
        summary_lines=[
            f"Progress: {progress.packed_count}/{progress.total_count} items ({progress.percentage}%)"
        ],
        tables=tables,
    )


EXPORT_BUILDERS = {
    "itinerary": build_itinerary_export,
    "expenses": build_expense_export,
    "packing": build_packing_export,
}
