# app/api/routers/reports.py
import csv
import io
from typing import List, Optional
from xml.sax.saxutils import escape

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from openpyxl import Workbook
from openpyxl.styles import Font
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_admin
from app.core.dates import to_utc_date
from app.core.errors import ValidationError
from app.db import crud_dashboard
from app.db.models import Booking
from app.db.session import get_db

router = APIRouter(dependencies=[Depends(get_current_admin)])

REPORT_HEADER = ["Car", "Customer", "Contact", "Start", "End", "Status", "Total", "Created"]
XLSX_COLUMN_WIDTHS = [24, 22, 18, 12, 12, 12, 12, 12]
# Contact and Created don't fit on an A4 page
PDF_COLUMNS = [0, 1, 3, 4, 5, 6]
PDF_COLUMN_WIDTHS = [120, 110, 60, 60, 55, 70]

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _report_row(b: Booking) -> List[str]:
    return [
        b.car.name if b.car else "",
        b.customer_name or "",
        b.contact or "",
        b.start_date.isoformat() if b.start_date else "",
        b.end_date.isoformat() if b.end_date else "",
        b.status or "",
        "" if b.total_price is None else str(b.total_price),
        b.created_at.date().isoformat() if b.created_at else "",
    ]


def render_bookings_csv(bookings: List[Booking]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(REPORT_HEADER)
    writer.writerows(_report_row(b) for b in bookings)
    return buf.getvalue()


def render_bookings_xlsx(bookings: List[Booking]) -> bytes:
    wb = Workbook()
    sheet = wb.active
    sheet.title = "Bookings"
    sheet.append(REPORT_HEADER)
    for b in bookings:
        row = _report_row(b)
        # keep totals numeric so the sheet can sum them
        row[6] = float(b.total_price) if b.total_price is not None else None
        sheet.append(row)

    for cell in sheet[1]:
        cell.font = Font(bold=True)
    for idx, width in enumerate(XLSX_COLUMN_WIDTHS):
        sheet.column_dimensions[chr(ord("A") + idx)].width = width
    sheet.auto_filter.ref = "A1:H1"

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def render_bookings_pdf(bookings: List[Booking], subtitle: str) -> bytes:
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, leftMargin=36, rightMargin=36, topMargin=36, bottomMargin=36)
    styles = getSampleStyleSheet()

    data = [[REPORT_HEADER[i] for i in PDF_COLUMNS]]
    for b in bookings:
        row = _report_row(b)
        data.append([row[i] for i in PDF_COLUMNS])

    table = Table(data, colWidths=PDF_COLUMN_WIDTHS, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("LINEBELOW", (0, 0), (-1, 0), 0.5, colors.lightgrey),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ]
        )
    )

    doc.build(
        [
            Paragraph("Bookings Report", styles["Title"]),
            Paragraph(escape(subtitle), styles["Normal"]),
            Spacer(1, 12),
            table,
        ]
    )
    return buf.getvalue()


@router.get("/bookings")
async def bookings_report(
    db: AsyncSession = Depends(get_db),
    format: str = "csv",
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    status: str = "all",
    car_id: Optional[int] = None,
):
    """
    Export bookings overlapping [from, to] (both optional, YYYY-MM-DD)
    as csv, xlsx (alias excel) or pdf.
    """
    if format not in ("csv", "xlsx", "excel", "pdf"):
        raise ValidationError("Invalid format. Use csv, xlsx, or pdf.")

    start = to_utc_date(date_from) if date_from else None
    end = to_utc_date(date_to) if date_to else None
    if start and end and end < start:
        raise ValidationError('"To" date must be on or after "From" date.')

    bookings = await crud_dashboard.list_bookings_for_report(
        db,
        date_from=start,
        date_to=end,
        status=status,
        car_id=car_id,
    )

    base_name = "bookings_{}_{}".format(
        start.isoformat() if start else "all",
        end.isoformat() if end else "all",
    )

    if format == "csv":
        content, media_type, ext = render_bookings_csv(bookings), "text/csv; charset=utf-8", "csv"
    elif format == "pdf":
        subtitle = "Range: {} to {}   Status: {}".format(
            start.isoformat() if start else "All",
            end.isoformat() if end else "All",
            status,
        )
        content, media_type, ext = render_bookings_pdf(bookings, subtitle), "application/pdf", "pdf"
    else:
        content, media_type, ext = render_bookings_xlsx(bookings), XLSX_MEDIA_TYPE, "xlsx"

    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{base_name}.{ext}"'},
    )
