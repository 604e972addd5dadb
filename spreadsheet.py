from datetime import datetime, timezone
from io import BytesIO

import openpyxl
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
# Excel caps sheet titles at 31 characters
SHEET_TITLE = 'Active Employees Work Hours'
FILENAME_PREFIX = 'ActiveEmployees_WorkHoursSummary_'
COLUMN_WIDTH = 20

HEADERS = [
    'Employee ID',
    'Employee Name',
    'FTE Percentage',
    'Termination Date',
    'Total Hours (HH:MM)',
    'Working Months',
    'Hours Per Working Month',
    'Working Weeks',
    'Hours Per Working Week',
    'Previous Week Hours (Sun-Sat)',
]


def export_timestamp(now=None) -> str:
    """UTC ISO timestamp made filename safe: 2025-06-01T12-30-00"""
    now = now or datetime.now(timezone.utc)
    return now.isoformat().replace(':', '-').replace('.', '-')[:19]


def export_filename(now=None) -> str:
    return f'{FILENAME_PREFIX}{export_timestamp(now)}.xlsx'


def build_workbook(rows) -> bytes:
    """
    Render summary rows as a single-sheet .xlsx and return the file bytes.
    Row cells follow the header order above.
    """
    workbook = openpyxl.Workbook()
    worksheet = workbook.active
    worksheet.title = SHEET_TITLE

    worksheet.append(HEADERS)

    header_fill = PatternFill(start_color='E0E0E0', end_color='E0E0E0', fill_type='solid')
    header_font = Font(bold=True)
    for col_num in range(1, len(HEADERS) + 1):
        cell = worksheet.cell(row=1, column=col_num)
        cell.fill = header_fill
        cell.font = header_font

    for row in rows:
        worksheet.append([
            row.employee_id,
            row.employee_name,
            row.fte_percentage,
            row.termination_date,
            row.total_hhmm,
            row.working_months,
            row.hours_per_working_month,
            row.working_weeks,
            row.hours_per_working_week,
            row.prev_week_hours,
        ])

    for col_num in range(1, len(HEADERS) + 1):
        worksheet.column_dimensions[get_column_letter(col_num)].width = COLUMN_WIDTH

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
