"""
Search, sort and pagination state for the summary page.

The page receives the full row set and narrows it down in memory; nothing
here touches the database.
"""
import math
import unicodedata
from dataclasses import dataclass, replace
from typing import List

from schemas import EmployeeSummaryRow

PAGE_SIZE = 20
# numbered page links shown in the pager
WINDOW_SIZE = 5
DEFAULT_SORT = 'HoursPerWorkingMonth'
ASC, DESC = 'asc', 'desc'

# published column name -> model attribute
_ATTRS = {
    field.alias: name for name, field in EmployeeSummaryRow.model_fields.items()
}

# columns shown on the page, in order
TABLE_COLUMNS = [
    ('EmployeeID', 'ID'),
    ('EmployeeName', 'Name'),
    ('FTE_Percentage', 'FTE %'),
    ('Total_HHMM', 'Total Hours'),
    ('WorkingMonths', 'Working Months'),
    ('HoursPerWorkingMonth', 'Hours/Month'),
    ('WorkingWeeks', 'Working Weeks'),
    ('HoursPerWorkingWeek', 'Hours/Week'),
    ('PrevWeekHours_SunSat', 'Prev Week Hours'),
]


@dataclass(frozen=True)
class ViewState:
    search: str = ''
    sort_field: str = DEFAULT_SORT
    direction: str = DESC
    page: int = 1

    @classmethod
    def from_args(cls, args):
        """Build a state from request query args, ignoring anything invalid."""
        sort_field = args.get('sort') or DEFAULT_SORT
        if sort_field not in _ATTRS:
            sort_field = DEFAULT_SORT
        direction = args.get('direction') or DESC
        if direction not in (ASC, DESC):
            direction = DESC
        try:
            page = int(args.get('page', 1))
        except (TypeError, ValueError):
            page = 1
        return cls(search=args.get('q', '').strip(), sort_field=sort_field, direction=direction, page=page)

    def with_search(self, term):
        return replace(self, search=term, page=1)

    def with_page(self, page):
        return replace(self, page=page)


@dataclass
class Page:
    rows: List[EmployeeSummaryRow]
    number: int
    total_pages: int
    start: int
    end: int
    total: int

    @property
    def has_previous(self):
        return self.number > 1

    @property
    def has_next(self):
        return self.number < self.total_pages

    @property
    def window(self):
        """Up to WINDOW_SIZE page numbers around the current page, kept inside [1, total_pages]."""
        first = max(1, min(self.number - WINDOW_SIZE // 2, self.total_pages - WINDOW_SIZE + 1))
        last = min(self.total_pages, first + WINDOW_SIZE - 1)
        return list(range(first, last + 1))


def toggle_sort(state: ViewState, field: str) -> ViewState:
    """Clicking the active column flips direction, any other column sorts it descending."""
    if field == state.sort_field:
        direction = ASC if state.direction == DESC else DESC
        return replace(state, direction=direction, page=1)
    return replace(state, sort_field=field, direction=DESC, page=1)


def filter_rows(rows, term):
    term = (term or '').casefold()
    if not term:
        return list(rows)
    return [r for r in rows if term in r.employee_name.casefold()]


def _hhmm_minutes(value):
    hours, minutes = value.split(':')
    return int(hours) * 60 + int(minutes)


def _sort_key(field, value):
    if field == 'Total_HHMM':
        return _hhmm_minutes(value)
    if isinstance(value, str):
        return (collation_key(value), value)
    return value


def collation_key(text):
    """Accent and case blind key: 'Ángela' sorts with 'angela', before 'Bob'."""
    decomposed = unicodedata.normalize('NFKD', text)
    base = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold()


def sort_rows(rows, field, direction=DESC):
    """
    Stable sort on one published column. Rows with no value for the column
    always come last whatever the direction.
    """
    attr = _ATTRS[field]
    present = [r for r in rows if getattr(r, attr) is not None]
    missing = [r for r in rows if getattr(r, attr) is None]
    present.sort(key=lambda r: _sort_key(field, getattr(r, attr)), reverse=(direction == DESC))
    return present + missing


def paginate(rows, page, page_size=PAGE_SIZE) -> Page:
    total = len(rows)
    total_pages = max(1, math.ceil(total / page_size))
    number = min(max(1, page), total_pages)
    offset = (number - 1) * page_size
    chunk = rows[offset:offset + page_size]
    start = offset + 1 if chunk else 0
    return Page(
        rows=chunk,
        number=number,
        total_pages=total_pages,
        start=start,
        end=offset + len(chunk),
        total=total,
    )


def apply(rows, state: ViewState, page_size=PAGE_SIZE) -> Page:
    """Filter, sort and cut out the requested page."""
    filtered = filter_rows(rows, state.search)
    ordered = sort_rows(filtered, state.sort_field, state.direction)
    return paginate(ordered, state.page, page_size)
