"""Tests for the in-memory search, sort and pagination of the summary page."""
import pytest

from schemas import EmployeeSummaryRow
from summary_view import (
    ASC,
    DESC,
    PAGE_SIZE,
    ViewState,
    apply,
    collation_key,
    filter_rows,
    paginate,
    sort_rows,
    toggle_sort,
)


def make_row(emp_id, name, hpm=None, total="0:00", fte=100):
    return EmployeeSummaryRow(
        employee_id=emp_id,
        employee_name=name,
        fte_percentage=fte,
        total_hhmm=total,
        working_months=1 if hpm is not None else 0,
        hours_per_working_month=hpm,
    )


@pytest.fixture
def rows():
    return [
        make_row(1, "Ada Lovelace", hpm=120, total="240:00"),
        make_row(2, "grace Hopper", hpm=None),
        make_row(3, "Alan Turing", hpm=80, total="9:30"),
        make_row(4, "Ángela Ruiz", hpm=150, total="10:05", fte=50),
    ]


def ids(rows):
    return [r.employee_id for r in rows]


def test_filter_is_case_insensitive_substring(rows):
    assert ids(filter_rows(rows, "GRACE")) == [2]
    assert ids(filter_rows(rows, "ALA")) == [3]
    assert ids(filter_rows(rows, "la")) == [1, 3, 4]
    assert ids(filter_rows(rows, "")) == [1, 2, 3, 4]
    assert filter_rows(rows, "nobody") == []


def test_numeric_sort_puts_nulls_last_both_ways(rows):
    assert ids(sort_rows(rows, "HoursPerWorkingMonth", DESC)) == [4, 1, 3, 2]
    assert ids(sort_rows(rows, "HoursPerWorkingMonth", ASC)) == [3, 1, 4, 2]


def test_string_sort_ignores_case_and_accents(rows):
    assert ids(sort_rows(rows, "EmployeeName", ASC)) == [1, 3, 4, 2]


def test_accented_names_sort_with_their_base_letter():
    data = [make_row(1, "Bob Stone"), make_row(2, "Ángela Ruiz"), make_row(3, "Zoe Ng")]
    assert [r.employee_name for r in sort_rows(data, "EmployeeName", ASC)] == [
        "Ángela Ruiz", "Bob Stone", "Zoe Ng",
    ]
    assert ids(sort_rows(data, "EmployeeName", DESC)) == [3, 1, 2]


def test_collation_key():
    assert collation_key("Ángela") == collation_key("angela")
    assert collation_key("Émile") < collation_key("Eva")


def test_total_hours_sort_by_duration(rows):
    assert ids(sort_rows(rows, "Total_HHMM", DESC)) == [1, 4, 3, 2]


def test_sorting_back_and_forth_restores_order(rows):
    state = ViewState(sort_field="FTE_Percentage")
    first = sort_rows(rows, state.sort_field, state.direction)
    state = toggle_sort(state, "FTE_Percentage")
    flipped = sort_rows(first, state.sort_field, state.direction)
    state = toggle_sort(state, "FTE_Percentage")
    assert state.direction == DESC
    assert ids(sort_rows(flipped, state.sort_field, state.direction)) == ids(first)


def test_toggle_sort():
    state = ViewState(page=3)
    flipped = toggle_sort(state, "HoursPerWorkingMonth")
    assert (flipped.sort_field, flipped.direction, flipped.page) == ("HoursPerWorkingMonth", ASC, 1)

    other = toggle_sort(flipped, "EmployeeName")
    assert (other.sort_field, other.direction, other.page) == ("EmployeeName", DESC, 1)


def test_search_resets_page():
    assert ViewState(page=4).with_search("ada").page == 1


def test_state_from_args_falls_back_on_bad_input():
    state = ViewState.from_args({"sort": "Salary", "direction": "sideways", "page": "two", "q": " ada "})
    assert state == ViewState(search="ada")

    state = ViewState.from_args({"sort": "WorkingWeeks", "direction": "asc", "page": "2"})
    assert state == ViewState(sort_field="WorkingWeeks", direction=ASC, page=2)


def test_paginate_last_partial_page():
    data = [make_row(i, f"Employee {i}", hpm=i) for i in range(1, 46)]
    page = paginate(data, 3)
    assert len(page.rows) == 5
    assert (page.start, page.end, page.total) == (41, 45, 45)
    assert page.total_pages == 3
    assert page.has_previous and not page.has_next


def test_paginate_clamps_page_number():
    data = [make_row(i, f"Employee {i}", hpm=i) for i in range(1, 46)]
    assert paginate(data, 99).number == 3
    assert paginate(data, 0).number == 1
    assert paginate(data, -5).start == 1


def test_page_window_first_middle_last():
    data = [make_row(i, f"Employee {i}", hpm=i) for i in range(1, 201)]
    assert paginate(data, 1).window == [1, 2, 3, 4, 5]
    assert paginate(data, 5).window == [3, 4, 5, 6, 7]
    assert paginate(data, 10).window == [6, 7, 8, 9, 10]
    assert paginate(data, 9).window == [6, 7, 8, 9, 10]


def test_page_window_with_few_pages():
    data = [make_row(i, f"Employee {i}", hpm=i) for i in range(1, 46)]
    assert paginate(data, 3).window == [1, 2, 3]
    assert paginate([], 1).window == [1]


def test_paginate_empty():
    page = paginate([], 1)
    assert page.rows == []
    assert (page.number, page.total_pages) == (1, 1)
    assert (page.start, page.end, page.total) == (0, 0, 0)


def test_apply_combines_filter_sort_and_page():
    data = [make_row(i, f"Employee {i}", hpm=i) for i in range(1, 46)]
    data.append(make_row(99, "Zed", hpm=500))
    page = apply(data, ViewState(search="employee", page=1))
    assert page.total == 45
    assert len(page.rows) == PAGE_SIZE
    assert page.rows[0].employee_id == 45
