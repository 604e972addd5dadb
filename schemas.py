"""Row shape returned by the work hours summary."""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EmployeeSummaryRow(BaseModel):
    """One active employee in the work hours summary.

    Field order is the JSON key order and the spreadsheet column order.
    Aliases are the column names the report has always been published with.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    employee_id: int = Field(alias="EmployeeID")
    employee_name: str = Field(alias="EmployeeName")
    fte_percentage: float = Field(default=0, alias="FTE_Percentage")
    termination_date: Optional[date] = Field(default=None, alias="TerminationDate")
    total_hhmm: str = Field(alias="Total_HHMM", pattern=r"^\d+:[0-5]\d$")
    working_months: int = Field(default=0, ge=0, alias="WorkingMonths")
    hours_per_working_month: Optional[int] = Field(default=None, alias="HoursPerWorkingMonth")
    working_weeks: int = Field(default=0, ge=0, alias="WorkingWeeks")
    hours_per_working_week: Optional[int] = Field(default=None, alias="HoursPerWorkingWeek")
    prev_week_hours: int = Field(default=0, ge=0, alias="PrevWeekHours_SunSat")

    def as_record(self) -> dict:
        """JSON-ready dict keyed by the published column names."""
        return self.model_dump(by_alias=True, mode="json")

