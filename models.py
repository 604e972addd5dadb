from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

# The tables below belong to the ERP database and are only ever read here.
# Column names follow the source schema.


class Employee(db.Model):
    __tablename__ = 'Employee'
    id = db.Column('ID', db.Integer, primary_key=True)
    first_name = db.Column('FirstName', db.String(128))
    last_name = db.Column('LastName', db.String(128))

    fte_terms = db.relationship('FteTerm', back_populates='employee')
    position_terms = db.relationship('PositionTerm', back_populates='employee')
    activities = db.relationship('ActivityRecord', back_populates='employee')

    @property
    def display_name(self):
        return f"{self.first_name or ''} {self.last_name or ''}"

    def __repr__(self):
        return f"<Employee {self.id} {self.display_name}>"


class FteTerm(db.Model):
    __tablename__ = 'EmployeeFTETerm'
    id = db.Column('ID', db.Integer, primary_key=True)
    employee_id = db.Column('EmployeeID', db.Integer, db.ForeignKey('Employee.ID'), nullable=False, index=True)
    percentage = db.Column('Percentage', db.Numeric(5, 2), nullable=False)
    start_date = db.Column('StartDate', db.Date, nullable=False)
    end_date = db.Column('EndDate', db.Date)  # NULL = open ended

    employee = db.relationship('Employee', back_populates='fte_terms')

    def __repr__(self):
        return f"<FteTerm emp_id={self.employee_id} {self.percentage}% {self.start_date}..{self.end_date}>"


class PositionTerm(db.Model):
    __tablename__ = 'EmployeePositionTerm'
    id = db.Column('ID', db.Integer, primary_key=True)
    employee_id = db.Column('EmployeeID', db.Integer, db.ForeignKey('Employee.ID'), nullable=False, index=True)
    start_date = db.Column('StartDate', db.Date)
    end_date = db.Column('EndDate', db.Date)

    employee = db.relationship('Employee', back_populates='position_terms')

    def __repr__(self):
        return f"<PositionTerm emp_id={self.employee_id} {self.start_date}..{self.end_date}>"


class ActivityRecord(db.Model):
    __tablename__ = 'HoursActivityReport'
    id = db.Column('ID', db.Integer, primary_key=True)
    employee_id = db.Column('EmployeeID', db.Integer, db.ForeignKey('Employee.ID'), nullable=False, index=True)
    day = db.Column('CalendarDayId', db.Date, nullable=False, index=True)
    duration = db.Column('Duration', db.Time)  # NULL counts as 00:00

    employee = db.relationship('Employee', back_populates='activities')

    def __repr__(self):
        return f"<ActivityRecord emp_id={self.employee_id} day={self.day} duration={self.duration}>"
