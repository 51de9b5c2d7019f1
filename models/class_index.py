from .database import db
from utils.generation_types import ClassSession
from utils.time_utils import normalize_day, normalize_time, parse_weeks


class ClassIndex(db.Model):
    """
    One weekly class session of a module index.
    Rows sharing module_code, semester and index_number form one index.
    """

    __tablename__ = 'class_indexes'

    id = db.Column(db.Integer, primary_key=True)
    module_code = db.Column(db.String(10), nullable=False, index=True)
    semester = db.Column(db.String(20), nullable=False, index=True)
    index_number = db.Column(db.String(5), nullable=False, index=True)  # e.g., "10101"
    type = db.Column(db.String(10), nullable=False)  # LEC, TUT, LAB, SEM, PRJ, DES
    day = db.Column(db.String(3), nullable=False)  # MON..SUN
    start_time = db.Column(db.String(4), nullable=False)  # "0830"
    end_time = db.Column(db.String(4), nullable=False)  # "1020"
    venue = db.Column(db.String(50), default='')
    weeks = db.Column(db.String(100), default='')  # "1,3,5" or "1-13"; empty = every week

    def __repr__(self):
        return f'<ClassIndex {self.module_code} {self.index_number} {self.type} {self.day}>'

    def get_weeks(self):
        return parse_weeks(self.weeks)

    def to_session(self, module_name=''):
        return ClassSession(
            module_code=self.module_code,
            module_name=module_name,
            index_number=self.index_number,
            type=self.type,
            day=normalize_day(self.day),
            start_time=normalize_time(self.start_time),
            end_time=normalize_time(self.end_time),
            venue=self.venue or '',
            weeks=self.get_weeks(),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'moduleCode': self.module_code,
            'semester': self.semester,
            'indexNumber': self.index_number,
            'type': self.type,
            'day': self.day,
            'startTime': self.start_time,
            'endTime': self.end_time,
            'venue': self.venue,
            'weeks': sorted(self.get_weeks()),
        }
