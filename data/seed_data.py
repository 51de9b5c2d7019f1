"""Seed data script to populate the catalogue with sample modules and indexes."""

from models import db, Module, ClassIndex


SEMESTER = '2025_1'

MODULES = [
    {'code': 'SC1003', 'name': 'Introduction to Computational Thinking and Programming', 'au': 3},
    {'code': 'SC1005', 'name': 'Digital Logic', 'au': 3},
    {'code': 'SC1007', 'name': 'Data Structures and Algorithms', 'au': 3},
    {'code': 'MH1810', 'name': 'Mathematics 1', 'au': 3},
    {'code': 'CC0001', 'name': 'Inquiry and Communication in an Interdisciplinary World', 'au': 2},
]

# (module, index, type, day, start, end, venue, weeks)
INDEXES = [
    # SC1003: shared lecture, different labs
    ('SC1003', '10101', 'LEC', 'MON', '0930', '1120', 'LT1A', ''),
    ('SC1003', '10101', 'LAB', 'TUE', '0830', '1020', 'SWLAB1', '2,4,6,8,10,12'),
    ('SC1003', '10102', 'LEC', 'MON', '0930', '1120', 'LT1A', ''),
    ('SC1003', '10102', 'LAB', 'TUE', '0830', '1020', 'SWLAB1', '3,5,7,9,11,13'),
    ('SC1003', '10103', 'LEC', 'MON', '0930', '1120', 'LT1A', ''),
    ('SC1003', '10103', 'LAB', 'THU', '1430', '1620', 'SWLAB2', '2-13'),

    # SC1005
    ('SC1005', '10201', 'LEC', 'WED', '1030', '1220', 'LT2A', ''),
    ('SC1005', '10201', 'TUT', 'TUE', '0930', '1020', 'TR+12', '2-13'),
    ('SC1005', '10202', 'LEC', 'WED', '1030', '1220', 'LT2A', ''),
    ('SC1005', '10202', 'TUT', 'FRI', '0830', '0920', 'TR+15', '2-13'),

    # SC1007
    ('SC1007', '10301', 'LEC', 'THU', '0830', '1020', 'LT19', ''),
    ('SC1007', '10301', 'TUT', 'MON', '1130', '1220', 'TR+3', '2-13'),
    ('SC1007', '10302', 'LEC', 'THU', '0830', '1020', 'LT19', ''),
    ('SC1007', '10302', 'TUT', 'FRI', '1330', '1420', 'ONLINE', '2-13'),

    # MH1810
    ('MH1810', '10401', 'LEC', 'TUE', '1330', '1520', 'LT3', ''),
    ('MH1810', '10401', 'TUT', 'WED', '1430', '1520', 'TR+40', '2-13'),
    ('MH1810', '10402', 'LEC', 'TUE', '1330', '1520', 'LT3', ''),
    ('MH1810', '10402', 'TUT', 'MON', '0930', '1020', 'TR+41', '2-13'),

    # CC0001: e-learning seminar
    ('CC0001', '10501', 'SEM', 'FRI', '1030', '1220', 'E-LEARNING', ''),
    ('CC0001', '10502', 'SEM', 'WED', '0830', '1020', 'LHS-TR+30', ''),
]


def seed_database():
    """Replace the catalogue with the sample data."""

    # Clear existing data
    ClassIndex.query.delete()
    Module.query.delete()

    for m_data in MODULES:
        db.session.add(Module(semester=SEMESTER, **m_data))

    for code, index_number, class_type, day, start, end, venue, weeks in INDEXES:
        db.session.add(ClassIndex(
            module_code=code,
            semester=SEMESTER,
            index_number=index_number,
            type=class_type,
            day=day,
            start_time=start,
            end_time=end,
            venue=venue,
            weeks=weeks
        ))

    db.session.commit()
    print("Database seeded successfully!")


if __name__ == '__main__':
    from app import app

    with app.app_context():
        seed_database()
