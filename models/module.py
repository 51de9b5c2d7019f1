from .database import db


class Module(db.Model):
    """A university module offered in one semester."""

    __tablename__ = 'modules'
    __table_args__ = (
        db.UniqueConstraint('code', 'semester', name='uq_module_code_semester'),
    )

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(10), nullable=False, index=True)  # e.g., "SC1007"
    semester = db.Column(db.String(20), nullable=False, index=True)  # e.g., "2025_1"
    name = db.Column(db.String(200), nullable=False)
    au = db.Column(db.Float, default=0)  # Academic units

    def __repr__(self):
        return f'<Module {self.code} ({self.semester}): {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'code': self.code,
            'semester': self.semester,
            'name': self.name,
            'au': self.au,
        }
