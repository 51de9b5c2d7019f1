from .main import main_bp
from .modules import modules_bp
from .timetable import timetable_bp

__all__ = ['main_bp', 'modules_bp', 'timetable_bp']
