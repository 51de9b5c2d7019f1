from .database import db
from .module import Module
from .class_index import ClassIndex

__all__ = ['db', 'Module', 'ClassIndex']
