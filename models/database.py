from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

def init_app(app):
    db.init_app(app)
    # Import models to register them with SQLAlchemy
    from .module import Module
    from .class_index import ClassIndex
