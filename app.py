from flask import Flask
from models import db
from models.database import init_app as init_db
from routes import main_bp, modules_bp, timetable_bp

app = Flask(__name__)
app.config.from_object('config')

# Initialize database
init_db(app)

# Register blueprints
app.register_blueprint(main_bp)
app.register_blueprint(modules_bp, url_prefix='/api/modules')
app.register_blueprint(timetable_bp, url_prefix='/api/timetable')

# Create tables
with app.app_context():
    db.create_all()

@app.after_request
def add_header(response):
    """Add headers to prevent caching."""
    response.headers['Cache-Control'] = 'no-cache, no-store, must-revalidate'
    response.headers['Pragma'] = 'no-cache'
    response.headers['Expires'] = '0'
    return response

@app.cli.command('seed')
def seed_command():
    """Load the sample catalogue."""
    from data.seed_data import seed_database
    seed_database()

if __name__ == '__main__':
    app.run(debug=app.config['DEBUG'], port=5000)
