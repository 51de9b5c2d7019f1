import os
import dotenv
dotenv.load_dotenv()
basedir = os.path.abspath(os.path.dirname(__file__))

# Flask configuration
SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-key-please-change-in-production'
DEBUG = os.environ.get('FLASK_DEBUG', '1') == '1'

# Database configuration
if os.environ.get('DATABASE_URL'):
    SQLALCHEMY_DATABASE_URI = os.environ['DATABASE_URL']
elif os.environ.get('VERCEL'):
    # Vercel filesystem is read-only, use ephemeral /tmp
    SQLALCHEMY_DATABASE_URI = 'sqlite:////tmp/catalogue.db'
else:
    SQLALCHEMY_DATABASE_URI = 'sqlite:///' + os.path.join(basedir, 'catalogue.db')
SQLALCHEMY_TRACK_MODIFICATIONS = False

# Timetable generation limits
GENERATION_MAX_COMBINATIONS = int(os.environ.get('GENERATION_MAX_COMBINATIONS', '1000'))
GENERATION_MAX_RECURSIVE_CALLS = int(os.environ.get('GENERATION_MAX_RECURSIVE_CALLS', '500000'))
GENERATION_MAX_RESULTS = int(os.environ.get('GENERATION_MAX_RESULTS', str(GENERATION_MAX_COMBINATIONS)))

# Audit logs
LOG_DIR = os.environ.get('LOG_DIR') or os.path.join(basedir, 'logs')
VALIDATION_LOG_PATH = os.environ.get('VALIDATION_LOG_PATH') or os.path.join(LOG_DIR, 'timetable-validation-errors.log')
RESULT_VALIDATION_LOG_PATH = os.environ.get('RESULT_VALIDATION_LOG_PATH') or os.path.join(LOG_DIR, 'timetable-result-validation.log')
