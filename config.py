from dotenv import load_dotenv
import os

load_dotenv()

SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL")
SQLALCHEMY_TRACK_MODIFICATIONS = False
SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key')
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

# first day of the aggregation window, the last day is always "today"
REPORT_START_DATE = os.environ.get('REPORT_START_DATE', '2025-01-01')
PAGE_SIZE = int(os.environ.get('PAGE_SIZE', 20))

DB_POOL_SIZE = int(os.environ.get('DB_POOL_SIZE', 10))
DB_POOL_TIMEOUT = int(os.environ.get('DB_POOL_TIMEOUT', 30))
DB_POOL_RECYCLE = int(os.environ.get('DB_POOL_RECYCLE', 30))

# SQLite uses its own pool classes which reject the sizing options
if SQLALCHEMY_DATABASE_URI and not SQLALCHEMY_DATABASE_URI.startswith('sqlite'):
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': DB_POOL_SIZE,
        'max_overflow': 0,
        'pool_timeout': DB_POOL_TIMEOUT,
        'pool_recycle': DB_POOL_RECYCLE,
        'pool_pre_ping': True,
    }
else:
    SQLALCHEMY_ENGINE_OPTIONS = {}
