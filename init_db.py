# Local MySQL development databases are supported through PyMySQL; the
# driver is registered under the MySQLdb name so mysql:// URLs work too.
import pymysql
pymysql.install_as_MySQLdb()

from app import create_app
from models import db


def main(overrides=None):
    """Create the report tables in a local development database."""
    app = create_app(overrides)
    with app.app_context():
        db.create_all()
        print("Database initialized at", app.config["SQLALCHEMY_DATABASE_URI"])
    return app


if __name__ == '__main__':
    main()
