# musiclib/database/db_manager.py
import logging
import os  # Import os for path handling

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.engine import make_url

# Initialize the SQLAlchemy object
db = SQLAlchemy()
logger = logging.getLogger(__name__)


class Song(db.Model):
    __tablename__ = 'songs'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    # "group" is a reserved word in SQL, hence the column name
    group = db.Column('group_name', db.String(255), nullable=False, index=True)
    song = db.Column(db.String(255), nullable=False, index=True)
    release_date = db.Column(db.String(64), nullable=True)
    text = db.Column(db.Text, nullable=True, default='')
    link = db.Column(db.String(500), nullable=True)

    def __repr__(self):
        return f'<Song {self.id}: {self.song} by {self.group}>'

    def to_dict(self):
        """Converts the Song object to a dictionary for API responses."""
        return {
            'id': self.id,
            'group': self.group,
            'song': self.song,
            'releaseDate': self.release_date or '',
            'text': self.text or '',
            'link': self.link or '',
        }


def initialize_database(app):
    """
    Initializes the SQLAlchemy extension with the Flask app instance
    and creates all database tables if they don't already exist.
    """
    db.init_app(app)
    # Ensure the instance folder exists for SQLite database file
    instance_path = app.instance_path
    if not os.path.exists(instance_path):
        os.makedirs(instance_path)
        logger.info("Created instance folder: %s", instance_path)

    # Ensure the directory for the configured SQLite file exists
    try:
        uri = app.config.get('SQLALCHEMY_DATABASE_URI')
        if uri:
            url = make_url(uri)
            # Only handle file-based SQLite (not :memory:)
            if url.get_backend_name() == 'sqlite' and url.database and url.database != ':memory:':
                db_dir = os.path.dirname(url.database)
                if db_dir and not os.path.exists(db_dir):
                    os.makedirs(db_dir, exist_ok=True)
                    logger.info("Created SQLite DB directory: %s", db_dir)
    except Exception as e:
        # Don't block app startup on path parsing issues; log and continue
        logger.warning("Could not ensure SQLite directory exists: %s", e)

    # Create database tables within the application context
    with app.app_context():
        db.create_all()
        logger.info("Database tables created or already exist.")


__all__ = ["db", "Song", "initialize_database"]
