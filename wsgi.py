# Entry point for Gunicorn: gunicorn wsgi:app
from app import app
import db

db.init_db()
