#!/usr/bin/env python3
"""Run script for the Planet Tycoon game server."""
import os

from planet_tycoon.app import create_app

if __name__ == '__main__':
    app = create_app(os.environ.get('FLASK_ENV', 'development'))

    # Initialize database
    with app.app_context():
        from planet_tycoon.models import db
        db.create_all()
        print("Database initialized.")

    port = int(os.environ.get('PORT', 5001))
    print("Starting Planet Tycoon game server...")
    print(f"API available at http://localhost:{port}/api/game")
    app.run(debug=True, host='0.0.0.0', port=port)
