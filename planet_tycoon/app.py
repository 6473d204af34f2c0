"""Flask application entry point."""
import logging
import os

from flask import Flask, jsonify, send_from_directory
from flask_cors import CORS
from flask_migrate import Migrate

from planet_tycoon.config import config
from planet_tycoon.models import db
from planet_tycoon.game_data_loader import get_game_data_loader
from planet_tycoon.sessions import get_session_registry


def create_app(config_name=None):
    """Create and configure Flask application."""
    app = Flask(__name__)

    # Load configuration
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')
    app.config.from_object(config[config_name])

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Initialize extensions
    db.init_app(app)
    CORS(app)
    Migrate(app, db)

    # Validate game data up front
    with app.app_context():
        data_loader = get_game_data_loader()
        errors = data_loader.validate_data()
        if errors:
            app.logger.warning(f"Game data validation warnings: {errors}")

    # Register blueprints
    from planet_tycoon.api import game_bp
    app.register_blueprint(game_bp, url_prefix='/api/game')

    # Serve game data files
    @app.route('/game_data/<path:filename>')
    def serve_game_data(filename):
        """Serve game data JSON files."""
        return send_from_directory(data_loader.data_dir, filename)

    @app.route('/health')
    def health():
        return {'status': 'ok', 'sessions': len(get_session_registry())}

    # Error handlers
    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return jsonify({'error': 'Internal server error'}), 500

    return app


if __name__ == '__main__':
    app = create_app()
    port = int(os.environ.get('PORT', 5001))
    app.run(debug=True, host='0.0.0.0', port=port)
