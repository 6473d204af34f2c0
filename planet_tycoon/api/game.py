"""Game API endpoints."""
from flask import Blueprint, current_app, jsonify, request
from planet_tycoon.models import db, GameSession, ActionRecord
from planet_tycoon.game_engine import GameEngine
from planet_tycoon.game_data_loader import get_game_data_loader
from planet_tycoon.sessions import get_session_registry

game_bp = Blueprint('game', __name__)


def _get_engine(session_id):
    """Look up the live engine for a session, or an error response."""
    engine = get_session_registry().get(session_id)
    if engine is None:
        if db.session.get(GameSession, session_id) is None:
            return None, (jsonify({'error': 'Session not found'}), 404)
        return None, (jsonify({'error': 'Colony is no longer running'}), 404)
    return engine, None


def _record_completion(session_id, engine):
    """Write the game-over summary the first time the colony is seen lost."""
    if not engine.game_over:
        return
    session = db.session.get(GameSession, session_id)
    if session is not None and session.record_game_over(engine.get_summary()):
        db.session.commit()


@game_bp.route('/start', methods=['POST'])
def start_game():
    """Start a new colony."""
    data = request.get_json(silent=True) or {}
    config = data.get('config', {})
    if not isinstance(config, dict):
        return jsonify({'error': 'config must be an object'}), 400

    if 'seed' not in config and current_app.config.get('RANDOM_SEED') is not None:
        config = {**config, 'seed': current_app.config['RANDOM_SEED']}

    session = GameSession(game_config=config)
    db.session.add(session)
    db.session.commit()

    engine = GameEngine(session.id, {
        **config,
        'tick_interval': current_app.config['TICK_INTERVAL_SECONDS']
    })
    get_session_registry().add(engine)
    if current_app.config.get('REALTIME_TICKS'):
        engine.start_realtime()

    return jsonify({
        'session_id': session.id,
        'game_state': engine.get_state()
    }), 201


@game_bp.route('/state/<int:session_id>', methods=['GET'])
def get_game_state(session_id):
    """Get current game state."""
    engine, error = _get_engine(session_id)
    if error:
        return error
    _record_completion(session_id, engine)
    return jsonify({'game_state': engine.get_state()})


@game_bp.route('/tick', methods=['POST'])
def tick_game():
    """Advance the colony by one or more ticks.

    The browser calls this from its one-second timer. Once the colony is
    lost the scheduler is cancelled and further calls run nothing.
    """
    data = request.get_json(silent=True)

    if not data or not data.get('session_id'):
        return jsonify({'error': 'Missing session_id'}), 400
    if isinstance(data['session_id'], bool) or not isinstance(data['session_id'], int):
        return jsonify({'error': 'session_id must be an integer'}), 400

    ticks = data.get('ticks', 1)
    max_ticks = current_app.config['MAX_TICKS_PER_REQUEST']
    if isinstance(ticks, bool) or not isinstance(ticks, int) or ticks < 1 or ticks > max_ticks:
        return jsonify({'error': f'ticks must be an integer between 1 and {max_ticks}'}), 400

    engine, error = _get_engine(data['session_id'])
    if error:
        return error

    ticks_run = engine.advance(ticks)
    _record_completion(data['session_id'], engine)

    return jsonify({
        'game_state': engine.get_state(),
        'ticks_run': ticks_run
    })


@game_bp.route('/action', methods=['POST'])
def game_action():
    """Perform a player command: build, upgrade, reset or set_speed.

    Commands that can't be afforded or name an unknown building still
    succeed and return the unchanged state. Only commands that changed the
    game are written to the action log.
    """
    data = request.get_json(silent=True)

    if not data or not data.get('session_id'):
        return jsonify({'error': 'Missing session_id'}), 400
    if isinstance(data['session_id'], bool) or not isinstance(data['session_id'], int):
        return jsonify({'error': 'session_id must be an integer'}), 400
    if not data.get('action_type'):
        return jsonify({'error': 'Missing action_type'}), 400

    session_id = data['session_id']
    engine, error = _get_engine(session_id)
    if error:
        return error

    action_type = data['action_type']
    action_data = data.get('action_data') or {}
    if not isinstance(action_data, dict):
        return jsonify({'error': 'action_data must be an object'}), 400
    day, tick_number = engine.get_time(), engine.tick_count

    try:
        applied = engine.perform_action(action_type, action_data)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    if applied:
        if action_type == 'reset':
            db.session.get(GameSession, session_id).reopen()
        record = ActionRecord(
            session_id=session_id,
            action_type=action_type,
            action_data=action_data,
            day=day,
            tick_number=tick_number
        )
        db.session.add(record)
        db.session.commit()

    return jsonify({'game_state': engine.get_state()})


@game_bp.route('/summary/<int:session_id>', methods=['GET'])
def get_summary(session_id):
    """Game-over flag plus final day and population."""
    engine, error = _get_engine(session_id)
    if error:
        return error
    _record_completion(session_id, engine)
    return jsonify({'summary': engine.get_summary()})


@game_bp.route('/history/<int:session_id>', methods=['GET'])
def get_history(session_id):
    """Get the command log for a session."""
    session = db.get_or_404(GameSession, session_id)
    return jsonify({
        'session': session.to_dict(),
        'actions': [action.to_dict() for action in session.actions]
    })


@game_bp.route('/buildings', methods=['GET'])
def get_buildings():
    """Building catalog for the build tab."""
    return jsonify({'buildings': get_game_data_loader().get_building_templates()})
