"""Database models for the game."""
from datetime import datetime
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class GameSession(db.Model):
    """Game session model."""
    __tablename__ = 'game_sessions'

    id = db.Column(db.Integer, primary_key=True)
    started_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    completed_at = db.Column(db.DateTime, nullable=True)  # set when the colony is lost
    final_day = db.Column(db.Integer, nullable=True)
    final_population = db.Column(db.Integer, nullable=True)
    game_config = db.Column(db.JSON, default=dict)  # seed etc.

    # Relationships
    actions = db.relationship('ActionRecord', backref='session', lazy=True, cascade='all, delete-orphan', order_by='ActionRecord.id')

    def record_game_over(self, summary):
        """Store the game-over summary once."""
        if self.completed_at is not None:
            return False
        self.completed_at = datetime.utcnow()
        self.final_day = summary['day']
        self.final_population = summary['population']
        return True

    def reopen(self):
        """Clear the game-over summary when the colony is reset."""
        self.completed_at = None
        self.final_day = None
        self.final_population = None

    def to_dict(self):
        """Convert to dictionary."""
        return {
            'id': self.id,
            'started_at': self.started_at.isoformat(),
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'final_day': self.final_day,
            'final_population': self.final_population,
            'game_config': self.game_config
        }


class ActionRecord(db.Model):
    """Player command log for a session."""
    __tablename__ = 'action_records'

    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.Integer, db.ForeignKey('game_sessions.id'), nullable=False, index=True)
    action_type = db.Column(db.String(50), nullable=False)  # build, upgrade, reset, set_speed
    action_data = db.Column(db.JSON, nullable=False)
    day = db.Column(db.Float, nullable=False)  # colony day when the command ran
    tick_number = db.Column(db.Integer, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        """Convert to dictionary."""
        return {
            'id': self.id,
            'session_id': self.session_id,
            'action_type': self.action_type,
            'action_data': self.action_data,
            'day': self.day,
            'tick_number': self.tick_number,
            'created_at': self.created_at.isoformat()
        }
