"""API blueprints for Planet Tycoon."""
from planet_tycoon.api.game import game_bp

__all__ = ['game_bp']
