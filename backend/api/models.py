"""
SQLAlchemy models for stored games.
"""

from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from .database import Base


class Game(Base):
    __tablename__ = "games"

    id = Column(String(36), primary_key=True)  # uuid
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    # Denormalized from game_state for listing and maintenance scripts
    turn = Column(Integer, nullable=False, default=1)
    game_over = Column(Boolean, nullable=False, default=False)
    winner = Column(String(16), nullable=True)
    game_state = Column(Text, nullable=False)  # JSON string of full game state
