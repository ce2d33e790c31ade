from datetime import datetime

from flask_login import UserMixin

from scoreboard import db, bcrypt
from scoreboard.sports import get_sport

GAME_STATUSES = ('active', 'paused', 'finished')


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)

    @staticmethod
    def hash_password(password):
        return bcrypt.generate_password_hash(password).decode('utf-8')

    def set_password(self, password):
        self.password_hash = self.hash_password(password)

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
        }


class Team(db.Model):
    __tablename__ = 'teams'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    color = db.Column(db.String(16), nullable=True)
    sport = db.Column(db.String(32), nullable=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    players = db.relationship('Player', back_populates='team', order_by='Player.id')

    def to_dict(self, include_players=False):
        data = {
            'id': self.id,
            'name': self.name,
            'color': self.color,
            'sport': self.sport,
            'user_id': self.user_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
        if include_players:
            data['players'] = [p.to_dict() for p in self.players]
        return data


class Player(db.Model):
    __tablename__ = 'players'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    team_id = db.Column(db.Integer, db.ForeignKey('teams.id'), nullable=False, index=True)
    position = db.Column(db.String(64), nullable=True)
    jersey_number = db.Column(db.Integer, nullable=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    team = db.relationship('Team', back_populates='players')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'team_id': self.team_id,
            'position': self.position,
            'jersey_number': self.jersey_number,
            'user_id': self.user_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class Game(db.Model):
    __tablename__ = 'games'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True, index=True)
    sport_id = db.Column(db.String(32), nullable=False)
    team1_id = db.Column(db.Integer, db.ForeignKey('teams.id'), nullable=False)
    team2_id = db.Column(db.Integer, db.ForeignKey('teams.id'), nullable=False)
    team1_score = db.Column(db.Integer, default=0, nullable=False)
    team2_score = db.Column(db.Integer, default=0, nullable=False)
    team1_fouls = db.Column(db.Integer, default=0, nullable=False)
    team2_fouls = db.Column(db.Integer, default=0, nullable=False)
    game_time = db.Column(db.Integer, default=0, nullable=False)
    shot_clock_time = db.Column(db.Integer, default=0, nullable=False)
    is_game_clock_running = db.Column(db.Boolean, default=False, nullable=False)
    is_shot_clock_running = db.Column(db.Boolean, default=False, nullable=False)
    current_period = db.Column(db.Integer, default=1, nullable=False)
    game_status = db.Column(db.String(16), default='active', nullable=False)  # active, paused, finished
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    team1 = db.relationship('Team', foreign_keys=[team1_id])
    team2 = db.relationship('Team', foreign_keys=[team2_id])

    @property
    def sport(self):
        return get_sport(self.sport_id)

    def to_dict(self, include_details=False):
        data = {
            'id': self.id,
            'user_id': self.user_id,
            'sport_id': self.sport_id,
            'team1_id': self.team1_id,
            'team2_id': self.team2_id,
            'team1_score': self.team1_score,
            'team2_score': self.team2_score,
            'team1_fouls': self.team1_fouls,
            'team2_fouls': self.team2_fouls,
            'game_time': self.game_time,
            'shot_clock_time': self.shot_clock_time,
            'is_game_clock_running': self.is_game_clock_running,
            'is_shot_clock_running': self.is_shot_clock_running,
            'current_period': self.current_period,
            'game_status': self.game_status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
        if include_details:
            sport = self.sport
            data['sport'] = sport.to_dict() if sport else None
            data['team1'] = self.team1.to_dict() if self.team1 else None
            data['team2'] = self.team2.to_dict() if self.team2 else None
        return data


class PlayerStat(db.Model):
    __tablename__ = 'player_stats'
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('games.id'), nullable=False, index=True)
    player_id = db.Column(db.Integer, db.ForeignKey('players.id'), nullable=False, index=True)
    stat_type = db.Column(db.String(32), nullable=False)
    value = db.Column(db.Float, nullable=False, default=1)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'game_id': self.game_id,
            'player_id': self.player_id,
            'stat_type': self.stat_type,
            'value': self.value,
            'user_id': self.user_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
