from datetime import datetime, timezone

from flask_login import UserMixin

from scoreboard import db, bcrypt

DEFAULT_GAME_ID = 'default'


def utcnow():
    """Naive UTC now; all timestamps are stored without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(ts):
    if ts is None:
        return None
    return ts.isoformat(timespec='milliseconds') + 'Z'


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
        }


class GameState(db.Model):
    """Single row holding the shared challenge clock."""
    __tablename__ = 'game_state'
    id = db.Column(db.String(32), primary_key=True, default=DEFAULT_GAME_ID)
    started_at = db.Column(db.DateTime, nullable=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)


class Team(db.Model):
    __tablename__ = 'teams'
    id = db.Column(db.String(32), primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    remaining_points = db.Column(db.Integer, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    scores = db.relationship('Score', back_populates='team', lazy='dynamic', order_by='Score.id')


class Score(db.Model):
    """One three-dart visit. Rows are append-only; id order is ledger order."""
    __tablename__ = 'scores'
    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(db.String(32), db.ForeignKey('teams.id'), nullable=False, index=True)
    score = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    team = db.relationship('Team', back_populates='scores')

    __table_args__ = (
        db.CheckConstraint('score >= 0 AND score <= 180', name='ck_scores_score_range'),
    )
