from datetime import datetime, timezone

from typetrainer import db

WEEKDAYS = ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']
MONTHS = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_utc(value):
    """Stored timestamps are naive UTC; return ``value`` as an aware UTC datetime."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_history_date(value, tz=None):
    """Render a timestamp like 'Sun Jan 05 2025 14:03' for the history table.

    Naive values are read as UTC and shown in ``tz`` (UTC when omitted).
    """
    if value is None:
        return None
    value = as_utc(value).astimezone(tz or timezone.utc)
    # isoweekday(): Monday=1 .. Sunday=7
    weekday = WEEKDAYS[value.isoweekday() % 7]
    return f"{weekday} {MONTHS[value.month - 1]} {value.day:02d} {value.year} {value.hour:02d}:{value.minute:02d}"


class TypingScore(db.Model):
    __tablename__ = 'typing_score'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=False, default=0, index=True)
    score = db.Column(db.Integer, nullable=False)  # WPM
    level = db.Column(db.String(32), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow, index=True)

    @classmethod
    def recent_for_user(cls, user_id, limit=5):
        return (
            cls.query.filter_by(user_id=user_id)
            .order_by(cls.created_at.desc(), cls.id.desc())
            .limit(limit)
            .all()
        )

    def to_dict(self, tz=None):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'score': self.score,
            'level': self.level,
            'created_at': as_utc(self.created_at).isoformat() if self.created_at else None,
            'created_at_display': format_history_date(self.created_at, tz),
        }
