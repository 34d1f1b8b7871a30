from arena import db


class LeaderboardEntry(db.Model):
    __tablename__ = 'leaderboard'
    name = db.Column(db.String(64), primary_key=True)
    score = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self):
        return {
            'name': self.name,
            'score': self.score,
        }
