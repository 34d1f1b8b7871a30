from flask import Blueprint, jsonify, current_app
from arena.services.leaderboard import LeaderboardStore


leaderboard = Blueprint('leaderboard', __name__)


@leaderboard.route('', methods=['GET'])
def list_leaderboard():
    rows = LeaderboardStore().list_all_descending()
    return jsonify([{'name': name, 'score': score} for name, score in rows])


@leaderboard.route('/state', methods=['GET'])
def match_state():
    session = current_app.extensions['arena.session']
    return jsonify(session.state())
