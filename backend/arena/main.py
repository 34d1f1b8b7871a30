from flask import Blueprint, jsonify, render_template, url_for
from arena.services.leaderboard import LeaderboardStore

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({
        'message': 'Welcome to the arena game server!',
        'leaderboard': url_for('main.leaderboard_page'),
    })

@main.route('/leaderboard')
def leaderboard_page():
    rows = LeaderboardStore().list_all_descending()
    return render_template('leaderboard.html', rows=rows)
