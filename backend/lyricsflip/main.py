from flask import Blueprint, jsonify, current_app
from lyricsflip.models import GameMode

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the LyricsFlip game server!'})

@main.route('/api/genres')
def list_genres():
    registry = current_app.extensions['lyricsflip']
    return jsonify(registry.genres())

@main.route('/api/game-modes')
def list_game_modes():
    return jsonify([mode.value for mode in GameMode])
