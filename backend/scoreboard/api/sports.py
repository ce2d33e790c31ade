from flask import Blueprint, jsonify

from scoreboard.errors import NotFoundError
from scoreboard.sports import SPORTS, get_sport

sports = Blueprint('sports', __name__)


@sports.route('', methods=['GET'])
def list_sports():
    return jsonify([s.to_dict() for s in SPORTS])


@sports.route('/<string:sport_id>', methods=['GET'])
def get_sport_rules(sport_id):
    sport = get_sport(sport_id)
    if sport is None:
        raise NotFoundError('Sport', sport_id)
    return jsonify(sport.to_dict())
