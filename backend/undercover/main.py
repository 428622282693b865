from flask import Blueprint, jsonify, current_app

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Undercover game server!'})

@main.route('/health')
def health():
    registry = current_app.extensions['undercover.registry']
    return jsonify({'status': 'healthy', 'rooms': len(registry)})
