import os

from dotenv import load_dotenv
from flask import Flask, jsonify

load_dotenv()

from models import db
from services import board_routes, calendar_routes, card_routes, user_routes

app = Flask(__name__)
app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL', 'sqlite:///boardcal.db')
app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
app.config['PERMANENT_SESSION_LIFETIME'] = 30 * 24 * 60 * 60  # 30 days in seconds
app.config['API_SHARED_KEY'] = os.environ.get('API_SHARED_KEY')  # Optional shared key for API callers

db.init_app(app)

with app.app_context():
    db.create_all()


@app.errorhandler(404)
def not_found(error):
    return jsonify({'error': 'Not found'}), 404


@app.errorhandler(500)
def internal_error(error):
    app.logger.error(f"Unhandled server error: {error}")
    db.session.rollback()
    return jsonify({'error': 'Internal error'}), 500


# User Selection Routes
app.add_url_rule('/api/users', view_func=user_routes.list_users, methods=['GET'])
app.add_url_rule('/api/set-user/<int:user_id>', view_func=user_routes.set_user, methods=['POST'])
app.add_url_rule('/api/create-user', view_func=user_routes.create_user, methods=['POST'])
app.add_url_rule('/api/current-user', view_func=user_routes.current_user_info, methods=['GET'])
app.add_url_rule('/api/logout', view_func=user_routes.logout_user, methods=['POST'])

# Board discovery
app.add_url_rule('/api/workspace', view_func=board_routes.list_workspaces, methods=['GET'])
app.add_url_rule('/api/board', view_func=board_routes.list_boards, methods=['GET'])
app.add_url_rule('/api/board/<int:board_id>/full', view_func=board_routes.full_board, methods=['GET'])

# Cards and calendar
app.add_url_rule('/api/cards/<int:card_id>', view_func=card_routes.handle_card, methods=['GET', 'PATCH'])
app.add_url_rule('/api/calendar', view_func=calendar_routes.calendar_items, methods=['GET', 'PATCH'])


if __name__ == '__main__':
    app.run(debug=os.environ.get('FLASK_DEBUG') == '1', port=int(os.environ.get('PORT', 5000)))
