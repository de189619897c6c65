"""Flask server exposing the Minesweeper session actions to a chat transport."""
import hmac
import logging
from datetime import datetime
from functools import wraps
from flask import Flask, current_app, request, jsonify
from flask_cors import CORS

from minesweeper_bot import messages
from minesweeper_bot.backends import LocalSessionBackend, TemporalSessionBackend
from minesweeper_bot.config import AppConfig, load_config
from minesweeper_bot.types import ActionRequest, ActionResult, ActionType, BoardView

logger = logging.getLogger(__name__)


class BadActionRequest(ValueError):
    """The request body does not describe a valid action."""


def serialize_board(board: BoardView):
    """Convert a board view to JSON-serializable format."""
    if board is None:
        return None
    return {
        'rows': board.rows,
        'cols': board.cols,
        'status': board.status.value,
        'cells': [[marker.value for marker in row] for row in board.cells],
        'text': messages.format_board(board),
    }


def serialize_result(result: ActionResult):
    """Convert an action result to JSON-serializable format."""
    return {
        'sessionId': result.session_id,
        'action': result.action.value if result.action else None,
        'outcome': result.outcome.value,
        'screen': result.screen.value,
        'menu': messages.menu_for(result.screen),
        'notice': result.notice,
        'message': result.message,
        'status': result.status.value if result.status else None,
        'board': serialize_board(result.board),
        'settings': {
            'rows': result.settings.rows,
            'cols': result.settings.cols,
            'mineCount': result.settings.mine_count,
        },
    }


def parse_action_request(data) -> ActionRequest:
    """Build an ActionRequest from a JSON body."""
    if not isinstance(data, dict):
        raise BadActionRequest('Request body must be a JSON object')

    try:
        action = ActionType(data.get('action'))
    except ValueError:
        raise BadActionRequest(f"Unknown action: {data.get('action')!r}") from None

    if action == ActionType.SELECT_CELL:
        row, col = data.get('row'), data.get('col')
        if not isinstance(row, int) or isinstance(row, bool) or \
           not isinstance(col, int) or isinstance(col, bool):
            raise BadActionRequest('select_cell requires integer row and col')
        return ActionRequest(action=action, row=row, col=col)

    if action == ActionType.CHOOSE_PRESET:
        preset = data.get('preset')
        if not isinstance(preset, str):
            raise BadActionRequest('choose_preset requires a preset name')
        return ActionRequest(action=action, preset=preset)

    if action == ActionType.SUBMIT_CUSTOM_SETTINGS:
        text = data.get('text')
        if not isinstance(text, str):
            raise BadActionRequest('submit_custom_settings requires text')
        return ActionRequest(action=action, text=text)

    return ActionRequest(action=action)


def require_bot_token(view):
    """Reject requests that do not carry the configured bot token."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        expected = current_app.config['BOT_TOKEN']
        auth_header = request.headers.get('Authorization', '')
        token = auth_header[len('Bearer '):] if auth_header.startswith('Bearer ') else \
            request.headers.get('X-Bot-Token', '')
        if not hmac.compare_digest(token.encode(), expected.encode()):
            return jsonify({'error': 'Unauthorized'}), 401
        return view(*args, **kwargs)
    return wrapper


def create_app(config: AppConfig, backend=None) -> Flask:
    """Create the Flask app bound to a session backend."""
    app = Flask(__name__)
    CORS(app)
    app.config['BOT_TOKEN'] = config.bot_token

    if backend is None:
        backend = TemporalSessionBackend.connect(config.temporal) if config.session_backend == 'temporal' \
            else LocalSessionBackend()
    app.extensions['session_backend'] = backend

    @app.route('/api/sessions/<session_id>/actions', methods=['POST'])
    @require_bot_token
    def apply_action(session_id):
        """Apply an action to a session."""
        try:
            action_request = parse_action_request(request.get_json(silent=True))
        except BadActionRequest as error:
            return jsonify({'error': str(error)}), 400

        try:
            result = backend.apply(session_id, action_request)
        except Exception as error:
            logger.error(f"Error applying {action_request.action.value} to session {session_id}: {error}")
            return jsonify({'error': 'Failed to apply action'}), 500

        return jsonify(serialize_result(result))

    @app.route('/api/sessions/<session_id>', methods=['GET'])
    @require_bot_token
    def describe_session(session_id):
        """Get the current view of a session."""
        try:
            result = backend.describe(session_id)
        except Exception as error:
            logger.error(f"Error describing session {session_id}: {error}")
            return jsonify({'error': 'Failed to describe session'}), 500

        return jsonify(serialize_result(result))

    @app.route('/api/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'OK',
            'timestamp': datetime.now().isoformat()
        })

    return app


def main():
    """Start the Flask server."""
    logging.basicConfig(level=logging.INFO)
    try:
        config = load_config()
        app = create_app(config)
    except Exception as error:
        logger.error(f"Failed to start server: {error}")
        raise SystemExit(1)

    backend = app.extensions['session_backend']
    logger.info(f"Minesweeper server running on http://localhost:{config.port} ({config.session_backend} sessions)")
    if config.session_backend == 'temporal':
        logger.info("Make sure to start the Temporal worker in another terminal: python -m minesweeper_bot.worker")

    try:
        app.run(host='0.0.0.0', port=config.port, debug=False)
    finally:
        backend.close()


if __name__ == "__main__":
    main()
