# backend/app.py
import logging

from flask import Flask, Blueprint, current_app, request, jsonify
from flask_cors import CORS

from config import Config
from expenses import ExpenseValidationError, parse_calculation_item, parse_expense, sort_by_recent, total_spent
from settlement import calculate_settlements, compute_balances, format_amount, settle
from store import ExpenseStore

logger = logging.getLogger(__name__)

# Loggers of the service modules, tuned by LOG_LEVEL
APP_LOGGERS = (__name__, "expenses", "settlement", "store")

api = Blueprint('api', __name__, url_prefix='/api')


def create_app(config_class=Config, store=None):
    app = Flask(__name__)
    app.config.from_object(config_class)

    for name in APP_LOGGERS:
        logging.getLogger(name).setLevel(app.config['LOG_LEVEL'])

    CORS(app, resources={r"/api/*": {"origins": app.config['CORS_ORIGINS']}})  # Lets the React frontend call the API

    app.extensions['expense_store'] = store if store is not None else ExpenseStore()
    app.register_blueprint(api)
    return app


def _store():
    return current_app.extensions['expense_store']


def _roster():
    return list(current_app.config['PARTICIPANTS'])


def _serialize_transactions(transactions):
    currency = current_app.config['CURRENCY_SYMBOL']
    return [t.to_dict(currency) for t in transactions]


# --- HEALTH CHECK ---
@api.route('', methods=['GET'])
def health_check():
    return jsonify({"status": "healthy", "message": "Backend is running!"})


@api.route('/participants', methods=['GET'])
def participants():
    roster = current_app.config['PARTICIPANTS']
    return jsonify({"participants": [{"name": name, "initials": initials} for name, initials in roster.items()]})


# --- EXPENSES ---
@api.route('/expenses', methods=['GET'])
def list_expenses():
    expenses = sort_by_recent(_store().snapshot())
    show_all = request.args.get('all', '').lower() in ('1', 'true', 'yes')
    visible = expenses if show_all else expenses[:current_app.config['RECENT_EXPENSES_LIMIT']]

    return jsonify({
        "expenses": [expense.to_dict() for expense in visible],
        "total": len(expenses),
        "total_spent": format_amount(total_spent(expenses)),
    })


@api.route('/expenses', methods=['POST'])
def add_expense():
    try:
        expense = parse_expense(request.get_json(silent=True), _roster())
    except ExpenseValidationError as e:
        return jsonify({"error": str(e)}), 400

    stored = _store().add(expense)
    return jsonify(stored.to_dict()), 201


@api.route('/expenses/<expense_id>', methods=['DELETE'])
def delete_expense(expense_id):
    try:
        _store().delete(expense_id)
    except KeyError:
        return jsonify({"error": f"Expense {expense_id} not found"}), 404
    return '', 204


# --- BALANCES & SETTLEMENTS ---
@api.route('/balances', methods=['GET'])
def balances():
    roster = current_app.config['PARTICIPANTS']
    result = compute_balances(list(roster), _store().snapshot())
    return jsonify({"balances": [
        {"name": name, "initials": roster.get(name), "balance": format_amount(amount)}
        for name, amount in result.items()
    ]})


@api.route('/settlements', methods=['GET'])
def settlements():
    result = settle(compute_balances(_roster(), _store().snapshot()))
    return jsonify({"settlements": _serialize_transactions(result)})


@api.route('/calculate', methods=['POST'])
def calculate():
    data = request.get_json(silent=True)
    if not isinstance(data, list):
        return jsonify({"error": "Expected a JSON list of expenses"}), 400

    # Convert JSON data into our Python objects
    try:
        expenses_list = [parse_calculation_item(item) for item in data]
    except ExpenseValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        results = calculate_settlements(expenses_list)
        return jsonify(_serialize_transactions(results))
    except Exception as e:
        logger.exception("Settlement calculation failed")
        # Returns specific error message to the frontend if something crashes
        return jsonify({"error": str(e)}), 500


if __name__ == '__main__':
    logging.basicConfig(format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    app = create_app()
    app.run(debug=app.config['DEBUG'], port=app.config['PORT'])
