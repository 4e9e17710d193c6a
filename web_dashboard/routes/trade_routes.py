from flask import Blueprint, Response, current_app, g, jsonify, request
import logging

from data.models.trade import TradeFormData
from data.repositories.base_repository import (
    BaseTradeRepository,
    DataNotFoundError,
    DataValidationError,
    RepositoryError,
)
from data.repositories.repository_factory import get_trade_repository
from web_dashboard.chart_utils import PLChart
from web_dashboard.flask_auth_utils import require_user
from web_dashboard.log_handler import log_execution_time
from web_dashboard.plotly_utils import serialize_plotly_figure

logger = logging.getLogger(__name__)

trades_bp = Blueprint('trades', __name__)


def get_repository() -> BaseTradeRepository:
    """Repository configured on the current app, else the process-wide one"""
    return current_app.config.get('TRADE_REPOSITORY') or get_trade_repository()


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise DataValidationError("Request body must be a JSON object")
    return data


@trades_bp.errorhandler(DataValidationError)
def handle_validation_error(e):
    logger.warning(f"[Trades API] Validation error: {e}")
    return jsonify({"error": str(e)}), 400


@trades_bp.errorhandler(DataNotFoundError)
def handle_not_found(e):
    logger.info(f"[Trades API] Not found: {e}")
    return jsonify({"error": str(e)}), 404


@trades_bp.errorhandler(RepositoryError)
def handle_repository_error(e):
    logger.error(f"[Trades API] Repository error: {e}", exc_info=True)
    return jsonify({"error": str(e)}), 502


@log_execution_time()
def load_user_trades(user_id: str):
    return get_repository().fetch_trades(user_id)


@trades_bp.route('/api/trades', methods=['GET'])
@require_user
def list_trades():
    """List the signed-in user's trades, newest entry date first"""
    trades = load_user_trades(g.user_id)
    logger.info(f"[Trades API] {len(trades)} trades for user {g.user_id}")
    return jsonify([trade.to_dict() for trade in trades])


@trades_bp.route('/api/trades', methods=['POST'])
@require_user
def create_trade():
    """Record a trade and apply its net P/L to the account balance.

    Request Body: camelCase trade form (accountId, instrumentType, direction,
    symbol, entryDate required). Responds 201 with the stored trade.
    """
    try:
        form = TradeFormData.from_dict(_json_body())
    except ValueError as e:
        raise DataValidationError(str(e)) from e

    trade = get_repository().create_trade(g.user_id, form)
    logger.info(f"[Trades API] Created trade {trade.id} ({trade.symbol})")
    return jsonify(trade.to_dict()), 201


@trades_bp.route('/api/trades/<trade_id>', methods=['PATCH'])
@require_user
def update_trade(trade_id):
    """Apply a partial update; the balance moves by the change in net P/L.

    Trades owned by other users respond 404.
    """
    trade = get_repository().update_trade(trade_id, _json_body(), user_id=g.user_id)
    return jsonify(trade.to_dict())


@trades_bp.route('/api/trades/<trade_id>', methods=['DELETE'])
@require_user
def delete_trade(trade_id):
    get_repository().delete_trade(trade_id, user_id=g.user_id)
    return '', 204


@trades_bp.route('/api/trades/bulk-delete', methods=['POST'])
@require_user
def bulk_delete_trades():
    """Delete several of the user's trades; ids of other users' trades are skipped.

    Request Body:
        {"ids": ["<trade id>", ...]}
    """
    ids = _json_body().get('ids')
    if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
        raise DataValidationError("'ids' must be a list of trade ids")

    get_repository().delete_trades(ids, user_id=g.user_id)
    logger.info(f"[Trades API] Bulk delete of {len(ids)} ids for user {g.user_id}")
    return '', 204


@trades_bp.route('/api/charts/cumulative-pl', methods=['GET'])
@require_user
def cumulative_pl_chart():
    """Cumulative P/L chart for the user's trades as Plotly JSON.

    Each request loads a fresh trade list and builds its own chart, so the
    PLChart memo does not carry across requests.

    Query Parameters:
        account (str): Account id, or 'all' (default) for every account
        currency (str): Display currency code (default from settings)
    """
    account = request.args.get('account') or None
    currency = (request.args.get('currency') or current_app.config['DISPLAY_CURRENCY']).upper()

    trades = load_user_trades(g.user_id)
    fig = PLChart(currency=currency).render(trades, account)
    return Response(serialize_plotly_figure(fig), mimetype='application/json')
