"""Field mapping utilities for converting between domain models and database formats."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from ..models.trade import (
    APP_FIELD_NAMES,
    DATE_FIELDS,
    DECIMAL_FIELDS,
    Trade,
    TradeFormData,
    normalize_direction,
    to_date,
    to_decimal,
)

logger = logging.getLogger(__name__)

# Columns a partial update may touch. Ownership (user/account) and id are fixed.
UPDATABLE_COLUMNS = (
    'instrument_type', 'direction', 'symbol',
    'entry_date', 'entry_time', 'exit_date', 'exit_time',
    'entry_price', 'exit_price', 'quantity', 'realized_pl', 'commission',
    'timeframe', 'emotional_state', 'strategy', 'setup', 'notes',
    'entry_screenshot', 'exit_screenshot',
)

# Both the application key and the attribute name resolve to the column
_KEY_TO_COLUMN: Dict[str, str] = {}
for _column in UPDATABLE_COLUMNS:
    _KEY_TO_COLUMN[_column] = _column
    _KEY_TO_COLUMN[APP_FIELD_NAMES[_column]] = _column


class TypeTransformers:
    """Type conversion utilities."""

    @staticmethod
    def decimal_to_db(value: Any) -> Optional[float]:
        dec = to_decimal(value)
        return float(dec) if dec is not None else None

    @staticmethod
    def date_to_db(value: Any) -> Optional[str]:
        parsed = to_date(value)
        return parsed.isoformat() if isinstance(parsed, date) else None

    @staticmethod
    def db_to_decimal(value: Any) -> Optional[Decimal]:
        return to_decimal(value)

    @classmethod
    def column_to_db(cls, column: str, value: Any) -> Any:
        """Convert one application value into its column representation."""
        if column in DECIMAL_FIELDS:
            return cls.decimal_to_db(value)
        if column in DATE_FIELDS:
            return cls.date_to_db(value)
        if column == 'direction':
            return normalize_direction(value)
        return value


class TradeMapper:
    """Maps between the Trade domain model and the trades table row format."""

    @staticmethod
    def db_to_model(row: Mapping[str, Any]) -> Trade:
        """Convert database row to Trade model."""
        return Trade(
            id=row['id'],
            user_id=row.get('user_id'),
            account_id=row['account_id'],
            instrument_type=row.get('instrument_type'),
            direction=row.get('direction'),
            symbol=row.get('symbol'),
            entry_date=row.get('entry_date'),
            entry_time=row.get('entry_time'),
            exit_date=row.get('exit_date'),
            exit_time=row.get('exit_time'),
            entry_price=row.get('entry_price'),
            exit_price=row.get('exit_price'),
            quantity=row.get('quantity'),
            realized_pl=row.get('realized_pl'),
            commission=row.get('commission') or 0,
            timeframe=row.get('timeframe'),
            emotional_state=row.get('emotional_state'),
            strategy=row.get('strategy') or '',
            setup=row.get('setup') or '',
            notes=row.get('notes') or '',
            entry_screenshot=row.get('entry_screenshot'),
            exit_screenshot=row.get('exit_screenshot'),
        )

    @staticmethod
    def form_to_db(form: TradeFormData, user_id: str, realized_pl: Decimal) -> Dict[str, Any]:
        """Convert creation form data to an insert row.

        Empty optional text fields are stored as NULL; commission defaults to 0.
        """
        return {
            'user_id': user_id,
            'account_id': form.account_id,
            'instrument_type': form.instrument_type,
            'direction': normalize_direction(form.direction),
            'symbol': form.symbol,
            'entry_date': TypeTransformers.date_to_db(form.entry_date),
            'entry_time': form.entry_time,
            'exit_date': TypeTransformers.date_to_db(form.exit_date),
            'exit_time': form.exit_time,
            'entry_price': TypeTransformers.decimal_to_db(form.entry_price),
            'exit_price': TypeTransformers.decimal_to_db(form.exit_price),
            'quantity': TypeTransformers.decimal_to_db(form.quantity),
            'realized_pl': TypeTransformers.decimal_to_db(realized_pl),
            'commission': TypeTransformers.decimal_to_db(form.commission) or 0.0,
            'timeframe': form.timeframe,
            'emotional_state': form.emotional_state,
            'strategy': form.strategy or None,
            'setup': form.setup or None,
            'notes': form.notes or None,
            'entry_screenshot': form.entry_screenshot or None,
            'exit_screenshot': form.exit_screenshot or None,
        }

    @staticmethod
    def normalize_changes(changes: Mapping[str, Any]) -> Dict[str, Any]:
        """Resolve application or attribute keys to column names.

        Values are left as given; keys that are not updatable are dropped.
        """
        normalized = {}
        for key, value in changes.items():
            column = _KEY_TO_COLUMN.get(key)
            if column is None:
                logger.debug(f"Ignoring non-updatable trade field: {key}")
                continue
            normalized[column] = value
        return normalized

    @classmethod
    def partial_to_db(cls, changes: Mapping[str, Any]) -> Dict[str, Any]:
        """Convert a partial update into an update payload with only the supplied columns."""
        return {
            column: TypeTransformers.column_to_db(column, value)
            for column, value in cls.normalize_changes(changes).items()
        }
