"""Trade data models."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

LONG = "LONG"
SHORT = "SHORT"
DIRECTIONS = (LONG, SHORT)

INSTRUMENT_TYPES = ("STOCK", "OPTIONS", "FUTURES", "FOREX", "CRYPTO")

# Attribute name -> application (camelCase) key
APP_FIELD_NAMES: Dict[str, str] = {
    'id': 'id',
    'user_id': 'userId',
    'account_id': 'accountId',
    'instrument_type': 'instrumentType',
    'direction': 'direction',
    'symbol': 'symbol',
    'entry_date': 'entryDate',
    'entry_time': 'entryTime',
    'exit_date': 'exitDate',
    'exit_time': 'exitTime',
    'entry_price': 'entryPrice',
    'exit_price': 'exitPrice',
    'quantity': 'quantity',
    'realized_pl': 'realizedPL',
    'commission': 'commission',
    'timeframe': 'timeframe',
    'emotional_state': 'emotionalState',
    'strategy': 'strategy',
    'setup': 'setup',
    'notes': 'notes',
    'entry_screenshot': 'entryScreenshot',
    'exit_screenshot': 'exitScreenshot',
}

DECIMAL_FIELDS = ('entry_price', 'exit_price', 'quantity', 'realized_pl', 'commission')
DATE_FIELDS = ('entry_date', 'exit_date')


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a numeric-ish value to Decimal, treating blanks as missing."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value: {value!r}")
    if isinstance(value, str):
        value = value.strip()
        if not value or value.lower() in ('nan', 'none', 'null'):
            return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid numeric value: {value!r}") from e


def to_date(value: Any) -> Optional[date]:
    """Parse an ISO date (or datetime) string into a date."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError as e:
        raise ValueError(f"Invalid date: {value!r}") from e


def normalize_direction(value: Any) -> str:
    return str(value or '').strip().upper()


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _number(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


@dataclass
class Trade:
    """A journaled trade as the application sees it.

    Attributes use Python naming; ``to_dict`` produces the camelCase shape
    the dashboard consumes. Row translation lives in ``TradeMapper``.
    """
    id: str
    account_id: str
    instrument_type: str
    direction: str
    symbol: str
    entry_date: date
    realized_pl: Decimal
    user_id: Optional[str] = None
    entry_time: Optional[str] = None
    exit_date: Optional[date] = None
    exit_time: Optional[str] = None
    entry_price: Optional[Decimal] = None
    exit_price: Optional[Decimal] = None
    quantity: Optional[Decimal] = None
    commission: Decimal = Decimal('0')
    timeframe: Optional[str] = None
    emotional_state: Optional[str] = None
    strategy: str = ''
    setup: str = ''
    notes: str = ''
    entry_screenshot: Optional[str] = None
    exit_screenshot: Optional[str] = None

    def __post_init__(self):
        self.direction = normalize_direction(self.direction)
        self.entry_date = to_date(self.entry_date)
        self.exit_date = to_date(self.exit_date)
        self.entry_price = to_decimal(self.entry_price)
        self.exit_price = to_decimal(self.exit_price)
        self.quantity = to_decimal(self.quantity)
        self.realized_pl = to_decimal(self.realized_pl) or Decimal('0')
        self.commission = to_decimal(self.commission) or Decimal('0')
        self.strategy = self.strategy or ''
        self.setup = self.setup or ''
        self.notes = self.notes or ''

    @property
    def net_pl(self) -> Decimal:
        """Realized P/L after commission."""
        return self.realized_pl - self.commission

    def is_long(self) -> bool:
        return self.direction == LONG

    def screenshots(self) -> list[str]:
        """Stored screenshot references, entry first."""
        return [ref for ref in (self.entry_screenshot, self.exit_screenshot) if ref]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the application (camelCase) shape for JSON responses."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in DECIMAL_FIELDS:
                value = _number(value)
            elif f.name in DATE_FIELDS:
                value = _iso(value)
            result[APP_FIELD_NAMES[f.name]] = value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Trade:
        """Create a Trade from an application-shape dictionary."""
        kwargs = {}
        for attr, app_key in APP_FIELD_NAMES.items():
            if app_key in data:
                kwargs[attr] = data[app_key]
            elif attr in data:
                kwargs[attr] = data[attr]
        return cls(**kwargs)


@dataclass
class TradeFormData:
    """Payload for creating a trade.

    ``realized_pl`` may be left out when entry price, exit price and quantity
    are all given; the repository derives it.
    """
    account_id: str
    instrument_type: str
    direction: str
    symbol: str
    entry_date: date
    entry_time: Optional[str] = None
    exit_date: Optional[date] = None
    exit_time: Optional[str] = None
    entry_price: Optional[Decimal] = None
    exit_price: Optional[Decimal] = None
    quantity: Optional[Decimal] = None
    realized_pl: Optional[Decimal] = None
    commission: Optional[Decimal] = None
    timeframe: Optional[str] = None
    emotional_state: Optional[str] = None
    strategy: Optional[str] = None
    setup: Optional[str] = None
    notes: Optional[str] = None
    entry_screenshot: Optional[str] = None
    exit_screenshot: Optional[str] = None

    def __post_init__(self):
        self.direction = normalize_direction(self.direction)
        self.entry_date = to_date(self.entry_date)
        self.exit_date = to_date(self.exit_date)
        for name in DECIMAL_FIELDS:
            setattr(self, name, to_decimal(getattr(self, name)))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TradeFormData:
        """Build form data from a camelCase (or snake_case) dictionary.

        Raises:
            ValueError: If a required field is missing or a value cannot be parsed
        """
        kwargs = {}
        allowed = {f.name for f in fields(cls)}
        for attr, app_key in APP_FIELD_NAMES.items():
            if attr not in allowed:
                continue
            if app_key in data:
                kwargs[attr] = data[app_key]
            elif attr in data:
                kwargs[attr] = data[attr]

        missing = [
            APP_FIELD_NAMES[name]
            for name in ('account_id', 'instrument_type', 'direction', 'symbol', 'entry_date')
            if not kwargs.get(name)
        ]
        if missing:
            raise ValueError(f"Missing required trade fields: {', '.join(missing)}")

        return cls(**kwargs)
