from decimal import Decimal
from typing import Optional, Tuple
from sqlalchemy.orm import Session

from shared.core.config import settings
from ...enum.system_enum import SettingKey
from ...ledger.money import to_decimal
from ...models.system.app_settings import AppSetting
from ...schemas.system.settings_schemas import CurrencySettingsOut, CurrencySettingsUpdate


def get_setting(db: Session, key: str, default: Optional[str] = None) -> Optional[str]:
    row = db.query(AppSetting).filter(AppSetting.key == key).first()
    return row.value if row else default


def set_setting(db: Session, key: str, value: str) -> AppSetting:
    row = db.query(AppSetting).filter(AppSetting.key == key).first()
    if row:
        row.value = value
    else:
        row = AppSetting(key=key, value=value)
        db.add(row)
    return row


def get_currency_settings(db: Session) -> CurrencySettingsOut:
    return CurrencySettingsOut(
        base_currency=settings.BASE_CURRENCY,
        display_currency=get_setting(
            db, SettingKey.display_currency.value, settings.BASE_CURRENCY),
        exchange_rate=get_setting(
            db, SettingKey.exchange_rate.value, settings.DEFAULT_EXCHANGE_RATE),
    )


def update_currency_settings(db: Session, payload: CurrencySettingsUpdate) -> CurrencySettingsOut:
    if payload.display_currency is not None:
        set_setting(db, SettingKey.display_currency.value,
                    payload.display_currency.upper())
    if payload.exchange_rate is not None:
        set_setting(db, SettingKey.exchange_rate.value,
                    format(payload.exchange_rate, "f"))
    db.commit()
    return get_currency_settings(db)


def resolve_display(db: Session, currency: Optional[str]) -> Tuple[str, Decimal]:
    """Currency code and multiplier for a requested display currency."""
    base = settings.BASE_CURRENCY
    if not currency or currency.upper() == base:
        return base, Decimal("1")

    current = get_currency_settings(db)
    if currency.upper() != current.display_currency:
        raise ValueError(
            f"Unsupported currency '{currency}', expected {base} or {current.display_currency}")
    return current.display_currency, to_decimal(current.exchange_rate)
