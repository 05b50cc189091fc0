from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_super_admin, validate_current_token
from shared.core.database import get_estate_db as get_db
from ...crud.system import settings_crud as crud
from ...schemas.system.settings_schemas import CurrencySettingsOut, CurrencySettingsUpdate

router = APIRouter(
    prefix="/api/settings",
    tags=["settings"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/currency", response_model=CurrencySettingsOut)
def get_currency(db: Session = Depends(get_db)):
    return crud.get_currency_settings(db)


@router.put("/currency", response_model=CurrencySettingsOut, dependencies=[Depends(allow_super_admin)])
def update_currency(payload: CurrencySettingsUpdate, db: Session = Depends(get_db)):
    return crud.update_currency_settings(db, payload)
