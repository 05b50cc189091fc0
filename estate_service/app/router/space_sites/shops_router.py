from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from shared.core.auth import allow_super_admin, validate_current_token
from shared.core.database import get_estate_db as get_db
from shared.core.schemas import DeletionRequest, Lookup, UserToken
from shared.helpers.json_response_helper import not_found
from shared.helpers.property_helper import ensure_allowed, get_allowed_shop_ids
from ...crud.space_sites import shops_crud as crud
from ...schemas.space_sites.shops_schemas import (
    ShopCreate, ShopListResponse, ShopOut, ShopRequest, ShopUpdate
)

router = APIRouter(
    prefix="/api/shops",
    tags=["shops"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=ShopListResponse)
def get_shops(
    params: ShopRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_list(db, params, get_allowed_shop_ids(db, current_user))


@router.get("/lookup", response_model=List[Lookup])
def shop_lookup(
    vacant_only: bool = Query(False),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.shop_lookup(db, get_allowed_shop_ids(db, current_user), vacant_only)


@router.get("/{shop_id}", response_model=ShopOut)
def get_shop(
    shop_id: int,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    shop = crud.get_by_id(db, shop_id)
    if not shop:
        return not_found("Shop")
    ensure_allowed(get_allowed_shop_ids(db, current_user), shop.id, "Shop")
    return crud.shop_out(shop)


@router.post("", response_model=ShopOut, dependencies=[Depends(allow_super_admin)])
def create_shop(payload: ShopCreate, db: Session = Depends(get_db)):
    try:
        return crud.shop_out(crud.create(db, payload))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{shop_id}", response_model=ShopOut, dependencies=[Depends(allow_super_admin)])
def update_shop(shop_id: int, payload: ShopUpdate, db: Session = Depends(get_db)):
    shop = crud.get_by_id(db, shop_id)
    if not shop:
        return not_found("Shop")
    try:
        return crud.shop_out(crud.update(db, shop, payload))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{shop_id}", response_model=None)
def delete_shop(
    shop_id: int,
    payload: DeletionRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_super_admin)
):
    shop = crud.get_by_id(db, shop_id)
    if not shop:
        return not_found("Shop")
    try:
        return crud.delete(db, shop, payload.reason, current_user.user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
