from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_estate_db as get_db
from shared.core.schemas import SearchResult, UserToken
from shared.helpers.property_helper import get_allowed_shop_ids, get_allowed_tenant_ids
from ...crud.system import search_crud as crud

router = APIRouter(
    prefix="/api/search",
    tags=["search"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=List[SearchResult])
def search(
    q: str = Query(""),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    allowed_shops = get_allowed_shop_ids(db, current_user)
    return crud.search(
        db, q,
        allowed_shop_ids=allowed_shops,
        allowed_tenant_ids=get_allowed_tenant_ids(db, current_user),
        include_owners=allowed_shops is None,
    )
