from typing import List, Optional, Set
from sqlalchemy import or_
from sqlalchemy.orm import Session

from shared.core.schemas import SearchResult
from ...ledger.dues_aggregator import floor_label
from ...models.leasing_tenants.tenants import Tenant
from ...models.space_sites.owners import Owner
from ...models.space_sites.shops import Shop

SEARCH_LIMIT = 10


def search(db: Session, term: str,
           allowed_shop_ids: Optional[Set[int]] = None,
           allowed_tenant_ids: Optional[Set[int]] = None,
           include_owners: bool = True) -> List[SearchResult]:
    term = (term or "").strip()
    if len(term) < 2:
        return []
    like = f"%{term}%"
    results = []

    tenants = db.query(Tenant).filter(
        Tenant.is_deleted == False,
        or_(Tenant.name.ilike(like), Tenant.phone.ilike(like),
            Tenant.business_name.ilike(like)),
    )
    if allowed_tenant_ids is not None:
        tenants = tenants.filter(Tenant.id.in_(allowed_tenant_ids))
    for t in tenants.order_by(Tenant.name).limit(SEARCH_LIMIT).all():
        results.append(SearchResult(
            type="tenant", id=t.id, title=t.name, subtitle=t.phone,
            extra={"business_name": t.business_name}))

    shops = db.query(Shop).filter(
        Shop.is_deleted == False, Shop.shop_number.ilike(like))
    if allowed_shop_ids is not None:
        shops = shops.filter(Shop.id.in_(allowed_shop_ids))
    for s in shops.order_by(Shop.shop_number).limit(SEARCH_LIMIT).all():
        results.append(SearchResult(
            type="shop", id=s.id, title=s.shop_number,
            subtitle=floor_label(s.floor), extra={"status": s.status}))

    if include_owners:
        owners = db.query(Owner).filter(
            or_(Owner.name.ilike(like), Owner.phone.ilike(like)))
        for o in owners.order_by(Owner.name).limit(SEARCH_LIMIT).all():
            results.append(SearchResult(
                type="owner", id=o.id, title=o.name, subtitle=o.phone or ""))

    return results
