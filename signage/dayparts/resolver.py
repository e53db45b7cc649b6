import logging
from typing import Dict, List, Optional

from sqlmodel import Session, col, or_, select

from signage.core.errors import StoreNotFound
from signage.models.daypart_definition import (
    SCOPE_CONCEPT,
    SCOPE_GLOBAL,
    SCOPE_STORE,
    DaypartDefinition,
    EffectiveDaypartDefinition,
)
from signage.models.store import Company, Store

logger = logging.getLogger(__name__)

SCOPE_RANK = {SCOPE_GLOBAL: 0, SCOPE_CONCEPT: 1, SCOPE_STORE: 2}


def _concept_id_for_store(session: Session, store: Store) -> Optional[int]:
    if store.company_id is None:
        return None
    company = session.get(Company, store.company_id)
    return company.concept_id if company else None


def resolve_dayparts(session: Session, store_id: int) -> List[EffectiveDaypartDefinition]:
    """Effective daypart definitions for a store, ascending by sort_order.

    Active definitions at global, concept and store scope are candidates; for
    each daypart_name the most specific scope wins. Ties in sort_order fall
    back to daypart_name then id so the order is stable between calls.
    """
    store = session.get(Store, store_id)
    if not store:
        raise StoreNotFound(store_id)

    concept_id = _concept_id_for_store(session, store)

    scope_filters = [
        col(DaypartDefinition.store_id) == store_id,
        (col(DaypartDefinition.store_id).is_(None) & col(DaypartDefinition.concept_id).is_(None)),
    ]
    if concept_id is not None:
        scope_filters.append(
            col(DaypartDefinition.store_id).is_(None) & (col(DaypartDefinition.concept_id) == concept_id)
        )

    candidates = session.exec(
        select(DaypartDefinition)
        .where(DaypartDefinition.is_active == True)  # noqa: E712
        .where(or_(*scope_filters))
        .order_by(DaypartDefinition.id)
    ).all()

    winners: Dict[str, DaypartDefinition] = {}
    shadowed = set()
    for definition in candidates:
        current = winners.get(definition.daypart_name)
        if current is None:
            winners[definition.daypart_name] = definition
            continue
        shadowed.add(definition.daypart_name)
        if SCOPE_RANK[definition.scope] > SCOPE_RANK[current.scope]:
            winners[definition.daypart_name] = definition

    resolved = [
        EffectiveDaypartDefinition(
            id=definition.id,
            daypart_name=definition.daypart_name,
            display_label=definition.display_label,
            description=definition.description,
            color=definition.color,
            icon=definition.icon,
            sort_order=definition.sort_order,
            source_level=definition.scope,
            is_customized=definition.daypart_name in shadowed and definition.scope != SCOPE_GLOBAL,
            concept_id=definition.concept_id,
            store_id=definition.store_id,
        )
        for definition in winners.values()
    ]
    resolved.sort(key=lambda d: (d.sort_order, d.daypart_name, d.id))

    logger.debug("store %s resolved %d dayparts", store_id, len(resolved))
    return resolved
