from fastapi import APIRouter, Depends, HTTPException, Query

from streakkeeper.core.deps import get_gateway, get_rank_table
from streakkeeper.ranks.table import RankTable

router = APIRouter(prefix="/ranks", tags=["ranks"], dependencies=[Depends(get_gateway)])


@router.get("")
def list_ranks(preview: int = Query(3, ge=1), table: RankTable = Depends(get_rank_table)):
    """First tiers of every rank system."""
    return {"rank_systems": table.describe(preview=preview)}


@router.get("/{name}")
def get_rank_system(name: str, table: RankTable = Depends(get_rank_table)):
    described = table.describe(name)
    if not described:
        raise HTTPException(status_code=404, detail="Unknown rank system")
    return described[0]
