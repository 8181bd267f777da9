"""Flash API router: GET /flash pops the current user's pending notifications."""

from typing import Annotated

from fastapi import APIRouter, Depends

from cms.api.dependencies import get_flash_bag
from cms.infrastructure.cache.flash_bag_redis import RedisFlashBag

router = APIRouter()


@router.get("/flash")
async def pop_flash(flash: Annotated[RedisFlashBag, Depends(get_flash_bag)]):
    """Return and clear pending flash messages, oldest first."""
    return {"messages": await flash.pop_all()}
