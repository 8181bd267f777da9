"""Records API router: POST /editcontent/{contenttypeslug}[/{id}] saves a posted edit form."""

from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse, Response

from cms.api.dependencies import get_contenttype, get_save_service
from cms.api.form_parsing import decode_form
from cms.application.responses import RedirectOutcome, SaveOutcome
from cms.application.save_service import ContentSaveService
from cms.domain.models.contenttype import ContentType

router = APIRouter()


async def _read_form(request: Request) -> Dict[str, Any]:
    """Decode the posted form; file uploads are not handled here."""
    form = await request.form()
    return decode_form((name, value) for name, value in form.multi_items() if isinstance(value, str))


def _param(request: Request, form_values: Dict[str, Any], name: str) -> Optional[str]:
    value = form_values.get(name) or request.query_params.get(name)
    return value if isinstance(value, str) and value else None


def _to_response(outcome: SaveOutcome) -> Response:
    if isinstance(outcome, RedirectOutcome):
        return RedirectResponse(outcome.url, status_code=302)
    return JSONResponse(content=jsonable_encoder(outcome.payload))


@router.post("/editcontent/{contenttypeslug}")
async def save_new_record(
    request: Request,
    contenttype: Annotated[ContentType, Depends(get_contenttype)],
    save_service: Annotated[ContentSaveService, Depends(get_save_service)],
):
    """Create a record of the content type from the posted form."""
    form_values = await _read_form(request)
    outcome = await save_service.save(
        form_values,
        contenttype,
        content_id=None,
        new=True,
        return_to=_param(request, form_values, "returnto"),
        edit_referrer=_param(request, form_values, "editreferrer"),
    )
    return _to_response(outcome)


@router.post("/editcontent/{contenttypeslug}/{id}")
async def save_existing_record(
    id: int,
    request: Request,
    contenttype: Annotated[ContentType, Depends(get_contenttype)],
    save_service: Annotated[ContentSaveService, Depends(get_save_service)],
):
    """Update an existing record from the posted form."""
    form_values = await _read_form(request)
    outcome = await save_service.save(
        form_values,
        contenttype,
        content_id=id,
        new=False,
        return_to=_param(request, form_values, "returnto"),
        edit_referrer=_param(request, form_values, "editreferrer"),
    )
    return _to_response(outcome)
