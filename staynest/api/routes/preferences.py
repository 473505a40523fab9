"""
Language and currency preference endpoints.
"""
from typing import Optional
from fastapi import APIRouter, Depends
from ..models import DataResponse, ErrorResponse, PreferencesRequest
from ..dependencies import get_auth_store, get_current_user, get_optional_user
from ...stores import AuthStore, CURRENCY_SYMBOLS, LANGUAGE_NAMES
from ...stores.settings_store import DEFAULT_LANGUAGE, DEFAULT_CURRENCY
from ...utils.models import User

router = APIRouter(prefix="/settings", tags=["settings"])


def _preferences(user: Optional[User]) -> dict:
    language = (user.language if user else None) or DEFAULT_LANGUAGE
    currency = (user.currency if user else None) or DEFAULT_CURRENCY
    return {
        "language": language.value,
        "language_name": LANGUAGE_NAMES[language],
        "currency": currency.value,
        "currency_symbol": CURRENCY_SYMBOLS[currency],
        "languages": {lang.value: name for lang, name in LANGUAGE_NAMES.items()},
        "currencies": {cur.value: symbol for cur, symbol in CURRENCY_SYMBOLS.items()},
    }


@router.get("", response_model=DataResponse)
async def get_preferences(user: Optional[User] = Depends(get_optional_user)):
    return {"success": True, "message": "Preferences retrieved", "data": _preferences(user)}


@router.put("", response_model=DataResponse, responses={401: {"model": ErrorResponse}, 422: {"model": ErrorResponse}})
async def update_preferences(
    req: PreferencesRequest,
    user: User = Depends(get_current_user),
    auth_store: AuthStore = Depends(get_auth_store)
):
    updates = req.model_dump(mode="json", exclude_none=True)
    ok = auth_store.update_user(user, user.id, updates) if updates else True
    if ok:
        if req.language is not None:
            user.language = req.language
        if req.currency is not None:
            user.currency = req.currency
    return {
        "success": ok,
        "message": "Preferences updated" if ok else "No change was made",
        "data": _preferences(user),
    }
