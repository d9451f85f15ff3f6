# app/routers/i18n.py
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import ConfigDict
from sqlmodel import SQLModel

from app.core.errors import ValidationFailure
from app.i18n.translator import SUPPORTED_LANGUAGES, LanguageContext, get_language_context

router = APIRouter(prefix="/i18n", tags=["i18n"])


class LanguageRead(SQLModel):
    language: str
    supported: list[str]


class LanguageUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    language: str


class TranslationRead(SQLModel):
    key: str
    language: str
    value: str


@router.get("", response_model=LanguageRead)
def read_language(i18n: LanguageContext = Depends(get_language_context)):
    """Current language and the languages on offer."""
    return LanguageRead(language=i18n.language, supported=list(SUPPORTED_LANGUAGES))


@router.put("/language", response_model=LanguageRead)
def update_language(
    payload: LanguageUpdate,
    i18n: LanguageContext = Depends(get_language_context),
):
    """Switch and persist the current language."""
    try:
        i18n.set_language(payload.language)
    except ValueError as exc:
        raise ValidationFailure(str(exc))
    return LanguageRead(language=i18n.language, supported=list(SUPPORTED_LANGUAGES))


@router.get("/translations/{language}")
def read_translations(
    language: str,
    i18n: LanguageContext = Depends(get_language_context),
) -> dict[str, Any]:
    """
    Full mapping for a language.

    Unsupported languages get the default language's mapping.
    """
    return i18n.translator.load(language)


@router.get("/translate", response_model=TranslationRead)
def translate(
    key: str,
    lang: str | None = None,
    i18n: LanguageContext = Depends(get_language_context),
):
    """Resolve one dotted key; unknown keys are echoed back."""
    language = lang or i18n.language
    return TranslationRead(key=key, language=language, value=i18n.t(key, language))
