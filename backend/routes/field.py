"""Single-value field route — GET /field?num=1&channel=3195161&key=..."""

import re

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse

from errors import InvalidRequestError, MissingParameterError
from services.resolver import FIELD_MAX, FIELD_MIN, FieldResolver

router = APIRouter()

_ASCII_INT = re.compile(r"[+-]?[0-9]+")


def get_resolver(request: Request) -> FieldResolver:
    return request.app.state.resolver


def _parse_field(raw: str) -> int:
    """Normalize and validate the field selector."""
    raw = raw.strip()
    number = int(raw) if _ASCII_INT.fullmatch(raw) else None
    if number is None or not FIELD_MIN <= number <= FIELD_MAX:
        raise InvalidRequestError(f"field must be between {FIELD_MIN} and {FIELD_MAX}")
    return number


@router.get("/field", response_class=PlainTextResponse)
async def field_value(
    num: str | None = Query(None),
    field: str | None = Query(None),
    channel: str | None = Query(None),
    key: str | None = Query(None),
    api_key: str | None = Query(None),
    resolver: FieldResolver = Depends(get_resolver),
) -> str:
    """Latest value of one channel field as bare text."""
    raw_field = num or field
    api_key = key or api_key

    if not raw_field:
        raise MissingParameterError("field")
    if not channel:
        raise MissingParameterError("channel")
    if not api_key:
        raise MissingParameterError("API key")

    return await resolver.resolve(channel, api_key, _parse_field(raw_field))
