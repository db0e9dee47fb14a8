# firebase_token/main.py
import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, Union

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import (
    BaseModel,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    ValidationInfo,
    confloat,
    field_validator,
)

from firebase_token.auth.token import get_current_client
from firebase_token.config import Settings, get_settings
from firebase_token.generator.builder import FirebaseTokenGenerator
from firebase_token.generator.errors import TokenGenerationError

log = logging.getLogger(__name__)

# NaN and Infinity parse from the request body but have no claims literal
FiniteFloat = confloat(strict=True, allow_inf_nan=False)
Scalar = Union[StrictBool, StrictInt, FiniteFloat, StrictStr, None]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    log.info("Starting Firebase token service...")
    if not settings.FIREBASE_SECRET:
        log.warning("FIREBASE_SECRET is not set. Token requests will be refused.")
    if settings.ENABLE_DEV_TOKEN:
        log.warning("ENABLE_DEV_TOKEN is on. Do not run this configuration in production.")
    yield
    log.info("Shutting down Firebase token service.")


app = FastAPI(title="Firebase Token Service (FastAPI)", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _settings_from(info: ValidationInfo) -> Settings:
    if info.context and "settings" in info.context:
        return info.context["settings"]
    return get_settings()


def _check_lengths(entries: dict[str, Any], limit: int) -> None:
    for key, value in entries.items():
        if len(key) > limit or (isinstance(value, str) and len(value) > limit):
            raise ValueError(f"Entry '{key[:32]}' exceeds {limit} characters.")


class TokenRequest(BaseModel):
    data: dict[str, Scalar] = Field(default_factory=dict)
    options: dict[str, Scalar] = Field(default_factory=dict)

    @field_validator("data")
    @classmethod
    def data_must_be_bounded(cls, v: dict[str, Any], info: ValidationInfo) -> dict[str, Any]:
        settings = _settings_from(info)
        if len(v) > settings.MAX_DATA_ENTRIES:
            raise ValueError("Too many data entries.")
        _check_lengths(v, settings.MAX_STRING_CHARS)
        return v

    @field_validator("options")
    @classmethod
    def options_must_be_allowed(cls, v: dict[str, Any], info: ValidationInfo) -> dict[str, Any]:
        settings = _settings_from(info)
        unknown = sorted(set(v) - set(settings.ALLOWED_OPTIONS))
        if unknown:
            raise ValueError(f"Options not allowed: {', '.join(unknown)}")
        _check_lengths(v, settings.MAX_STRING_CHARS)
        return v


class TokenResponse(BaseModel):
    token: str
    issued_at: int


@app.get("/healthz", tags=["Health"])
def healthz() -> dict[str, Any]:
    return {"ok": True, "timestamp": int(time.time())}


@app.get("/readyz", tags=["Health"])
async def readyz(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    return {"ready": bool(settings.FIREBASE_SECRET), "signing": "HS256"}


@app.post("/v1/tokens", response_model=TokenResponse, tags=["Tokens"])
async def create_token(
    request: Request,
    client: dict = Depends(get_current_client),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    if not settings.FIREBASE_SECRET:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Server misconfigured: FIREBASE_SECRET not set",
        )

    try:
        body = await request.json()
        req = TokenRequest.model_validate(body, context={"settings": settings})
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid token request: {e}") from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail="Malformed JSON body") from e

    issued_at = time.time()
    generator = FirebaseTokenGenerator(settings.FIREBASE_SECRET, clock=lambda: issued_at)
    for name, value in req.options.items():
        generator.set_option(name, value)
    for name, value in req.data.items():
        generator.set_data(name, value)

    try:
        token = generator.create_token()
    except TokenGenerationError as e:
        log.error(f"Token generation failed for client {client.get('id')}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Token generation failed") from e

    log.info(
        "Issued Firebase token client=%r data_keys=%d options=%r",
        client.get("id"),
        len(req.data),
        sorted(req.options),
    )
    return TokenResponse(token=token, issued_at=int(issued_at * 1000))
