# storefront_e2e/core/profile_loader.py
from __future__ import annotations

"""Gateway profile schema and loader
------------------------------------
Pydantic models describing the payment gateway under test (id, supported
features, card and token fixtures) and a YAML loader with multi-document
files and ${ENV} substitution.
"""

from datetime import date
from pathlib import Path
from typing import Optional
import os
import re

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator


# ---------- Defaults ----------


def _next_year_expiry() -> str:
    return f"12/{(date.today().year + 1) % 100:02d}"


def default_credit_cards() -> dict[str, "CardData"]:
    expiry = _next_year_expiry()
    return {
        "visa": CardData(number="4111111111111111", expiry=expiry, cvv="123"),
        "mastercard": CardData(number="5100000010001004", expiry=expiry, cvv="123"),
    }


def default_payment_tokens() -> dict[str, "PaymentTokenData"]:
    expiry = _next_year_expiry()
    rows = [
        ("4421912014039990", "visa", "9990"),
        ("4421912014039991", "visa", "9991"),
        ("4263971921001307", "visa", "1307"),
        ("5425232820001308", "master", "1308"),
    ]
    return {
        token: PaymentTokenData(token=token, card_type=card_type, last_four=last_four, expiry=expiry)
        for token, card_type, last_four in rows
    }


# ---------- Models ----------


class CardData(BaseModel):
    number: str
    expiry: str = Field(..., description="MM/YY")
    cvv: str = "123"

    @field_validator("expiry")
    @classmethod
    def _mm_yy(cls, v: str) -> str:
        v = v.strip()
        if not re.fullmatch(r"\d{2}/\d{2}", v):
            raise ValueError("expiry must look like MM/YY")
        return v


class PaymentTokenData(BaseModel):
    token: str
    card_type: str
    last_four: str
    expiry: str

    @field_validator("last_four")
    @classmethod
    def _four_digits(cls, v: str) -> str:
        if not re.fullmatch(r"\d{4}", v):
            raise ValueError("last_four must be 4 digits")
        return v


class GatewayProfile(BaseModel):
    id: str = Field(..., description="Gateway ID, e.g. 'acme_credit_card'")
    title: Optional[str] = None
    supports_add_payment_method: bool = True
    supports_token_editor: bool = True
    # adding tokens in the admin editor is disabled when tokens are refreshed from the API
    supports_tokenized_payment_methods_api: bool = False
    supports_customer_id: bool = False
    customer_id_meta_key: Optional[str] = Field(default=None, description="usermeta key holding the gateway customer ID")
    credit_cards: dict[str, CardData] = Field(default_factory=default_credit_cards)
    payment_tokens: dict[str, PaymentTokenData] = Field(default_factory=default_payment_tokens)

    @field_validator("id")
    @classmethod
    def _id_non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("id cannot be empty")
        return v

    @field_validator("credit_cards", "payment_tokens")
    @classmethod
    def _non_empty_map(cls, v: dict) -> dict:
        if not v:
            raise ValueError("at least one entry is required")
        return v

    @property
    def id_dasherized(self) -> str:
        return self.id.replace("_", "-")


# ---------- Public API ----------


def _subst_env(obj):
    if isinstance(obj, str):
        def repl(m):
            key = m.group(1)
            return os.environ.get(key, m.group(0))
        return re.sub(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}", repl, obj)
    if isinstance(obj, list):
        return [_subst_env(x) for x in obj]
    if isinstance(obj, dict):
        return {k: _subst_env(v) for k, v in obj.items()}
    return obj


def load_profiles(path: Path | str) -> list[GatewayProfile]:
    """Load one or more gateway profiles from a YAML file (supports multi-document)."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Profile file not found: {p}")
    try:
        docs = list(yaml.safe_load_all(p.read_text(encoding="utf-8")))
    except yaml.YAMLError as ye:
        raise ValueError(f"YAML parse error in {p}: {ye}") from ye

    out: list[GatewayProfile] = []
    for idx, data in enumerate(docs, start=1):
        if data is None:
            continue
        if not isinstance(data, dict):
            raise ValueError(f"Document {idx} in {p} must be a mapping/object.")
        try:
            out.append(GatewayProfile.model_validate(_subst_env(data)))
        except ValidationError as ve:
            lines = [f"Invalid gateway profile '{p}' (document {idx}):"]
            for e in ve.errors():
                loc = ".".join(str(part) for part in e.get("loc", []))
                msg = e.get("msg", "invalid value")
                lines.append(f"  - {loc}: {msg}")
            raise ValueError("\n".join(lines)) from ve
    if not out:
        raise ValueError(f"No gateway profiles found in {p}")
    return out


def load_profile(path: Path | str, gateway_id: Optional[str] = None) -> GatewayProfile:
    """Load a single profile; `gateway_id` picks one out of a multi-document file."""
    profiles = load_profiles(path)
    if gateway_id is None:
        if len(profiles) > 1:
            raise ValueError(f"{path} holds {len(profiles)} profiles; pass gateway_id")
        return profiles[0]
    for prof in profiles:
        if prof.id == gateway_id:
            return prof
    raise KeyError(f"No profile with id {gateway_id!r} in {path}")


def find_profile_files(root: Path, recursive: bool = True) -> list[Path]:
    if recursive:
        return sorted(list(root.rglob("*.yaml")) + list(root.rglob("*.yml")))
    return sorted(list(root.glob("*.yaml")) + list(root.glob("*.yml")))


__all__ = [
    "CardData",
    "PaymentTokenData",
    "GatewayProfile",
    "load_profiles",
    "load_profile",
    "find_profile_files",
]
