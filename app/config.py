from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import streamlit as st
from streamlit.errors import StreamlitSecretNotFoundError

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()


@dataclass(frozen=True)
class AppConfig:
    currency: str = "USD"
    locale: str = "en_US"
    user_id: str = "demo"
    seed_path: str = str(_PROJECT_ROOT / "data" / "seed.json")
    extended_categories: bool = False


def load_config() -> AppConfig:
    """Load configuration from Streamlit secrets, then environment overrides.

    A missing `.streamlit/secrets.toml` falls back to defaults.
    """
    try:
        secrets: dict = dict(st.secrets)
    except (FileNotFoundError, StreamlitSecretNotFoundError):
        secrets = {}

    app_section = secrets.get("app", {})
    defaults = AppConfig()

    return AppConfig(
        currency=os.getenv("BUDGET_CURRENCY", app_section.get("currency", defaults.currency)),
        locale=app_section.get("locale", defaults.locale),
        user_id=os.getenv("BUDGET_USER_ID", app_section.get("user_id", defaults.user_id)),
        seed_path=os.getenv("BUDGET_SEED_PATH", app_section.get("seed_path", defaults.seed_path)),
        extended_categories=bool(app_section.get("extended_categories", defaults.extended_categories)),
    )
