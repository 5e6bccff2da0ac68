import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Try to load .env from streamlit_app directory first, then fallback to project root
streamlit_app_env = PROJECT_ROOT / "streamlit_app" / ".env"
project_root_env = PROJECT_ROOT / ".env"


def load_env() -> Optional[Path]:
    """Load the first .env file found. Returns the path that was used, if any."""
    if streamlit_app_env.exists():
        load_dotenv(dotenv_path=streamlit_app_env)
        return streamlit_app_env
    if project_root_env.exists():
        load_dotenv(dotenv_path=project_root_env)
        return project_root_env
    # Fallback to default behavior
    load_dotenv()
    return None


class Settings(BaseModel):
    supabase_url: str
    supabase_anon_key: str

    app_name: str = "Heart Of Christ"

    # Where confirmation and password-reset emails send the member back to
    site_url: str = "http://localhost:8501"
    currency: str = "KES"
    session_ready_timeout: float = 5.0
    log_level: str = "INFO"


def get_settings() -> Settings:
    load_env()

    supabase_url = os.getenv("SUPABASE_URL")
    supabase_anon_key = os.getenv("SUPABASE_ANON_KEY")

    if not supabase_url or not supabase_anon_key:
        raise RuntimeError(
            f"Supabase environment variables not set. "
            f"SUPABASE_URL={'set' if supabase_url else 'missing'}, "
            f"SUPABASE_ANON_KEY={'set' if supabase_anon_key else 'missing'}. "
            f"Checked: {streamlit_app_env} and {project_root_env}"
        )

    return Settings(
        supabase_url=supabase_url,
        supabase_anon_key=supabase_anon_key,
        app_name=os.getenv("APP_NAME", "Heart Of Christ"),
        site_url=os.getenv("SITE_URL", "http://localhost:8501").rstrip("/"),
        currency=os.getenv("CURRENCY", "KES"),
        session_ready_timeout=float(os.getenv("SESSION_READY_TIMEOUT", "5")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    # basicConfig is a no-op once the root logger has handlers, so Streamlit reruns are safe
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
