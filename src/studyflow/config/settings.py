from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    db_path: str = os.getenv("STUDYFLOW_DB_PATH", "data/studyflow.db")

    username: str = os.getenv("STUDYFLOW_USERNAME", "admin")
    password: str = os.getenv("STUDYFLOW_PASSWORD", "admin")

    pass_threshold: float = _float_env("STUDYFLOW_PASS_THRESHOLD", 6.0)

    user_key: str = os.getenv("STUDYFLOW_USER_KEY", "studyflow_user")
    subjects_key: str = os.getenv("STUDYFLOW_SUBJECTS_KEY", "studyflow_subjects")
    tasks_key: str = os.getenv("STUDYFLOW_TASKS_KEY", "studyflow_tasks")

    log_level: str = os.getenv("STUDYFLOW_LOG_LEVEL", "INFO")
    log_file: str = os.getenv("STUDYFLOW_LOG_FILE", "")

    web_mode: bool = os.getenv("STUDYFLOW_WEB", "0") == "1"
    port: int = int(os.getenv("PORT", "8550"))


settings = Settings()
