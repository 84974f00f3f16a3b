# settings.py
import os
from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv(override=True)

class Settings(BaseModel):
    HOST: str = os.getenv("HOST", "0.0.0.0")
    # the second instance runs with PORT=3002
    PORT: int = int(os.getenv("PORT", "3001"))
    BASE_PATH: str = os.getenv("BASE_PATH", "")
    CORS_ALLOW_ORIGINS: str = os.getenv("CORS_ALLOW_ORIGINS", "*")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    INSTANCE_NAME: str = os.getenv("INSTANCE_NAME", "chat-api")
    # client knobs
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:3001")
    POLL_INTERVAL: float = float(os.getenv("POLL_INTERVAL", "3.0"))

    @property
    def route_prefix(self) -> str:
        path = self.BASE_PATH.strip("/")
        return f"/{path}" if path else ""

    @property
    def cors_origins(self) -> list:
        return [o.strip() for o in self.CORS_ALLOW_ORIGINS.split(",") if o.strip()]
