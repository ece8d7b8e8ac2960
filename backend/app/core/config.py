from typing import List, Union
from pydantic import validator
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # CORS
    BACKEND_CORS_ORIGINS: Union[List[str], str] = ["*"]

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Meshy image-to-3D
    MESHY_API_KEY: str = ""
    MESHY_BASE_URL: str = "https://api.meshy.ai/openapi/v1"

    # FASHN virtual try-on
    FASHN_API_KEY: str = ""
    FASHN_BASE_URL: str = "https://api.fashn.ai/v1"
    FASHN_MODEL_NAME: str = "tryon-v1.6"

    # Relay behaviour
    POLL_INTERVAL_SECONDS: float = 2.0
    UPSTREAM_TIMEOUT: float = 30.0
    DOWNLOAD_TIMEOUT: float = 60.0
    MAX_UPLOAD_SIZE_MB: int = 25

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    def missing_credentials(self) -> List[str]:
        """Names of required provider keys that are not set"""
        missing = []
        if not self.MESHY_API_KEY:
            missing.append("MESHY_API_KEY")
        if not self.FASHN_API_KEY:
            missing.append("FASHN_API_KEY")
        return missing


def get_settings() -> Settings:
    return Settings()
