from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    api_base_url: str = "http://localhost:8000/api"
    timeout_seconds: float = 30.0
    cache_dir: str = ".homehni"

    class Config:
        env_prefix = "HOMEHNI_"
        env_file = ".env"
        extra = "ignore"


client_settings = ClientSettings()
