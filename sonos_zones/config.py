from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "SONOS_"}

    api_host: str = "0.0.0.0"
    api_port: int = 5005
    discovery_interval: int = 30
    discovery_timeout: int = 5
    log_level: str = "INFO"
    log_json: bool = False

    # Volume every room is set to after a group is formed
    group_baseline_volume: int = 10
    command_retries: int = 1
    command_retry_delay: float = 1.0
    queue_limit: int = 500

    # Room driven by the /music shortcut routes
    music_coordinator: str = "Living Room"


settings = Settings()
