from pydantic import PrivateAttr
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Underwriting Decision Engine"
    debug: bool = False
    log_level: str = "INFO"

    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    _allowed_origins: list[str] = PrivateAttr(default_factory=list)

    def model_post_init(self, __context: object) -> None:
        origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        object.__setattr__(self, "_allowed_origins", origins)

    @property
    def allowed_origins(self) -> list[str]:
        return self._allowed_origins

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level.upper()


settings = Settings()
