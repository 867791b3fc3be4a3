from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreAdapter(Enum):
    MONGO = "mongo"
    MEMORY = "memory"


class MongoConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MONGO_", env_file=".env", extra="ignore")

    uri: str = "mongodb://localhost:27017"
    hospital_database: str = "hospitaldb"
    users_database: str = "userdb"
    connect_timeout: float = 10.0
    request_timeout: float = 5.0


class ServerConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SERVER_", env_file=".env", extra="ignore")

    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    store_adapter: StoreAdapter = StoreAdapter.MONGO
    mongo: MongoConfig = Field(default_factory=lambda: MongoConfig())
    server: ServerConfig = Field(default_factory=lambda: ServerConfig())
