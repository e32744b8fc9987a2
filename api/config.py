"""
API Settings
============
Cấu hình cho API, đọc từ environment variables (prefix HPASIM_) hoặc .env.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "HPA Queue Simulator API"
    LOG_LEVEL: str = "INFO"

    # Giới hạn để mỗi request có bộ nhớ bị chặn trên
    MAX_SIMULATION_SECONDS: int = Field(86400, description="simulationSeconds tối đa cho một request")
    MAX_SENSITIVITY_VALUES: int = Field(50, description="Số giá trị tối đa cho một sensitivity sweep")

    class Config:
        env_prefix = 'HPASIM_'
        env_file = '.env'
        env_file_encoding = 'utf-8'
        extra = 'ignore'


settings = Settings()
