from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	# Hosted LLM (OpenAI-compatible chat completions endpoint)
	deepseek_api_key: str | None = Field(default=None, validation_alias="DEEPSEEK_API_KEY")
	deepseek_base_url: str = Field(default="https://api.deepseek.com/v1", validation_alias="DEEPSEEK_BASE_URL")
	deepseek_model: str = Field(default="deepseek-chat", validation_alias="DEEPSEEK_MODEL")
	llm_timeout_seconds: float = Field(default=30.0, validation_alias="LLM_TIMEOUT_SECONDS")
	llm_max_tokens: int = Field(default=4000, validation_alias="LLM_MAX_TOKENS")
	llm_temperature: float = Field(default=0.7, validation_alias="LLM_TEMPERATURE")

	# Uploaded material is clipped before it goes into a prompt
	assessment_char_limit: int = Field(default=50000, validation_alias="ASSESSMENT_CHAR_LIMIT")
	lesson_plan_char_limit: int = Field(default=25000, validation_alias="LESSON_PLAN_CHAR_LIMIT")

	# Largest intervention text accepted by the formatting endpoints
	max_content_chars: int = Field(default=200000, validation_alias="MAX_CONTENT_CHARS")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# uvicorn bind address for `python -m concern2care`
	host: str = Field(default="127.0.0.1", validation_alias="HOST")
	port: int = Field(default=8000, validation_alias="PORT")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
