"""
AI Settings Models for Configuration Management
"""
import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()

DEFAULT_SYSTEM_INSTRUCTION = (
    "You are an expert HR recruiter. Analyze resumes carefully and provide structured JSON output."
)


class CompletionOptions(BaseModel):
    """Decoding parameters sent with every completion call"""
    model: str = Field(default="grok-3", description="Provider model id")
    max_output_tokens: int = Field(default=3000, ge=1, description="Maximum tokens to generate")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Generation temperature")
    system_instruction: str = Field(default=DEFAULT_SYSTEM_INSTRUCTION, description="System prompt")


class LLMSettings(BaseModel):
    """LLM Configuration Settings"""
    api_key: Optional[str] = Field(default=None, repr=False, description="Provider credential")
    base_url: str = Field(default="https://api.x.ai/v1", description="Provider API base URL")
    model_name: str = Field(default="grok-3", description="LLM model name")
    max_output_tokens: int = Field(default=3000, ge=1, le=32000, description="Maximum tokens to generate")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Generation temperature")
    timeout: float = Field(default=30.0, gt=0, le=300, description="Hard ceiling for the completion call in seconds")
    system_instruction: str = Field(default=DEFAULT_SYSTEM_INSTRUCTION)

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    @classmethod
    def from_env(cls) -> "LLMSettings":
        return cls(
            api_key=(os.getenv("XAI_API_KEY") or "").strip() or None,
            base_url=os.getenv("XAI_BASE_URL", "https://api.x.ai/v1"),
            model_name=os.getenv("LLM_MODEL", "grok-3"),
            max_output_tokens=int(os.getenv("LLM_MAX_OUTPUT_TOKENS", "3000")),
            temperature=float(os.getenv("LLM_TEMPERATURE", "0.7")),
            timeout=float(os.getenv("LLM_TIMEOUT", "30")),
        )

    def completion_options(self) -> CompletionOptions:
        return CompletionOptions(
            model=self.model_name,
            max_output_tokens=self.max_output_tokens,
            temperature=self.temperature,
            system_instruction=self.system_instruction,
        )


@lru_cache
def get_llm_settings() -> LLMSettings:
    """Process-wide settings, read once at first use."""
    return LLMSettings.from_env()
