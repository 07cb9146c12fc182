from pydantic import BaseModel, Field, ValidationError

class SettingsSchema(BaseModel):
    weight_unit: str = "kg"
    language: str = "es"
    recent_pr_limit: int = Field(default=5, ge=0)
    min_chart_points: int = Field(default=2, ge=1)
    gemini_model: str = "gemini-2.5-flash"
    generation_timeout: float = Field(default=60.0, gt=0)
    gemini_api_key: str | bool = ""

def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
