from __future__ import annotations
import json
import logging
import os
from typing import List, Optional, Union

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from models import Routine, RoutineExercise

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "routineName": {
            "type": "STRING",
            "description": "Un nombre creativo y motivador para esta rutina de ejercicios.",
        },
        "days": {
            "type": "ARRAY",
            "description": "Un objeto por cada día de entrenamiento.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "dayName": {
                        "type": "STRING",
                        "description": "Nombre del día con los grupos musculares, p. ej. 'Día 1: Pecho y Tríceps'.",
                    },
                    "exercises": {
                        "type": "ARRAY",
                        "items": {
                            "type": "OBJECT",
                            "properties": {
                                "name": {"type": "STRING"},
                                "sets": {"type": "STRING"},
                                "reps": {"type": "STRING"},
                            },
                        },
                    },
                },
            },
        },
    },
    "required": ["routineName", "days"],
}


class GeneratedExercise(BaseModel):
    name: str = Field(min_length=1)
    sets: Optional[str] = None
    reps: Optional[str] = None


class GeneratedDay(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day_name: str = Field(alias="dayName", min_length=1)
    exercises: List[GeneratedExercise] = Field(default_factory=list)


class GeneratedPlan(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    routine_name: str = Field(alias="routineName", min_length=1)
    days: List[GeneratedDay] = Field(min_length=1)

    def to_routines(self) -> List[Routine]:
        return [
            Routine(
                name=day.day_name,
                exercises=[RoutineExercise(name=ex.name) for ex in day.exercises],
            )
            for day in self.days
        ]


class GenerationSuccess(BaseModel):
    ok: bool = True
    name: str
    routines: List[Routine]


class GenerationFailure(BaseModel):
    ok: bool = False
    reason: str


GenerationResult = Union[GenerationSuccess, GenerationFailure]


class RoutineGenerator:
    """Ask the Gemini API for a training plan split into routines."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gemini-2.5-flash",
        timeout: float = 60.0,
    ) -> None:
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
        self.model = model
        self.timeout = timeout

    @staticmethod
    def build_prompt(goal: str, level: str, days_per_week: int) -> str:
        return (
            "Genera un plan de entrenamiento de gimnasio en español.\n\n"
            "Mis detalles:\n"
            f"- Objetivo Principal: {goal}\n"
            f"- Nivel de Experiencia: {level}\n"
            f"- Días por semana: {days_per_week}\n\n"
            "Estructura la respuesta como un JSON que cumpla con el schema proporcionado. "
            "Crea una rutina distinta para cada día de entrenamiento. "
            "Los nombres de los ejercicios deben ser comunes y en español. "
            "El nombre general de la rutina debe ser inspirador."
        )

    def _request(self, prompt: str) -> dict:
        resp = requests.post(
            GEMINI_URL.format(model=self.model),
            params={"key": self.api_key},
            json={
                "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                "generationConfig": {
                    "responseMimeType": "application/json",
                    "responseSchema": RESPONSE_SCHEMA,
                },
            },
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    @staticmethod
    def parse_response(body: dict) -> GeneratedPlan:
        """Extract and validate the plan from a ``generateContent`` response.

        Raises ``ValueError`` when the body has no text candidate or the text
        does not match :class:`GeneratedPlan`.
        """
        try:
            text = body["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            raise ValueError("response contains no generated text")
        try:
            return GeneratedPlan.model_validate(json.loads(text.strip()))
        except json.JSONDecodeError as e:
            raise ValueError(f"generated text is not JSON: {e}")
        except ValidationError as e:
            raise ValueError(f"unexpected plan format: {e}")

    def generate(self, goal: str, level: str, days_per_week: int) -> GenerationResult:
        if not self.api_key:
            logger.warning("no Gemini API key configured; routine generation disabled")
            return GenerationFailure(reason="API key not configured")
        if days_per_week < 1:
            return GenerationFailure(reason="days_per_week must be at least 1")
        try:
            body = self._request(self.build_prompt(goal, level, days_per_week))
            plan = self.parse_response(body)
        except requests.RequestException as e:
            logger.error("routine generation request failed: %s", e)
            return GenerationFailure(reason=f"request failed: {e}")
        except ValueError as e:
            logger.error("routine generation returned an invalid plan: %s", e)
            return GenerationFailure(reason=str(e))
        routines = plan.to_routines()
        logger.info("generated plan %r with %d routines", plan.routine_name, len(routines))
        return GenerationSuccess(name=plan.routine_name, routines=routines)
