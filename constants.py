EXERCISE_LIST = sorted(
    [
        # Chest
        "Press de Banca con Barra",
        "Press de Banca con Mancuernas",
        "Press Inclinado con Barra",
        "Press Inclinado con Mancuernas",
        "Aperturas con Mancuernas",
        "Flexiones",
        "Fondos en Paralelas",
        "Cruce de Poleas",
        # Back
        "Dominadas",
        "Jalón al Pecho",
        "Remo con Barra",
        "Remo con Mancuerna",
        "Remo en Punta (T-Bar)",
        "Peso Muerto",
        "Face Pulls",
        # Legs
        "Sentadillas",
        "Prensa de Piernas",
        "Zancadas",
        "Extensiones de Cuádriceps",
        "Curl Femoral",
        "Elevación de Talones",
        "Peso Muerto Rumano",
        # Shoulders
        "Press Militar con Barra",
        "Press de Hombros con Mancuernas",
        "Elevaciones Laterales",
        "Elevaciones Frontales",
        "Pájaro (Bent-Over Dumbbell Raise)",
        "Encogimientos de Hombros",
        # Arms
        "Curl de Bíceps con Barra",
        "Curl de Bíceps con Mancuernas",
        "Curl Martillo",
        "Press Francés",
        "Extensiones de Tríceps en Polea",
        "Fondos de Tríceps",
        # Core
        "Plancha",
        "Crunches",
        "Elevaciones de Piernas",
        "Russian Twists",
    ]
)

DATASETS = (
    "workouts",
    "routines",
    "body_metrics",
    "cardio_sessions",
    "custom_exercises",
)


def all_exercise_names(custom: list[str]) -> list[str]:
    """Return built-in and custom exercise names, de-duplicated and sorted."""
    return sorted(set(EXERCISE_LIST) | set(custom))
