import datetime

from models import parse_timestamp


class Translator:
    def __init__(self) -> None:
        self.language = "es"
        self.translations = {
            "en": {},
            "es": {
                "Just now": "Justo ahora",
                "{n} min ago": "Hace {n} min",
                "1 hour ago": "Hace 1 hora",
                "{n} hours ago": "Hace {n} horas",
                "Yesterday": "Ayer",
                "{n} days ago": "Hace {n} días",
                "Recent Records": "Logros Recientes",
                "Previous": "Anterior",
            },
        }

    def set_language(self, lang: str) -> None:
        self.language = lang

    def gettext(self, key: str) -> str:
        return self.translations.get(self.language, {}).get(key, key)

    def format_time_ago(
        self, date: str, now: datetime.datetime | None = None
    ) -> str:
        """Describe how long ago ``date`` was; older than a week gives the day."""
        then = parse_timestamp(date)
        now = now or datetime.datetime.now(datetime.timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=datetime.timezone.utc)
        seconds = int((now - then).total_seconds())
        if seconds < 60:
            return self.gettext("Just now")
        if seconds < 3600:
            return self.gettext("{n} min ago").format(n=seconds // 60)
        if seconds < 86400:
            hours = seconds // 3600
            if hours == 1:
                return self.gettext("1 hour ago")
            return self.gettext("{n} hours ago").format(n=hours)
        if seconds < 172800:
            return self.gettext("Yesterday")
        days = seconds // 86400
        if days < 7:
            return self.gettext("{n} days ago").format(n=days)
        return then.date().isoformat()

translator = Translator()
