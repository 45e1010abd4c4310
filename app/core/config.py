import os
from dotenv import load_dotenv
from urllib.parse import quote_plus

load_dotenv()

class Settings:
    # Environment setting
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

    # Clerk Configuration
    CLERK_SECRET_KEY = os.getenv("CLERK_SECRET_KEY")
    CLERK_WEBHOOK_SECRET = os.getenv("CLERK_WEBHOOK_SECRET")

    # db creds (DATABASE_URL wins when set)
    DB_URL_OVERRIDE = os.getenv("DATABASE_URL")
    DB_HOST = os.getenv("DB_HOST", "localhost")
    DB_USER = os.getenv("DB_USER", "postgres")
    DB_PASSWORD = os.getenv("DB_PASSWORD", "")
    DB_NAME = os.getenv("DB_NAME", "sprite")
    DB_PORT = os.getenv("DB_PORT", "5432")

    # Onboarding
    HOME_PATH = os.getenv("HOME_PATH", "/home")
    SKILL_QUIZ_TOPIC = os.getenv("SKILL_QUIZ_TOPIC", "Skill Assessment")
    SKILL_QUIZ_QUESTION_LIMIT = int(os.getenv("SKILL_QUIZ_QUESTION_LIMIT", "5"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    LOG_DIR = os.getenv("LOG_DIR", "logs")

    def _build_database_url(self):
        if self.DB_URL_OVERRIDE:
            return self.DB_URL_OVERRIDE
        return f"postgresql+asyncpg://{self.DB_USER}:{quote_plus(self.DB_PASSWORD)}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def DATABASE_URL(self):
        return self._build_database_url()

    @property
    def IS_DEVELOPMENT(self):
        return self.ENVIRONMENT == "development"

settings = Settings()
