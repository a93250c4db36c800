import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Rooms
    ROOM_CAPACITY = int(os.environ.get("ROOM_CAPACITY", "10"))
    MIN_PLAYERS = int(os.environ.get("MIN_PLAYERS", "2"))
    MAX_NAME_LENGTH = int(os.environ.get("MAX_NAME_LENGTH", "16"))

    # Game
    MAX_ROUNDS = int(os.environ.get("MAX_ROUNDS", "6"))
    ROUND_DURATION_SEC = int(os.environ.get("ROUND_DURATION_SEC", "80"))
    WORD_CHOICES_COUNT = int(os.environ.get("WORD_CHOICES_COUNT", "3"))
    CHOOSE_DURATION_SEC = int(os.environ.get("CHOOSE_DURATION_SEC", "15"))

    # Delays between phases (seconds)
    START_DELAY_SEC = float(os.environ.get("START_DELAY_SEC", "3"))
    ALL_GUESSED_DELAY_SEC = float(os.environ.get("ALL_GUESSED_DELAY_SEC", "2"))
    NEXT_ROUND_DELAY_SEC = float(os.environ.get("NEXT_ROUND_DELAY_SEC", "4"))
    REVEAL_DELAY_SEC = float(os.environ.get("REVEAL_DELAY_SEC", "5"))
    DRAWER_LEFT_DELAY_SEC = float(os.environ.get("DRAWER_LEFT_DELAY_SEC", "3"))

    # Scoring
    MIN_POINTS = int(os.environ.get("MIN_POINTS", "20"))
    MAX_POINTS = int(os.environ.get("MAX_POINTS", "100"))
    NEAR_MISS_MIN_LENGTH = int(os.environ.get("NEAR_MISS_MIN_LENGTH", "3"))
