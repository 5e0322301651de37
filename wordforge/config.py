import os


class Config:
    # Word list, one word per line. Built-in words are used when unset.
    WORDLIST_PATH = os.environ.get('WORDLIST_PATH')
    WORD_MIN_LENGTH = int(os.environ.get('WORD_MIN_LENGTH', '3'))
    WORD_MAX_LENGTH = int(os.environ.get('WORD_MAX_LENGTH', '5'))
    # Room defaults
    DEFAULT_ROUND_DURATION_MS = int(os.environ.get('DEFAULT_ROUND_DURATION_MS', '60000'))
    DEFAULT_BOARD_SIZE = int(os.environ.get('DEFAULT_BOARD_SIZE', '4'))
    # Extra wait past the round duration before round_end is announced (ms)
    ROUND_END_GRACE_MS = int(os.environ.get('ROUND_END_GRACE_MS', '50'))
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '8000'))
