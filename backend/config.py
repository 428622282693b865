import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma-separated list, or '*' for any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    PORT = int(os.environ.get('PORT', '3001'))
    # Emptied rooms are kept this long before removal (seconds)
    ROOM_DELETION_GRACE_SEC = float(os.environ.get('ROOM_DELETION_GRACE_SEC', '300'))
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '3'))
    # Special-role counts a new room starts with
    DEFAULT_MR_WHITE_COUNT = int(os.environ.get('DEFAULT_MR_WHITE_COUNT', '1'))
    DEFAULT_UNDERCOVER_COUNT = int(os.environ.get('DEFAULT_UNDERCOVER_COUNT', '1'))
    # Hide other players' roles and words in broadcasts until the game is over
    REDACT_SECRETS = os.environ.get('REDACT_SECRETS', '0') == '1'
    # Tell the caller when an action is dropped. Off keeps the silent contract.
    REPORT_REJECTED_ACTIONS = os.environ.get('REPORT_REJECTED_ACTIONS', '0') == '1'
