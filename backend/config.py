import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Session shape shared by every game mode
    QUIZ_MAX_ROUNDS = int(os.environ.get('QUIZ_MAX_ROUNDS', '10'))
    QUIZ_PASSING_SCORE = int(os.environ.get('QUIZ_PASSING_SCORE', '6'))
    # 'session' counts down the whole game, 'round' restarts the clock every round
    QUIZ_TIMER_SCOPE = os.environ.get('QUIZ_TIMER_SCOPE', 'session')
    # Quick game defaults (home screen shortcut)
    QUICK_GAME_GENRE = os.environ.get('QUICK_GAME_GENRE', 'Pop')
    QUICK_GAME_DIFFICULTY = os.environ.get('QUICK_GAME_DIFFICULTY', 'Easy')
    QUICK_GAME_DURATION = os.environ.get('QUICK_GAME_DURATION', '5 mins')
    QUICK_GAME_ODDS = float(os.environ.get('QUICK_GAME_ODDS', '1'))
    QUICK_GAME_WAGER = float(os.environ.get('QUICK_GAME_WAGER', '0'))
    # Reveal -> flip -> next round pacing (seconds)
    REVEAL_DWELL_SEC = float(os.environ.get('REVEAL_DWELL_SEC', '1.5'))
    FLIP_DURATION_SEC = float(os.environ.get('FLIP_DURATION_SEC', '0.6'))
    # Countdown
    TIMER_ENABLED = os.environ.get('TIMER_ENABLED', '1') not in ('0', 'false', 'False')
    TICK_INTERVAL_SEC = float(os.environ.get('TICK_INTERVAL_SEC', '1'))
    # Lyric provider
    PROVIDER_RETRIES = int(os.environ.get('PROVIDER_RETRIES', '1'))
    PROVIDER_SEED = os.environ.get('PROVIDER_SEED')
    OPTION_COUNTS = {'Easy': 3, 'Medium': 4, 'Hard': 5}
    # Games untouched for this long are dropped on the next create (0 keeps them)
    GAME_IDLE_TTL_SEC = float(os.environ.get('GAME_IDLE_TTL_SEC', '1800'))
