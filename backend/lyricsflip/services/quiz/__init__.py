"""Quiz domain services: session store, round orchestration, lyric source.

This package contains the game logic that HTTP routes and socket handlers
call into, keeping transport concerns separated from the round state
machine and its countdown.
"""
