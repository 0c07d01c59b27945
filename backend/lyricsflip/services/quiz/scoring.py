def is_win(score: int, passing_score: int) -> bool:
    """A finished session is won when the score reaches the configured pass mark."""
    return score >= passing_score


def pot_win(wager_amount: float, odds: float) -> float:
    """Potential payout shown next to the score while a session runs."""
    return round(wager_amount * odds, 2)
