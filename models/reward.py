"""
Loyalty reward ledger.
Confirmation of a reservation grants XP and tokens once per reservation.
"""

from database import get_db


def grant_confirmation_reward(cursor, user_id: str, reservation_id: int, xp: int, tokens: int) -> int:
    """
    Record the confirmation reward inside the caller's transaction.

    The reservation_id column is unique, so a second grant for the same
    reservation fails the transaction.

    Returns:
        int: Ledger row ID
    """
    cursor.execute('''
        INSERT INTO reward_ledger (user_id, reservation_id, xp, tokens, reason)
        VALUES (?, ?, ?, ?, 'RESERVATION_CONFIRMED')
    ''', (user_id, reservation_id, xp, tokens))
    return cursor.lastrowid


def get_user_reward_totals(user_id: str) -> dict:
    """
    Get a user's accumulated rewards.

    Returns:
        dict: {'xp': int, 'tokens': int}
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT COALESCE(SUM(xp), 0) AS xp, COALESCE(SUM(tokens), 0) AS tokens
        FROM reward_ledger
        WHERE user_id = ?
    ''', (user_id,))
    row = cursor.fetchone()
    return {'xp': row['xp'], 'tokens': row['tokens']}
