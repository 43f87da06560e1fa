"""
Session bookkeeping for the Classroom Bot.
Keeps one session row per Telegram user with its thread and chat.
"""
from datetime import datetime, timedelta
from typing import Dict, Any
from sqlalchemy.orm import Session

from database import UserSession

SESSION_TTL = timedelta(days=30)


def record_session(
    db: Session,
    telegram_user_id: int,
    thread_id: str,
    chat_id: int
) -> Dict[str, Any]:
    """
    Create or refresh the session row for a Telegram user.

    Returns:
        The stored session data
    """
    now = datetime.now()
    session = (
        db.query(UserSession)
        .filter(UserSession.telegram_user_id == telegram_user_id)
        .order_by(UserSession.id.desc())
        .first()
    )
    if session is None:
        session = UserSession(telegram_user_id=telegram_user_id)
        db.add(session)

    session.session_data = {
        "thread_id": thread_id,
        "chat_id": chat_id,
        "last_message_at": now.isoformat(),
    }
    session.expires_at = now + SESSION_TTL
    db.commit()

    return dict(session.session_data)
