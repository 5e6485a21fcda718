from hirelane.auth.session import Session, SessionProvider, get_session

__all__ = ["Session", "SessionProvider", "get_session"]
