from reviewbot.app.session.controller import Registrar, SessionController, SessionListener

__all__ = ["Registrar", "SessionController", "SessionListener"]
