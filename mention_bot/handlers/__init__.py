from .mention_handler import MentionDispatcher, make_event_listener, register_handlers

__all__ = ["MentionDispatcher", "make_event_listener", "register_handlers"]
