from goesctl.progress.events.bus import EventBus, emit_event, get_bus

__all__ = ["EventBus", "emit_event", "get_bus"]
