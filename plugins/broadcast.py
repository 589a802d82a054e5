"""
plugins/broadcast.py
Cross-plugin broadcast of named events.

Plugins mark methods with @broadcast_handler(name, *param_types). When a plugin
is loaded the PluginManager registers those methods here; any component can then
call `dispatcher.broadcast(name, *args)` and every loaded plugin that declares a
compatible handler is invoked, without the caller importing that plugin.

A handler is compatible when it has the same number of parameters as there are
arguments and each argument is accepted by the declared parameter: an instance
of its type, or None when the parameter is nullable. Each plugin runs only its
first compatible handler, in the order the methods are declared in its class.
Plugins without a matching handler are skipped.
"""
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple, Union

from engine.utils.logger import Logger

# Parameters of these types cannot receive None unless declared with Nullable().
VALUE_TYPES: Tuple[type, ...] = (bool, int, float, complex)


class Param(NamedTuple):
    type: type
    nullable: bool

    def accepts(self, arg: Any) -> bool:
        if arg is None:
            return self.nullable
        return isinstance(arg, self.type)


def Nullable(param_type: type) -> Param:
    """Declares a parameter that also accepts None, even for value types."""
    return Param(param_type, True)


ParamDescriptor = Union[type, Param]


def to_param(descriptor: ParamDescriptor) -> Param:
    if isinstance(descriptor, Param):
        return descriptor
    if not isinstance(descriptor, type):
        raise TypeError(f"Parameter descriptor must be a type or Param, got {descriptor!r}")
    return Param(descriptor, not issubclass(descriptor, VALUE_TYPES))


def broadcast_handler(name: str, *param_types: ParamDescriptor):
    """
    Decorator marking a plugin method as the receiver of broadcast `name`.

    Works on instance methods and on static methods (either decorator order).
    """
    params = tuple(to_param(p) for p in param_types)

    def decorator(func):
        target = func.__func__ if isinstance(func, (staticmethod, classmethod)) else func
        target._broadcast_info = {"name": name, "params": params}  # type: ignore[attr-defined]
        return func
    return decorator


class HandlerEntry:
    def __init__(self, owner_id: str, name: str, handler: Callable, params: Sequence[Param]):
        self.owner_id = owner_id
        self.name = name
        self.handler = handler
        self.params: Tuple[Param, ...] = tuple(params)

    def matches(self, name: str, args: Sequence[Any]) -> bool:
        if self.name != name or len(self.params) != len(args):
            return False
        return all(param.accepts(arg) for param, arg in zip(self.params, args))

    @property
    def target(self) -> str:
        handler_name = getattr(self.handler, "__qualname__", getattr(self.handler, "__name__", repr(self.handler)))
        return f"{self.owner_id}:{handler_name}"


class EventDispatcher:
    def __init__(self):
        # owner id -> handlers, both in registration (plugin load) order
        self._handlers: Dict[str, List[HandlerEntry]] = {}

    def register(self, owner_id: str, name: str, handler: Callable,
                 param_types: Sequence[ParamDescriptor] = ()) -> HandlerEntry:
        if not callable(handler):
            raise TypeError(f"Broadcast handler for '{name}' on '{owner_id}' is not callable")
        entry = HandlerEntry(owner_id, name, handler, [to_param(p) for p in param_types])
        self._handlers.setdefault(owner_id, []).append(entry)
        return entry

    def register_owner(self, owner_id: str, owner: Any) -> int:
        """
        Registers every @broadcast_handler method of `owner`, in declaration order
        (subclass before base). Returns the count registered.
        """
        count = 0
        seen = set()
        for klass in type(owner).__mro__:
            for attr_name, member in vars(klass).items():
                if attr_name in seen:
                    continue
                seen.add(attr_name)
                func = member.__func__ if isinstance(member, (staticmethod, classmethod)) else member
                info = getattr(func, "_broadcast_info", None)
                if not info:
                    continue
                handler = getattr(owner, attr_name)
                self.register(owner_id, info["name"], handler, info["params"])
                count += 1
        return count

    def unregister_owner(self, owner_id: str) -> int:
        return len(self._handlers.pop(owner_id, []))

    def find_handler(self, owner_id: str, name: str, args: Sequence[Any]) -> Optional[HandlerEntry]:
        for entry in self._handlers.get(owner_id, []):
            if entry.matches(name, args):
                return entry
        return None

    def broadcast(self, name: str, *args: Any) -> List[str]:
        """
        Invokes the first compatible `name` handler of every registered owner.

        Returns:
            The targets that were invoked, in dispatch order. A handler that
            raises is logged and left out; the broadcast carries on.
        """
        invoked: List[str] = []
        for owner_id in list(self._handlers):
            entry = self.find_handler(owner_id, name, args)
            if entry is None:
                continue
            Logger.debug("Broadcast", f"Calling {name} on plugin {entry.target}")
            try:
                entry.handler(*args)
            except Exception as e:
                Logger.exception("Broadcast", f"Handler {entry.target} failed for {name}", e)
                continue
            invoked.append(entry.target)
        return invoked
