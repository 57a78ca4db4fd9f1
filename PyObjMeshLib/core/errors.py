from typing import Optional


class ObjError(Exception):
    pass


class AllocationError(ObjError, MemoryError):
    pass


class FileAccessError(ObjError, OSError):
    def __init__(self, path, reason: str = ""):
        self.path = str(path)
        self.reason = reason
        msg = f"cannot access '{self.path}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class InvalidContextError(ObjError, RuntimeError):
    pass


class MalformedInputError(ObjError, ValueError):
    """Raised by the parser; carries the location of the offending line."""

    def __init__(self, message: str, source: str = "<stream>", lineno: Optional[int] = None, line: str = ""):
        self.message = message
        self.source = source
        self.lineno = lineno
        self.line = line
        if lineno is None:
            text = f"{source}: {message}"
        else:
            text = f"{source}:{lineno}: {message}"
        if line:
            text += f" [{line}]"
        super().__init__(text)


class MalformedDataError(ObjError, ValueError):
    pass


class OutOfRangeError(ObjError, IndexError):
    pass


class InvalidArgumentError(ObjError, ValueError):
    pass
