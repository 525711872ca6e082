from dataclasses import dataclass


@dataclass
class AdapterError(Exception):
    message: str
    hint: str | None = None
    cause: Exception | None = None

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class FileSystemError(AdapterError):
    pass


class LockTimeoutError(AdapterError):
    pass
