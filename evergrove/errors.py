class EvergroveError(Exception):
    pass


class ConfigurationError(EvergroveError, ValueError):
    option: str
    value: object

    def __init__(self, option: str, value: object, reason: str) -> None:
        super().__init__(option, value, reason)
        self.option = option
        self.value = value
        self.reason = reason

    def __str__(self) -> str:
        return f'Invalid {self.option} ({self.value!r}): {self.reason}'
