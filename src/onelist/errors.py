"""Exception types raised by onelist.

Every failure the tool can report derives from OneListError, so the
interactive loops can print the message and carry on.
"""


class OneListError(Exception):
    """Base class for all onelist failures."""


class ConfigError(OneListError):
    """The configuration file exists but cannot be used."""


class NotConfiguredError(OneListError):
    def __init__(self) -> None:
        super().__init__("No task folder configured")


class DirectoryUnreadableError(OneListError):
    def __init__(self, directory: str, reason: str = "") -> None:
        self.directory = directory
        msg = f"Cannot read folder {directory}"
        super().__init__(f"{msg}: {reason}" if reason else msg)


class NoListsFoundError(OneListError):
    def __init__(self, directory: str = "") -> None:
        self.directory = directory
        super().__init__("No .1list files found")


class ListReadError(OneListError):
    """The list file is missing or cannot be read."""


class MalformedListError(OneListError):
    """The list file does not hold a valid task list."""


class ListWriteError(OneListError):
    """Saving or creating a list file failed."""


class ListRemoveError(OneListError):
    """Deleting a list file failed."""


class EmptyNameError(OneListError):
    def __init__(self) -> None:
        super().__init__("List name cannot be empty")


class EmptyTitleError(OneListError):
    def __init__(self) -> None:
        super().__init__("Task title cannot be empty")


class IndexOutOfRangeError(OneListError):
    def __init__(self, index: int, count: int) -> None:
        self.index = index
        self.count = count
        if count:
            msg = f"Invalid task number {index}. Use 1-{count}"
        else:
            msg = f"Invalid task number {index}. The list is empty"
        super().__init__(msg)


class InvalidSelectionError(OneListError):
    def __init__(self, text: str = "") -> None:
        self.text = text
        super().__init__("Invalid selection")


class TaskAlreadyDoneError(OneListError):
    def __init__(self, title: str) -> None:
        self.title = title
        super().__init__(f"Task already done: {title}")


class InputClosedError(OneListError):
    def __init__(self) -> None:
        super().__init__("Input closed")
