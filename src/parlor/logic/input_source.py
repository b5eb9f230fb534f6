from abc import ABC, abstractmethod

from parlor.logic.types import Command, InputRequest


class InputSource(ABC):
    """
    Abstract source of commands for the human seat.

    The round engine blocks on request_command() whenever the human has a
    decision to make. This abstraction allows the engine to be driven by a
    scripted source in tests and by the terminal in the console app.
    """

    @abstractmethod
    def request_command(self, request: InputRequest) -> Command:
        """
        Return the human's next command for the described decision.
        """
        ...
