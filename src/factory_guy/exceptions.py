"""
factory-guy exceptions.

Custom exception hierarchy for definitions, sequences and fixture lookup.
"""


class FactoryGuyError(Exception):
    """Base exception for all factory-guy errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnknownFixtureError(FactoryGuyError):
    """Raised when no definition matches a requested fixture name."""

    def __init__(self, fixture_name: str):
        self.fixture_name = fixture_name
        super().__init__(f"Can't find that factory named [{fixture_name}]")


class UnknownSequenceError(FactoryGuyError):
    """Raised when a definition references a sequence it does not declare."""

    def __init__(self, sequence_name: str, model_name: str):
        self.sequence_name = sequence_name
        self.model_name = model_name
        super().__init__(f"Can not find that sequence named [{sequence_name}] in '{model_name}' definition")


class InvalidSequenceDefinitionError(FactoryGuyError):
    """Raised when a sequence is not a one-argument callable."""

    def __init__(self, sequence_name: str, model_name: str):
        self.sequence_name = sequence_name
        self.model_name = model_name
        super().__init__(
            f"Problem with [{sequence_name}] sequence definition in '{model_name}'. "
            "Sequences must be functions taking the sequence number"
        )
