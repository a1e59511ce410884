## Error taxonomy for generation, chat and configuration failures


class StudyFlowError(Exception):
    pass


class MalformedModelOutput(StudyFlowError):
    """The model answered, but the text did not parse into the expected shape.

    Never retried. ``raw_text`` keeps the offending response for diagnosis.
    """

    def __init__(self, message: str, *, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class GenerationError(StudyFlowError):
    pass


class ChatError(StudyFlowError):
    pass


class ConfigurationError(StudyFlowError):
    pass
