class LeadScoringError(Exception):
    """Base class for all lead-scoring domain exceptions.

    Every custom exception in this module inherits from here so that a
    single ``except LeadScoringError`` clause can catch any domain
    error.
    """

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(detail)


class LeadNotFoundError(LeadScoringError):
    """Raised when a requested lead does not exist."""

    def __init__(self, detail: str = "Lead not found"):
        super().__init__(detail)


class ActivityFetchError(LeadScoringError):
    """Raised when a lead's activity history cannot be read."""

    def __init__(self, detail: str = "Lead activities could not be fetched"):
        super().__init__(detail)


class RuleSourceUnavailableError(LeadScoringError):
    """Raised when no scoring-rule snapshot can be produced at all.

    A failed refresh on its own never raises: the last known good
    snapshot is served instead.  This only fires when nothing has ever
    been loaded.
    """

    def __init__(self, detail: str = "Scoring rules are unavailable"):
        super().__init__(detail)


class ScoreWriteError(LeadScoringError):
    """Raised when a computed score cannot be persisted."""

    def __init__(self, detail: str = "Lead score could not be saved"):
        super().__init__(detail)


class ScoreSourceUnavailableError(LeadScoringError):
    """Raised when a batch sweep cannot list the leads it should process."""

    def __init__(self, detail: str = "Stored lead scores are unavailable"):
        super().__init__(detail)
