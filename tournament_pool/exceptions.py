class ScoringError(Exception):
    """Base class for errors raised by the scoring services."""


class TournamentNotFound(ScoringError):
    pass


class MatchNotFound(ScoringError):
    pass


class BoostError(ScoringError):
    """A boost could not be set."""


class InvalidBoostType(BoostError):
    pass


class BoostLimitReached(BoostError):
    pass


class BoostLocked(BoostError):
    """The match already has a result, so its boost can no longer change."""


class GuessNotFound(BoostError):
    pass
