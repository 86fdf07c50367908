class MatchValidationError(Exception):
    pass


class RuleConfigurationError(MatchValidationError, ValueError):
    pass


class InvalidTeamError(MatchValidationError, ValueError):
    pass


class MatchFormatError(MatchValidationError):
    pass
