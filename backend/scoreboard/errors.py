class ScoreboardError(Exception):
    """Base class for errors surfaced by the scoring services."""

    status_code = 500

    def __init__(self, message, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        payload = {'error': self.message}
        payload.update(self.details)
        return payload


class ValidationError(ScoreboardError):
    status_code = 400


class NotFoundError(ScoreboardError):
    status_code = 404


class PersistenceUnavailable(ScoreboardError):
    """The store is unreachable, unconfigured or missing its schema.

    ``configured`` tells "no database URL set" apart from "set but broken".
    """

    status_code = 503

    def __init__(self, message, configured=True, **details):
        super().__init__(message, configured=configured, **details)
        self.configured = configured
