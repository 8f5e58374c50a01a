# backend/nexus/errors.py


class NexusError(Exception):
    """Βάση για όλα τα request-scoped σφάλματα του backend."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientInputError(NexusError):
    """Λείπει ή είναι άκυρη μια υποχρεωτική παράμετρος."""

    status_code = 400


class MergeDepthError(ClientInputError):
    """Το override είναι πιο βαθύ από το επιτρεπτό όριο του merge."""


class NotFoundError(NexusError):
    status_code = 404


class UpstreamReadError(NexusError):
    """
    Αποτυχία ανάγνωσης από τη βάση.
    Το detail γράφεται στο log, ο client βλέπει μόνο το generic μήνυμα.
    """

    status_code = 500


class ParseError(NexusError):
    """Χαλασμένο custom_fields. Δεν φτάνει ποτέ στον client."""


class PersistenceWriteError(NexusError):
    """Αποτυχία εγγραφής. Ο caller τη γράφει στο log, το response δεν επηρεάζεται."""
